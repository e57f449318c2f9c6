"""Tests for regular-expression line matching."""

from __future__ import annotations

import random
import string

import pytest

from matchlines.editor.document_model import DocumentState, EndOfLine
from matchlines.editor.matcher import LineMatcher, MatchResult, SearchRequest, match_lines
from matchlines.errors import EmptyPatternError, PatternInvalidError


def test_matches_lines_containing_pattern(sample_document):
    result = match_lines(sample_document, "foo", case_sensitive=False)

    assert result.line_indices == (0, 2)
    assert result.text == "foo\nfoobar\n"
    assert result.count == 2


def test_crlf_documents_join_with_crlf():
    document = DocumentState(text="keep\r\ndrop me\r\nkeep\r\ndrop you", eol=EndOfLine.CRLF)

    result = match_lines(document, r"^drop")

    assert result.text == "drop me\r\ndrop you\r\n"
    assert [span.range.to_tuple() for span in result.spans] == [(6, 15), (21, 29)]


def test_none_style_appends_no_terminator():
    document = DocumentState(text="a1\nb\na2", eol=EndOfLine.NONE)

    result = match_lines(document, "a")

    assert result.text == "a1a2"


def test_none_style_matched_empty_line_is_not_an_empty_result():
    document = DocumentState(text="a\n\nb", eol=EndOfLine.NONE)

    result = match_lines(document, "^$")

    assert result.text == ""
    assert result.line_indices == (1,)
    assert not result.is_empty
    assert result.count == 1


def test_case_sensitivity_flag():
    document = DocumentState(text="Foo\nfoo\nFOO")

    assert match_lines(document, "foo", case_sensitive=True).line_indices == (1,)
    assert match_lines(document, "foo", case_sensitive=False).line_indices == (0, 1, 2)


def test_empty_string_match_includes_every_line():
    document = DocumentState(text="a\nb\n")

    result = match_lines(document, "x*")

    assert result.line_indices == (0, 1, 2)
    assert result.text == "a\nb\n\n"


def test_no_match_returns_empty_result(sample_document):
    result = match_lines(sample_document, "xyz")

    assert result.is_empty
    assert not result
    assert result.text == ""
    assert result.spans == ()


def test_unbalanced_pattern_raises_pattern_error(sample_document):
    with pytest.raises(PatternInvalidError) as excinfo:
        match_lines(sample_document, "(")

    assert excinfo.value.pattern == "("
    assert excinfo.value.reason
    assert "Invalid regular expression" in excinfo.value.message
    assert sample_document.text == "foo\nbar\nfoobar\nbaz"


def test_empty_pattern_is_rejected(sample_document):
    with pytest.raises(EmptyPatternError):
        match_lines(sample_document, "")


def test_matching_does_not_mutate_document(sample_document):
    signature = sample_document.version_signature()

    match_lines(sample_document, "ba")

    assert sample_document.version_signature() == signature
    assert not sample_document.dirty


def test_result_records_document_version(sample_document):
    result = LineMatcher().match(sample_document, "bar")

    assert result.document_version == sample_document.version_signature()
    assert isinstance(result, MatchResult)


def test_search_request_flags():
    assert SearchRequest("a", case_sensitive=True).flags == 0
    assert SearchRequest("a").compile().search("A") is not None


def _random_document(rng: random.Random) -> DocumentState:
    alphabet = "abcABC xyz"
    lines = ["".join(rng.choice(alphabet) for _ in range(rng.randint(0, 8))) for _ in range(rng.randint(0, 12))]
    return DocumentState(text="\n".join(lines))


@pytest.mark.parametrize("seed", range(20))
def test_properties_hold_for_random_documents(seed):
    rng = random.Random(seed)
    document = _random_document(rng)
    pattern = rng.choice(["a", "B", "c+", "^a", "x$", "[ab]c", "z"])

    sensitive = match_lines(document, pattern, case_sensitive=True)
    insensitive = match_lines(document, pattern, case_sensitive=False)

    for result in (sensitive, insensitive):
        indices = list(result.line_indices)
        assert indices == sorted(set(indices))
        assert (result.text == "") == (len(result.spans) == 0)
        assert result.text == "".join(span.text + "\n" for span in result.spans)
    assert set(sensitive.line_indices) <= set(insensitive.line_indices)


def test_every_character_class_round_trips_through_spans():
    text = "\n".join(string.ascii_letters[i:i + 5] for i in range(0, 30, 5))
    document = DocumentState(text=text)

    result = match_lines(document, "[aeiou]")

    for span in result.spans:
        assert text[span.start:span.start + len(span.text)] == span.text
