"""Tests for the document model and line splitting."""

from __future__ import annotations

import pytest

from matchlines.editor.document_model import DocumentState, EndOfLine, detect_end_of_line


def test_lines_split_like_an_editor():
    document = DocumentState(text="alpha\r\nbeta\ngamma\rdelta")

    assert [line.text for line in document.lines()] == ["alpha", "beta", "gamma", "delta"]
    assert document.line_count == 4


def test_trailing_break_yields_empty_final_line():
    document = DocumentState(text="one\ntwo\n")

    assert [line.text for line in document.lines()] == ["one", "two", ""]


def test_empty_document_has_single_empty_line():
    document = DocumentState(text="")

    assert document.line_count == 1
    assert document.line_at(0).text == ""


def test_line_span_includes_trailing_break():
    document = DocumentState(text="ab\r\ncd")

    first = document.line_at(0).span
    last = document.line_at(1).span

    assert first.range.to_tuple() == (0, 4)
    assert first.break_length == 2
    assert last.range.to_tuple() == (4, 6)
    assert last.break_length == 0


def test_line_at_out_of_range_raises():
    document = DocumentState(text="a\nb")

    with pytest.raises(IndexError):
        document.line_at(2)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a\nb\nc", EndOfLine.LF),
        ("a\r\nb\r\nc", EndOfLine.CRLF),
        ("a\r\nb\nc\r\n", EndOfLine.CRLF),
        ("a\r\nb\nc\n", EndOfLine.LF),
        ("single line", EndOfLine.LF),
    ],
)
def test_detect_end_of_line_picks_dominant_style(text, expected):
    assert detect_end_of_line(text) is expected


def test_detect_end_of_line_uses_default_without_breaks():
    assert detect_end_of_line("abc", EndOfLine.NONE) is EndOfLine.NONE


def test_end_of_line_from_value_accepts_names_and_terminators():
    assert EndOfLine.from_value("crlf") is EndOfLine.CRLF
    assert EndOfLine.from_value("\n") is EndOfLine.LF
    assert EndOfLine.from_value(None) is EndOfLine.NONE
    with pytest.raises(ValueError):
        EndOfLine.from_value("mac")


def test_update_text_bumps_version_and_invalidates_lines():
    document = DocumentState(text="a\nb")
    signature = document.version_signature()
    assert document.line_count == 2

    document.update_text("a")

    assert document.dirty
    assert document.version_id == 2
    assert document.line_count == 1
    assert document.version_signature() != signature
