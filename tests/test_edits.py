"""Tests for batched span deletion."""

from __future__ import annotations

import pytest

from matchlines.core.ranges import LineSpan, TextRange
from matchlines.editor.document_model import DocumentState
from matchlines.editor.edits import delete_spans, insert_text
from matchlines.editor.matcher import match_lines
from matchlines.errors import EditApplyError


def test_delete_spans_removes_matched_lines(sample_document):
    matches = match_lines(sample_document, "foo")

    result = delete_spans(sample_document.text, matches.spans)

    assert result.text == "bar\nbaz"
    assert DocumentState(text=result.text).line_count == 2
    assert result.summary == "delete: -11 chars"


def test_delete_spans_uses_original_offsets_regardless_of_order():
    document = DocumentState(text="a\nb\nc\nd\n")
    spans = list(match_lines(document, "[bd]").spans)

    result = delete_spans(document.text, list(reversed(spans)))

    assert result.text == "a\nc\n"


def test_deleting_last_line_keeps_previous_break():
    document = DocumentState(text="keep\ndrop")

    result = delete_spans(document.text, match_lines(document, "drop").spans)

    assert result.text == "keep\n"


def test_delete_spans_rejects_empty_batch():
    with pytest.raises(EditApplyError) as excinfo:
        delete_spans("abc", [])

    assert excinfo.value.reason == "empty_batch"


def test_delete_spans_rejects_overlap():
    spans = [
        LineSpan(line=0, range=TextRange(0, 4), text="abc"),
        LineSpan(line=1, range=TextRange(3, 6), text="def"),
    ]

    with pytest.raises(EditApplyError) as excinfo:
        delete_spans("abc\ndef\n", spans)

    assert excinfo.value.reason == "overlap"


def test_delete_spans_detects_changed_document(sample_document):
    spans = match_lines(sample_document, "foo").spans

    with pytest.raises(EditApplyError) as excinfo:
        delete_spans("FOO\nbar\nfoobar\nbaz", spans)

    assert excinfo.value.reason == "range_mismatch"


def test_delete_spans_detects_overflow():
    span = LineSpan(line=0, range=TextRange(0, 10), text="abc")

    with pytest.raises(EditApplyError) as excinfo:
        delete_spans("abc", [span])

    assert excinfo.value.reason == "range_overflow"


def test_insert_text_clamps_offset():
    assert insert_text("world", 0, "hello ") == "hello world"
    assert insert_text("abc", 99, "!") == "abc!"
    assert insert_text("abc", -5, ">") == ">abc"
