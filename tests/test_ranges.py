"""Tests for text and line span helpers."""

from __future__ import annotations

import pytest

from matchlines.core.ranges import LineSpan, TextRange


def test_text_range_normalizes_order_and_negatives():
    assert TextRange(5, 2).to_tuple() == (2, 5)
    assert TextRange(-3, 4).to_tuple() == (0, 4)


def test_text_range_rejects_non_integers():
    with pytest.raises(ValueError, match="start must be an integer"):
        TextRange("abc", 2)  # type: ignore[arg-type]


def test_text_range_from_value_accepts_mappings_and_sequences():
    assert TextRange.from_value({"start": 1, "end": 3}) == TextRange(1, 3)
    assert TextRange.from_value([4, 9]) == TextRange(4, 9)
    with pytest.raises(ValueError):
        TextRange.from_value([1, 2, 3])
    with pytest.raises(TypeError):
        TextRange.from_value(object())


def test_text_range_overlap_ignores_touching_edges():
    assert TextRange(0, 4).overlaps(TextRange(3, 6))
    assert not TextRange(0, 4).overlaps(TextRange(4, 6))
    assert not TextRange(2, 2).overlaps(TextRange(0, 5))


def test_line_span_reports_break_length():
    span = LineSpan(line=2, range=TextRange(10, 15), text="abc")

    assert span.start == 10
    assert span.end == 15
    assert span.break_length == 2
    assert span.to_dict() == {"line": 2, "start": 10, "end": 15, "text": "abc"}


def test_line_span_coerces_tuple_range():
    span = LineSpan(line=0, range=(0, 4), text="foo")  # type: ignore[arg-type]

    assert isinstance(span.range, TextRange)
    assert span.range.to_tuple() == (0, 4)


def test_line_span_rejects_negative_line():
    with pytest.raises(ValueError):
        LineSpan(line=-1, range=TextRange(0, 1))
