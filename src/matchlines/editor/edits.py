"""Batched text edits applied against a single document snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from ..core.ranges import LineSpan, TextRange
from ..errors import EditApplyError


@dataclass(slots=True)
class EditResult:
    """Result of applying a batch of edits to a document."""

    text: str
    removed: Tuple[TextRange, ...]
    summary: str


def delete_spans(original_text: str, spans: Sequence[LineSpan]) -> EditResult:
    """Remove every span from ``original_text`` as one atomic batch.

    All offsets refer to ``original_text``; deletions are applied back-to-front
    so earlier removals never shift later ones. Nothing is modified when any
    span is invalid.
    """

    if not spans:
        raise EditApplyError(message="Deletion batch requires at least one span", reason="empty_batch")

    normalized = tuple(sorted(spans, key=lambda item: (item.start, item.end)))
    _ensure_non_overlapping(normalized)

    for span in normalized:
        if span.end > len(original_text):
            raise EditApplyError(
                message="Span exceeds document length",
                reason="range_overflow",
                details={"line": span.line, "end": span.end, "length": len(original_text)},
            )
        current = original_text[span.start:span.start + len(span.text)]
        if current != span.text:
            raise EditApplyError(
                message="Document changed since the lines were matched",
                reason="range_mismatch",
                details={"line": span.line, "expected": span.text, "actual": current},
            )

    updated_text = original_text
    for span in reversed(normalized):
        updated_text = updated_text[:span.start] + updated_text[span.end:]

    removed = tuple(span.range for span in normalized)
    return EditResult(text=updated_text, removed=removed, summary=_summarize(original_text, updated_text))


def insert_text(original_text: str, offset: int, payload: str) -> str:
    """Insert ``payload`` at ``offset`` (clamped to the document bounds)."""

    position = max(0, min(offset, len(original_text)))
    return original_text[:position] + payload + original_text[position:]


def _ensure_non_overlapping(spans: Sequence[LineSpan]) -> None:
    previous: LineSpan | None = None
    for span in spans:
        if previous is not None and (span.line == previous.line or previous.range.overlaps(span.range)):
            raise EditApplyError(
                message="Deletion spans overlap",
                reason="overlap",
                details={"lines": [previous.line, span.line]},
            )
        previous = span


def _summarize(before: str, after: str) -> str:
    delta = len(before) - len(after)
    return f"delete: -{delta} chars"


__all__ = ["EditResult", "delete_spans", "insert_text"]
