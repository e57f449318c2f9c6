"""Offset ranges and line spans over a document's text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator


def _offset(value: Any, label: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"TextRange {label} must be an integer, got {value!r}") from exc
    return max(number, 0)


@dataclass(slots=True, frozen=True)
class TextRange:
    """Half-open ``[start, end)`` character range; bounds are ordered and clamped at zero."""

    start: int
    end: int

    def __post_init__(self) -> None:
        low, high = sorted((_offset(self.start, "start"), _offset(self.end, "end")))
        object.__setattr__(self, "start", low)
        object.__setattr__(self, "end", high)

    def __iter__(self) -> Iterator[int]:
        return iter((self.start, self.end))

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    def overlaps(self, other: TextRange) -> bool:
        """True when the ranges share a character; touching edges do not count."""

        return self.start < other.end and other.start < self.end

    def to_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_value(cls, value: Any) -> TextRange:
        """Build a range from a ``TextRange``, ``{"start", "end"}`` mapping or pair."""

        if isinstance(value, TextRange):
            return value
        if isinstance(value, dict):
            if "start" not in value or "end" not in value:
                raise ValueError("TextRange mappings require start and end keys")
            return cls(value["start"], value["end"])
        if isinstance(value, (tuple, list)):
            if len(value) != 2:
                raise ValueError(f"TextRange pairs need two offsets, got {len(value)}")
            return cls(*value)
        raise TypeError(f"Cannot build a TextRange from {type(value).__name__}")


@dataclass(slots=True, frozen=True)
class LineSpan:
    """A single document line addressed together with its trailing line break.

    ``range`` covers the line text plus its terminator (when the line has one),
    which is exactly what must be removed to delete the line from the buffer.
    ``text`` is the line content without the terminator.
    """

    line: int
    range: TextRange
    text: str = ""

    def __post_init__(self) -> None:
        if self.line < 0:
            raise ValueError(f"LineSpan line must be >= 0, got {self.line}")
        if not isinstance(self.range, TextRange):
            object.__setattr__(self, "range", TextRange.from_value(self.range))

    @property
    def start(self) -> int:
        return self.range.start

    @property
    def end(self) -> int:
        return self.range.end

    @property
    def break_length(self) -> int:
        """Number of line-break characters covered after the line text."""

        return self.range.length - len(self.text)

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, **self.range.to_dict(), "text": self.text}


__all__ = ["TextRange", "LineSpan"]
