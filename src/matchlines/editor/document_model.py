"""Dataclasses representing editor documents and their lines."""

from __future__ import annotations

import hashlib
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional

from ..core.ranges import LineSpan, TextRange

_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")


def _utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""

    return datetime.now(timezone.utc)


def _hash_text(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


class EndOfLine(Enum):
    """Line-break convention used when reconstructing extracted text."""

    NONE = ""
    LF = "\n"
    CRLF = "\r\n"

    @property
    def terminator(self) -> str:
        return self.value

    @classmethod
    def from_value(cls, value: Any) -> "EndOfLine":
        """Coerce names (``"lf"``), terminators (``"\\n"``) or members."""

        if isinstance(value, EndOfLine):
            return value
        if value is None:
            return cls.NONE
        text = str(value)
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise ValueError(f"Unknown end-of-line style: {value!r}")


def detect_end_of_line(text: str, default: EndOfLine = EndOfLine.LF) -> EndOfLine:
    """Return the dominant line-break style used in ``text``.

    Documents without any line break report ``default``.
    """

    crlf = text.count("\r\n")
    bare_lf = text.count("\n") - crlf
    if crlf == 0 and bare_lf == 0:
        return default
    return EndOfLine.CRLF if crlf > bare_lf else EndOfLine.LF


@dataclass(slots=True, frozen=True)
class TextLine:
    """One line of a document, mirroring what an editor exposes per line."""

    index: int
    text: str
    start: int
    end_including_break: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def span(self) -> LineSpan:
        """Return the span covering this line and its trailing break."""

        return LineSpan(
            line=self.index,
            range=TextRange(self.start, self.end_including_break),
            text=self.text,
        )


@dataclass(slots=True)
class DocumentMetadata:
    """Metadata describing a loaded document."""

    path: Optional[Path] = None
    title: str = "Untitled"
    untitled: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass(slots=True)
class DocumentState:
    """Full snapshot of a document's text plus its line-ending convention.

    ``eol`` is detected from the text when not supplied explicitly.
    """

    text: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    eol: EndOfLine | None = None
    dirty: bool = False
    document_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    version_id: int = 1
    content_hash: str = field(default_factory=str)
    _lines: tuple[TextLine, ...] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.eol is None:
            self.eol = detect_end_of_line(self.text)
        else:
            self.eol = EndOfLine.from_value(self.eol)
        if not self.content_hash:
            self.content_hash = _hash_text(self.text)

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def line_count(self) -> int:
        return len(self.lines())

    def lines(self) -> tuple[TextLine, ...]:
        """Return the document lines, splitting on ``\\r\\n``, ``\\n`` or ``\\r``.

        A trailing break yields a final empty line and an empty document has a
        single empty line, matching how editors count lines.
        """

        if self._lines is None:
            self._lines = tuple(_split_lines(self.text))
        return self._lines

    def line_at(self, index: int) -> TextLine:
        lines = self.lines()
        if index < 0 or index >= len(lines):
            raise IndexError(f"Line {index} is out of range (total: {len(lines)} lines)")
        return lines[index]

    def __iter__(self) -> Iterator[TextLine]:
        return iter(self.lines())

    def update_text(self, new_text: str) -> None:
        """Update the document text and mark it dirty."""

        self.text = new_text
        self.dirty = True
        self.metadata.updated_at = _utcnow()
        self.version_id += 1
        self.content_hash = _hash_text(new_text)
        self._lines = None

    def version_signature(self) -> str:
        return f"{self.document_id}:{self.version_id}:{self.content_hash}"


def _split_lines(text: str) -> Iterator[TextLine]:
    index = 0
    cursor = 0
    for match in _LINE_BREAK_RE.finditer(text):
        yield TextLine(
            index=index,
            text=text[cursor:match.start()],
            start=cursor,
            end_including_break=match.end(),
        )
        index += 1
        cursor = match.end()
    yield TextLine(index=index, text=text[cursor:], start=cursor, end_including_break=len(text))


__all__ = [
    "EndOfLine",
    "detect_end_of_line",
    "TextLine",
    "DocumentMetadata",
    "DocumentState",
]
