"""Regular-expression line matching over a document.

The matcher is a single ascending scan: every line whose text contains a
match anywhere (not a full-line match) contributes its span and its text,
suffixed with the document's line terminator, to the result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Pattern

from ..core.ranges import LineSpan
from ..errors import EmptyPatternError, PatternInvalidError
from .document_model import DocumentState, EndOfLine

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SearchRequest:
    """A user-supplied pattern plus its case-sensitivity flag."""

    pattern: str
    case_sensitive: bool = False

    @property
    def flags(self) -> int:
        return 0 if self.case_sensitive else re.IGNORECASE

    def compile(self) -> Pattern[str]:
        """Compile the pattern, raising :class:`PatternInvalidError` on bad syntax."""

        if not self.pattern:
            raise EmptyPatternError(details={"pattern": self.pattern})
        try:
            return re.compile(self.pattern, self.flags)
        except re.error as exc:
            raise PatternInvalidError.from_regex_error(self.pattern, exc) from exc


@dataclass(slots=True, frozen=True)
class MatchResult:
    """Ordered matched spans plus the joined text of the matched lines."""

    spans: tuple[LineSpan, ...] = ()
    text: str = ""
    eol: EndOfLine = EndOfLine.LF
    document_version: str | None = field(default=None, compare=False)

    @property
    def count(self) -> int:
        return len(self.spans)

    @property
    def is_empty(self) -> bool:
        return not self.spans

    @property
    def line_indices(self) -> tuple[int, ...]:
        return tuple(span.line for span in self.spans)

    def __len__(self) -> int:
        return len(self.spans)

    def __bool__(self) -> bool:
        return bool(self.spans)


def match_lines(document: DocumentState, pattern: str, case_sensitive: bool = False) -> MatchResult:
    """Return every line of ``document`` that ``pattern`` matches.

    Raises:
        EmptyPatternError: If ``pattern`` is empty.
        PatternInvalidError: If ``pattern`` is not a valid regular expression.
    """

    regex = SearchRequest(pattern, case_sensitive).compile()
    eol = document.eol or EndOfLine.NONE
    terminator = eol.terminator

    spans: list[LineSpan] = []
    chunks: list[str] = []
    for line in document.lines():
        if regex.search(line.text) is None:
            continue
        chunks.append(line.text + terminator)
        spans.append(line.span)

    LOGGER.debug(
        "Pattern %r (case_sensitive=%s) matched %d of %d lines",
        pattern,
        case_sensitive,
        len(spans),
        document.line_count,
    )
    return MatchResult(
        spans=tuple(spans),
        text="".join(chunks),
        eol=eol,
        document_version=document.version_signature(),
    )


class LineMatcher:
    """Object wrapper around :func:`match_lines` for injection into dispatchers."""

    def match(self, document: DocumentState, pattern: str, case_sensitive: bool = False) -> MatchResult:
        return match_lines(document, pattern, case_sensitive)


__all__ = ["SearchRequest", "MatchResult", "match_lines", "LineMatcher"]
