"""Error types raised while matching lines and applying the resulting edits.

Every error carries a machine-readable ``error_code`` and a ``message`` that
is shown to the user verbatim; ``to_dict`` feeds structured log records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


class ErrorCode:
    EMPTY_PATTERN = "empty_pattern"
    PATTERN_INVALID = "pattern_invalid"
    NO_MATCHES = "no_matches"
    NO_ACTIVE_DOCUMENT = "no_active_document"
    EDIT_FAILED = "edit_failed"
    HOST_OPERATION_FAILED = "host_operation_failed"
    INTERNAL_ERROR = "internal_error"


@dataclass
class MatchLinesError(Exception):
    """Base class for failures surfaced by the matching-lines commands."""

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    severity: ClassVar[str] = "error"
    # Optional attributes copied into ``to_dict`` when set.
    extra_fields: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error_code, "message": self.message, "severity": self.severity}
        if self.details:
            payload["details"] = dict(self.details)
        if self.suggestion:
            payload["suggestion"] = self.suggestion
        for name in self.extra_fields:
            value = getattr(self, name, None)
            if value is not None:
                payload[name] = value
        return payload

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class EmptyPatternError(MatchLinesError):
    error_code: str = ErrorCode.EMPTY_PATTERN
    message: str = "Empty search term"
    suggestion: str = "Enter a regular expression to search for"


@dataclass
class PatternInvalidError(MatchLinesError):
    """The search term is not a valid regular expression."""

    error_code: str = ErrorCode.PATTERN_INVALID
    message: str = "Invalid search pattern"
    suggestion: str = "Check the regex syntax and try again"
    pattern: str | None = None
    reason: str | None = None

    extra_fields: ClassVar[tuple[str, ...]] = ("pattern", "reason")

    @classmethod
    def from_regex_error(cls, pattern: str, exc: Exception) -> "PatternInvalidError":
        reason = str(exc)
        return cls(message=f"Invalid regular expression: {reason}", pattern=pattern, reason=reason)


@dataclass
class NoMatchesError(MatchLinesError):
    error_code: str = ErrorCode.NO_MATCHES
    message: str = "No match found"
    suggestion: str = "Try a different search term or pattern"
    pattern: str | None = None

    severity: ClassVar[str] = "info"
    extra_fields: ClassVar[tuple[str, ...]] = ("pattern",)


@dataclass
class NoActiveDocumentError(MatchLinesError):
    error_code: str = ErrorCode.NO_ACTIVE_DOCUMENT
    message: str = "No active document"
    suggestion: str = "Open or focus a document and run the command again"


@dataclass
class EditApplyError(MatchLinesError):
    """A deletion batch does not fit the document it was computed from.

    ``reason`` is one of ``empty_batch``, ``overlap``, ``range_overflow``,
    ``range_mismatch`` or ``tab_closed``.
    """

    error_code: str = ErrorCode.EDIT_FAILED
    message: str = "Unable to apply the edit"
    suggestion: str = "The document may have changed; run the command again"
    reason: str = "edit_failed"

    extra_fields: ClassVar[tuple[str, ...]] = ("reason",)


@dataclass
class HostOperationError(MatchLinesError):
    """An editor host call failed unexpectedly."""

    error_code: str = ErrorCode.HOST_OPERATION_FAILED
    message: str = "Unable to complete action due to unexpected error"
    operation: str | None = None
    cause: str | None = None

    extra_fields: ClassVar[tuple[str, ...]] = ("operation", "cause")

    @classmethod
    def wrap(cls, exc: BaseException, *, operation: str | None = None) -> "HostOperationError":
        if isinstance(exc, HostOperationError):
            return exc
        cause = str(exc) or type(exc).__name__
        return cls(
            message=f"Unable to complete action due to unexpected error {cause}",
            operation=operation,
            cause=cause,
        )


__all__ = [
    "ErrorCode",
    "MatchLinesError",
    "EmptyPatternError",
    "PatternInvalidError",
    "NoMatchesError",
    "NoActiveDocumentError",
    "EditApplyError",
    "HostOperationError",
]
