"""Mode dispatch for the matching-lines commands.

One invocation walks ``prompt -> match -> effects -> report``; every terminal
state is surfaced to the user as a notification (or silently, on cancel) and
the reached state is returned as an :class:`InvocationOutcome`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable

from ..errors import (
    EmptyPatternError,
    HostOperationError,
    NoActiveDocumentError,
    NoMatchesError,
    PatternInvalidError,
)
from ..editor.document_model import DocumentState
from ..editor.matcher import LineMatcher, MatchResult
from ..host import CaseToggle, EditorHost, PromptRequest
from ..services.settings import Settings
from .lock import InvocationLock

LOGGER = logging.getLogger(__name__)

_TITLE_TIME_FORMAT = "%H:%M:%S %a %b %d %Y"


class Mode(Enum):
    """What happens to matched lines."""

    DELETE = "deleted"
    CUT = "cut"
    COPY = "copied"

    @property
    def verb(self) -> str:
        """Past-tense verb used in the status message."""

        return self.value

    @property
    def copies_to_clipboard(self) -> bool:
        return self in (Mode.CUT, Mode.COPY)

    @property
    def removes_lines(self) -> bool:
        return self in (Mode.CUT, Mode.DELETE)


class InvocationOutcome(Enum):
    """Terminal state reached by one command invocation."""

    CANCELLED = "cancelled"
    EMPTY_PATTERN = "empty_pattern"
    PATTERN_ERROR = "pattern_error"
    NO_DOCUMENT = "no_document"
    NO_MATCH = "no_match"
    REPORTED = "reported"
    FAILED = "failed"


def format_report(count: int, mode: Mode) -> str:
    return f"{count} lines were {mode.verb}"


def new_document_title(
    prefix: str = "Untitled",
    *,
    now: datetime | None = None,
    existing: Iterable[str] = (),
) -> str:
    """Return a distinct title such as ``Untitled - 14:03:09 Sun Oct 18 2026``.

    A numeric suffix is appended when the timestamped title is already taken.
    """

    stamp = (now or datetime.now()).strftime(_TITLE_TIME_FORMAT)
    base = f"{prefix} - {stamp}"
    taken = set(existing)
    title = base
    counter = 2
    while title in taken:
        title = f"{base} ({counter})"
        counter += 1
    return title


class ModeDispatcher:
    """Runs one matching-lines command against an injected editor host."""

    def __init__(
        self,
        host: EditorHost,
        settings: Settings | None = None,
        *,
        matcher: LineMatcher | None = None,
        lock: InvocationLock | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._host = host
        self._settings = settings or Settings()
        self._matcher = matcher or LineMatcher()
        self._lock = lock or InvocationLock(enabled=self._settings.serialize_invocations)
        self._clock = clock or datetime.now
        self._created_titles: set[str] = set()

    @property
    def host(self) -> EditorHost:
        return self._host

    @property
    def lock(self) -> InvocationLock:
        return self._lock

    async def execute(
        self,
        mode: Mode,
        send_to_new_document: bool = False,
        *,
        title: str | None = None,
    ) -> InvocationOutcome:
        """Prompt for a pattern and apply ``mode`` to every matching line."""

        host = self._host
        request = PromptRequest(
            title=title or f"{mode.name.title()} matching lines",
            placeholder=self._settings.placeholder,
            toggle=CaseToggle(self._settings.default_case_sensitive),
        )
        try:
            result = await host.prompt(request)
        except Exception as exc:
            return self._report_failure(exc, operation="prompt")

        if result is None:
            LOGGER.debug("Prompt cancelled for %s", mode.name)
            return InvocationOutcome.CANCELLED

        if not result.search_term:
            host.show_error(EmptyPatternError().message)
            return InvocationOutcome.EMPTY_PATTERN

        try:
            document = host.active_document()
        except Exception as exc:
            return self._report_failure(exc, operation="active_document")
        if document is None:
            host.show_error(NoActiveDocumentError().message)
            return InvocationOutcome.NO_DOCUMENT

        async with self._lock.hold(document.document_id, command=mode.name):
            operation = "match"
            try:
                matches = self._matcher.match(document, result.search_term, result.case_sensitive)
                if matches.is_empty:
                    host.show_information(NoMatchesError().message)
                    return InvocationOutcome.NO_MATCH
                operation = "apply"
                await self._apply(mode, document, matches, send_to_new_document)
            except PatternInvalidError as exc:
                LOGGER.info("Rejected pattern %r: %s", exc.pattern, exc.reason, extra={"error": exc.to_dict()})
                host.show_error(exc.message)
                return InvocationOutcome.PATTERN_ERROR
            except Exception as exc:
                return self._report_failure(exc, operation=operation)

        LOGGER.info(
            "%s: %d lines (new_document=%s, case_sensitive=%s)",
            mode.name,
            matches.count,
            send_to_new_document,
            result.case_sensitive,
        )
        host.show_information(format_report(matches.count, mode))
        return InvocationOutcome.REPORTED

    async def _apply(
        self,
        mode: Mode,
        document: DocumentState,
        matches: MatchResult,
        send_to_new_document: bool,
    ) -> None:
        if mode.copies_to_clipboard:
            await self._host.write_clipboard(matches.text)
        if mode.removes_lines:
            await self._host.apply_deletions(document, matches.spans)
        if send_to_new_document:
            await self._open_new_document(matches.text)

    async def _open_new_document(self, text: str) -> DocumentState:
        title = new_document_title(
            self._settings.new_document_prefix,
            now=self._clock(),
            existing=self._created_titles,
        )
        self._created_titles.add(title)
        target = await self._host.create_document(title)
        await self._host.insert_text(target, 0, text)
        LOGGER.debug("Opened %r with %d chars", title, len(text))
        return target

    def _report_failure(self, exc: Exception, *, operation: str) -> InvocationOutcome:
        error = HostOperationError.wrap(exc, operation=operation)
        LOGGER.exception("Matching-lines command failed during %s", operation, extra={"error": error.to_dict()})
        try:
            self._host.show_error(error.message)
        except Exception:  # pragma: no cover - host notification itself broken
            LOGGER.exception("Unable to show error notification")
        return InvocationOutcome.FAILED


__all__ = [
    "Mode",
    "InvocationOutcome",
    "ModeDispatcher",
    "format_report",
    "new_document_title",
]
