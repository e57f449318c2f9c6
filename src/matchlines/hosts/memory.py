"""Headless editor host keeping documents, clipboard and notifications in memory.

Used by the test-suite and by scripted runs where no Qt display is available.
Prompt answers are queued up front; each answer is either a
:class:`PromptResult`, a plain search term, ``None`` (the user cancelled) or a
callable receiving the :class:`PromptRequest`.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence, Union

from ..core.ranges import LineSpan
from ..editor.document_model import DocumentMetadata, DocumentState, EndOfLine, detect_end_of_line
from ..editor.edits import delete_spans, insert_text
from ..host import PromptRequest, PromptResult

LOGGER = logging.getLogger(__name__)

PromptAnswer = Union[PromptResult, str, None, Callable[[PromptRequest], "PromptResult | None"]]


@dataclass(slots=True, frozen=True)
class Notification:
    level: str
    message: str


class InMemoryEditorHost:
    """In-memory implementation of :class:`matchlines.host.EditorHost`."""

    def __init__(
        self,
        documents: Iterable[DocumentState] = (),
        *,
        answers: Iterable[PromptAnswer] = (),
        clipboard: str = "",
        default_eol: EndOfLine = EndOfLine.LF,
        fail_on: Iterable[str] = (),
    ) -> None:
        self.documents: list[DocumentState] = list(documents)
        self.active_index: int | None = 0 if self.documents else None
        self.clipboard = clipboard
        self.notifications: list[Notification] = []
        self.prompts: list[PromptRequest] = []
        self.edit_batches: list[tuple[str, tuple[LineSpan, ...]]] = []
        self.fail_on = set(fail_on)
        self._answers: deque[PromptAnswer] = deque(answers)
        self._default_eol = default_eol

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def open_text(self, text: str, *, title: str = "Untitled", eol: EndOfLine | None = None) -> DocumentState:
        """Open ``text`` as a new document and focus it."""

        document = DocumentState(
            text=text,
            metadata=DocumentMetadata(title=title),
            eol=eol or detect_end_of_line(text, self._default_eol),
        )
        self.documents.append(document)
        self.active_index = len(self.documents) - 1
        return document

    def queue_answer(self, answer: PromptAnswer) -> None:
        self._answers.append(answer)

    @property
    def information(self) -> list[str]:
        return [item.message for item in self.notifications if item.level == "info"]

    @property
    def errors(self) -> list[str]:
        return [item.message for item in self.notifications if item.level == "error"]

    # ------------------------------------------------------------------
    # EditorHost implementation
    # ------------------------------------------------------------------

    async def prompt(self, request: PromptRequest) -> PromptResult | None:
        self._maybe_fail("prompt")
        self.prompts.append(request)
        if not self._answers:
            return None
        answer = self._answers.popleft()
        if callable(answer):
            return answer(request)
        if isinstance(answer, str):
            return PromptResult(search_term=answer, case_sensitive=request.toggle.case_sensitive)
        return answer

    def active_document(self) -> DocumentState | None:
        self._maybe_fail("active_document")
        if self.active_index is None:
            return None
        return self.documents[self.active_index]

    async def apply_deletions(self, document: DocumentState, spans: Sequence[LineSpan]) -> None:
        self._maybe_fail("apply_deletions")
        result = delete_spans(document.text, spans)
        document.update_text(result.text)
        self.edit_batches.append((document.document_id, tuple(spans)))
        LOGGER.debug("Applied %s to %s", result.summary, document.title)

    async def create_document(self, title: str) -> DocumentState:
        self._maybe_fail("create_document")
        return self.open_text("", title=title, eol=self._default_eol)

    async def insert_text(self, document: DocumentState, offset: int, text: str) -> None:
        self._maybe_fail("insert_text")
        document.update_text(insert_text(document.text, offset, text))

    async def write_clipboard(self, text: str) -> None:
        self._maybe_fail("write_clipboard")
        self.clipboard = text

    async def read_clipboard(self) -> str:
        self._maybe_fail("read_clipboard")
        return self.clipboard

    def show_information(self, message: str) -> None:
        self.notifications.append(Notification("info", message))

    def show_error(self, message: str) -> None:
        self.notifications.append(Notification("error", message))

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} failed")

    def __repr__(self) -> str:
        details: dict[str, Any] = {"documents": len(self.documents), "active": self.active_index}
        return f"InMemoryEditorHost({details})"


__all__ = ["InMemoryEditorHost", "Notification", "PromptAnswer"]
