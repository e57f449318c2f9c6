"""Editor host capability surface consumed by the commands.

The commands never talk to a global editor object; everything they need is
expressed by :class:`EditorHost` and injected at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence, runtime_checkable

from .core.ranges import LineSpan
from .editor.document_model import DocumentState

DEFAULT_PLACEHOLDER = "Search term (regular expression)"


@dataclass(slots=True)
class CaseToggle:
    """Case-sensitivity toggle owned by one open prompt."""

    case_sensitive: bool = False

    def toggle(self) -> bool:
        self.case_sensitive = not self.case_sensitive
        return self.case_sensitive

    @property
    def prompt(self) -> str:
        """Label shown under the input box for the current toggle state."""

        return "Match case" if self.case_sensitive else "Ignore case"


@dataclass(slots=True)
class PromptRequest:
    """Describes the input prompt shown for one command invocation."""

    title: str
    placeholder: str = DEFAULT_PLACEHOLDER
    toggle: CaseToggle = field(default_factory=CaseToggle)


@dataclass(slots=True, frozen=True)
class PromptResult:
    """Value submitted through the prompt."""

    search_term: str | None
    case_sensitive: bool = False


@runtime_checkable
class EditorHost(Protocol):
    """Asynchronous capabilities provided by the hosting editor."""

    async def prompt(self, request: PromptRequest) -> PromptResult | None:
        """Show the input prompt; return ``None`` when the user cancels."""
        ...

    def active_document(self) -> DocumentState | None:
        """Return the document currently focused in the editor."""
        ...

    async def apply_deletions(self, document: DocumentState, spans: Sequence[LineSpan]) -> None:
        """Delete every span from ``document`` in one atomic edit."""
        ...

    async def create_document(self, title: str) -> DocumentState:
        """Open a new, untitled document named ``title``."""
        ...

    async def insert_text(self, document: DocumentState, offset: int, text: str) -> None:
        """Insert ``text`` into ``document`` at ``offset``."""
        ...

    async def write_clipboard(self, text: str) -> None:
        ...

    async def read_clipboard(self) -> str:
        ...

    def show_information(self, message: str) -> None:
        ...

    def show_error(self, message: str) -> None:
        ...


__all__ = [
    "DEFAULT_PLACEHOLDER",
    "CaseToggle",
    "PromptRequest",
    "PromptResult",
    "EditorHost",
]
