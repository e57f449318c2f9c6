"""matchlines: delete, cut or copy every line matching a regular expression."""

from .commands import COMMANDS, InvocationOutcome, Mode, ModeDispatcher
from .editor import DocumentState, EndOfLine, LineMatcher, MatchResult, match_lines
from .host import EditorHost, PromptRequest, PromptResult

__all__ = [
    "COMMANDS",
    "InvocationOutcome",
    "Mode",
    "ModeDispatcher",
    "DocumentState",
    "EndOfLine",
    "LineMatcher",
    "MatchResult",
    "match_lines",
    "EditorHost",
    "PromptRequest",
    "PromptResult",
]

__version__ = "0.3.0"
