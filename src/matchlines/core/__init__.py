"""Core domain types shared by the matcher, the edit helpers and the hosts."""

from .ranges import LineSpan, TextRange

__all__ = ["LineSpan", "TextRange"]
