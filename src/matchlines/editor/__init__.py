"""Editor package containing document models, matching and edit helpers."""

from .document_model import DocumentMetadata, DocumentState, EndOfLine, TextLine, detect_end_of_line
from .edits import EditResult, delete_spans, insert_text
from .matcher import LineMatcher, MatchResult, SearchRequest, match_lines

__all__ = [
    "DocumentMetadata",
    "DocumentState",
    "EndOfLine",
    "TextLine",
    "detect_end_of_line",
    "EditResult",
    "delete_spans",
    "insert_text",
    "LineMatcher",
    "MatchResult",
    "SearchRequest",
    "match_lines",
]
