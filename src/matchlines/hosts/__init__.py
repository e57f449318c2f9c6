"""Editor host implementations (in-memory and PySide6)."""

from .memory import InMemoryEditorHost, Notification

__all__ = ["InMemoryEditorHost", "Notification"]
