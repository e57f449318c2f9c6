"""Service layer helpers (settings persistence)."""

from .settings import NOTIFICATION_STYLES, Settings, SettingsStore

__all__ = ["NOTIFICATION_STYLES", "Settings", "SettingsStore"]
