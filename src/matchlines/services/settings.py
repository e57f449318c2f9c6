"""User settings for the matchlines editor and their JSON persistence."""

from __future__ import annotations

import json
import logging
import os
import types
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Union, get_args, get_origin, get_type_hints

__all__ = [
    "Settings",
    "SettingsStore",
    "NOTIFICATION_STYLES",
    "coerce_setting",
    "parse_flag",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".matchlines"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_FLAG_WORDS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}
_NULL_WORDS = {"", "none", "null"}
NOTIFICATION_STYLES: tuple[str, ...] = ("dialog", "status_bar")


@dataclass(slots=True)
class Settings:
    """Preferences read at startup; every field has a usable default."""

    default_case_sensitive: bool = False
    placeholder: str = "Search term (regular expression)"
    new_document_prefix: str = "Untitled"
    default_eol: str = "LF"
    serialize_invocations: bool = True
    notification_style: str = "dialog"
    debug_logging: bool = False
    font_family: str = "JetBrains Mono"
    font_size: int = 13
    last_open_file: str | None = None


class SettingsStore:
    """Reads and writes :class:`Settings` as a JSON object on disk.

    ``load`` layers three sources: the file, explicit ``overrides`` (the
    ``--set`` flags) and finally ``MATCHLINES_*`` environment variables.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        settings = _merge(Settings(), self._read_file(), source=str(self._path))
        settings = _merge(settings, overrides or {}, source="command line")
        settings = _merge(settings, _environment_values(), source="environment")
        return _normalize(settings)

    def save(self, settings: Settings) -> Path:
        """Write ``settings`` atomically through a sibling ``.tmp`` file."""

        document = {"version": _SETTINGS_VERSION, **asdict(settings)}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        staging = self._path.with_suffix(".tmp")
        staging.write_text(json.dumps(document, indent=2, sort_keys=True), encoding="utf-8")
        staging.replace(self._path)
        LOGGER.debug("Wrote settings to %s", self._path)
        return self._path

    def update(self, **values: Any) -> Path:
        """Change ``values`` in the stored file only, leaving overrides of this run out of it."""

        stored = _merge(Settings(), self._read_file(), source=str(self._path))
        return self.save(_merge(stored, values, source="update"))

    def _read_file(self) -> Mapping[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Ignoring %s: invalid JSON (%s)", self._path, exc)
            return {}
        if not isinstance(decoded, dict):
            LOGGER.warning("Ignoring %s: expected a JSON object, found %s", self._path, type(decoded).__name__)
            return {}
        return decoded


def _merge(settings: Settings, values: Mapping[str, Any], *, source: str) -> Settings:
    """Apply the convertible ``values`` to ``settings``; anything else is logged and skipped."""

    known = _field_types()
    accepted: dict[str, Any] = {}
    for key, value in values.items():
        if key not in known or value is None:
            continue
        try:
            accepted[key] = coerce_setting(key, value)
        except ValueError as exc:
            LOGGER.warning("Ignoring setting %r from %s: %s", key, source, exc)
    ignored = sorted(set(values) - set(known) - {"version"})
    if ignored:
        LOGGER.debug("Ignoring unknown settings from %s: %s", source, ignored)
    if not accepted:
        return settings
    LOGGER.debug("Settings from %s: %s", source, sorted(accepted))
    return replace(settings, **accepted)


def _environment_values() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field_name, variable in _ENVIRONMENT.items():
        raw = os.environ.get(variable)
        if raw is not None:
            values[field_name] = raw
    return values


def _normalize(settings: Settings) -> Settings:
    updates: Dict[str, Any] = {}
    style = (settings.notification_style or "").strip().lower()
    if style not in NOTIFICATION_STYLES:
        LOGGER.warning("Unknown notification style %r; using 'dialog'", settings.notification_style)
        style = "dialog"
    if style != settings.notification_style:
        updates["notification_style"] = style
    eol = (settings.default_eol or "").strip().upper()
    if eol not in {"LF", "CRLF", "NONE"}:
        LOGGER.warning("Unknown end-of-line style %r; using 'LF'", settings.default_eol)
        eol = "LF"
    if eol != settings.default_eol:
        updates["default_eol"] = eol
    if not (settings.new_document_prefix or "").strip():
        updates["new_document_prefix"] = "Untitled"
    return replace(settings, **updates) if updates else settings


def parse_flag(value: str) -> bool:
    try:
        return _FLAG_WORDS[value.strip().lower()]
    except KeyError:
        raise ValueError(f"expected a boolean, got {value!r}") from None


def coerce_setting(name: str, value: Any) -> Any:
    """Convert ``value`` (JSON data or command-line text) to the type of field ``name``.

    Raises:
        ValueError: If ``name`` is not a setting or ``value`` does not convert.
    """

    try:
        target, optional = _field_types()[name]
    except KeyError:
        raise ValueError(f"no setting named {name!r}") from None

    if value is None or (optional and isinstance(value, str) and value.strip().lower() in _NULL_WORDS):
        if optional:
            return None
        raise ValueError(f"{name} cannot be null")
    if target is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return parse_flag(value)
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
    elif target is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip(), 10)
            except ValueError:
                raise ValueError(f"{name} expects an integer, got {value!r}") from None
    elif target is str:
        if isinstance(value, str):
            return value
    raise ValueError(f"{name} expects {target.__name__}, got {type(value).__name__}")


def _field_types() -> dict[str, tuple[type, bool]]:
    hints = get_type_hints(Settings)
    resolved: dict[str, tuple[type, bool]] = {}
    for item in fields(Settings):
        hint = hints.get(item.name, str)
        optional = False
        if isinstance(hint, types.UnionType) or get_origin(hint) is Union:
            members = [arg for arg in get_args(hint) if arg is not type(None)]
            optional = len(members) < len(get_args(hint))
            hint = members[0] if members else str
        resolved[item.name] = (hint, optional)
    return resolved


_ENVIRONMENT: Mapping[str, str] = {
    "placeholder": "MATCHLINES_PLACEHOLDER",
    "new_document_prefix": "MATCHLINES_NEW_DOCUMENT_PREFIX",
    "notification_style": "MATCHLINES_NOTIFICATION_STYLE",
    "default_eol": "MATCHLINES_DEFAULT_EOL",
    "default_case_sensitive": "MATCHLINES_CASE_SENSITIVE",
    "serialize_invocations": "MATCHLINES_SERIALIZE_INVOCATIONS",
    "debug_logging": "MATCHLINES_DEBUG_LOGGING",
}
