"""Command line entry point and Qt bootstrap for the matchlines editor."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence, TextIO

from .services.settings import Settings, SettingsStore, coerce_setting, parse_flag
from .utils import logging as logging_utils

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "MATCHLINES_"


@dataclasses.dataclass(slots=True)
class QtRuntime:
    """QApplication plus the qasync loop driving it."""

    app: Any
    loop: asyncio.AbstractEventLoop


@dataclasses.dataclass(slots=True)
class LaunchOptions:
    files: list[Path]
    settings_path: Path | None
    overrides: dict[str, Any]
    dump_settings: bool = False


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    path = logging_utils.setup_logging(level, force=force)
    LOGGER.debug("Writing logs to %s at %s", path, logging.getLevelName(level))
    logging_utils.install_qt_message_handler()


def load_settings(store: SettingsStore, overrides: Mapping[str, Any] | None = None) -> Settings:
    """Read ``store``; unreadable files fall back to defaults plus ``overrides``."""

    try:
        return store.load(overrides=overrides)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Ignoring unreadable settings file %s: %s", store.path, exc)
        return dataclasses.replace(Settings(), **dict(overrides or {}))


def create_qapp() -> QtRuntime:
    try:
        from PySide6.QtWidgets import QApplication
        from qasync import QEventLoop
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("PySide6 and qasync are required to launch the matchlines window.") from exc

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("matchlines")
    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    app.aboutToQuit.connect(loop.stop)
    return QtRuntime(app=app, loop=loop)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matchlines",
        description="Edit files and delete, cut or copy the lines that match a regular expression.",
    )
    parser.add_argument("files", nargs="*", type=Path, metavar="FILE", help="files to open, one tab each")
    parser.add_argument("--settings-path", type=Path, metavar="PATH", help="settings file to read and write")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="override one setting for this run; may be repeated",
    )
    parser.add_argument("--dump-settings", action="store_true", help="print the effective settings as JSON and exit")
    return parser


def parse_options(argv: Sequence[str] | None = None) -> LaunchOptions:
    """Parse ``argv``; malformed ``--set`` values exit with status 2."""

    parser = build_parser()
    namespace = parser.parse_args(argv)
    try:
        overrides = parse_overrides(namespace.overrides)
    except ValueError as exc:
        parser.error(f"invalid --set override: {exc}")
    settings_path = namespace.settings_path or os.environ.get(f"{ENV_PREFIX}SETTINGS_PATH")
    return LaunchOptions(
        files=[path.expanduser() for path in namespace.files],
        settings_path=Path(settings_path).expanduser() if settings_path else None,
        overrides=overrides,
        dump_settings=namespace.dump_settings,
    )


def parse_overrides(items: Sequence[str]) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into typed :class:`Settings` field values."""

    overrides: dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"'{item}' is not KEY=VALUE")
        overrides[key] = coerce_setting(key, raw.strip())
    return overrides


def describe_settings(settings: Settings, store: SettingsStore, overrides: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "settings": dataclasses.asdict(settings),
        "meta": {
            "path": str(store.path),
            "cli_overrides": sorted(overrides),
            "environment_variables": sorted(name for name in os.environ if name.startswith(ENV_PREFIX)),
        },
    }


def dump_settings(
    settings: Settings, store: SettingsStore, overrides: Mapping[str, Any], stream: TextIO | None = None
) -> None:
    out = stream or sys.stdout
    json.dump(describe_settings(settings, store, overrides), out, indent=2)
    out.write("\n")


def main(argv: Sequence[str] | None = None) -> None:
    options = parse_options(argv)
    env_debug = _env_debug()
    configure_logging(env_debug)

    store = SettingsStore(options.settings_path)
    settings = load_settings(store, options.overrides or None)
    if options.dump_settings:
        dump_settings(settings, store, options.overrides)
        return
    if settings.debug_logging and not env_debug:
        configure_logging(True, force=True)

    runtime = create_qapp()
    window = open_window(settings, store, options.files)
    window.show()
    run_loop(runtime.loop)


def open_window(settings: Settings, store: SettingsStore, files: Sequence[Path]) -> Any:
    from .ui.main_window import MainWindow

    window = MainWindow(settings, settings_store=store)
    paths = list(files)
    if not paths and settings.last_open_file:
        paths.append(Path(settings.last_open_file))
    for path in paths:
        try:
            window.open_path(path)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Skipping %s: %s", path, exc)
    if window.tabs.count() == 0:
        window.open_untitled()
    return window


def run_loop(loop: asyncio.AbstractEventLoop) -> None:
    try:
        loop.run_forever()
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        LOGGER.info("Interrupted; shutting down.")
    finally:
        _cancel_pending(loop)
        loop.close()


def _env_debug() -> bool:
    try:
        return parse_flag(os.environ.get(f"{ENV_PREFIX}DEBUG", "0"))
    except ValueError:
        return False


def _cancel_pending(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel command invocations still awaiting the host."""

    if loop.is_closed():
        return
    pending = [task for task in asyncio.all_tasks(loop) if not task.done()]
    if not pending:
        return
    LOGGER.debug("Cancelling %d pending invocation(s)", len(pending))
    for task in pending:
        task.cancel()
    with contextlib.suppress(RuntimeError):
        loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
