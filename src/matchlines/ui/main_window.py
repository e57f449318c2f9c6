"""Minimal tabbed editor window exposing the matching-lines commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..commands.dispatcher import ModeDispatcher
from ..commands.registry import CommandBinding, register_commands
from ..editor.document_model import EndOfLine, detect_end_of_line
from ..hosts.qt import QtEditorHost
from ..services.settings import Settings, SettingsStore
from .actions import MenuSpec, WindowAction, command_actions, default_menus

LOGGER = logging.getLogger(__name__)

QMainWindow: Any = None
QTabWidget: Any = None

try:  # pragma: no cover - PySide6 optional in CI
    from PySide6.QtWidgets import QMainWindow as _QtQMainWindow, QTabWidget as _QtQTabWidget

    QMainWindow = _QtQMainWindow
    QTabWidget = _QtQTabWidget
except Exception:  # pragma: no cover - runtime fallback
    LOGGER.debug("PySide6 unavailable; MainWindow cannot be constructed.")


class MainWindow(QMainWindow if QMainWindow is not None else object):  # type: ignore[misc]
    """Top-level window: editor tabs plus File and Matching Lines menus."""

    def __init__(self, settings: Settings, *, settings_store: SettingsStore | None = None) -> None:
        super().__init__()
        self._settings = settings
        self._settings_store = settings_store
        self.setWindowTitle("matchlines")

        self.tabs = QTabWidget(self)
        self.tabs.setTabsClosable(True)
        self.tabs.tabCloseRequested.connect(self.close_tab)
        self.setCentralWidget(self.tabs)

        self.host = QtEditorHost(self.tabs, settings=settings, status_bar=self.statusBar())
        self.dispatcher = ModeDispatcher(self.host, settings)
        self.bindings: dict[str, CommandBinding] = register_commands(self.dispatcher)
        self._paths: dict[int, Path] = {}

        actions = command_actions(self.bindings)
        file_actions = {
            "file.open": WindowAction("file.open", "&Open…", "Ctrl+O", callback=self._open_dialog),
            "file.save": WindowAction("file.save", "&Save", "Ctrl+S", callback=self.save_current),
            "file.quit": WindowAction("file.quit", "&Quit", "Ctrl+Q", callback=self.close),
        }
        actions.update(file_actions)
        self.qt_actions = self._install_menus(actions, default_menus(tuple(file_actions)))

    def open_path(self, path: Path) -> None:
        """Open ``path`` in a new tab, keeping its line-ending style."""

        with path.open("r", encoding="utf-8", newline="") as handle:
            text = handle.read()
        eol = detect_end_of_line(text, EndOfLine.from_value(self._settings.default_eol))
        self.host.open_tab(text, title=path.name, eol=eol)
        self._paths[id(self.tabs.currentWidget())] = path
        LOGGER.info("Opened %s (eol=%s)", path, eol.name)
        self._remember(path)

    def open_untitled(self, text: str = "") -> None:
        self.host.open_tab(text, title=self._settings.new_document_prefix)

    def save_current(self) -> None:
        widget = self.tabs.currentWidget()
        if widget is None:
            return
        path = self._paths.get(id(widget))
        if path is None:
            path = self._ask_save_path()
            if path is None:
                return
            self._paths[id(widget)] = path
            self.tabs.setTabText(self.tabs.currentIndex(), path.name)
        eol = self.host.tab_eol(widget)
        text = widget.toPlainText()
        if eol is EndOfLine.CRLF:
            text = text.replace("\n", "\r\n")
        path.write_text(text, encoding="utf-8", newline="")
        self.statusBar().showMessage(f"Saved {path}", 3000)
        LOGGER.info("Saved %s", path)
        self._remember(path)

    def close_tab(self, index: int) -> None:
        widget = self.host.close_tab(index)
        if widget is not None:
            self._paths.pop(id(widget), None)

    def _remember(self, path: Path) -> None:
        """Record ``path`` as ``last_open_file``, persisting it when a store is attached."""

        self._settings.last_open_file = str(path)
        if self._settings_store is None:
            return
        try:
            self._settings_store.update(last_open_file=str(path))
        except OSError as exc:
            LOGGER.warning("Unable to save settings to %s: %s", self._settings_store.path, exc)

    def _open_dialog(self) -> None:
        from PySide6.QtWidgets import QFileDialog

        filename, _ = QFileDialog.getOpenFileName(self, "Open File")
        if filename:
            try:
                self.open_path(Path(filename))
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.warning("Unable to open %s: %s", filename, exc)
                self.host.show_error(f"Unable to open {filename}: {exc}")

    def _ask_save_path(self) -> Path | None:
        from PySide6.QtWidgets import QFileDialog

        filename, _ = QFileDialog.getSaveFileName(self, "Save File")
        return Path(filename) if filename else None

    def _install_menus(self, actions: dict[str, WindowAction], menus: dict[str, MenuSpec]) -> dict[str, Any]:
        from PySide6.QtGui import QAction

        menubar = self.menuBar()
        qt_actions: dict[str, Any] = {}
        for action in actions.values():
            qt_action = QAction(action.text, self)
            if action.shortcut:
                qt_action.setShortcut(action.shortcut)
            if action.status_tip:
                qt_action.setStatusTip(action.status_tip)
            qt_action.triggered.connect(action.trigger)
            qt_actions[action.name] = qt_action

        for menu_spec in menus.values():
            menu = menubar.addMenu(menu_spec.title)
            for action_name in menu_spec.actions:
                qt_action = qt_actions.get(action_name)
                if qt_action is not None:
                    menu.addAction(qt_action)
        return qt_actions


__all__ = ["MainWindow"]
