"""PySide6 editor host backed by a ``QTabWidget`` of ``QPlainTextEdit`` tabs.

``QPlainTextEdit`` normalizes every line break to ``\\n``, so the line-ending
style detected when a tab was opened is remembered per tab and reported on the
document snapshots handed to the matcher.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from ..core.ranges import LineSpan
from ..editor.document_model import DocumentMetadata, DocumentState, EndOfLine, detect_end_of_line
from ..errors import EditApplyError
from ..host import PromptRequest, PromptResult
from ..services.settings import Settings

LOGGER = logging.getLogger(__name__)

QDialog: Any = None
QDialogButtonBox: Any = None
QFont: Any = None
QGuiApplication: Any = None
QHBoxLayout: Any = None
QLabel: Any = None
QLineEdit: Any = None
QMessageBox: Any = None
QPlainTextEdit: Any = None
QTextCursor: Any = None
QToolButton: Any = None
QVBoxLayout: Any = None

try:  # pragma: no cover - PySide6 optional in CI
    from PySide6.QtGui import QFont as _QtFont, QGuiApplication as _QtGuiApplication, QTextCursor as _QtTextCursor
    from PySide6.QtWidgets import (
        QDialog as _QtDialog,
        QDialogButtonBox as _QtDialogButtonBox,
        QHBoxLayout as _QtHBoxLayout,
        QLabel as _QtLabel,
        QLineEdit as _QtLineEdit,
        QMessageBox as _QtMessageBox,
        QPlainTextEdit as _QtPlainTextEdit,
        QToolButton as _QtToolButton,
        QVBoxLayout as _QtVBoxLayout,
    )

    QDialog = _QtDialog
    QDialogButtonBox = _QtDialogButtonBox
    QFont = _QtFont
    QGuiApplication = _QtGuiApplication
    QHBoxLayout = _QtHBoxLayout
    QLabel = _QtLabel
    QLineEdit = _QtLineEdit
    QMessageBox = _QtMessageBox
    QPlainTextEdit = _QtPlainTextEdit
    QTextCursor = _QtTextCursor
    QToolButton = _QtToolButton
    QVBoxLayout = _QtVBoxLayout
except Exception:  # pragma: no cover - runtime fallback
    LOGGER.debug("PySide6 unavailable; QtEditorHost cannot be constructed.")


def qt_available() -> bool:
    return QPlainTextEdit is not None


def to_qt_position(text: str, offset: int) -> int:
    """Convert a code-point offset into a Qt (UTF-16 code unit) position."""

    return len(text[:offset].encode("utf-16-le")) // 2


@dataclass(slots=True)
class _TabRecord:
    widget: Any
    document_id: str
    eol: EndOfLine
    title: str


class SearchPromptDialog(QDialog if QDialog is not None else object):  # type: ignore[misc]
    """Single-line prompt with a case-sensitivity toggle button."""

    def __init__(self, request: PromptRequest, parent: Any | None = None) -> None:
        super().__init__(parent)
        self._toggle = request.toggle
        self.setWindowTitle(request.title)

        self.input = QLineEdit(self)
        self.input.setPlaceholderText(request.placeholder)
        self.case_button = QToolButton(self)
        self.case_button.setText("Aa")
        self.case_button.setCheckable(True)
        self.case_button.setChecked(self._toggle.case_sensitive)
        self.case_button.setToolTip("Toggle Case Sensitivity")
        self.case_button.toggled.connect(self._on_case_toggled)
        self.status_label = QLabel(self._toggle.prompt, self)

        row = QHBoxLayout()
        row.addWidget(self.input)
        row.addWidget(self.case_button)
        standard = QDialogButtonBox.StandardButton
        buttons = QDialogButtonBox(standard.Ok | standard.Cancel, parent=self)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(row)
        layout.addWidget(self.status_label)
        layout.addWidget(buttons)

    @property
    def case_sensitive(self) -> bool:
        return self._toggle.case_sensitive

    def result_value(self) -> PromptResult:
        return PromptResult(search_term=self.input.text(), case_sensitive=self._toggle.case_sensitive)

    def _on_case_toggled(self, checked: bool) -> None:
        if checked != self._toggle.case_sensitive:
            self._toggle.toggle()
        self.status_label.setText(self._toggle.prompt)


class QtEditorHost:
    """Implements :class:`matchlines.host.EditorHost` on top of Qt widgets.

    ``tabs`` is a ``QTabWidget`` whose pages are ``QPlainTextEdit`` editors;
    ``status_bar`` is used when ``settings.notification_style`` is
    ``"status_bar"``.
    """

    def __init__(self, tabs: Any, *, settings: Settings | None = None, status_bar: Any | None = None) -> None:
        if not qt_available():
            raise RuntimeError("PySide6 must be installed to use the Qt editor host.")
        self._tabs = tabs
        self._settings = settings or Settings()
        self._status_bar = status_bar
        self._records: dict[int, _TabRecord] = {}
        self._default_eol = EndOfLine.from_value(self._settings.default_eol)

    # ------------------------------------------------------------------
    # Tab management
    # ------------------------------------------------------------------

    def open_tab(self, text: str, *, title: str, eol: EndOfLine | None = None) -> DocumentState:
        """Add an editor tab holding ``text`` and focus it."""

        widget = QPlainTextEdit()
        widget.setFont(QFont(self._settings.font_family, self._settings.font_size))
        resolved_eol = eol or detect_end_of_line(text, self._default_eol)
        widget.setPlainText(_normalize_breaks(text))
        document = DocumentState(text=widget.toPlainText(), metadata=DocumentMetadata(title=title), eol=resolved_eol)
        self._records[id(widget)] = _TabRecord(
            widget=widget, document_id=document.document_id, eol=resolved_eol, title=title
        )
        index = self._tabs.addTab(widget, title)
        self._tabs.setCurrentIndex(index)
        return document

    def tab_eol(self, widget: Any) -> EndOfLine:
        record = self._records.get(id(widget))
        return record.eol if record else self._default_eol

    def close_tab(self, index: int) -> Any:
        """Remove the tab at ``index``; edits still pending against it fail with ``tab_closed``."""

        widget = self._tabs.widget(index)
        if widget is None:
            return None
        record = self._records.pop(id(widget), None)
        self._tabs.removeTab(index)
        widget.deleteLater()
        if record is not None:
            LOGGER.debug("Closed tab %s", record.title)
        return widget

    def _record_for(self, document: DocumentState) -> _TabRecord:
        for record in self._records.values():
            if record.document_id == document.document_id:
                return record
        raise EditApplyError(message=f"Document is no longer open: {document.title}", reason="tab_closed")

    # ------------------------------------------------------------------
    # EditorHost implementation
    # ------------------------------------------------------------------

    async def prompt(self, request: PromptRequest) -> PromptResult | None:
        dialog = SearchPromptDialog(request, self._tabs.window())
        loop = asyncio.get_running_loop()
        future: asyncio.Future[PromptResult | None] = loop.create_future()

        def _accept() -> None:
            if not future.done():
                future.set_result(dialog.result_value())

        def _reject() -> None:
            if not future.done():
                future.set_result(None)

        dialog.accepted.connect(_accept)
        dialog.rejected.connect(_reject)
        dialog.open()
        try:
            return await future
        finally:
            dialog.deleteLater()

    def active_document(self) -> DocumentState | None:
        widget = self._tabs.currentWidget()
        if widget is None:
            return None
        record = self._records.get(id(widget))
        if record is None:
            return None
        return DocumentState(
            text=widget.toPlainText(),
            metadata=DocumentMetadata(title=record.title),
            eol=record.eol,
            document_id=record.document_id,
        )

    async def apply_deletions(self, document: DocumentState, spans: Sequence[LineSpan]) -> None:
        record = self._record_for(document)
        widget = record.widget
        current = widget.toPlainText()
        if current != document.text:
            raise EditApplyError(message="Document changed since the lines were matched", reason="range_mismatch")

        cursor = QTextCursor(widget.document())
        cursor.beginEditBlock()
        try:
            for span in sorted(spans, key=lambda item: item.start, reverse=True):
                cursor.setPosition(to_qt_position(current, span.start))
                cursor.setPosition(to_qt_position(current, span.end), QTextCursor.MoveMode.KeepAnchor)
                cursor.removeSelectedText()
        finally:
            cursor.endEditBlock()
        LOGGER.debug("Deleted %d lines from %s", len(spans), record.title)

    async def create_document(self, title: str) -> DocumentState:
        return self.open_tab("", title=title, eol=self._default_eol)

    async def insert_text(self, document: DocumentState, offset: int, text: str) -> None:
        record = self._record_for(document)
        widget = record.widget
        current = widget.toPlainText()
        if not current and text:
            record.eol = detect_end_of_line(text, record.eol)
        cursor = QTextCursor(widget.document())
        cursor.setPosition(to_qt_position(current, max(0, min(offset, len(current)))))
        cursor.insertText(_normalize_breaks(text))

    async def write_clipboard(self, text: str) -> None:
        QGuiApplication.clipboard().setText(text)

    async def read_clipboard(self) -> str:
        return QGuiApplication.clipboard().text()

    def show_information(self, message: str) -> None:
        self._notify(message, error=False)

    def show_error(self, message: str) -> None:
        self._notify(message, error=True)

    def _notify(self, message: str, *, error: bool) -> None:
        if self._settings.notification_style == "status_bar" and self._status_bar is not None:
            self._status_bar.showMessage(message, 5000)
            return
        icon = QMessageBox.Icon.Critical if error else QMessageBox.Icon.Information
        box = QMessageBox(icon, "Matching Lines", message, QMessageBox.StandardButton.Ok, self._tabs.window())
        box.setModal(False)
        box.open()


def _normalize_breaks(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


__all__ = ["QtEditorHost", "SearchPromptDialog", "qt_available", "to_qt_position"]
