"""
Console Log Panel

Mirrors the root logger into the main window so the operator sees workflow
transitions and collaborator failures. Records tagged with a case id
(``[<case>] ...``) can be narrowed to the current case.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPlainTextEdit,
    QPushButton, QComboBox, QCheckBox
)
from PySide6.QtCore import Signal, Slot, QObject
from PySide6.QtGui import QFont, QTextCharFormat, QColor

from ..style import COLORS, FONTS


LEVEL_COLORS = (
    (logging.ERROR, "error"),
    (logging.WARNING, "warning"),
    (logging.INFO, "text"),
    (logging.NOTSET, "text_secondary"),
)


class LogRelay(QObject):
    """Carries formatted records to the GUI thread."""
    record_ready = Signal(str, int)  # (message, level)


class QLogHandler(logging.Handler):
    """
    Logging handler that re-emits records as a Qt signal.

    Worker threads log too; the queued signal connection hands their records
    to the panel on the GUI thread.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__()
        self.relay = LogRelay(parent)

    def emit(self, record):
        try:
            self.relay.record_ready.emit(self.format(record), record.levelno)
        except RuntimeError:
            # Relay already deleted during shutdown
            pass


class LogViewerPanel(QWidget):
    """Scrolling log of the session, newest at the bottom."""

    def __init__(self, max_lines: int = 2000, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._case_id = ""
        self._setup_ui(max_lines)

        self._handler = QLogHandler(self)
        self._handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(message)s", datefmt="%H:%M:%S"
        ))
        self._handler.relay.record_ready.connect(self._append)
        logging.getLogger().addHandler(self._handler)

    def _setup_ui(self, max_lines: int) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(4, 4, 4, 0)

        self._level_combo = QComboBox()
        self._level_combo.addItems(["DEBUG", "INFO", "WARNING", "ERROR"])
        self._level_combo.setCurrentText(logging.getLevelName(logging.getLogger().level))
        self._level_combo.currentTextChanged.connect(self._on_level_changed)
        toolbar.addWidget(self._level_combo)

        self._case_only = QCheckBox("Current case only")
        toolbar.addWidget(self._case_only)
        toolbar.addStretch()

        clear_btn = QPushButton("Clear")
        clear_btn.clicked.connect(self.clear)
        toolbar.addWidget(clear_btn)
        layout.addLayout(toolbar)

        self._view = QPlainTextEdit()
        self._view.setReadOnly(True)
        self._view.setMaximumBlockCount(max_lines)
        self._view.setLineWrapMode(QPlainTextEdit.NoWrap)
        self._view.setFont(QFont(FONTS["mono"].split(",")[0], 9))
        layout.addWidget(self._view)

    def set_case(self, case_id: str) -> None:
        """Case whose records pass the 'current case only' filter."""
        self._case_id = case_id

    def detach(self) -> None:
        """Stop receiving records (window closing)."""
        logging.getLogger().removeHandler(self._handler)

    def clear(self) -> None:
        self._view.clear()

    def _on_level_changed(self, name: str) -> None:
        logging.getLogger().setLevel(name)
        logging.info(f"Log level set to {name}")

    @Slot(str, int)
    def _append(self, message: str, level: int) -> None:
        if self._case_only.isChecked() and f"[{self._case_id}]" not in message:
            return
        color = next(COLORS[key] for threshold, key in LEVEL_COLORS if level >= threshold)
        fmt = QTextCharFormat()
        fmt.setForeground(QColor(color))
        cursor = self._view.textCursor()
        cursor.movePosition(cursor.MoveOperation.End)
        if not self._view.document().isEmpty():
            cursor.insertBlock()
        cursor.insertText(message, fmt)
        self._view.setTextCursor(cursor)
