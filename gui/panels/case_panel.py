"""
Case Selector Panel

Hierarchical (region / protocol / case) selection of the active case.
"""

import logging
from typing import Dict, Iterable, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QPushButton, QTreeWidget, QTreeWidgetItem, QLabel
)
from PySide6.QtCore import Qt, Signal

from core.case import case_label, split_case_id


CASE_ID_ROLE = Qt.UserRole + 1


class CasePanel(QWidget):
    """Tree of available cases; emits the id of the chosen case."""

    case_selected = Signal(str)
    refresh_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the panel UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        group = QGroupBox("Case")
        group_layout = QVBoxLayout(group)

        self._tree = QTreeWidget()
        self._tree.setHeaderHidden(True)
        self._tree.setMinimumHeight(160)
        self._tree.itemActivated.connect(self._on_item_activated)
        self._tree.itemClicked.connect(self._on_item_activated)
        group_layout.addWidget(self._tree)

        row = QHBoxLayout()
        self._current_label = QLabel("No case selected")
        self._current_label.setObjectName("secondaryLabel")
        row.addWidget(self._current_label, stretch=1)

        refresh_btn = QPushButton("Refresh")
        refresh_btn.clicked.connect(self.refresh_requested.emit)
        row.addWidget(refresh_btn)
        group_layout.addLayout(row)

        layout.addWidget(group)

    def set_cases(self, case_ids: Iterable[str]) -> None:
        """
        Rebuild the tree from case ids.

        Args:
            case_ids: Hierarchical ids, e.g. 'Abdomen/CT Abdomen Contrast/case_001'
        """
        self._tree.clear()
        nodes: Dict[tuple, QTreeWidgetItem] = {}
        count = 0

        for case_id in case_ids:
            parts = split_case_id(case_id)
            if not parts:
                continue
            parent_item = None
            for depth, part in enumerate(parts):
                key = parts[:depth + 1]
                item = nodes.get(key)
                if item is None:
                    if parent_item is None:
                        item = QTreeWidgetItem(self._tree, [part])
                    else:
                        item = QTreeWidgetItem(parent_item, [part])
                    nodes[key] = item
                parent_item = item
            parent_item.setData(0, CASE_ID_ROLE, "/".join(parts))
            count += 1

        self._tree.expandAll()
        logging.info(f"Case list loaded: {count} cases")

    def set_current(self, case_id: str) -> None:
        """Show which case is active."""
        label = case_label(case_id)
        self._current_label.setText(label if label else "No case selected")

    def _on_item_activated(self, item: QTreeWidgetItem, column: int = 0) -> None:
        case_id = item.data(0, CASE_ID_ROLE)
        if case_id:
            self.case_selected.emit(case_id)
