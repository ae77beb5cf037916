"""
Main Window

The main application window for the CT Scan Console.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QSplitter, QStatusBar, QMessageBox, QScrollArea, QFrame, QDockWidget
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from config import DEFAULT_GUI, DEFAULT_PLAYBACK, DEFAULT_STORAGE
from core.base import ReconParams, planned_slice_count
from core.workers import TaskDispatcher
from storage.case_repository import CaseRepository
from workflow.lifecycle import SessionLifecycle
from workflow.state_machine import WorkflowFacts
from .panels import CasePanel, WorkflowPanel, ScoutPanel, LogPanel
from .playback import ScanPlayback


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, cases_root: Optional[str] = None):
        super().__init__()

        self._repository = CaseRepository(cases_root or DEFAULT_STORAGE.cases_root)
        self._dispatcher = TaskDispatcher(self)
        self._lifecycle = SessionLifecycle(
            scout_source=self._repository,
            planning_store=self._repository,
            recon_service=self._repository,
            dispatcher=self._dispatcher,
            parent=self,
        )
        self._playback = ScanPlayback(DEFAULT_PLAYBACK, self)

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()
        self._bind_case()
        self._reload_cases()

    def _setup_ui(self) -> None:
        """Set up the main window UI."""
        self.setWindowTitle(DEFAULT_GUI.window_title)
        self.setMinimumSize(*DEFAULT_GUI.min_size)
        self.resize(*DEFAULT_GUI.window_size)

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(8)

        splitter = QSplitter(Qt.Horizontal)

        # Left panel (case + workflow controls)
        controls_widget = QWidget()
        controls_layout = QVBoxLayout(controls_widget)
        controls_layout.setContentsMargins(4, 4, 4, 4)

        self._case_panel = CasePanel()
        controls_layout.addWidget(self._case_panel)

        self._workflow_panel = WorkflowPanel()
        controls_layout.addWidget(self._workflow_panel)
        controls_layout.addStretch()

        scroll_area = QScrollArea()
        scroll_area.setWidget(controls_widget)
        scroll_area.setWidgetResizable(True)
        scroll_area.setFrameShape(QFrame.NoFrame)
        scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        scroll_area.setMinimumWidth(280)
        scroll_area.setMaximumWidth(380)
        splitter.addWidget(scroll_area)

        # Right panel (scout view)
        self._scout_panel = ScoutPanel()
        splitter.addWidget(self._scout_panel)

        splitter.setCollapsible(0, False)
        splitter.setCollapsible(1, False)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([300, 900])
        main_layout.addWidget(splitter)

        # Log dock
        self._log_panel = LogPanel()
        log_dock = QDockWidget("Log", self)
        log_dock.setWidget(self._log_panel)
        self.addDockWidget(Qt.BottomDockWidgetArea, log_dock)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready")

    def _setup_menu(self) -> None:
        """Set up the menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")

        refresh_action = QAction("Refresh Cases", self)
        refresh_action.setShortcut("F5")
        refresh_action.triggered.connect(self._reload_cases)
        file_menu.addAction(refresh_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        help_menu = menubar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)

    def _connect_signals(self) -> None:
        """Connect widget and lifecycle signals."""
        self._case_panel.case_selected.connect(self._lifecycle.select_case)
        self._case_panel.refresh_requested.connect(self._reload_cases)
        self._workflow_panel.scout_requested.connect(self._lifecycle.acquire_scout)

        self._lifecycle.case_changed.connect(self._on_case_changed)
        self._lifecycle.scout_ready.connect(self._on_scout_ready)
        self._lifecycle.scout_failed.connect(
            lambda message: self._status_bar.showMessage(f"Scout failed: {message}")
        )
        self._dispatcher.task_failed.connect(self._on_task_failed)
        self._playback.finished.connect(
            lambda: self._status_bar.showMessage("Scan complete")
        )

    # ========== Case binding ==========

    def _bind_case(self) -> None:
        """Attach the panels to the current case's objects."""
        lifecycle = self._lifecycle
        workflow = lifecycle.workflow

        self._scout_panel.view.set_session(lifecycle.session, lifecycle.drag)
        self._scout_panel.view.set_scout(lifecycle.scout)
        self._scout_panel.view.set_planning_visible(False)
        self._workflow_panel.bind(workflow, has_case=lifecycle.has_case)
        self._case_panel.set_current(lifecycle.case_id)
        self._log_panel.set_case(lifecycle.case_id)

        workflow.facts_changed.connect(self._on_facts_changed)
        workflow.planning_committed.connect(
            lambda snapshot: self._status_bar.showMessage("Planning saved")
        )
        workflow.scan_started.connect(self._on_scan_started)
        workflow.scan_stopped.connect(self._playback.stop)

    def _reload_cases(self) -> None:
        self._case_panel.set_cases(self._repository.list_cases())

    # ========== Event handlers ==========

    def _on_case_changed(self, old_id: str, new_id: str) -> None:
        self._playback.stop()
        self._bind_case()
        self._status_bar.showMessage(f"Case: {new_id}" if new_id else "No case selected")
        if new_id:
            self._dispatcher.submit(
                self._repository.load_planning,
                new_id,
                on_finished=lambda snapshot: self._on_saved_planning(new_id, snapshot),
                description=f"Load planning [{new_id}]",
            )

    def _on_saved_planning(self, case_id: str, snapshot) -> None:
        # Status bar only; the session keeps its own geometry
        if snapshot is None or case_id != self._lifecycle.case_id:
            return
        self._status_bar.showMessage(
            f"Case: {case_id} (last planning: rows {snapshot.start_y}-{snapshot.end_y} "
            f"of {snapshot.frame_height})"
        )

    def _on_scout_ready(self, scout) -> None:
        self._scout_panel.view.set_scout(scout)
        frame = scout.frame
        self._status_bar.showMessage(f"Scout loaded ({frame.width} x {frame.height})")

    def _on_facts_changed(self, facts: WorkflowFacts) -> None:
        self._scout_panel.view.set_planning_visible(facts.planning_active)

    def _on_scan_started(self, params: ReconParams) -> None:
        lifecycle = self._lifecycle
        total = 0
        snapshot = lifecycle.session.snapshot()
        if snapshot is not None and lifecycle.scout is not None:
            total = planned_slice_count(snapshot, lifecycle.scout, params)
        self._playback.start(lifecycle.workflow, total)

    def _on_task_failed(self, description: str, message: str) -> None:
        self._status_bar.showMessage(f"{description} failed: {message}")

    def _on_about(self) -> None:
        """Show about dialog."""
        QMessageBox.about(
            self,
            "About CT Scan Console",
            "<h3>CT Scan Console</h3>"
            "<p>Operator workflow simulation for CT scanning:</p>"
            "<ul>"
            "<li>Scout acquisition</li>"
            "<li>Z-range and FOV planning on the scout</li>"
            "<li>Reconstruction parameters</li>"
            "<li>Scan execution</li>"
            "</ul>"
        )

    def closeEvent(self, event):
        self._playback.stop()
        self._dispatcher.wait_all()
        self._log_panel.detach()
        logging.info("Console closed")
        super().closeEvent(event)
