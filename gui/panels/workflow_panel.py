"""
Workflow Panel

Operator controls in workflow order: Scout Scan, Start/End Planning,
reconstruction parameters, Start/Stop Scan, plus the stage indicators.
Buttons are enabled purely from the state machine's capabilities.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QPushButton, QLabel, QFormLayout, QGridLayout
)
from PySide6.QtCore import Signal

from config import DEFAULT_RECON, ReconConfig
from core.base import ReconParams
from workflow.state_machine import IndicatorState, WorkflowStage, WorkflowStateMachine
from ..style import COLORS
from ..utils import create_mm_spinbox, set_value_silently


INDICATOR_COLORS = {
    IndicatorState.IDLE: COLORS["indicator_idle"],
    IndicatorState.ACTIVE: COLORS["accent_hover"],
    IndicatorState.DONE: COLORS["success"],
}


class WorkflowPanel(QWidget):
    """Workflow buttons bound to one WorkflowStateMachine at a time."""

    scout_requested = Signal()

    def __init__(
        self,
        recon_config: ReconConfig = DEFAULT_RECON,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)
        self._recon_config = recon_config
        self._workflow: Optional[WorkflowStateMachine] = None
        self._has_case = False
        self._setup_ui()
        self.refresh()

    def _setup_ui(self) -> None:
        """Set up the panel UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        group = QGroupBox("Workflow")
        group_layout = QVBoxLayout(group)

        # Row 1: Scout Scan | Start Planning
        row = QGridLayout()
        self._scout_btn = QPushButton("Scout Scan")
        self._scout_btn.clicked.connect(self.scout_requested.emit)
        row.addWidget(self._scout_btn, 0, 0)

        self._start_planning_btn = QPushButton("Start Planning")
        self._start_planning_btn.setObjectName("primaryButton")
        self._start_planning_btn.clicked.connect(self._on_start_planning)
        row.addWidget(self._start_planning_btn, 0, 1)
        group_layout.addLayout(row)

        # Row 2: End Planning
        self._end_planning_btn = QPushButton("End Planning")
        self._end_planning_btn.setObjectName("successButton")
        self._end_planning_btn.clicked.connect(self._on_end_planning)
        group_layout.addWidget(self._end_planning_btn)

        # Reconstruction
        self._recon_group = QGroupBox("Reconstruction")
        recon_layout = QFormLayout(self._recon_group)
        cfg = self._recon_config
        self._thickness_spin = create_mm_spinbox(
            cfg.slice_thickness_mm, cfg.min_thickness_mm, cfg.max_thickness_mm,
            tooltip="Reconstructed slice thickness",
            on_change=self._on_recon_changed
        )
        recon_layout.addRow("Slice Thickness:", self._thickness_spin)
        self._spacing_spin = create_mm_spinbox(
            cfg.slice_spacing_mm, cfg.min_spacing_mm, cfg.max_spacing_mm,
            tooltip="Distance between reconstructed slices",
            on_change=self._on_recon_changed
        )
        recon_layout.addRow("Slice Spacing:", self._spacing_spin)
        group_layout.addWidget(self._recon_group)

        # Start / Stop Scan
        self._scan_btn = QPushButton("Start Scan")
        self._scan_btn.clicked.connect(self._on_scan_clicked)
        group_layout.addWidget(self._scan_btn)

        layout.addWidget(group)

        # Stage indicators
        indicator_row = QHBoxLayout()
        self._indicators = {}
        for stage in WorkflowStage:
            dot = QLabel("●")
            text = QLabel(stage.value)
            indicator_row.addWidget(dot)
            indicator_row.addWidget(text)
            self._indicators[stage] = (dot, text)
        indicator_row.addStretch()
        layout.addLayout(indicator_row)

        self._progress_label = QLabel("")
        self._progress_label.setObjectName("progressLabel")
        layout.addWidget(self._progress_label)

    def bind(self, workflow: WorkflowStateMachine, has_case: bool = True) -> None:
        """
        Follow a new workflow (after a case change).

        Args:
            workflow: State machine of the current case
            has_case: Whether a case is selected at all
        """
        if self._workflow is not None:
            try:
                self._workflow.facts_changed.disconnect(self._on_facts_changed)
            except (RuntimeError, TypeError):
                pass
        self._workflow = workflow
        self._has_case = has_case
        workflow.facts_changed.connect(self._on_facts_changed)

        params = workflow.recon_params
        set_value_silently(self._thickness_spin, params.slice_thickness_mm)
        set_value_silently(self._spacing_spin, params.slice_spacing_mm)
        self.refresh()

    def _on_facts_changed(self, facts) -> None:
        self.refresh()

    def refresh(self) -> None:
        """Update every control from the workflow capabilities."""
        wf = self._workflow
        if wf is None:
            for widget in (self._scout_btn, self._start_planning_btn,
                           self._end_planning_btn, self._recon_group, self._scan_btn):
                widget.setEnabled(False)
            return

        self._scout_btn.setEnabled(self._has_case and wf.can_acquire_scout)
        self._start_planning_btn.setEnabled(wf.can_start_planning)
        self._end_planning_btn.setEnabled(wf.can_end_planning)
        self._recon_group.setEnabled(wf.can_edit_recon)

        if wf.scanning:
            self._scan_btn.setText("Stop Scan")
            self._scan_btn.setObjectName("dangerButton")
            self._scan_btn.setEnabled(True)
        else:
            self._scan_btn.setText("Start Scan")
            self._scan_btn.setObjectName("successButton")
            self._scan_btn.setEnabled(wf.can_start_scan)
        # Object name changed; re-apply the stylesheet rules
        self._scan_btn.style().unpolish(self._scan_btn)
        self._scan_btn.style().polish(self._scan_btn)

        for stage, state in wf.indicator_states().items():
            dot, text = self._indicators[stage]
            color = INDICATOR_COLORS[state]
            dot.setStyleSheet(f"color: {color};")
            text.setStyleSheet(f"color: {color if state is not IndicatorState.IDLE else COLORS['text_secondary']};")

        self._progress_label.setText(wf.progress_text())

    def current_recon_params(self) -> ReconParams:
        return ReconParams(
            slice_thickness_mm=self._thickness_spin.value(),
            slice_spacing_mm=self._spacing_spin.value(),
        )

    def _on_start_planning(self) -> None:
        if self._workflow is not None:
            self._workflow.start_planning()

    def _on_end_planning(self) -> None:
        if self._workflow is not None:
            self._workflow.end_planning()

    def _on_recon_changed(self, value: float) -> None:
        if self._workflow is not None and self._workflow.can_edit_recon:
            self._workflow.set_recon_params(self.current_recon_params())

    def _on_scan_clicked(self) -> None:
        wf = self._workflow
        if wf is None:
            return
        if wf.scanning:
            logging.info("Stop Scan pressed")
            wf.stop_scan()
        else:
            wf.start_scan(self.current_recon_params())
