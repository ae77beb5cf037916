"""
Scan Playback

Timer-driven playback of a running scan: advances the workflow's slice
counters and stops the scan after the last slice.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from config import DEFAULT_PLAYBACK, PlaybackConfig


class ScanPlayback(QObject):
    """Plays a scan slice by slice for a WorkflowStateMachine."""

    finished = Signal()

    def __init__(self, config: PlaybackConfig = DEFAULT_PLAYBACK, parent=None):
        super().__init__(parent)
        self._config = config
        self._workflow = None
        self._slice = 0
        self._total = 0

        self._timer = QTimer(self)
        self._timer.setInterval(config.frame_interval_ms)
        self._timer.timeout.connect(self._tick)

    @property
    def is_running(self) -> bool:
        return self._workflow is not None

    @property
    def current_slice(self) -> int:
        return self._slice

    @property
    def total_slices(self) -> int:
        return self._total

    def start(self, workflow, total_slices: Optional[int] = None) -> None:
        """
        Start playing a scan.

        Args:
            workflow: WorkflowStateMachine in the scanning state
            total_slices: Number of slices; the configured fallback is used
                when missing or zero
        """
        self.stop()
        total = total_slices or self._config.fallback_slices
        self._workflow = workflow
        self._slice = 0
        self._total = max(1, int(total))
        workflow.advance_scan(0, self._total)
        logging.info(f"Scan playback started: {self._total} slices")
        self._timer.start()

    def stop(self) -> None:
        """Stop playback without touching the workflow."""
        self._timer.stop()
        self._workflow = None

    def _tick(self) -> None:
        workflow = self._workflow
        if workflow is None:
            return
        if not workflow.scanning:
            # Stopped elsewhere (emergency stop or case change)
            self.stop()
            return

        if self._slice < self._total - 1:
            self._slice += 1
            workflow.advance_scan(self._slice, self._total)

        if self._slice >= self._total - 1:
            self.stop()
            workflow.stop_scan()
            logging.info("Scan playback complete")
            self.finished.emit()
