"""GUI package for the CT Scan Console."""

from .panels import CasePanel, WorkflowPanel, ScoutPanel, LogPanel
from .main_window import MainWindow
from .style import ConsoleStyle
from .playback import ScanPlayback

__all__ = [
    "MainWindow",
    "ConsoleStyle",
    "CasePanel",
    "WorkflowPanel",
    "ScoutPanel",
    "LogPanel",
    "ScanPlayback",
]
