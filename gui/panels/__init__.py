"""
GUI Panels Package

Contains all panel widgets for the application.
"""

from .case_panel import CasePanel
from .workflow_panel import WorkflowPanel
from .scout_panel import ScoutPanel, ScoutView
from .log_panel import LogViewerPanel

# Alias for consistency
LogPanel = LogViewerPanel

__all__ = [
    'CasePanel',
    'WorkflowPanel',
    'ScoutPanel',
    'ScoutView',
    'LogViewerPanel',
    'LogPanel',
]
