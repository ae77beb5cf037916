"""
Workflow Package

Exam workflow gate (scout, planning, reconstruction, scan) and the per-case
session lifecycle.
"""

from .state_machine import (
    IndicatorState,
    WorkflowFacts,
    WorkflowStage,
    WorkflowStateMachine,
)
from .lifecycle import SessionLifecycle

__all__ = [
    'IndicatorState',
    'WorkflowFacts',
    'WorkflowStage',
    'WorkflowStateMachine',
    'SessionLifecycle',
]
