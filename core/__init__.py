"""
Core Package

Contains data transfer objects, collaborator interfaces and background workers.
"""

from .base import (
    ScoutImage,
    ReconParams,
    ScoutSource,
    PlanningStore,
    ReconstructionService,
    planned_slice_count,
)
from .case import normalize_case_id, split_case_id, case_label
from .workers import TaskDispatcher, TaskWorker

__all__ = [
    'ScoutImage',
    'ReconParams',
    'ScoutSource',
    'PlanningStore',
    'ReconstructionService',
    'planned_slice_count',
    'normalize_case_id',
    'split_case_id',
    'case_label',
    'TaskDispatcher',
    'TaskWorker',
]
