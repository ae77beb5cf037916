"""
Planning Package

Scout planning geometry: z-range lines, FOV box, clamping and drag editing.
"""

from .types import (
    FOVEdge,
    FOVRectangle,
    LineHandle,
    PlanningLines,
    PlanningSnapshot,
    ScoutImageFrame,
)
from .geometry import MIN_GAP, clamp_lines, clamp_rect, translate_rect
from .session import PlanningSession
from .drag import DisplayRect, DragAnchor, DragController, DragHandle

__all__ = [
    'FOVEdge',
    'FOVRectangle',
    'LineHandle',
    'PlanningLines',
    'PlanningSnapshot',
    'ScoutImageFrame',
    'MIN_GAP',
    'clamp_lines',
    'clamp_rect',
    'translate_rect',
    'PlanningSession',
    'DisplayRect',
    'DragAnchor',
    'DragController',
    'DragHandle',
]
