"""
Planning Geometry Clamps

Pure functions that keep the z-lines and the FOV box inside a scout frame.
Out-of-range input is corrected, never rejected: a drag gesture must not be
interrupted by an exception.
"""

from typing import Optional, Tuple

from config import DEFAULT_PLANNING
from .types import FOVEdge, FOVRectangle, LineHandle, PlanningLines


MIN_GAP = DEFAULT_PLANNING.min_gap_px


def _clip(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def clamp_span(
    lower: float,
    upper: float,
    extent: float,
    moving_lower: bool = False,
    min_gap: float = MIN_GAP
) -> Tuple[float, float]:
    """
    Clamp an ordered pair of coordinates on one axis.

    The fixed side is first brought into the range that leaves room for the
    moving side; the moving side is then clamped against the fixed side
    (gap) and only afterwards against the frame bound.

    Args:
        lower: Lower coordinate (top/left)
        upper: Upper coordinate (bottom/right)
        extent: Axis length in pixels
        moving_lower: True when the lower coordinate is the one being moved
        min_gap: Minimum allowed distance between the two coordinates

    Returns:
        Tuple of (lower, upper) satisfying 0 <= lower, lower + min_gap <= upper <= extent
    """
    extent = float(extent)
    if extent < min_gap:
        # Frame too small to hold the gap; use the whole axis
        return 0.0, extent

    if moving_lower:
        upper = _clip(float(upper), min_gap, extent)
        lower = min(float(lower), upper - min_gap)
        lower = max(lower, 0.0)
    else:
        lower = _clip(float(lower), 0.0, extent - min_gap)
        upper = max(float(upper), lower + min_gap)
        upper = min(upper, extent)
    return lower, upper


def clamp_lines(
    lines: PlanningLines,
    frame_height: float,
    moving: LineHandle = LineHandle.END,
    min_gap: float = MIN_GAP
) -> PlanningLines:
    """
    Clamp the z-lines to the frame height.

    Args:
        lines: Candidate line positions
        frame_height: Scout height in pixels
        moving: Which line the operator is moving; the other one is kept
        min_gap: Minimum distance between the lines

    Returns:
        PlanningLines with 0 <= start_y <= end_y - min_gap <= frame_height - min_gap
    """
    start_y, end_y = clamp_span(
        lines.start_y,
        lines.end_y,
        frame_height,
        moving_lower=(moving is LineHandle.START),
        min_gap=min_gap,
    )
    return PlanningLines(start_y=start_y, end_y=end_y)


def clamp_rect(
    rect: FOVRectangle,
    frame_width: float,
    frame_height: float,
    edge: Optional[FOVEdge] = None,
    min_gap: float = MIN_GAP
) -> FOVRectangle:
    """
    Clamp a FOV rectangle to the frame.

    Each axis is clamped independently. The edge being moved is limited by
    the opposite edge first and by the frame second, so shrinking an edge
    stops at ``min_gap`` from its opposite edge.

    Args:
        rect: Candidate rectangle
        frame_width: Scout width in pixels
        frame_height: Scout height in pixels
        edge: Edge being moved, or None to treat the lower edges as fixed
        min_gap: Minimum box width/height

    Returns:
        FOVRectangle satisfying the ordering and bound invariants
    """
    x_min, x_max = clamp_span(
        rect.x_min, rect.x_max, frame_width,
        moving_lower=(edge is FOVEdge.LEFT),
        min_gap=min_gap,
    )
    y_min, y_max = clamp_span(
        rect.y_min, rect.y_max, frame_height,
        moving_lower=(edge is FOVEdge.TOP),
        min_gap=min_gap,
    )
    return FOVRectangle(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max)


def translate_rect(
    rect: FOVRectangle,
    dx: float,
    dy: float,
    frame_width: float,
    frame_height: float
) -> FOVRectangle:
    """
    Move a rectangle as a unit, keeping its size.

    Args:
        rect: Rectangle to move
        dx, dy: Translation in pixels
        frame_width, frame_height: Frame extent

    Returns:
        Translated rectangle, stopped at the frame border
    """
    width = min(rect.width, float(frame_width))
    height = min(rect.height, float(frame_height))
    x_min = _clip(rect.x_min + dx, 0.0, frame_width - width)
    y_min = _clip(rect.y_min + dy, 0.0, frame_height - height)
    return FOVRectangle(
        x_min=x_min,
        x_max=x_min + width,
        y_min=y_min,
        y_max=y_min + height,
    )
