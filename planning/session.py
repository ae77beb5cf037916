"""
Planning Session

Holds the z-lines and FOV box for one case in scout pixel coordinates.
"""

import logging
from dataclasses import replace
from typing import Optional

from PySide6.QtCore import QObject, Signal

from config import DEFAULT_PLANNING, PlanningConfig
from .geometry import clamp_lines, clamp_rect, translate_rect
from .types import (
    FOVEdge,
    FOVRectangle,
    LineHandle,
    PlanningLines,
    PlanningSnapshot,
    ScoutImageFrame,
    round_px,
)


class PlanningSession(QObject):
    """
    Live planning geometry for a single case.

    Values stay floating-point while dragging; they are rounded only when a
    snapshot is taken. Every mutation is clamped, so the session always
    satisfies the line and FOV invariants once a frame is set.
    """

    # Emitted after any geometry change (reset, drag update, clear)
    changed = Signal()

    def __init__(
        self,
        frame: Optional[ScoutImageFrame] = None,
        config: PlanningConfig = DEFAULT_PLANNING,
        parent=None
    ):
        super().__init__(parent)
        self._config = config
        self._frame: Optional[ScoutImageFrame] = None
        self._lines: Optional[PlanningLines] = None
        self._fov: Optional[FOVRectangle] = None

        if frame is not None:
            self.reset(frame)

    @property
    def frame(self) -> Optional[ScoutImageFrame]:
        """Scout frame the coordinates refer to."""
        return self._frame

    @property
    def lines(self) -> Optional[PlanningLines]:
        return self._lines

    @property
    def fov(self) -> Optional[FOVRectangle]:
        return self._fov

    @property
    def has_frame(self) -> bool:
        """Whether a scout frame is available for planning."""
        return self._frame is not None

    @property
    def min_gap(self) -> float:
        return self._config.min_gap_px

    def reset(self, frame: ScoutImageFrame) -> None:
        """
        Re-initialize the geometry for a new scout frame.

        Lines go to 20%/80% of the height; the FOV is inset by 20% of the
        width on each side and spans the lines vertically.

        Args:
            frame: The newly acquired scout frame
        """
        cfg = self._config
        start_y = round_px(frame.height * cfg.default_start_fraction)
        end_y = round_px(frame.height * cfg.default_end_fraction)
        margin = round_px(frame.width * cfg.fov_margin_fraction)

        self._frame = frame
        self._lines = clamp_lines(
            PlanningLines(start_y, end_y), frame.height, min_gap=cfg.min_gap_px
        )
        self._fov = clamp_rect(
            FOVRectangle(
                x_min=margin,
                x_max=frame.width - margin,
                y_min=self._lines.start_y,
                y_max=self._lines.end_y,
            ),
            frame.width,
            frame.height,
            min_gap=cfg.min_gap_px,
        )
        logging.info(
            f"Planning reset for {frame.width}x{frame.height} scout: "
            f"z=[{self._lines.start_y:.0f}, {self._lines.end_y:.0f}]"
        )
        self.changed.emit()

    def clear(self) -> None:
        """Drop the frame and all geometry."""
        self._frame = None
        self._lines = None
        self._fov = None
        self.changed.emit()

    def move_start_line(self, new_y: float) -> None:
        """Move the start (top) line; the FOV's vertical span follows."""
        self._move_line(LineHandle.START, new_y)

    def move_end_line(self, new_y: float) -> None:
        """Move the end (bottom) line; the FOV's vertical span follows."""
        self._move_line(LineHandle.END, new_y)

    def _move_line(self, handle: LineHandle, new_y: float) -> None:
        if not self._require_frame(f"move {handle.value} line"):
            return

        if handle is LineHandle.START:
            candidate = replace(self._lines, start_y=float(new_y))
        else:
            candidate = replace(self._lines, end_y=float(new_y))

        self._lines = clamp_lines(
            candidate, self._frame.height, moving=handle, min_gap=self.min_gap
        )
        self._fov = replace(
            self._fov, y_min=self._lines.start_y, y_max=self._lines.end_y
        )
        self.changed.emit()

    def move_fov(
        self,
        delta_x: float,
        delta_y: float,
        origin: Optional[FOVRectangle] = None
    ) -> None:
        """
        Translate the FOV box, keeping its size.

        Args:
            delta_x, delta_y: Translation in pixels
            origin: Rectangle to translate from (drag anchor); defaults to
                the current rectangle
        """
        if not self._require_frame("move FOV"):
            return

        base = origin if origin is not None else self._fov
        self._fov = translate_rect(
            base, delta_x, delta_y, self._frame.width, self._frame.height
        )
        self.changed.emit()

    def resize_fov_edge(self, edge: FOVEdge, new_value: float) -> None:
        """
        Move a single FOV edge.

        The top and bottom edges are coupled to the z-lines: after resizing
        either of them the lines equal the FOV's vertical span.

        Args:
            edge: Edge to move
            new_value: Candidate coordinate for the edge in pixels
        """
        if not self._require_frame(f"resize FOV {edge.value}"):
            return

        self._fov = clamp_rect(
            self._fov.with_edge(edge, new_value),
            self._frame.width,
            self._frame.height,
            edge=edge,
            min_gap=self.min_gap,
        )
        if edge in (FOVEdge.TOP, FOVEdge.BOTTOM):
            self._lines = PlanningLines(
                start_y=self._fov.y_min, end_y=self._fov.y_max
            )
        self.changed.emit()

    def snapshot(self) -> Optional[PlanningSnapshot]:
        """
        Take a persistable copy of the geometry.

        Returns:
            PlanningSnapshot with integer coordinates, or None before the
            first scout frame
        """
        if self._frame is None:
            return None
        return PlanningSnapshot(
            start_y=round_px(self._lines.start_y),
            end_y=round_px(self._lines.end_y),
            frame_height=self._frame.height,
            fov=self._fov.rounded(),
        )

    def _require_frame(self, action: str) -> bool:
        if self._frame is None:
            logging.debug(f"Ignoring '{action}': no scout frame")
            return False
        return True
