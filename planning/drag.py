"""
Drag Controller

Turns pointer events on the scout view into PlanningSession mutations.

The controller is either idle or dragging exactly one handle. A drag keeps an
immutable anchor (pointer position and geometry at pointer-down); every
pointer-move derives the new value from the anchor plus the total delta, so
rapid event streams cannot accumulate drift.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from config import DEFAULT_PLANNING, PlanningConfig
from .session import PlanningSession
from .types import FOVEdge, FOVRectangle, PlanningLines, PlanningSnapshot


class DragHandle(Enum):
    """Grabbable parts of the planning overlay."""
    START_LINE = "start"
    END_LINE = "end"
    FOV_MOVE = "fov"
    FOV_LEFT = "fov-left"
    FOV_RIGHT = "fov-right"
    FOV_TOP = "fov-top"
    FOV_BOTTOM = "fov-bottom"


@dataclass(frozen=True)
class DisplayRect:
    """Rectangle the scout image occupies on screen, in display pixels."""
    left: float
    top: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class DragAnchor:
    """Pointer position and session geometry captured at pointer-down."""
    pointer_x: float
    pointer_y: float
    lines: PlanningLines
    fov: FOVRectangle


class DragController(QObject):
    """
    Pointer-driven editing of a PlanningSession.

    Commits are handed to ``commit`` on release; the callback is expected to
    dispatch persistence in the background and never block.
    """

    drag_started = Signal(object)  # Emits DragHandle
    drag_finished = Signal(object)  # Emits DragHandle

    def __init__(
        self,
        session: PlanningSession,
        commit: Optional[Callable[[PlanningSnapshot], None]] = None,
        is_enabled: Optional[Callable[[], bool]] = None,
        config: PlanningConfig = DEFAULT_PLANNING,
        parent=None
    ):
        """
        Initialize the controller.

        Args:
            session: Session to mutate
            commit: Called with the session snapshot when a drag ends
            is_enabled: Returns whether planning edits are currently allowed
            config: Planning configuration (grab tolerances)
            parent: Qt parent
        """
        super().__init__(parent)
        self._session = session
        self._commit = commit
        self._is_enabled = is_enabled or (lambda: True)
        self._config = config

        self._handle: Optional[DragHandle] = None
        self._anchor: Optional[DragAnchor] = None

    @property
    def session(self) -> PlanningSession:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._handle is not None

    @property
    def active_handle(self) -> Optional[DragHandle]:
        """Handle being dragged, or None when idle."""
        return self._handle

    @property
    def anchor(self) -> Optional[DragAnchor]:
        return self._anchor

    def pointer_down(self, handle: DragHandle, x: float, y: float) -> bool:
        """
        Start dragging a handle.

        Args:
            handle: Handle under the pointer
            x, y: Pointer position in display pixels

        Returns:
            True if a drag started
        """
        if self._handle is not None:
            logging.debug(
                f"Ignoring pointer-down on {handle.value}: "
                f"already dragging {self._handle.value}"
            )
            return False
        if not self._is_enabled():
            logging.debug(f"Ignoring pointer-down on {handle.value}: planning not active")
            return False
        if not self._session.has_frame:
            logging.debug(f"Ignoring pointer-down on {handle.value}: no scout frame")
            return False

        self._handle = handle
        self._anchor = DragAnchor(
            pointer_x=float(x),
            pointer_y=float(y),
            lines=self._session.lines,
            fov=self._session.fov,
        )
        logging.debug(f"Drag started: {handle.value} at ({x:.1f}, {y:.1f})")
        self.drag_started.emit(handle)
        return True

    def pointer_move(self, x: float, y: float, display_rect: DisplayRect) -> bool:
        """
        Update the dragged quantity for a new pointer position.

        Args:
            x, y: Pointer position in display pixels
            display_rect: Current on-screen rectangle of the scout image

        Returns:
            True if the session was updated
        """
        if self._handle is None:
            return False
        if not self._is_enabled():
            logging.debug(f"Drag on {self._handle.value} cancelled: planning not active")
            self.cancel()
            return False
        frame = self._session.frame
        if frame is None or display_rect.is_empty:
            return False

        scale_x, scale_y = self.scale_factors(display_rect)
        dx = (x - self._anchor.pointer_x) * scale_x
        dy = (y - self._anchor.pointer_y) * scale_y
        anchor = self._anchor
        handle = self._handle

        if handle is DragHandle.START_LINE:
            self._session.move_start_line(anchor.lines.start_y + dy)
        elif handle is DragHandle.END_LINE:
            self._session.move_end_line(anchor.lines.end_y + dy)
        elif handle is DragHandle.FOV_MOVE:
            self._session.move_fov(dx, dy, origin=anchor.fov)
        elif handle is DragHandle.FOV_LEFT:
            self._session.resize_fov_edge(FOVEdge.LEFT, anchor.fov.x_min + dx)
        elif handle is DragHandle.FOV_RIGHT:
            self._session.resize_fov_edge(FOVEdge.RIGHT, anchor.fov.x_max + dx)
        elif handle is DragHandle.FOV_TOP:
            self._session.resize_fov_edge(FOVEdge.TOP, anchor.fov.y_min + dy)
        elif handle is DragHandle.FOV_BOTTOM:
            self._session.resize_fov_edge(FOVEdge.BOTTOM, anchor.fov.y_max + dy)
        return True

    def pointer_up(self) -> Optional[PlanningSnapshot]:
        """
        End the drag and commit the session.

        Returns:
            The committed snapshot, or None if nothing was committed
        """
        if self._handle is None:
            return None

        handle = self._handle
        self._handle = None
        self._anchor = None
        self.drag_finished.emit(handle)

        if not self._is_enabled():
            logging.debug(f"Drag on {handle.value} ended after planning closed; not saved")
            return None

        snapshot = self._session.snapshot()
        if snapshot is None:
            return None

        logging.debug(f"Drag finished: {handle.value}, committing {snapshot.to_dict()}")
        if self._commit is not None:
            try:
                self._commit(snapshot)
            except Exception as e:
                logging.error(f"Failed to dispatch planning commit: {e}")
        return snapshot

    # Leaving the view ends the drag the same way as releasing the button
    pointer_leave = pointer_up

    def cancel(self) -> None:
        """End any drag without committing."""
        if self._handle is not None:
            logging.debug(f"Drag cancelled: {self._handle.value}")
            handle = self._handle
            self._handle = None
            self._anchor = None
            self.drag_finished.emit(handle)

    def scale_factors(self, display_rect: DisplayRect) -> Tuple[float, float]:
        """Image pixels per display pixel along x and y."""
        frame = self._session.frame
        return frame.width / display_rect.width, frame.height / display_rect.height

    def hit_test(
        self,
        x: float,
        y: float,
        display_rect: DisplayRect
    ) -> Optional[DragHandle]:
        """
        Find the handle under a display point.

        FOV edge grips win over the z-lines, which win over the FOV interior.

        Args:
            x, y: Point in display pixels
            display_rect: On-screen rectangle of the scout image

        Returns:
            DragHandle under the point, or None
        """
        if not self._session.has_frame or display_rect.is_empty:
            return None

        scale_x, scale_y = self.scale_factors(display_rect)
        px = (x - display_rect.left) * scale_x
        py = (y - display_rect.top) * scale_y
        tol_x = self._config.handle_tolerance_px * scale_x
        tol_y = self._config.handle_tolerance_px * scale_y
        grip_x = self._config.grip_half_length_px * scale_x
        grip_y = self._config.grip_half_length_px * scale_y

        fov = self._session.fov
        lines = self._session.lines
        center_x = (fov.x_min + fov.x_max) / 2
        center_y = (fov.y_min + fov.y_max) / 2

        if abs(py - center_y) <= grip_y:
            if abs(px - fov.x_min) <= tol_x:
                return DragHandle.FOV_LEFT
            if abs(px - fov.x_max) <= tol_x:
                return DragHandle.FOV_RIGHT
        if abs(px - center_x) <= grip_x:
            if abs(py - fov.y_min) <= tol_y:
                return DragHandle.FOV_TOP
            if abs(py - fov.y_max) <= tol_y:
                return DragHandle.FOV_BOTTOM

        if abs(py - lines.start_y) <= tol_y:
            return DragHandle.START_LINE
        if abs(py - lines.end_y) <= tol_y:
            return DragHandle.END_LINE

        if fov.contains(px, py):
            return DragHandle.FOV_MOVE
        return None
