"""Tests for DragController."""

from unittest.mock import Mock

import pytest

from planning.drag import DisplayRect, DragController, DragHandle
from planning.session import PlanningSession
from planning.types import PlanningLines


# Scout of 800x1000 shown at half size: one display pixel is two image pixels
HALF_SIZE = DisplayRect(left=0, top=0, width=400, height=500)


@pytest.fixture
def commit():
    return Mock()


@pytest.fixture
def enabled():
    return {"value": True}


@pytest.fixture
def drag(session, commit, enabled):
    return DragController(session, commit=commit, is_enabled=lambda: enabled["value"])


def test_move_scales_display_delta(drag, session):
    assert drag.pointer_down(DragHandle.START_LINE, 100, 100)
    drag.pointer_move(100, 150, HALF_SIZE)
    assert session.lines.start_y == 300.0


def test_moves_are_relative_to_anchor(drag, session):
    drag.pointer_down(DragHandle.END_LINE, 100, 400)
    for y in (410, 420, 430, 405):
        drag.pointer_move(100, y, HALF_SIZE)
    assert session.lines.end_y == 810.0


def test_display_offset_does_not_change_delta(drag, session):
    rect = DisplayRect(left=50, top=30, width=400, height=500)
    drag.pointer_down(DragHandle.FOV_MOVE, 200, 250)
    drag.pointer_move(220, 240, rect)
    assert (session.fov.x_min, session.fov.y_min) == (200.0, 180.0)
    assert session.lines == PlanningLines(200.0, 800.0)


def test_edge_drags(drag, session):
    drag.pointer_down(DragHandle.FOV_LEFT, 80, 250)
    drag.pointer_move(70, 250, HALF_SIZE)
    drag.pointer_up()
    assert session.fov.x_min == 140.0

    drag.pointer_down(DragHandle.FOV_BOTTOM, 200, 400)
    drag.pointer_move(200, 410, HALF_SIZE)
    drag.pointer_up()
    assert session.fov.y_max == 820.0
    assert session.lines.end_y == 820.0


def test_pointer_down_ignored_while_dragging(drag):
    drag.pointer_down(DragHandle.START_LINE, 0, 0)
    assert not drag.pointer_down(DragHandle.END_LINE, 0, 0)
    assert drag.active_handle is DragHandle.START_LINE


def test_pointer_down_ignored_when_disabled(drag, enabled):
    enabled["value"] = False
    assert not drag.pointer_down(DragHandle.START_LINE, 0, 0)
    assert not drag.is_dragging


def test_pointer_down_ignored_without_frame(commit):
    drag = DragController(PlanningSession(), commit=commit)
    assert not drag.pointer_down(DragHandle.START_LINE, 0, 0)


def test_move_without_drag_does_nothing(drag, session):
    assert not drag.pointer_move(10, 10, HALF_SIZE)
    assert session.lines == PlanningLines(200.0, 800.0)


def test_empty_display_rect_ignored(drag, session):
    drag.pointer_down(DragHandle.START_LINE, 0, 0)
    assert not drag.pointer_move(0, 50, DisplayRect(0, 0, 0, 0))
    assert session.lines.start_y == 200.0


def test_pointer_up_commits_snapshot(drag, commit):
    drag.pointer_down(DragHandle.START_LINE, 100, 100)
    drag.pointer_move(100, 125, HALF_SIZE)
    snapshot = drag.pointer_up()

    commit.assert_called_once_with(snapshot)
    assert snapshot.start_y == 250
    assert not drag.is_dragging
    assert drag.anchor is None


def test_pointer_leave_ends_drag(drag, commit):
    drag.pointer_down(DragHandle.FOV_MOVE, 100, 100)
    drag.pointer_leave()
    assert not drag.is_dragging
    commit.assert_called_once()


def test_pointer_up_when_idle_commits_nothing(drag, commit):
    assert drag.pointer_up() is None
    commit.assert_not_called()


def test_no_commit_after_planning_closed(drag, commit, enabled):
    drag.pointer_down(DragHandle.START_LINE, 0, 0)
    enabled["value"] = False
    assert drag.pointer_up() is None
    commit.assert_not_called()


def test_commit_errors_are_contained(drag, commit):
    commit.side_effect = RuntimeError("queue full")
    drag.pointer_down(DragHandle.START_LINE, 0, 0)
    assert drag.pointer_up() is not None
    assert not drag.is_dragging


def test_cancel_does_not_commit(qtbot, drag, commit):
    drag.pointer_down(DragHandle.START_LINE, 0, 0)
    with qtbot.waitSignal(drag.drag_finished, timeout=100) as blocker:
        drag.cancel()
    assert blocker.args == [DragHandle.START_LINE]
    commit.assert_not_called()


@pytest.mark.parametrize("point, expected", [
    ((80, 100), DragHandle.START_LINE),
    ((80, 400), DragHandle.END_LINE),
    ((200, 100), DragHandle.FOV_TOP),
    ((200, 400), DragHandle.FOV_BOTTOM),
    ((80, 250), DragHandle.FOV_LEFT),
    ((320, 250), DragHandle.FOV_RIGHT),
    ((150, 250), DragHandle.FOV_MOVE),
    ((10, 10), None),
])
def test_hit_test(drag, point, expected):
    assert drag.hit_test(*point, HALF_SIZE) is expected


def test_hit_test_without_frame():
    drag = DragController(PlanningSession())
    assert drag.hit_test(10, 10, HALF_SIZE) is None


def test_drag_stops_when_planning_closes_mid_drag(drag, session, commit, enabled):
    drag.pointer_down(DragHandle.START_LINE, 0, 0)
    enabled["value"] = False

    assert not drag.pointer_move(0, 100, HALF_SIZE)
    assert session.lines.start_y == 200.0
    assert not drag.is_dragging
    assert drag.pointer_up() is None
    commit.assert_not_called()
