"""Tests for PlanningSession."""

import pytest

from planning.session import PlanningSession
from planning.types import FOVEdge, FOVRectangle, PlanningLines, ScoutImageFrame


def test_reset_places_default_geometry(session):
    assert session.lines == PlanningLines(200.0, 800.0)
    assert session.fov == FOVRectangle(160.0, 640.0, 200.0, 800.0)


def test_reset_rounds_half_up():
    session = PlanningSession(ScoutImageFrame(width=101, height=502))
    # 502 * 0.2 = 100.4, 502 * 0.8 = 401.6, 101 * 0.2 = 20.2
    assert session.lines == PlanningLines(100.0, 402.0)
    assert (session.fov.x_min, session.fov.x_max) == (20.0, 81.0)


def test_reset_on_tiny_frame_stays_valid():
    session = PlanningSession(ScoutImageFrame(width=30, height=25))
    assert session.lines.end_y - session.lines.start_y >= session.min_gap
    assert session.fov.x_max - session.fov.x_min >= session.min_gap


def test_reset_emits_changed(qtbot, frame):
    session = PlanningSession()
    with qtbot.waitSignal(session.changed, timeout=100):
        session.reset(frame)
    assert session.has_frame


def test_invalid_frame_rejected():
    with pytest.raises(ValueError):
        ScoutImageFrame(width=0, height=100)


def test_end_line_clamped_against_start(session):
    session.move_end_line(190)
    assert session.lines.end_y == 220.0
    assert session.lines.start_y == 200.0


def test_line_moves_sync_fov_span(session):
    session.move_start_line(300)
    session.move_end_line(700)
    assert (session.fov.y_min, session.fov.y_max) == (300.0, 700.0)
    assert (session.fov.x_min, session.fov.x_max) == (160.0, 640.0)


def test_compatible_line_moves_commute(frame):
    a = PlanningSession(frame)
    a.move_start_line(300)
    a.move_end_line(700)

    b = PlanningSession(frame)
    b.move_end_line(700)
    b.move_start_line(300)

    assert a.lines == b.lines
    assert a.fov == b.fov


def test_move_fov_keeps_lines_and_size(session):
    session.move_fov(100, 50)
    assert session.fov == FOVRectangle(260.0, 740.0, 250.0, 850.0)
    assert session.lines == PlanningLines(200.0, 800.0)


def test_move_fov_from_origin(session):
    origin = session.fov
    session.move_fov(10, 0)
    session.move_fov(30, 0, origin=origin)
    assert session.fov.x_min == 190.0


def test_move_fov_clamped_to_frame(session):
    session.move_fov(-500, 0)
    assert session.fov.x_min == 0.0
    assert session.fov.width == 480.0


def test_resize_vertical_edge_moves_lines(session):
    session.resize_fov_edge(FOVEdge.TOP, 150)
    assert session.lines.start_y == 150.0
    session.resize_fov_edge(FOVEdge.BOTTOM, 2000)
    assert session.lines.end_y == 1000.0
    assert session.fov.y_max == 1000.0


def test_resize_horizontal_edge_leaves_lines(session):
    session.resize_fov_edge(FOVEdge.RIGHT, 100)
    assert session.fov.x_max == 180.0
    assert session.lines == PlanningLines(200.0, 800.0)


def test_snapshot_rounds_coordinates(session):
    session.move_start_line(250.5)
    session.move_fov(0.4, 0)
    snapshot = session.snapshot()
    assert snapshot.start_y == 251
    assert snapshot.end_y == 800
    assert snapshot.frame_height == 1000
    assert snapshot.fov.x_min == 160
    assert snapshot.is_well_formed


def test_snapshot_wire_format(session):
    data = session.snapshot().to_dict()
    assert data == {
        "z_pixel_start": 200,
        "z_pixel_end": 800,
        "scout_height_px": 1000,
        "fov": {"x_min": 160, "x_max": 640, "y_min": 200, "y_max": 800},
    }


def test_no_frame_mutations_are_ignored():
    session = PlanningSession()
    session.move_start_line(10)
    session.move_fov(5, 5)
    session.resize_fov_edge(FOVEdge.LEFT, 3)
    assert session.lines is None
    assert session.snapshot() is None


def test_clear_drops_geometry(session):
    session.clear()
    assert not session.has_frame
    assert session.snapshot() is None
