"""Tests for the planning clamp functions."""

import itertools

import pytest

from planning.geometry import MIN_GAP, clamp_lines, clamp_rect, clamp_span, translate_rect
from planning.types import FOVEdge, FOVRectangle, LineHandle, PlanningLines


EXTREME_VALUES = [-1e6, -50.0, -0.5, 0.0, 10.0, 19.9, 200.0, 500.0, 980.0, 999.0, 1000.0, 1e6]


def assert_lines_valid(lines, height):
    assert 0 <= lines.start_y
    assert lines.start_y <= lines.end_y - MIN_GAP
    assert lines.end_y - MIN_GAP <= height - MIN_GAP


def assert_rect_valid(rect, width, height):
    assert 0 <= rect.x_min
    assert rect.x_min + MIN_GAP <= rect.x_max <= width
    assert 0 <= rect.y_min
    assert rect.y_min + MIN_GAP <= rect.y_max <= height


@pytest.mark.parametrize("moving", list(LineHandle))
def test_clamp_lines_always_valid(moving):
    height = 1000
    for start, end in itertools.product(EXTREME_VALUES, repeat=2):
        result = clamp_lines(PlanningLines(start, end), height, moving=moving)
        assert_lines_valid(result, height)


def test_clamp_lines_keeps_valid_input():
    lines = PlanningLines(200.0, 800.0)
    assert clamp_lines(lines, 1000) == lines
    assert clamp_lines(lines, 1000, moving=LineHandle.START) == lines


def test_end_line_stops_at_gap_below_start():
    result = clamp_lines(PlanningLines(200.0, 190.0), 1000, moving=LineHandle.END)
    assert result == PlanningLines(200.0, 220.0)


def test_start_line_stops_at_gap_above_end():
    result = clamp_lines(PlanningLines(900.0, 800.0), 1000, moving=LineHandle.START)
    assert result == PlanningLines(780.0, 800.0)


def test_lines_clamped_to_frame():
    assert clamp_lines(PlanningLines(-30.0, 800.0), 1000, moving=LineHandle.START).start_y == 0.0
    assert clamp_lines(PlanningLines(200.0, 1500.0), 1000).end_y == 1000.0


def test_fixed_line_is_pulled_inside_frame():
    # Moving the end line with a start line beyond the frame
    result = clamp_lines(PlanningLines(995.0, 1200.0), 1000, moving=LineHandle.END)
    assert result == PlanningLines(980.0, 1000.0)


def test_frame_smaller_than_gap_uses_full_axis():
    assert clamp_span(3.0, 5.0, 10.0) == (0.0, 10.0)


@pytest.mark.parametrize("edge", [None] + list(FOVEdge))
def test_clamp_rect_always_valid(edge):
    width, height = 800, 1000
    for x_min, x_max, y_min, y_max in itertools.product(EXTREME_VALUES[::2], repeat=4):
        rect = FOVRectangle(x_min, x_max, y_min, y_max)
        assert_rect_valid(clamp_rect(rect, width, height, edge=edge), width, height)


def test_shrinking_right_edge_stops_at_gap():
    rect = FOVRectangle(160.0, 100.0, 200.0, 800.0)
    result = clamp_rect(rect, 800, 1000, edge=FOVEdge.RIGHT)
    assert result.x_max == 180.0
    assert result.x_min == 160.0


def test_shrinking_left_edge_stops_at_gap():
    rect = FOVRectangle(700.0, 640.0, 200.0, 800.0)
    result = clamp_rect(rect, 800, 1000, edge=FOVEdge.LEFT)
    assert result.x_min == 620.0
    assert result.x_max == 640.0


def test_growing_edges_stop_at_frame():
    rect = FOVRectangle(160.0, 640.0, -40.0, 800.0)
    result = clamp_rect(rect, 800, 1000, edge=FOVEdge.TOP)
    assert result.y_min == 0.0

    rect = FOVRectangle(160.0, 900.0, 200.0, 800.0)
    assert clamp_rect(rect, 800, 1000, edge=FOVEdge.RIGHT).x_max == 800.0


def test_axes_are_independent():
    rect = FOVRectangle(160.0, 640.0, 200.0, 800.0)
    result = clamp_rect(rect.with_edge(FOVEdge.LEFT, -10.0), 800, 1000, edge=FOVEdge.LEFT)
    assert (result.y_min, result.y_max) == (200.0, 800.0)


def test_translate_keeps_size():
    rect = FOVRectangle(160.0, 640.0, 200.0, 800.0)
    moved = translate_rect(rect, 50.0, -30.0, 800, 1000)
    assert moved == FOVRectangle(210.0, 690.0, 170.0, 770.0)
    assert moved.width == rect.width and moved.height == rect.height


def test_translate_stops_at_frame_border():
    rect = FOVRectangle(160.0, 640.0, 200.0, 800.0)
    moved = translate_rect(rect, 1000.0, -1000.0, 800, 1000)
    assert moved == FOVRectangle(320.0, 800.0, 0.0, 600.0)
