"""Tests for scan playback."""

from unittest.mock import Mock

import pytest

from config import PlaybackConfig
from gui.playback import ScanPlayback


@pytest.fixture
def workflow():
    workflow = Mock()
    workflow.scanning = True
    return workflow


@pytest.fixture
def playback():
    playback = ScanPlayback(PlaybackConfig(frame_interval_ms=10, fallback_slices=4))
    yield playback
    playback.stop()


def test_start_resets_progress(playback, workflow):
    playback.start(workflow, 3)
    workflow.advance_scan.assert_called_once_with(0, 3)
    assert playback.is_running
    assert playback.total_slices == 3


def test_fallback_slice_count(playback, workflow):
    playback.start(workflow, 0)
    assert playback.total_slices == 4


def test_plays_to_the_end_and_stops_scan(qtbot, playback, workflow):
    playback.start(workflow, 3)
    with qtbot.waitSignal(playback.finished, timeout=100):
        playback._tick()
        playback._tick()

    assert [c.args for c in workflow.advance_scan.call_args_list] == [(0, 3), (1, 3), (2, 3)]
    workflow.stop_scan.assert_called_once()
    assert not playback.is_running


def test_timer_drives_playback(qtbot, playback, workflow):
    with qtbot.waitSignal(playback.finished, timeout=2000):
        playback.start(workflow, 3)
    workflow.stop_scan.assert_called_once()


def test_stops_when_workflow_stopped_elsewhere(playback, workflow):
    playback.start(workflow, 10)
    workflow.scanning = False
    playback._tick()

    assert not playback.is_running
    workflow.stop_scan.assert_not_called()
    assert workflow.advance_scan.call_count == 1
