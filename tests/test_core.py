"""Tests for scout images, reconstruction parameters and case ids."""

import numpy as np
import pytest

from core.base import ReconParams, ScoutImage, planned_slice_count
from core.case import case_label, normalize_case_id, split_case_id
from planning.session import PlanningSession


def test_scout_requires_2d():
    with pytest.raises(ValueError):
        ScoutImage(np.zeros(10))


def test_rgb_scout_converted_to_gray():
    scout = ScoutImage(np.zeros((4, 6, 3), dtype=np.uint8))
    assert scout.frame.size == (6, 4)


def test_display_normalization():
    scout = ScoutImage(np.array([[0, 50], [100, 200]], dtype=np.int16))
    display = scout.to_display()
    assert display.dtype == np.uint8
    assert display.min() == 0 and display.max() == 255

    flat = ScoutImage(np.full((3, 3), 7.0)).to_display()
    assert not flat.any()


def test_recon_params_clamped():
    assert ReconParams(0.1, 100.0).clamped() == ReconParams(0.5, 50.0)
    assert ReconParams(3.0, 2.0).clamped() == ReconParams(3.0, 2.0)


def test_planned_slice_count():
    scout = ScoutImage(np.zeros((1000, 800)), z_min_mm=0.0, z_max_mm=500.0)
    snapshot = PlanningSession(scout.frame).snapshot()
    # Rows 200..800 cover 300 mm
    assert planned_slice_count(snapshot, scout, ReconParams(5.0, 5.0)) == 61

    uncalibrated = ScoutImage(np.zeros((1000, 800)))
    assert planned_slice_count(snapshot, uncalibrated, ReconParams()) == 0


@pytest.mark.parametrize("raw, expected", [
    ("Abdomen/CT Abdomen Contrast/case_001", "Abdomen/CT Abdomen Contrast/case_001"),
    ("  /Head//Routine/c1/ ", "Head/Routine/c1"),
    ("", ""),
])
def test_normalize_case_id(raw, expected):
    assert normalize_case_id(raw) == expected


def test_split_and_label():
    assert split_case_id("a/b/c") == ("a", "b", "c")
    assert split_case_id("") == ()
    assert case_label("Head/Routine/c1") == "c1"
