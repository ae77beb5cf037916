"""Widget tests for the workflow and scout panels."""

import numpy as np
import pytest
from PySide6.QtCore import Qt

from core.base import ScoutImage
from gui.panels import ScoutView, WorkflowPanel
from planning.drag import DragController
from workflow.state_machine import WorkflowStateMachine


@pytest.fixture
def workflow(session, dispatcher, planning_store, recon_service):
    return WorkflowStateMachine("Head/Routine/c1", session, dispatcher, planning_store, recon_service)


@pytest.fixture
def panel(qtbot, workflow):
    panel = WorkflowPanel()
    qtbot.addWidget(panel)
    panel.bind(workflow)
    return panel


def test_unbound_panel_is_disabled(qtbot):
    panel = WorkflowPanel()
    qtbot.addWidget(panel)
    assert not panel._scout_btn.isEnabled()
    assert not panel._scan_btn.isEnabled()


def test_buttons_follow_capabilities(qtbot, panel, workflow):
    assert panel._scout_btn.isEnabled()
    assert not panel._start_planning_btn.isEnabled()

    workflow.complete_scout()
    assert panel._start_planning_btn.isEnabled()

    qtbot.mouseClick(panel._start_planning_btn, Qt.LeftButton)
    assert workflow.planning_active
    assert panel._end_planning_btn.isEnabled()
    assert not panel._recon_group.isEnabled()

    qtbot.mouseClick(panel._end_planning_btn, Qt.LeftButton)
    assert workflow.planning_completed
    assert panel._recon_group.isEnabled()
    assert panel._scan_btn.isEnabled()


def test_scan_button_toggles(qtbot, panel, workflow):
    workflow.complete_scout()
    workflow.start_planning()
    workflow.end_planning()

    panel._thickness_spin.setValue(2.0)
    qtbot.mouseClick(panel._scan_btn, Qt.LeftButton)
    assert workflow.scanning
    assert workflow.recon_params.slice_thickness_mm == 2.0
    assert panel._scan_btn.text() == "Stop Scan"

    qtbot.mouseClick(panel._scan_btn, Qt.LeftButton)
    assert not workflow.scanning
    assert panel._scan_btn.text() == "Start Scan"


def test_scout_button_emits_request(qtbot, panel):
    with qtbot.waitSignal(panel.scout_requested, timeout=100):
        qtbot.mouseClick(panel._scout_btn, Qt.LeftButton)


def test_scout_view_fits_image(qtbot, session):
    view = ScoutView()
    qtbot.addWidget(view)
    view.resize(800, 500)
    view.set_session(session, DragController(session))
    view.set_scout(ScoutImage(np.zeros((1000, 800), dtype=np.uint8)))

    rect = view.display_rect()
    assert (rect.width, rect.height) == (400.0, 500.0)
    assert (rect.left, rect.top) == (200.0, 0.0)

    view.set_planning_visible(True)
    view.grab()


def test_palette_follows_gui_config():
    from config import DEFAULT_GUI
    from gui.style import COLORS, get_stylesheet

    assert COLORS["fov"] == DEFAULT_GUI.fov_color
    assert COLORS["planning_line"] == DEFAULT_GUI.line_color
    assert DEFAULT_GUI.background_color in get_stylesheet()


def test_selecting_case_reports_saved_planning(qtbot, tmp_path, session):
    from gui.main_window import MainWindow
    from storage.case_repository import CaseRepository

    case_dir = tmp_path / "Chest" / "Routine" / "case_A"
    case_dir.mkdir(parents=True)
    np.save(case_dir / "scout.npy", np.zeros((1000, 800), dtype=np.uint8))
    CaseRepository(tmp_path).persist_planning("Chest/Routine/case_A", session.snapshot())

    window = MainWindow(cases_root=str(tmp_path))
    qtbot.addWidget(window)
    window._lifecycle.select_case("Chest/Routine/case_A")

    qtbot.waitUntil(
        lambda: "rows 200-800 of 1000" in window.statusBar().currentMessage(),
        timeout=2000,
    )
