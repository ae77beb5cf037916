"""
Shared test fixtures.

Background work runs inline through ``InlineDispatcher`` so workflow tests are
deterministic; the real QThread dispatcher has its own tests.
"""

import os
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from core.base import PlanningStore, ReconstructionService, ScoutSource  # noqa: E402
from planning.session import PlanningSession  # noqa: E402
from planning.types import ScoutImageFrame  # noqa: E402


class InlineDispatcher:
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = []

    def submit(self, fn, *args, on_finished=None, on_error=None, description="task"):
        self.submitted.append((description, args))
        try:
            value = fn(*args)
        except Exception as e:
            if on_error is not None:
                on_error(str(e))
            return len(self.submitted)
        if on_finished is not None:
            on_finished(value)
        return len(self.submitted)


class DeferredDispatcher:
    """Queues submitted work until ``run_all`` is called."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, on_finished=None, on_error=None, description="task"):
        self.pending.append((fn, args, on_finished, on_error))
        return len(self.pending)

    def run_all(self):
        pending, self.pending = self.pending, []
        for fn, args, on_finished, on_error in pending:
            try:
                value = fn(*args)
            except Exception as e:
                if on_error is not None:
                    on_error(str(e))
                continue
            if on_finished is not None:
                on_finished(value)


@pytest.fixture(autouse=True)
def _qt_app(qapp):
    """Every test runs with a QApplication (signals, QImage)."""
    return qapp


@pytest.fixture
def dispatcher():
    return InlineDispatcher()


@pytest.fixture
def deferred_dispatcher():
    return DeferredDispatcher()


@pytest.fixture
def planning_store():
    return Mock(spec=PlanningStore)


@pytest.fixture
def recon_service():
    return Mock(spec=ReconstructionService)


@pytest.fixture
def scout_source():
    return Mock(spec=ScoutSource)


@pytest.fixture
def frame():
    return ScoutImageFrame(width=800, height=1000)


@pytest.fixture
def session(frame):
    return PlanningSession(frame)
