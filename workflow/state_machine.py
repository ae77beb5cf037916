"""
Exam Workflow State Machine

Gates the operator actions Scout -> Planning -> Reconstruction -> Scan.

The workflow is a set of boolean facts rather than one linear state: the
planning facts are mutually exclusive, the others are independent. Every
capability is derived from the facts, and every transition checks its
capability first. Illegal calls log a warning and return False.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

from PySide6.QtCore import QObject, Signal

from config import DEFAULT_RECON, ReconConfig
from core.base import PlanningStore, ReconParams, ReconstructionService
from planning.session import PlanningSession
from planning.types import PlanningSnapshot


class WorkflowStage(Enum):
    """Stages shown by the console's indicator dots."""
    SCOUT = "Scout"
    PLANNING = "Planning"
    SCAN = "Scan"


class IndicatorState(Enum):
    """Display state of a stage indicator."""
    IDLE = "idle"
    ACTIVE = "active"
    DONE = "done"


@dataclass(frozen=True)
class WorkflowFacts:
    """
    Immutable view of the workflow facts.

    Attributes:
        scout_completed: A scout acquisition finished for this case
        planning_active: Between Start Planning and End Planning
        planning_completed: End Planning persisted the planning
        scanning: Scan playback running
        current_slice: Playback position
        total_slices: Playback length
        busy: A persistence or reconstruction call is in flight
    """
    scout_completed: bool = False
    planning_active: bool = False
    planning_completed: bool = False
    scanning: bool = False
    current_slice: int = 0
    total_slices: int = 0
    busy: bool = False

    @property
    def can_acquire_scout(self) -> bool:
        return not self.scanning and not self.busy

    @property
    def can_start_planning(self) -> bool:
        return (
            self.scout_completed
            and not self.planning_active
            and not self.planning_completed
            and not self.busy
        )

    @property
    def can_end_planning(self) -> bool:
        return self.planning_active and not self.busy

    @property
    def can_edit_recon(self) -> bool:
        return self.planning_completed and not self.scanning and not self.busy

    @property
    def can_start_scan(self) -> bool:
        return self.planning_completed and not self.scanning and not self.busy


class WorkflowStateMachine(QObject):
    """
    Workflow gate for one case.

    Collaborator calls go through the dispatcher and never block; the
    in-memory transition that depends on a call's outcome is applied when
    the result arrives. A disposed machine (its case was replaced) ignores
    late results.
    """

    facts_changed = Signal(object)  # Emits WorkflowFacts
    planning_committed = Signal(object)  # Emits PlanningSnapshot
    scan_started = Signal(object)  # Emits ReconParams
    scan_stopped = Signal()

    def __init__(
        self,
        case_id: str,
        session: PlanningSession,
        dispatcher,
        planning_store: PlanningStore,
        recon_service: ReconstructionService,
        recon_config: ReconConfig = DEFAULT_RECON,
        parent=None
    ):
        """
        Initialize the state machine with all facts false/zero.

        Args:
            case_id: Case this workflow belongs to
            session: Planning session of the case
            dispatcher: Object with ``submit(fn, *args, on_finished, on_error, description)``
            planning_store: Planning persistence collaborator
            recon_service: Reconstruction collaborator
            recon_config: Reconstruction defaults and limits
            parent: Qt parent
        """
        super().__init__(parent)
        self._case_id = case_id
        self._session = session
        self._dispatcher = dispatcher
        self._store = planning_store
        self._recon_service = recon_service
        self._recon_config = recon_config

        self._facts = WorkflowFacts()
        self._recon_params = ReconParams(
            recon_config.slice_thickness_mm, recon_config.slice_spacing_mm
        )
        self._disposed = False

    # ------------------------------------------------------------------
    # Facts and capabilities
    # ------------------------------------------------------------------

    @property
    def case_id(self) -> str:
        return self._case_id

    @property
    def facts(self) -> WorkflowFacts:
        return self._facts

    @property
    def scout_completed(self) -> bool:
        return self._facts.scout_completed

    @property
    def planning_active(self) -> bool:
        return self._facts.planning_active

    @property
    def planning_completed(self) -> bool:
        return self._facts.planning_completed

    @property
    def scanning(self) -> bool:
        return self._facts.scanning

    @property
    def busy(self) -> bool:
        return self._facts.busy

    @property
    def current_slice(self) -> int:
        return self._facts.current_slice

    @property
    def total_slices(self) -> int:
        return self._facts.total_slices

    @property
    def can_acquire_scout(self) -> bool:
        return self._facts.can_acquire_scout

    @property
    def can_start_planning(self) -> bool:
        return self._facts.can_start_planning

    @property
    def can_end_planning(self) -> bool:
        return self._facts.can_end_planning

    @property
    def can_edit_recon(self) -> bool:
        return self._facts.can_edit_recon

    @property
    def can_start_scan(self) -> bool:
        return self._facts.can_start_scan

    @property
    def recon_params(self) -> ReconParams:
        return self._recon_params

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def indicator_states(self) -> Dict[WorkflowStage, IndicatorState]:
        """State of the Scout/Planning/Scan indicator dots."""
        facts = self._facts
        if facts.planning_completed:
            planning = IndicatorState.DONE
        elif facts.planning_active:
            planning = IndicatorState.ACTIVE
        else:
            planning = IndicatorState.IDLE
        return {
            WorkflowStage.SCOUT: IndicatorState.DONE if facts.scout_completed else IndicatorState.IDLE,
            WorkflowStage.PLANNING: planning,
            WorkflowStage.SCAN: IndicatorState.ACTIVE if facts.scanning else IndicatorState.IDLE,
        }

    def progress_text(self) -> str:
        """Scan progress label, empty while not scanning."""
        if not self._facts.scanning:
            return ""
        return f"Scanning: {self._facts.current_slice} / {self._facts.total_slices}"

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def complete_scout(self) -> bool:
        """Record a finished scout acquisition. Idempotent."""
        if self._facts.scout_completed:
            logging.debug(f"[{self._case_id}] Scout already completed")
            return True
        self._update(scout_completed=True)
        logging.info(f"[{self._case_id}] Scout completed")
        return True

    def start_planning(self) -> bool:
        """Enter planning mode."""
        if not self._check(self._facts.can_start_planning, "start planning"):
            return False
        self._update(planning_active=True)
        logging.info(f"[{self._case_id}] Planning started")
        return True

    def end_planning(self) -> bool:
        """
        Leave planning mode and persist the planning.

        Planning mode ends immediately. The planning counts as completed only
        once the store confirms the save; a missing or malformed snapshot is
        not saved, and the operator can plan again.
        """
        if not self._check(self._facts.can_end_planning, "end planning"):
            return False

        snapshot = self._session.snapshot()
        self._update(planning_active=False)

        if snapshot is None or not snapshot.is_well_formed:
            logging.warning(f"[{self._case_id}] Planning ended without a valid z-range; not saved")
            return True

        self._update(busy=True)
        self._dispatcher.submit(
            self._store.persist_planning,
            self._case_id,
            snapshot,
            on_finished=lambda _: self._on_planning_saved(snapshot),
            on_error=self._on_planning_save_failed,
            description=f"Save planning [{self._case_id}]",
        )
        logging.info(f"[{self._case_id}] Planning ended, saving {snapshot.to_dict()}")
        return True

    def set_recon_params(self, params: ReconParams) -> bool:
        """Change the reconstruction parameters (clamped to their limits)."""
        if not self._check(self._facts.can_edit_recon, "edit reconstruction"):
            return False
        clamped = params.clamped(self._recon_config)
        if clamped != params:
            logging.warning(
                f"[{self._case_id}] Reconstruction parameters clamped to "
                f"{clamped.slice_thickness_mm} / {clamped.slice_spacing_mm} mm"
            )
        self._recon_params = clamped
        return True

    def start_scan(self, recon_params: Optional[ReconParams] = None) -> bool:
        """
        Apply reconstruction and, once it succeeds, start scanning.

        Args:
            recon_params: Parameters to use; defaults to the current ones
        """
        if not self._check(self._facts.can_start_scan, "start scan"):
            return False

        params = (recon_params or self._recon_params).clamped(self._recon_config)
        self._recon_params = params
        snapshot = self._session.snapshot()

        self._update(busy=True)
        self._dispatcher.submit(
            self._recon_service.apply_reconstruction,
            self._case_id,
            params,
            snapshot,
            on_finished=lambda _: self._on_reconstruction_applied(params),
            on_error=self._on_reconstruction_failed,
            description=f"Apply reconstruction [{self._case_id}]",
        )
        logging.info(
            f"[{self._case_id}] Applying reconstruction: "
            f"thickness={params.slice_thickness_mm}mm, spacing={params.slice_spacing_mm}mm"
        )
        return True

    def stop_scan(self) -> bool:
        """Stop scanning. Always allowed (emergency stop)."""
        if not self._facts.scanning:
            logging.debug(f"[{self._case_id}] Stop requested while not scanning")
            return True
        self._update(scanning=False)
        logging.info(
            f"[{self._case_id}] Scan stopped at "
            f"{self._facts.current_slice} / {self._facts.total_slices}"
        )
        self.scan_stopped.emit()
        return True

    def advance_scan(self, current_slice: int, total_slices: int) -> bool:
        """
        Update scan progress.

        The machine does not stop on the last slice; the playback
        collaborator calls ``stop_scan`` when it is done.
        """
        if not self._check(self._facts.scanning, "advance scan"):
            return False
        if current_slice < 0 or total_slices < 0:
            logging.warning(
                f"[{self._case_id}] Ignoring negative scan progress "
                f"{current_slice} / {total_slices}"
            )
            return False
        self._update(current_slice=int(current_slice), total_slices=int(total_slices))
        return True

    def dispose(self) -> None:
        """Detach from the case; late collaborator results are ignored."""
        self._disposed = True

    # ------------------------------------------------------------------
    # Collaborator results
    # ------------------------------------------------------------------

    def _on_planning_saved(self, snapshot: PlanningSnapshot) -> None:
        if self._ignore_late("planning save"):
            return
        self._update(busy=False, planning_completed=True)
        logging.info(f"[{self._case_id}] Planning saved")
        self.planning_committed.emit(snapshot)

    def _on_planning_save_failed(self, message: str) -> None:
        if self._ignore_late("planning save failure"):
            return
        self._update(busy=False)
        logging.error(f"[{self._case_id}] Failed to save planning: {message}")

    def _on_reconstruction_applied(self, params: ReconParams) -> None:
        if self._ignore_late("reconstruction"):
            return
        self._update(busy=False, scanning=True, current_slice=0, total_slices=0)
        logging.info(f"[{self._case_id}] Reconstruction applied, scan started")
        self.scan_started.emit(params)

    def _on_reconstruction_failed(self, message: str) -> None:
        if self._ignore_late("reconstruction failure"):
            return
        self._update(busy=False)
        logging.error(f"[{self._case_id}] Failed to apply reconstruction: {message}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check(self, allowed: bool, action: str) -> bool:
        if not allowed:
            logging.warning(f"[{self._case_id}] Cannot {action} now: {self._facts}")
        return allowed

    def _ignore_late(self, what: str) -> bool:
        if self._disposed:
            logging.debug(f"[{self._case_id}] Ignoring late {what} result for replaced case")
        return self._disposed

    def _update(self, **changes) -> None:
        facts = replace(self._facts, **changes)
        if facts != self._facts:
            self._facts = facts
            self.facts_changed.emit(facts)
