"""
Session Lifecycle

Owns the per-case objects (planning session, workflow state machine, drag
controller) and replaces all of them whenever the selected case changes.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from config import DEFAULT_PLANNING, DEFAULT_RECON, PlanningConfig, ReconConfig
from core.base import PlanningStore, ReconstructionService, ScoutImage, ScoutSource
from core.case import normalize_case_id
from planning.drag import DragController
from planning.session import PlanningSession
from planning.types import PlanningSnapshot
from .state_machine import WorkflowStateMachine


class SessionLifecycle(QObject):
    """
    Per-case session management.

    Switching cases discards the previous session and workflow entirely;
    nothing carries over and no scout is requested automatically. Results of
    collaborator calls made for a replaced case are ignored.
    """

    # Signals
    case_changed = Signal(str, str)  # Emits (old case id, new case id)
    scout_ready = Signal(object)  # Emits ScoutImage
    scout_failed = Signal(str)

    def __init__(
        self,
        scout_source: ScoutSource,
        planning_store: PlanningStore,
        recon_service: ReconstructionService,
        dispatcher,
        planning_config: PlanningConfig = DEFAULT_PLANNING,
        recon_config: ReconConfig = DEFAULT_RECON,
        parent=None
    ):
        super().__init__(parent)
        self._scout_source = scout_source
        self._store = planning_store
        self._recon_service = recon_service
        self._dispatcher = dispatcher
        self._planning_config = planning_config
        self._recon_config = recon_config

        self._case_id = ""
        self._scout: Optional[ScoutImage] = None
        self._session: Optional[PlanningSession] = None
        self._workflow: Optional[WorkflowStateMachine] = None
        self._drag: Optional[DragController] = None
        self._build("")

    @property
    def case_id(self) -> str:
        """Current case id ('' when no case is selected)."""
        return self._case_id

    @property
    def has_case(self) -> bool:
        return bool(self._case_id)

    @property
    def session(self) -> PlanningSession:
        return self._session

    @property
    def workflow(self) -> WorkflowStateMachine:
        return self._workflow

    @property
    def drag(self) -> DragController:
        return self._drag

    @property
    def scout(self) -> Optional[ScoutImage]:
        """Scout of the current case, once acquired."""
        return self._scout

    def select_case(self, case_id: str) -> bool:
        """
        Make a case current.

        Args:
            case_id: Hierarchical case id ('' to deselect)

        Returns:
            True if the case changed
        """
        new_id = normalize_case_id(case_id)
        if new_id == self._case_id:
            logging.debug(f"Case '{new_id}' already selected")
            return False

        old_id = self._case_id
        self._teardown()
        self._case_id = new_id
        self._scout = None
        self._build(new_id)

        logging.info(f"Case changed from '{old_id}' to '{new_id}'")
        self.case_changed.emit(old_id, new_id)
        return True

    def acquire_scout(self) -> bool:
        """
        Request the scout for the current case in the background.

        On success the planning geometry is reset to the new frame and the
        scout is marked completed.
        """
        if not self._case_id:
            logging.warning("Cannot acquire scout: no case selected")
            return False
        if not self._workflow.can_acquire_scout:
            logging.warning(f"[{self._case_id}] Cannot acquire scout now: {self._workflow.facts}")
            return False

        case_id = self._case_id
        session = self._session
        self._dispatcher.submit(
            self._scout_source.acquire_scout,
            case_id,
            on_finished=lambda scout: self._on_scout_acquired(session, scout),
            on_error=lambda message: self._on_scout_failed(session, message),
            description=f"Acquire scout [{case_id}]",
        )
        logging.info(f"[{case_id}] Scout requested")
        return True

    def _on_scout_acquired(self, session: PlanningSession, scout: ScoutImage) -> None:
        if session is not self._session:
            logging.debug("Ignoring scout for a replaced case")
            return
        self._scout = scout
        session.reset(scout.frame)
        self._workflow.complete_scout()
        self.scout_ready.emit(scout)

    def _on_scout_failed(self, session: PlanningSession, message: str) -> None:
        if session is not self._session:
            return
        logging.error(f"[{self._case_id}] Scout acquisition failed: {message}")
        self.scout_failed.emit(message)

    def _commit_planning(
        self,
        case_id: str,
        session: PlanningSession,
        snapshot: PlanningSnapshot
    ) -> None:
        if session is not self._session:
            logging.debug(f"[{case_id}] Dropping commit from a replaced session")
            return
        self._dispatcher.submit(
            self._store.persist_planning,
            case_id,
            snapshot,
            on_error=lambda message: logging.error(
                f"[{case_id}] Failed to save planning: {message}"
            ),
            description=f"Commit planning [{case_id}]",
        )

    def _build(self, case_id: str) -> None:
        session = PlanningSession(config=self._planning_config)
        workflow = WorkflowStateMachine(
            case_id,
            session,
            self._dispatcher,
            self._store,
            self._recon_service,
            recon_config=self._recon_config,
        )
        self._session = session
        self._workflow = workflow
        self._drag = DragController(
            session,
            commit=lambda snapshot: self._commit_planning(case_id, session, snapshot),
            is_enabled=lambda: workflow.planning_active,
            config=self._planning_config,
        )

    def _teardown(self) -> None:
        if self._drag is not None:
            self._drag.cancel()
        if self._workflow is not None:
            self._workflow.dispose()
