"""
Background Workers

QThread workers for collaborator calls (scout acquisition, planning
persistence, reconstruction). Results are delivered back on the thread that
owns the dispatcher, so all state changes stay on the GUI thread.
"""

import itertools
import logging
import traceback
from typing import Any, Callable, Dict, Optional, Tuple

from PySide6.QtCore import QObject, QThread, Signal, Slot


class TaskWorker(QThread):
    """Runs one collaborator call in the background."""

    result = Signal(int, object)  # Emits (task_id, return value)
    error = Signal(int, str)  # Emits (task_id, message)

    def __init__(
        self,
        task_id: int,
        fn: Callable[..., Any],
        args: Tuple = (),
        description: str = "task"
    ):
        super().__init__()
        self.task_id = task_id
        self.fn = fn
        self.args = args
        self.description = description

    def run(self):
        try:
            value = self.fn(*self.args)
            self.result.emit(self.task_id, value)
        except Exception as e:
            logging.error(f"{self.description} failed: {e}\n{traceback.format_exc()}")
            self.error.emit(self.task_id, str(e))


class TaskDispatcher(QObject):
    """
    Fire-and-forget execution of collaborator calls.

    Callers never wait: ``submit`` returns immediately and the optional
    callbacks run later on the dispatcher's thread. There is no cancellation;
    callbacks decide for themselves whether a late result is still relevant.
    """

    # Emitted for every failed task: (description, message)
    task_failed = Signal(str, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._ids = itertools.count(1)
        self._workers: Dict[int, TaskWorker] = {}
        self._callbacks: Dict[int, Tuple[Optional[Callable], Optional[Callable]]] = {}

    @property
    def active_count(self) -> int:
        """Number of workers that have not finished yet."""
        return len(self._workers)

    def submit(
        self,
        fn: Callable[..., Any],
        *args,
        on_finished: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        description: str = "task"
    ) -> int:
        """
        Run ``fn(*args)`` on a background thread.

        Args:
            fn: Callable to run
            *args: Positional arguments for fn
            on_finished: Called with the return value on success
            on_error: Called with the error message on failure
            description: Name used in log messages

        Returns:
            Task id
        """
        task_id = next(self._ids)
        worker = TaskWorker(task_id, fn, args, description)
        worker.result.connect(self._on_result)
        worker.error.connect(self._on_error)
        worker.finished.connect(self._on_worker_finished)

        self._workers[task_id] = worker
        self._callbacks[task_id] = (on_finished, on_error)
        logging.debug(f"Dispatching {description} (task {task_id})")
        worker.start()
        return task_id

    def wait_all(self, timeout_ms: int = 5000) -> None:
        """Block until running workers end (used at shutdown)."""
        for worker in list(self._workers.values()):
            worker.wait(timeout_ms)

    @Slot(int, object)
    def _on_result(self, task_id: int, value: object) -> None:
        on_finished, _ = self._callbacks.pop(task_id, (None, None))
        if on_finished is not None:
            self._run_callback(on_finished, value)

    @Slot(int, str)
    def _on_error(self, task_id: int, message: str) -> None:
        _, on_error = self._callbacks.pop(task_id, (None, None))
        worker = self._workers.get(task_id)
        description = worker.description if worker is not None else "task"
        self.task_failed.emit(description, message)
        if on_error is not None:
            self._run_callback(on_error, message)

    @Slot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if isinstance(worker, TaskWorker):
            self._workers.pop(worker.task_id, None)
            self._callbacks.pop(worker.task_id, None)
            worker.deleteLater()

    @staticmethod
    def _run_callback(callback: Callable, arg: Any) -> None:
        try:
            callback(arg)
        except Exception as e:
            logging.error(f"Task callback error: {e}\n{traceback.format_exc()}")
