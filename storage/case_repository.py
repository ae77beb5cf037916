"""
Case Repository

Directory-backed implementation of the console's collaborators. Each case is
a directory ``<root>/<region>/<protocol>/<case>/`` holding its scout image and
receiving the saved planning and reconstruction request.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
from PySide6.QtGui import QImage

from config import DEFAULT_STORAGE, StorageConfig
from core.base import (
    PlanningStore,
    ReconParams,
    ReconstructionService,
    ScoutImage,
    ScoutSource,
)
from core.case import normalize_case_id, split_case_id
from planning.types import PlanningSnapshot


class StorageError(Exception):
    """Base class for case repository errors."""


class CaseNotFoundError(StorageError):
    """The case directory does not exist."""


class ScoutNotAvailableError(StorageError):
    """The case has no readable scout image."""


class CaseRepository(ScoutSource, PlanningStore, ReconstructionService):
    """
    Local case storage.

    Scouts are read from ``scout.npy`` (any numeric 2D array) or
    ``scout.png``; an optional ``scout.json`` gives ``z_min_mm``/``z_max_mm``.
    Planning and reconstruction requests are written as JSON, replacing the
    previous file atomically so concurrent commits resolve to the last write.
    """

    def __init__(
        self,
        root: Union[str, Path],
        config: StorageConfig = DEFAULT_STORAGE
    ):
        """
        Initialize the repository.

        Args:
            root: Directory containing the case tree
            config: File naming configuration
        """
        self.root = Path(root)
        self.config = config
        self._write_lock = threading.Lock()

    def case_dir(self, case_id: str) -> Path:
        """
        Resolve the directory of a case.

        Raises:
            CaseNotFoundError: If the id is empty, escapes the root, or the
                directory does not exist
        """
        parts = split_case_id(case_id)
        if not parts or any(part in (".", "..") for part in parts):
            raise CaseNotFoundError(f"Invalid case id: '{case_id}'")
        path = self.root.joinpath(*parts)
        if not path.is_dir():
            raise CaseNotFoundError(f"Case not found: '{case_id}' ({path})")
        return path

    def list_cases(self) -> List[str]:
        """
        List all case ids below the root.

        Returns:
            Sorted case ids of directories that contain a scout image
        """
        if not self.root.is_dir():
            logging.warning(f"Cases root does not exist: {self.root}")
            return []

        scout_names = {self.config.scout_array_name, self.config.scout_image_name}
        cases = set()
        for path in self.root.rglob("*"):
            if path.is_file() and path.name in scout_names:
                relative = path.parent.relative_to(self.root).as_posix()
                case_id = normalize_case_id(relative)
                if case_id:
                    cases.add(case_id)
        return sorted(cases)

    # ------------------------------------------------------------------
    # ScoutSource
    # ------------------------------------------------------------------

    def acquire_scout(self, case_id: str) -> ScoutImage:
        """
        Load the scout image of a case.

        Raises:
            CaseNotFoundError: If the case does not exist
            ScoutNotAvailableError: If no scout file can be read
        """
        directory = self.case_dir(case_id)
        array_path = directory / self.config.scout_array_name
        image_path = directory / self.config.scout_image_name

        if array_path.is_file():
            pixels = np.load(array_path, allow_pickle=False)
            source = array_path
        elif image_path.is_file():
            pixels = self._read_image(image_path)
            source = image_path
        else:
            raise ScoutNotAvailableError(f"No scout image for case '{case_id}'")

        meta = self._read_json(directory / self.config.scout_meta_name) or {}
        try:
            scout = ScoutImage(
                pixels=pixels,
                z_min_mm=float(meta.get("z_min_mm", 0.0)),
                z_max_mm=float(meta.get("z_max_mm", 0.0)),
                metadata={"source": str(source)},
            )
        except ValueError as e:
            raise ScoutNotAvailableError(f"Invalid scout for case '{case_id}': {e}") from e

        frame = scout.frame
        logging.info(f"Loaded scout {source.name} for '{case_id}': {frame.width}x{frame.height}")
        return scout

    @staticmethod
    def _read_image(path: Path) -> np.ndarray:
        image = QImage(str(path))
        if image.isNull():
            raise ScoutNotAvailableError(f"Cannot read scout image: {path}")
        image = image.convertToFormat(QImage.Format_Grayscale8)
        width, height = image.width(), image.height()
        buffer = np.frombuffer(image.constBits(), dtype=np.uint8)
        # Rows are padded to bytesPerLine
        return buffer.reshape(height, image.bytesPerLine())[:, :width].copy()

    # ------------------------------------------------------------------
    # PlanningStore
    # ------------------------------------------------------------------

    def persist_planning(self, case_id: str, snapshot: PlanningSnapshot) -> None:
        """Write ``planning.json`` for the case."""
        directory = self.case_dir(case_id)
        record = dict(snapshot.to_dict())
        record["case_id"] = normalize_case_id(case_id)
        record["saved_at"] = datetime.now().isoformat(timespec="seconds")
        self._write_json(directory / self.config.planning_name, record)
        logging.info(f"Planning saved for '{case_id}'")

    def load_planning(self, case_id: str) -> Optional[PlanningSnapshot]:
        """Read back the saved planning of a case, if any."""
        data = self._read_json(self.case_dir(case_id) / self.config.planning_name)
        if data is None:
            return None
        try:
            return PlanningSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logging.warning(f"Ignoring malformed planning for '{case_id}': {e}")
            return None

    # ------------------------------------------------------------------
    # ReconstructionService
    # ------------------------------------------------------------------

    def apply_reconstruction(
        self,
        case_id: str,
        params: ReconParams,
        snapshot: Optional[PlanningSnapshot]
    ) -> None:
        """Record the reconstruction request in ``recon.json``."""
        directory = self.case_dir(case_id)
        record = {
            "case_id": normalize_case_id(case_id),
            **params.to_dict(),
            "planning": snapshot.to_dict() if snapshot is not None else {},
            "requested_at": datetime.now().isoformat(timespec="seconds"),
        }
        self._write_json(directory / self.config.recon_name, record)
        logging.info(
            f"Reconstruction applied for '{case_id}': "
            f"thickness={params.slice_thickness_mm}mm, spacing={params.slice_spacing_mm}mm"
        )

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        with self._write_lock:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.stem}-", suffix=".tmp", dir=path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    @staticmethod
    def _read_json(path: Path) -> Optional[Dict[str, Any]]:
        if not path.is_file():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logging.warning(f"Cannot read {path}: {e}")
            return None
        return data if isinstance(data, dict) else None
