"""
Core Base Classes

Data transfer objects and the abstract collaborator interfaces the scan
console calls: scout acquisition, planning persistence and reconstruction.
"""

from dataclasses import dataclass, field
from abc import ABC, abstractmethod
from typing import Dict, Optional
import numpy as np

from config import DEFAULT_RECON, ReconConfig
from planning.types import PlanningSnapshot, ScoutImageFrame


@dataclass
class ScoutImage:
    """
    Scout (topogram) image supplied by the scout collaborator.

    Attributes:
        pixels: 2D array (height, width)
        z_min_mm: Table position at row 0
        z_max_mm: Table position at the last row
        metadata: Source information (path, series, ...)
    """
    pixels: np.ndarray
    z_min_mm: float = 0.0
    z_max_mm: float = 0.0
    metadata: Dict = field(default_factory=dict)

    def __post_init__(self):
        self.pixels = np.asarray(self.pixels)
        if self.pixels.ndim == 3:
            # RGB(A) scouts are reduced to luminance
            self.pixels = self.pixels[..., :3].mean(axis=2)
        if self.pixels.ndim != 2:
            raise ValueError(f"Scout image must be 2D, got shape {self.pixels.shape}")

    @property
    def frame(self) -> ScoutImageFrame:
        """Pixel extent of the scout."""
        height, width = self.pixels.shape
        return ScoutImageFrame(width=int(width), height=int(height))

    @property
    def has_z_calibration(self) -> bool:
        return self.z_max_mm != self.z_min_mm

    def row_to_mm(self, row: float) -> float:
        """Convert a scout row to a table position in mm."""
        height = self.pixels.shape[0]
        return self.z_min_mm + (row / height) * (self.z_max_mm - self.z_min_mm)

    def to_display(self) -> np.ndarray:
        """
        Normalize the scout to 8-bit for display.

        Returns:
            Contiguous uint8 array (height, width)
        """
        data = self.pixels.astype(np.float32)
        lower = float(np.min(data))
        upper = float(np.max(data))
        if upper <= lower:
            return np.zeros(data.shape, dtype=np.uint8)
        normalized = (data - lower) / (upper - lower)
        return np.ascontiguousarray((normalized * 255).astype(np.uint8))


@dataclass(frozen=True)
class ReconParams:
    """Reconstruction parameters chosen by the operator."""
    slice_thickness_mm: float = DEFAULT_RECON.slice_thickness_mm
    slice_spacing_mm: float = DEFAULT_RECON.slice_spacing_mm

    def clamped(self, config: ReconConfig = DEFAULT_RECON) -> "ReconParams":
        """Return a copy limited to the allowed ranges."""
        thickness = max(config.min_thickness_mm,
                        min(float(self.slice_thickness_mm), config.max_thickness_mm))
        spacing = max(config.min_spacing_mm,
                      min(float(self.slice_spacing_mm), config.max_spacing_mm))
        return ReconParams(slice_thickness_mm=thickness, slice_spacing_mm=spacing)

    def to_dict(self) -> Dict[str, float]:
        return {
            "slice_thickness_mm": self.slice_thickness_mm,
            "slice_spacing_mm": self.slice_spacing_mm,
        }


def planned_slice_count(
    snapshot: PlanningSnapshot,
    scout: ScoutImage,
    params: ReconParams
) -> int:
    """
    Number of reconstructed slices covering the planned z-range.

    Args:
        snapshot: Committed planning
        scout: Scout the planning was drawn on (for the mm calibration)
        params: Reconstruction parameters

    Returns:
        Slice count (at least 1), or 0 if the scout has no z calibration
    """
    if not scout.has_z_calibration:
        return 0
    z_start = scout.row_to_mm(snapshot.start_y)
    z_end = scout.row_to_mm(snapshot.end_y)
    extent = abs(z_end - z_start)
    return int(extent // params.slice_spacing_mm) + 1


class ScoutSource(ABC):
    """Provides scout images for a case."""

    @abstractmethod
    def acquire_scout(self, case_id: str) -> ScoutImage:
        """
        Acquire the scout image for a case.

        Args:
            case_id: Hierarchical case identifier

        Returns:
            ScoutImage for the case
        """
        pass


class PlanningStore(ABC):
    """Persists committed planning geometry."""

    @abstractmethod
    def persist_planning(self, case_id: str, snapshot: PlanningSnapshot) -> None:
        """
        Store a planning snapshot, replacing any earlier one.

        Args:
            case_id: Hierarchical case identifier
            snapshot: Full planning record
        """
        pass


class ReconstructionService(ABC):
    """Applies reconstruction parameters to a planned case."""

    @abstractmethod
    def apply_reconstruction(
        self,
        case_id: str,
        params: ReconParams,
        snapshot: Optional[PlanningSnapshot]
    ) -> None:
        """
        Apply reconstruction for the planned range.

        Args:
            case_id: Hierarchical case identifier
            params: Slice thickness/spacing
            snapshot: Planning the reconstruction covers
        """
        pass
