"""
CT Scan Console Configuration

Contains constants and default settings for the scan console.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class PlanningConfig:
    """Configuration for scout planning geometry."""
    min_gap_px: float = 20.0  # Minimum distance between opposite edges/lines
    default_start_fraction: float = 0.2  # Start line at 20% of scout height
    default_end_fraction: float = 0.8  # End line at 80% of scout height
    fov_margin_fraction: float = 0.2  # FOV inset from each side, fraction of width
    handle_tolerance_px: float = 6.0  # Display-space grab distance for handles
    grip_half_length_px: float = 16.0  # Half length of FOV edge grips (display)


@dataclass
class ReconConfig:
    """Configuration for reconstruction parameters."""
    slice_thickness_mm: float = 5.0
    slice_spacing_mm: float = 5.0
    min_thickness_mm: float = 0.5
    max_thickness_mm: float = 10.0
    min_spacing_mm: float = 0.1
    max_spacing_mm: float = 50.0


@dataclass
class PlaybackConfig:
    """Configuration for scan playback."""
    frame_interval_ms: int = 80  # Delay between played slices
    fallback_slices: int = 32  # Used when the scout has no z calibration


@dataclass
class StorageConfig:
    """Configuration for the local case repository."""
    cases_root: str = "cases"
    scout_array_name: str = "scout.npy"
    scout_image_name: str = "scout.png"
    scout_meta_name: str = "scout.json"
    planning_name: str = "planning.json"
    recon_name: str = "recon.json"


@dataclass
class GUIConfig:
    """Configuration for GUI appearance."""
    window_title: str = "CT Scan Console"
    window_size: Tuple[int, int] = (1400, 900)
    min_size: Tuple[int, int] = (1000, 700)

    # Console dark theme colors
    background_color: str = "#0F172A"
    text_color: str = "#E2E8F0"
    accent_color: str = "#2563EB"
    line_color: str = "#FACC15"
    fov_color: str = "#22D3EE"

    font_family: str = "Segoe UI"
    font_size: int = 10


# Default configurations
DEFAULT_PLANNING = PlanningConfig()
DEFAULT_RECON = ReconConfig()
DEFAULT_PLAYBACK = PlaybackConfig()
DEFAULT_STORAGE = StorageConfig()
DEFAULT_GUI = GUIConfig()
