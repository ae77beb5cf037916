"""
GUI Utilities

Small widget helpers shared by the panels.
"""

from typing import Callable, Optional

from PySide6.QtCore import QSignalBlocker
from PySide6.QtWidgets import QDoubleSpinBox, QWidget


def create_mm_spinbox(
    value: float,
    minimum: float,
    maximum: float,
    step: float = 0.1,
    tooltip: str = "",
    on_change: Optional[Callable[[float], None]] = None,
    parent: Optional[QWidget] = None
) -> QDoubleSpinBox:
    """
    Create a millimetre spin box (one decimal, " mm" suffix).

    Args:
        value: Initial value in mm
        minimum, maximum: Allowed range in mm
        step: Arrow-key increment
        tooltip: Tooltip text
        on_change: Connected to valueChanged
        parent: Parent widget
    """
    spin = QDoubleSpinBox(parent)
    spin.setDecimals(1)
    spin.setRange(minimum, maximum)
    spin.setSingleStep(step)
    spin.setSuffix(" mm")
    spin.setKeyboardTracking(False)
    spin.setValue(value)
    if tooltip:
        spin.setToolTip(tooltip)
    if on_change is not None:
        spin.valueChanged.connect(on_change)
    return spin


def set_value_silently(spin: QDoubleSpinBox, value: float) -> None:
    """Show a value without emitting valueChanged."""
    blocker = QSignalBlocker(spin)
    spin.setValue(value)
    blocker.unblock()
