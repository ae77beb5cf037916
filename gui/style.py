"""
Console Dark Theme Stylesheet

Provides the Qt stylesheet for the scan console: a dark slate background
with blue/emerald accents, similar to scanner operator consoles.
"""

from config import DEFAULT_GUI

# Console dark theme color palette
COLORS = {
    "background": DEFAULT_GUI.background_color,
    "background_alt": "#111827",
    "surface": "#1E293B",
    "border": "#334155",
    "border_focus": "#3B82F6",
    "text": DEFAULT_GUI.text_color,
    "text_secondary": "#94A3B8",
    "text_disabled": "#64748B",
    "accent": DEFAULT_GUI.accent_color,
    "accent_hover": "#3B82F6",
    "accent_pressed": "#1D4ED8",
    "success": "#10B981",
    "warning": "#F59E0B",
    "error": "#EF4444",
    "planning_line": DEFAULT_GUI.line_color,
    "fov": DEFAULT_GUI.fov_color,
    "indicator_idle": "#475569",
}

# Font settings
FONTS = {
    "family": "Segoe UI, Roboto, Helvetica Neue, Arial, sans-serif",
    "mono": "Consolas, Menlo, monospace",
    "size": "10pt",
    "size_small": "9pt",
    "size_header": "11pt",
}


def get_stylesheet() -> str:
    """Get the complete Qt stylesheet for the console theme."""
    return f"""
    QWidget {{
        background-color: {COLORS["background"]};
        color: {COLORS["text"]};
        font-family: {FONTS["family"]};
        font-size: {FONTS["size"]};
    }}

    QGroupBox {{
        border: 1px solid {COLORS["border"]};
        border-radius: 6px;
        margin-top: 14px;
        padding: 10px 8px 8px 8px;
        font-weight: 600;
    }}

    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 10px;
        padding: 0 4px;
        color: {COLORS["text_secondary"]};
        text-transform: uppercase;
    }}

    QPushButton {{
        background-color: {COLORS["surface"]};
        color: {COLORS["text"]};
        border: 1px solid {COLORS["border"]};
        border-radius: 6px;
        padding: 8px 14px;
        font-weight: 500;
    }}

    QPushButton:hover {{
        background-color: {COLORS["border"]};
    }}

    QPushButton:disabled {{
        color: {COLORS["text_disabled"]};
        background-color: {COLORS["background_alt"]};
    }}

    QPushButton#primaryButton:enabled {{
        background-color: {COLORS["accent"]};
        border-color: {COLORS["accent_pressed"]};
        color: white;
    }}

    QPushButton#successButton:enabled {{
        background-color: {COLORS["success"]};
        color: white;
    }}

    QPushButton#dangerButton:enabled {{
        background-color: {COLORS["error"]};
        color: white;
    }}

    QDoubleSpinBox, QSpinBox, QLineEdit {{
        background-color: {COLORS["background_alt"]};
        border: 1px solid {COLORS["border"]};
        border-radius: 4px;
        padding: 4px 6px;
    }}

    QDoubleSpinBox:focus, QSpinBox:focus, QLineEdit:focus {{
        border-color: {COLORS["border_focus"]};
    }}

    QTreeWidget {{
        background-color: {COLORS["background_alt"]};
        border: 1px solid {COLORS["border"]};
    }}

    QTreeWidget::item:selected {{
        background-color: {COLORS["accent"]};
        color: white;
    }}

    QLabel#secondaryLabel {{
        color: {COLORS["text_secondary"]};
        font-size: {FONTS["size_small"]};
    }}

    QLabel#progressLabel {{
        color: {COLORS["success"]};
        font-family: {FONTS["mono"]};
    }}

    QStatusBar {{
        color: {COLORS["text_secondary"]};
    }}
    """


class ConsoleStyle:
    """Helper class for applying the console theme."""

    @staticmethod
    def apply(app) -> None:
        """
        Apply the console theme to a QApplication.

        Args:
            app: QApplication instance
        """
        app.setStyleSheet(get_stylesheet())

    @staticmethod
    def get_color(name: str) -> str:
        """Get a color value by name."""
        return COLORS.get(name, COLORS["text"])
