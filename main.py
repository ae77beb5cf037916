"""
CT Scan Console

Main entry point for the application.
"""

import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from config import DEFAULT_GUI, DEFAULT_STORAGE
from gui.main_window import MainWindow
from gui.style import ConsoleStyle


def setup_logging(level: int = logging.INFO):
    """Configure logging to stdout."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=DEFAULT_GUI.window_title)
    parser.add_argument(
        "--cases-root",
        default=DEFAULT_STORAGE.cases_root,
        help="Directory containing <region>/<protocol>/<case>/ folders",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    # Qt consumes its own arguments from sys.argv
    args, _ = parser.parse_known_args(argv)
    return args


def main():
    """Application entry point."""
    args = parse_args()
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    # Enable High DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName(DEFAULT_GUI.window_title)
    app.setApplicationVersion("1.0")
    app.setOrganizationName("Research")

    app.setFont(QFont(DEFAULT_GUI.font_family, DEFAULT_GUI.font_size))
    ConsoleStyle.apply(app)

    window = MainWindow(cases_root=args.cases_root)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
