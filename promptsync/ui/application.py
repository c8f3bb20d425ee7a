# promptsync/ui/application.py
import sys
from PySide6.QtWidgets import QApplication
from loguru import logger

from .windows.main_window import MainWindow
from ..config.loader import load_config, save_config, get_config


def run(argv=None):
    """Creates the QApplication, shows the window and saves settings on exit."""
    if argv is None:
        argv = sys.argv

    app = QApplication(argv)
    app.setApplicationName("PromptSync")

    try:
        load_config()
    except Exception:
        logger.exception("Fatal error loading configuration on startup.")
        QApplication.beep()
        return 1

    try:
        main_window = MainWindow()
        main_window.show()
    except Exception:
        logger.exception("Fatal error creating or showing the main window.")
        QApplication.beep()
        return 1

    exit_code = app.exec()

    try:
        save_config(get_config())
    except Exception:
        logger.exception("Error saving configuration on exit.")

    logger.info(f"Application finished with exit code {exit_code}.")
    return exit_code
