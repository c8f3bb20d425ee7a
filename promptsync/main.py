# promptsync/main.py
import sys
import os

# Direct execution: make the package importable
if __package__ is None and not hasattr(sys, "frozen"):
    path = os.path.realpath(os.path.abspath(__file__))
    sys.path.insert(0, os.path.dirname(os.path.dirname(path)))

from promptsync.config.loader import get_config
from promptsync.services.logging import setup_logging


def main():
    setup_logging(level=get_config().log_level)
    from promptsync.ui.application import run # Qt is only imported for the window
    sys.exit(run(sys.argv))


if __name__ == "__main__":
    main()
