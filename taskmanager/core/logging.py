"""Logging setup shared by the API process."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Un seul handler, même si create_app() est appelé plusieurs fois (tests)
    for handler in root.handlers:
        if getattr(handler, "_taskmanager", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._taskmanager = True
    root.addHandler(handler)
