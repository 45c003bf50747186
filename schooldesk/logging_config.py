"""
Logging Setup
Console + rotating file handlers for the whole service
"""
import logging
import os
from logging.handlers import RotatingFileHandler

from schooldesk.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Attach console and file handlers to the root logger."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    # Re-running (uvicorn reload, tests) must not stack handlers
    for handler in list(root.handlers):
        if getattr(handler, "_schooldesk", False):
            root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._schooldesk = True
    root.addHandler(console)

    if settings.LOG_FILE:
        log_dir = os.path.dirname(settings.LOG_FILE)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            settings.LOG_FILE, maxBytes=1_000_000, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        file_handler._schooldesk = True
        root.addHandler(file_handler)

    # Keep request/transport chatter out of INFO logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
