"""Shared logging setup for the CLI.

Console output is message-only (the menus already decorate their own text);
everything, including DEBUG records from spotify_api.*, also goes to a log file.
"""

import logging
import os

LOGGER_NAME = "playlist_extractor"
# Per-user location, independent of the working directory.
LOG_DIR = os.path.join(os.path.expanduser("~"), ".playlist_extractor", "logs")
LOG_FILE = os.path.join(LOG_DIR, "playlist_extractor.log")

_FILE_FMT = logging.Formatter(
    "%(asctime)s [%(name)s] %(levelname)-5s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
_CONSOLE_FMT = logging.Formatter("%(message)s")

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: int = logging.INFO, log_file: str = LOG_FILE) -> logging.Logger:
    """Attach console + file handlers to the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        if getattr(handler, "_playlist_extractor", False):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(_CONSOLE_FMT)
    console._playlist_extractor = True
    root.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_FILE_FMT)
        file_handler._playlist_extractor = True
        root.addHandler(file_handler)

    # httpx logs every request at INFO; keep that out of the console.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logger


def log_info(message: str) -> None:
    logger.info(message)


def log_success(message: str) -> None:
    logger.info(f"✅ {message}")


def log_warning(message: str) -> None:
    logger.warning(message)


def log_error(message: str) -> None:
    logger.error(message)
