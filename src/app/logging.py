"""Logging setup shared by the CLI and the web server."""
import logging
import sys

from src.app.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with stderr and file handlers.

    Safe to call more than once; existing handlers are replaced.
    """
    settings = get_settings()
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(settings.log_path, encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )
