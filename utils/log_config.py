import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from utils.app_config import LOG_FILE

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_file: Path | None = LOG_FILE) -> None:
    """Console + rotating file logging for the whole app. Safe to call twice."""
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(console)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
            )
        except OSError:
            root.warning("Could not open log file %s; logging to console only", log_file)
            return
        file_handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(file_handler)
