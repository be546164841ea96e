# expense_import/utilities/config_logging.py
from __future__ import annotations

import copy
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

LOG_DIR = Path(os.environ.get("EXPENSE_IMPORT_LOG_DIR", "logs"))

LOGGING: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s "
            "[%(process)d:%(threadName)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "simple",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "verbose",
            "filename": str(LOG_DIR / "expense_import.log"),
            "maxBytes": 5_000_000,
            "backupCount": 5,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        # root logger
        "": {
            "level": "DEBUG",
            "handlers": ["console", "file"],
        },
        # transport libraries log every request at DEBUG
        "httpx": {"level": "WARNING", "propagate": True},
        "httpcore": {"level": "WARNING", "propagate": True},
    },
}


def configure_logging(log_dir: Optional[Path] = None) -> Path:
    """
    Apply LOGGING with the rotating file under ``log_dir`` (default LOG_DIR).

    Call once from the application entry point; importing the package never
    configures logging or touches the filesystem. Returns the log file path.
    """
    directory = Path(log_dir) if log_dir is not None else LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    config = copy.deepcopy(LOGGING)
    log_file = directory / "expense_import.log"
    config["handlers"]["file"]["filename"] = str(log_file)
    logging.config.dictConfig(config)
    return log_file
