import logging
import logging.config
from pathlib import Path

from app.core.config import settings

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_logging_config(level: str, log_to_file: bool) -> dict:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    }
    app_handlers = ["console"]

    if log_to_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filename": "logs/app.log",
            "maxBytes": 10485760,
            "backupCount": 5
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": "logs/error.log",
            "maxBytes": 10485760,
            "backupCount": 5
        }
        app_handlers = ["console", "file", "error_file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": FORMAT}
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": app_handlers
        },
        "loggers": {
            "app": {
                "level": level,
                "handlers": app_handlers,
                "propagate": False
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        }
    }


def configure_logging(level: str = None, log_to_file: bool = None):
    level = (level or settings.LOG_LEVEL).upper()
    log_to_file = settings.LOG_TO_FILE if log_to_file is None else log_to_file
    if log_to_file:
        Path("logs").mkdir(exist_ok=True)
    logging.config.dictConfig(_build_logging_config(level, log_to_file))
