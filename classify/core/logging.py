import logging
import logging.config
from pathlib import Path
from classify.core.config import settings

# Attempt lifecycle and grading events also go to a separate audit file.
AUDIT_LOGGERS = ("classify.services.exam_attempt", "classify.services.exam")


class RequestIdFilter(logging.Filter):
    """Give records logged outside a request a placeholder ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def _rotating(filename: str, level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "default",
        "filters": ["request_id"],
        "filename": str(Path(settings.LOG_DIR) / filename),
        "maxBytes": 10485760,
        "backupCount": 5,
    }


def build_logging_config(level: str = "INFO") -> dict:
    app_handlers = ["console", "file", "error_file"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id": {"()": RequestIdFilter},
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "filters": ["request_id"],
                "stream": "ext://sys.stdout",
            },
            "file": _rotating("classify.log", level),
            "error_file": _rotating("error.log", "ERROR"),
            "audit_file": _rotating("cbt_audit.log", "INFO"),
        },
        "root": {"level": level, "handlers": app_handlers},
        "loggers": {
            "classify": {"level": level, "handlers": app_handlers, "propagate": False},
            **{
                name: {"level": "INFO", "handlers": app_handlers + ["audit_file"], "propagate": False}
                for name in AUDIT_LOGGERS
            },
            "apscheduler": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }


def configure_logging():
    Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings.LOG_LEVEL.upper()))
