"""Logging configuration.

Development gets a readable line format; every other environment gets
key=value lines carrying the slot context attached through ``extra=``.
"""

import logging
import sys
from typing import Optional

from clinica.core.config import settings

# Record attributes copied into structured output when a caller sets them
CONTEXT_FIELDS = ("psychologist_id", "candidate_date", "rejection")

DEV_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StructuredFormatter(logging.Formatter):
    """Render records as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return " ".join(f"{k}={v}" for k, v in log_data.items())


def setup_logging(level: Optional[str] = None) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Level name overriding ``settings.log_level``
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    if settings.is_dev:
        console_handler.setFormatter(logging.Formatter(DEV_FORMAT))
    else:
        console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
