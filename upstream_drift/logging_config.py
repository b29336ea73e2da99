"""Logging configuration for the upstream drift detector."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = LOG_FORMAT, datefmt: str = DATE_FORMAT, use_color: bool = True):
        super().__init__(fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record):
        if not self.use_color:
            return super().format(record)

        # Work on a copy so other handlers see the plain record
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        record.name = f"\033[34m{record.name}{self.RESET}"  # Blue for logger name
        return super().format(record)


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Setup logging for the CLI.

    Logs are written to stderr: stdout is reserved for diff text and the
    XML summary document.

    Args:
        log_level: Level name; falls back to LOG_LEVEL, then INFO
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(use_color=sys.stderr.isatty()))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if getattr(existing, '_upstream_drift', False):
            root_logger.removeHandler(existing)
    handler._upstream_drift = True
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    configure_external_loggers()


def configure_external_loggers() -> None:
    """Configure logging levels for external libraries."""
    external_loggers = {
        'git': logging.WARNING,
    }

    for logger_name, level in external_loggers.items():
        logging.getLogger(logger_name).setLevel(level)
