"""Logging configuration for vadsync."""
import logging
import sys
from typing import Optional
from vadsync.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


class _BelowLevelFilter(logging.Filter):
    """Passes records strictly below a level (the rest belong to stderr)."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _level(name: str) -> int:
    return getattr(logging, name.upper())


def setup_logging(
    level: Optional[str] = None,
    stderr_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_file_level: Optional[str] = None
) -> bool:
    """
    Configure application logging.

    Records below `stderr_level` go to stdout, the rest go to stderr. When a
    log file is given it receives everything at or above `log_file_level`.
    Logging can only be configured once per process.

    Args:
        level: Threshold for stdout (defaults to config value)
        stderr_level: Threshold for stderr (defaults to config value)
        log_file: Optional path of a log file (defaults to config value)
        log_file_level: Threshold for the log file (defaults to config value)

    Returns:
        True if logging was configured, False if it already had been
    """
    global _configured

    if _configured:
        logger.debug("Logging already configured, ignoring setup request")
        return False

    stdout_level = _level(level or settings.log_level)
    stderr_threshold = _level(stderr_level or settings.log_stderr_level)
    log_file = log_file or settings.log_file
    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(stdout_level)
    stdout_handler.addFilter(_BelowLevelFilter(stderr_threshold))
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(stderr_threshold)
    stderr_handler.setFormatter(formatter)

    handlers = [stdout_handler, stderr_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(_level(log_file_level or settings.log_file_level))
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    levels = [handler.level for handler in handlers]
    logging.basicConfig(level=min(levels), handlers=handlers, force=True)

    _configured = True
    return True


logger = logging.getLogger("vadsync")
