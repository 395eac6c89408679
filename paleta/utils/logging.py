"""
Paleta Structured Logging
Centralized logging configuration using loguru.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger

from paleta.config import config

_configured = False


def configure_logging(level: Optional[str] = None, serialize: bool = False) -> None:
    """
    Install the single stdout sink used by Paleta.

    Args:
        level: Minimum level, defaults to PALETA_LOG_LEVEL
        serialize: Emit JSON lines instead of the pipe-separated format
    """
    global _configured

    # Remove default handler
    logger.remove()
    logger.configure(extra={"component": "paleta"})
    logger.add(
        sys.stdout,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[component]} | {message} | {extra}",
        level=level or config.LOG_LEVEL,
        serialize=serialize
    )
    _configured = True


class StructuredLogger:
    """Structured logger bound to one Paleta component."""

    def __init__(self, component: str = "paleta"):
        if not _configured:
            configure_logging()
        self.component = component
        self._logger = logger.bind(component=component)

    def _emit(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        bound = self._logger.bind(**extra) if extra else self._logger
        bound.log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log info message with optional extra data."""
        self._emit("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log warning message with optional extra data."""
        self._emit("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log error message with optional extra data."""
        self._emit("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log debug message with optional extra data."""
        self._emit("DEBUG", message, extra)


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(component: str = "paleta") -> StructuredLogger:
    """Get or create the structured logger for a component."""
    if component not in _loggers:
        _loggers[component] = StructuredLogger(component)
    return _loggers[component]
