"""Rich logging for the content-resolver command line."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logging", "console"]

LOG_LEVEL_ENV = "CONTENT_RESOLVER_LOG_LEVEL"

# Libraries that log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")

console = Console()

_handler: RichHandler | None = None


def _level_for(name: str | None) -> int:
    name = (name or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: str | None = None) -> RichHandler:
    """Route log records through a Rich handler on the shared console.

    *level_name* wins over ``CONTENT_RESOLVER_LOG_LEVEL``; unknown names
    fall back to INFO. Safe to call more than once: the handler is created
    on first use and only the level changes afterwards.
    """
    global _handler
    if _handler is None:
        _handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
        _handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    if _handler not in root.handlers:
        root.addHandler(_handler)

    level = _level_for(level_name)
    root.setLevel(level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.captureWarnings(True)
    return _handler
