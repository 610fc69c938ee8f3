"""Logging configuration for netquality."""
from __future__ import annotations

import logging
import os
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

_ENV_VAR = "NETQUALITY_LOG_LEVEL"
_DEFAULT_LEVEL = "WARNING"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_level(level: Optional[Union[str, int]] = None) -> int:
    """Turn *level* (or ``$NETQUALITY_LOG_LEVEL``) into a logging constant.

    Unknown names fall back to WARNING.
    """
    if isinstance(level, int):
        return level
    name = (level or os.environ.get(_ENV_VAR) or _DEFAULT_LEVEL).upper()
    return _LEVELS.get(name, logging.WARNING)


def configure_logging(level: Optional[Union[str, int]] = None) -> int:
    """Route all log records to stderr through a ``rich`` handler.

    Returns the effective level.
    """
    log_level = resolve_level(level)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=log_level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s", logging.getLevelName(log_level)
    )
    return log_level
