"""
Logging helpers for giq.

Log records go to stderr through rich so they never mix with the output of
a delegated git command.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ENV_LOG_LEVEL = "GIQ_LOG_LEVEL"


def _level_from_env(value: Optional[str]) -> int:
    if not value:
        return logging.WARNING
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: Optional[int] = None) -> None:
    """
    Configure the root logger.

    When ``level`` is not given it is read from ``GIQ_LOG_LEVEL`` and falls
    back to WARNING.
    """

    if level is None:
        level = _level_from_env(os.getenv(ENV_LOG_LEVEL))

    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
