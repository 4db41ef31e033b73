"""Runtime logging helpers."""

from __future__ import annotations

import os
from logging import Handler

from loguru import logger
from rich import get_console
from rich.logging import RichHandler

_CONFIGURED_LEVEL: str | None = None


def _build_console_handler() -> Handler:
    return RichHandler(
        console=get_console(),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure process-level logging once per level."""
    global _CONFIGURED_LEVEL

    resolved = (level or os.getenv("AOS_LOG_LEVEL", "WARNING")).upper()
    if resolved == _CONFIGURED_LEVEL:
        return

    logger.remove()
    logger.add(
        _build_console_handler(),
        level=resolved,
        format="{message}",
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_LEVEL = resolved
