"""Tagged shortcuts onto the shared history log.

Callers outside the pure domain write through these helpers so every line in
``huginn_history.log`` carries a tag such as ``API`` or ``CHART``. When no tag
is passed it is inferred from the calling module via ``TAG_MAP``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

from huginn_metrics.logging_setup import get_logger, get_tag_for_module


def _caller_tag(depth: int) -> str:
    module_name = sys._getframe(depth).f_globals.get("__name__", "unknown")
    return get_tag_for_module(module_name)


def _numeric_level(level: Any) -> Optional[int]:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else None


def log_message(msg: str, level: Any = "INFO", tag: Optional[str] = None, **kwargs: Any) -> None:
    """Write ``msg`` at ``level``; extra kwargs (e.g. ``exc_info``) go to the logger."""
    logger = get_logger(tag or _caller_tag(2))
    numeric = _numeric_level(level)
    if numeric is None:
        logger.warning("Unknown log level %r for message: %s", level, msg)
        return
    logger.log(numeric, msg, **kwargs)


def debug(msg: str, tag: Optional[str] = None, **kwargs: Any) -> None:
    log_message(msg, logging.DEBUG, tag or _caller_tag(2), **kwargs)


def info(msg: str, tag: Optional[str] = None, **kwargs: Any) -> None:
    log_message(msg, logging.INFO, tag or _caller_tag(2), **kwargs)


def warn(msg: str, tag: Optional[str] = None, **kwargs: Any) -> None:
    log_message(msg, logging.WARNING, tag or _caller_tag(2), **kwargs)


def error(msg: str, tag: Optional[str] = None, **kwargs: Any) -> None:
    log_message(msg, logging.ERROR, tag or _caller_tag(2), **kwargs)
