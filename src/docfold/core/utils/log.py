"""Logging setup for the docfold CLI.

Library modules only create module loggers; handlers are attached here, once,
by the CLI entry point.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

LOG_LEVEL_ENV = "DOCFOLD_LOG_LEVEL"
_HANDLER_NAME = "docfold-cli"


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if level:
        resolved = logging.getLevelName(str(level).strip().upper())
        if isinstance(resolved, int):
            return resolved
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    *,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Attach a stderr handler to the ``docfold`` logger.

    Priority: ``verbose`` (DEBUG) > ``level`` > ``DOCFOLD_LOG_LEVEL`` > WARNING.
    Calling it again replaces the previous handler instead of stacking another.
    """
    if verbose:
        resolved = logging.DEBUG
    elif level is not None:
        resolved = _parse_level(level)
    else:
        resolved = _parse_level(os.environ.get(LOG_LEVEL_ENV))

    logger = logging.getLogger("docfold")
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("[docfold] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    return logger


__all__ = ["configure_logging", "LOG_LEVEL_ENV"]
