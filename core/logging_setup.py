"""Centralized logging configuration for the Flow Sight client.

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the
  package root logger (``"flow_sight"``). Called once by the Streamlit app
  at startup.
- ``get_logger(name)``: acquire a child logger, ensuring the root logger has
  at least a ``NullHandler`` when nothing has been configured yet.

Library modules never attach their own handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

ROOT_LOGGER_NAME = "flow_sight"
_CONFIGURED = False


def _level_from_name(name: str) -> Optional[int]:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: Optional[Union[int, str]]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    env_val = os.getenv("FLOW_SIGHT_LOG_LEVEL")
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(
    level: Optional[Union[int, str]] = None,
    *,
    fmt: Optional[str] = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    ``level`` falls back to ``FLOW_SIGHT_LOG_LEVEL`` and then ``INFO``.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return ``flow_sight.<name>``; silent until ``configure_logging`` runs."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
