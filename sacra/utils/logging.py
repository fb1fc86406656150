"""Root logger setup for the headless entry point and hosting applications.

``SACRA_LOG_LEVEL`` pins the level (name or number). Otherwise a truthy
``SACRA_DEBUG`` forces DEBUG, and failing that the ``debug_logging`` screen
setting decides. Transport loggers stay at WARNING unless DEBUG is active.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

LEVEL_ENV = "SACRA_LOG_LEVEL"
DEBUG_ENV = "SACRA_DEBUG"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_TRANSPORT_LOGGERS = ("urllib3", "requests")


def _env(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def env_level(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Return the level pinned by ``SACRA_LOG_LEVEL``, if it names one."""
    text = _env(environ).get(LEVEL_ENV, "").strip()
    if not text:
        return None
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else None


def env_debug_forced(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when the environment alone asks for DEBUG output."""
    pinned = env_level(environ)
    if pinned is not None:
        return pinned <= logging.DEBUG
    return _env(environ).get(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def setup_logging(debug: bool = False, environ: Optional[Mapping[str, str]] = None) -> int:
    """Configure the root logger and return the effective level.

    Handlers are installed only when the root logger has none, so calling
    this from a host that already configured logging just adjusts levels.
    """
    level = env_level(environ)
    if level is None:
        level = logging.DEBUG if debug or env_debug_forced(environ) else logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_FORMAT, datefmt="%H:%M:%S")
    root.setLevel(level)
    transport_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
    return level


__all__ = ["DEBUG_ENV", "LEVEL_ENV", "env_debug_forced", "env_level", "setup_logging"]
