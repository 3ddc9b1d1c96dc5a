"""
analysis_core/context.py
════════════════════════

Output context: the debug and printing switches of a run.

A tool builds one :class:`OutputContext` at startup (normally through
``CoreOptions.apply_to_core_flags()``) and passes it to every collaborator
that logs or prints.  Nothing here is global: two contexts can coexist, for
example in tests.

Logging levels
──────────────

  deep debug          → DEEP_DEBUG (5)
  debug               → DEBUG
  printing disabled   → WARNING
  otherwise           → INFO
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Optional, TextIO

PACKAGE_LOGGER = "analysis_core"

DEEP_DEBUG = 5
logging.addLevelName(DEEP_DEBUG, "DEEP_DEBUG")

_LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"


class _ContextHandler(logging.StreamHandler):
    """Stream handler installed by :meth:`OutputContext.configure_logging`."""
    pass


@dataclass(frozen=True)
class OutputContext:
    """
    Debug and printing switches consumed by logging and printing helpers.

    Attributes
    ----------
    debug_mode       : emit debugging output
    deep_debug_mode  : emit deep debugging output (implies ``debug_mode``)
    disable_printing : suppress regular console output
    """
    debug_mode: bool = False
    deep_debug_mode: bool = False
    disable_printing: bool = False

    def __post_init__(self) -> None:
        if self.deep_debug_mode and not self.debug_mode:
            object.__setattr__(self, "debug_mode", True)

    @property
    def log_level(self) -> int:
        if self.deep_debug_mode:
            return DEEP_DEBUG
        if self.debug_mode:
            return logging.DEBUG
        if self.disable_printing:
            return logging.WARNING
        return logging.INFO

    def configure_logging(
        self,
        logger_name: str = PACKAGE_LOGGER,
        stream: Optional[TextIO] = None,
    ) -> logging.Logger:
        """
        Set up *logger_name* for this context and return it.

        One handler is kept per logger: configuring again replaces the
        handler installed by a previous call.
        """
        logger = logging.getLogger(logger_name)
        for handler in list(logger.handlers):
            if isinstance(handler, _ContextHandler):
                logger.removeHandler(handler)

        handler = _ContextHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(
            logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)
        )
        logger.addHandler(handler)
        logger.setLevel(self.log_level)
        return logger

    # ── printing ─────────────────────────────────────────────────────

    def print(self, *values: Any, stream: Optional[TextIO] = None) -> None:
        """Print regular output unless printing is disabled."""
        if self.disable_printing:
            return
        print(*values, file=stream if stream is not None else sys.stdout)

    def debug_print(self, *values: Any, stream: Optional[TextIO] = None) -> None:
        """Print only in debug mode, regardless of ``disable_printing``."""
        if self.debug_mode:
            print(*values, file=stream if stream is not None else sys.stderr)

    def deep_debug_print(
        self, *values: Any, stream: Optional[TextIO] = None
    ) -> None:
        if self.deep_debug_mode:
            print(*values, file=stream if stream is not None else sys.stderr)


def deep_debug(logger: logging.Logger, msg: str, *args: Any) -> None:
    """Log *msg* at the ``DEEP_DEBUG`` level."""
    if logger.isEnabledFor(DEEP_DEBUG):
        logger.log(DEEP_DEBUG, msg, *args)


__all__ = [
    "PACKAGE_LOGGER",
    "DEEP_DEBUG",
    "OutputContext",
    "deep_debug",
]
