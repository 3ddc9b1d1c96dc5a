"""
analysis_core/errors.py
═══════════════════════

Exception types raised by the glue layers around the option model and the
naming environment.

The option derivation and the naming environment themselves are total and
never raise.  Everything that reads outside input does: the command-line
layer, the options profile loader and the OS / file helpers.

Hierarchy
─────────

  AnalysisCoreError
  ├── OptionsError
  │   ├── UnknownFlagError   - flag name not in the flag table
  │   └── FlagValueError     - value of the wrong kind for a flag
  ├── ProfileError           - unreadable or malformed options profile
  ├── CommandNotFoundError   - OS command lookup failed
  └── FileUtilError          - file helper could not produce a path
"""

from __future__ import annotations

from typing import Any, Optional


class AnalysisCoreError(Exception):
    """Base exception for all analysis_core errors."""
    pass


# ═════════════════════════════════════════════════════════════════════════
#  OPTIONS
# ═════════════════════════════════════════════════════════════════════════

class OptionsError(AnalysisCoreError):
    """Raised when raw flags cannot be turned into options."""
    pass


class UnknownFlagError(OptionsError):
    """Raised for a flag name that the flag table does not declare."""

    def __init__(self, name: str, source: str = "") -> None:
        self.name = name
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Unknown flag '{name}'{where}")


class FlagValueError(OptionsError):
    """Raised when a flag receives a value of the wrong kind."""

    def __init__(self, name: str, value: Any, expected: str) -> None:
        self.name = name
        self.value = value
        self.expected = expected
        super().__init__(
            f"Flag '{name}' expects {expected}, got {value!r}"
        )


# ═════════════════════════════════════════════════════════════════════════
#  PROFILES
# ═════════════════════════════════════════════════════════════════════════

class ProfileError(AnalysisCoreError):
    """Raised when an options profile cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


# ═════════════════════════════════════════════════════════════════════════
#  OPERATING SYSTEM / FILES
# ═════════════════════════════════════════════════════════════════════════

class CommandNotFoundError(AnalysisCoreError):
    """Raised when a command cannot be located on the search path."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Command not found: {command}")


class FileUtilError(AnalysisCoreError):
    """Raised when a file helper cannot produce the requested path."""
    pass


__all__ = [
    "AnalysisCoreError",
    "OptionsError",
    "UnknownFlagError",
    "FlagValueError",
    "ProfileError",
    "CommandNotFoundError",
    "FileUtilError",
]
