"""
analysis_core/system.py
═══════════════════════

Operating-system level helpers: platform checks, command lookup and
directory listing.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from typing import List

from analysis_core.errors import CommandNotFoundError

_log = logging.getLogger(__name__)


def is_windows_os() -> bool:
    return sys.platform.startswith("win")


def is_linux_os() -> bool:
    return sys.platform.startswith("linux")


def is_macos_os() -> bool:
    return sys.platform == "darwin"


def path_of_command_from_env(cmd: str) -> str:
    """
    Full path of *cmd* found on ``PATH``.

    Raises
    ------
    CommandNotFoundError
        If the command is not on the search path.
    """
    path = shutil.which(cmd)
    if path is None:
        raise CommandNotFoundError(cmd)
    _log.debug("Found command %s at %s", cmd, path)
    return path


def ls_dir(dir_path: str) -> List[str]:
    """
    Paths of the files and sub-directories of *dir_path*.

    An unreadable or missing directory gives an empty list.
    """
    try:
        entries = os.listdir(dir_path)
    except OSError as exc:
        _log.debug("Cannot list %s: %s", dir_path, exc)
        return []
    return [os.path.join(dir_path, entry) for entry in entries]


def get_current_directory() -> str:
    return os.getcwd()


__all__ = [
    "is_windows_os",
    "is_linux_os",
    "is_macos_os",
    "path_of_command_from_env",
    "ls_dir",
    "get_current_directory",
]
