"""
analysis_core/fileutil.py
═════════════════════════

File helpers used by pipeline drivers: write intermediate programs to
temporary files and pick apart file names.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional

from analysis_core.errors import FileUtilError

_log = logging.getLogger(__name__)


def save_to_temporary_file(content: str, filename: str) -> str:
    """
    Write *content* to *filename* inside a fresh temporary directory.

    The directory is not removed; the caller owns it.

    Returns
    -------
    str
        Path of the written file.
    """
    if filename in ("", ".", "..") or Path(filename).name != filename:
        raise FileUtilError(f"Not a plain file name: {filename!r}")
    output_dir = Path(tempfile.mkdtemp())
    output_file = output_dir / filename
    output_file.write_text(content, encoding="utf-8")
    _log.debug("Saved %d characters to %s", len(content), output_file)
    return str(output_file)


def get_file_ext(filename: str) -> Optional[str]:
    """Extension of *filename* without the dot, or ``None``."""
    suffix = Path(filename).suffix
    return suffix[1:] if suffix else None


def get_parent_directory(filename: str) -> Optional[str]:
    """Parent directory of *filename*, or ``None`` when it has none."""
    parent = str(Path(filename).parent)
    if parent in ("", "."):
        return None
    return parent


__all__ = [
    "save_to_temporary_file",
    "get_file_ext",
    "get_parent_directory",
]
