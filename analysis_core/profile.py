"""
analysis_core/profile.py
════════════════════════

Options profiles: raw flags stored as S-expressions.

A profile holds one form per flag, optionally wrapped in ``(profile ...)``::

    ; nightly run
    (profile
      (bug-all)
      (deep-debug nil)
      (clang-option "-O0" "-g")
      (include-dir "include" "third_party/include"))

- ``(flag)`` or ``(flag t)`` sets a boolean flag; ``(flag nil)`` clears it.
  The symbols ``true``/``false``, ``yes``/``no`` and ``on``/``off`` are
  accepted as well.
- ``(flag "a" "b" ...)`` sets a list flag, keeping order and duplicates.
  Repeating a list form appends to the earlier values.

The result is the same raw mapping the command line produces, so it feeds
straight into :meth:`AnalysisOptions.from_raw`.

Depends on:
    - sexpdata          (S-expression parsing)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import sexpdata

from analysis_core.errors import (
    FlagValueError,
    ProfileError,
    UnknownFlagError,
)
from analysis_core.options import FLAG_TABLE, FlagKind, RawValue

_log = logging.getLogger(__name__)

PROFILE_HEAD = "profile"

_TRUE_WORDS = frozenset({"t", "true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"nil", "false", "no", "off", "0"})


# ===================================================================
#  PART 1 — S-EXPRESSION LAYER
# ===================================================================

def _parse_forms(text: str) -> List[Any]:
    """Parse every top-level form of *text*."""
    # sexpdata reads a single form; wrap the stream and strip the outer list
    try:
        parsed = sexpdata.loads(f"({text}\n)")
    except Exception as exc:
        raise ProfileError(f"Failed to parse S-expression: {exc}") from exc
    return [_normalise(item) for item in parsed]


def _normalise(obj: Any) -> Any:
    """Recursively turn sexpdata output into plain Python values."""
    if isinstance(obj, list):
        return [_normalise(x) for x in obj]
    if isinstance(obj, sexpdata.Symbol):
        return str(obj)
    if isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, sexpdata.Quoted):
        return _normalise(obj.value())
    return str(obj)


# ===================================================================
#  PART 2 — FLAG FORMS
# ===================================================================

def _bool_value(name: str, args: List[Any]) -> bool:
    if not args:
        return True
    if len(args) > 1:
        raise FlagValueError(name, args, "at most one boolean")
    value = args[0]
    if isinstance(value, bool):
        return value
    if value == []:
        return False
    word = str(value).lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise FlagValueError(name, value, "a boolean")


def _list_value(name: str, args: List[Any]) -> List[str]:
    values: List[str] = []
    for arg in args:
        if isinstance(arg, list) or isinstance(arg, bool):
            raise FlagValueError(name, arg, "string values")
        values.append(str(arg))
    return values


def flags_from_forms(forms: List[Any], source: str = "") -> Dict[str, RawValue]:
    """
    Convert parsed profile forms into a raw flag mapping.

    Raises
    ------
    ProfileError       on a form that is not ``(name args...)``, or on a
                       ``(profile ...)`` wrapper next to other forms
    UnknownFlagError   on a name missing from the flag table
    FlagValueError     on arguments of the wrong kind
    """
    wrappers = [f for f in forms if isinstance(f, list) and f and f[0] == PROFILE_HEAD]
    if wrappers:
        if len(forms) > 1:
            raise ProfileError(
                f"({PROFILE_HEAD} ...) must be the only form in a profile",
                source or None,
            )
        forms = forms[0][1:]

    raw: Dict[str, RawValue] = {}
    for form in forms:
        if not isinstance(form, list) or not form or not isinstance(form[0], str):
            raise ProfileError(f"Expected (flag args...), got {form!r}", source or None)
        name, args = form[0], form[1:]
        spec = FLAG_TABLE.get(name)
        if spec is None:
            raise UnknownFlagError(name, source)
        if spec.kind is FlagKind.BOOL:
            raw[name] = _bool_value(name, args)
        else:
            previous = list(raw.get(name, []))  # type: ignore[arg-type]
            raw[name] = previous + _list_value(name, args)
    return raw


# ===================================================================
#  PART 3 — ENTRY POINTS
# ===================================================================

def loads_profile(text: str, source: str = "") -> Dict[str, RawValue]:
    """Parse profile *text* into raw flags."""
    try:
        forms = _parse_forms(text)
    except ProfileError as exc:
        raise ProfileError(str(exc), source or None) from exc
    return flags_from_forms(forms, source)


def load_profile(path: Union[str, Path]) -> Dict[str, RawValue]:
    """Read and parse the profile at *path*."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileError(f"Cannot read profile: {exc.strerror or exc}", str(p)) from exc
    except UnicodeDecodeError as exc:
        raise ProfileError(f"Profile is not valid UTF-8: {exc.reason}", str(p)) from exc
    raw = loads_profile(text, str(p))
    _log.info("Loaded %d flags from profile %s", len(raw), p)
    return raw


def _as_list(value: Optional[RawValue]) -> List[str]:
    # a lone string is one value, not a sequence of characters
    if value is None or isinstance(value, bool):
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def merge_raw_flags(
    base: Dict[str, RawValue], override: Dict[str, RawValue]
) -> Dict[str, RawValue]:
    """
    Combine two raw mappings.

    Booleans are OR'ed; list values of *override* are appended after those
    of *base*, a single string counting as one value.  Neither input is
    modified.
    """
    merged: Dict[str, RawValue] = dict(base)
    for name, value in override.items():
        spec = FLAG_TABLE.get(name)
        if spec is None:
            raise UnknownFlagError(name)
        if spec.kind is FlagKind.BOOL:
            merged[name] = bool(merged.get(name, False)) or bool(value)
        else:
            merged[name] = _as_list(merged.get(name)) + _as_list(value)
    return merged


__all__ = [
    "PROFILE_HEAD",
    "flags_from_forms",
    "loads_profile",
    "load_profile",
    "merge_raw_flags",
]
