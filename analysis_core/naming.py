"""
analysis_core/naming.py
═══════════════════════

Naming environment for fresh identifiers.

A :class:`NamingEnv` maps each name to two indices:

  current index   the index most recently allocated in the current scope
  index counter   the highest index ever allocated for the name

The renaming pass threads an environment through its traversal.  Allocation
never mutates the receiver; it returns a new environment, so the two arms of
a conditional can rename independently from the same starting point::

    env = NamingEnv()
    idx, env = env.allocate_fresh_index("x")     # None: keep "x"
    idx, env = env.allocate_fresh_index("x")     # 1:    "x$1"

    then_idx, then_env = env.allocate_fresh_index("y")
    else_idx, else_env = env.allocate_fresh_index("y")
    assert then_idx == else_idx                   # env is unchanged

Index ``0`` means "not renamed yet": the first allocation of a name yields
``0`` internally and ``None`` to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

RENAME_SEPARATOR = "$"


def indexed_name(
    name: str, index: Optional[int], separator: str = RENAME_SEPARATOR
) -> str:
    """Render *name* with its fresh index (``x``, ``x$1``, ``x$2``, ...)."""
    if index is None or index == 0:
        return name
    return f"{name}{separator}{index}"


@dataclass(frozen=True)
class NamingEnv:
    """
    Persistent name → index environment.

    Both maps are copied on construction and never modified afterwards;
    :meth:`allocate_fresh_index` builds the new environment from copies.
    """
    _current_naming_index: Dict[str, int] = field(default_factory=dict)
    _naming_index_counter: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_current_naming_index", dict(self._current_naming_index)
        )
        object.__setattr__(
            self, "_naming_index_counter", dict(self._naming_index_counter)
        )

    def __hash__(self) -> int:
        return hash((
            frozenset(self._current_naming_index.items()),
            frozenset(self._naming_index_counter.items()),
        ))

    @property
    def current_naming_index(self) -> Mapping[str, int]:
        return MappingProxyType(self._current_naming_index)

    @property
    def naming_index_counter(self) -> Mapping[str, int]:
        return MappingProxyType(self._naming_index_counter)

    def get_current_index(self, name: str) -> Optional[int]:
        """Current-scope index of *name*, or ``None`` if not renamed yet."""
        index = self._current_naming_index.get(name)
        if not index:
            return None
        return index

    def get_index_counter(self, name: str) -> Optional[int]:
        """Highest index allocated for *name*, or ``None`` if never seen."""
        return self._naming_index_counter.get(name)

    def allocate_fresh_index(self, name: str) -> Tuple[Optional[int], "NamingEnv"]:
        """
        Allocate the next index for *name*.

        Returns the index (``None`` for the first allocation, which keeps
        the original name) and the environment holding the allocation.
        The receiver is left unchanged, so allocating twice from the same
        environment gives the same index.
        """
        counter = self._naming_index_counter.get(name)
        new_index = 0 if counter is None else counter + 1

        current = dict(self._current_naming_index)
        current[name] = new_index
        counters = dict(self._naming_index_counter)
        counters[name] = new_index
        new_env = NamingEnv(current, counters)

        return (None if new_index == 0 else new_index), new_env

    def fresh_name(
        self, name: str, separator: str = RENAME_SEPARATOR
    ) -> Tuple[str, "NamingEnv"]:
        """Allocate an index for *name* and render the renamed identifier."""
        index, new_env = self.allocate_fresh_index(name)
        return indexed_name(name, index, separator), new_env

    def current_name(self, name: str, separator: str = RENAME_SEPARATOR) -> str:
        """Renamed identifier for *name* visible in the current scope."""
        return indexed_name(name, self.get_current_index(name), separator)

    def __contains__(self, name: object) -> bool:
        return name in self._current_naming_index

    def __len__(self) -> int:
        return len(self._naming_index_counter)

    def __repr__(self) -> str:
        items = ", ".join(
            f"{k}: {self._current_naming_index.get(k, '-')}/{v}"
            for k, v in sorted(self._naming_index_counter.items())
        )
        return f"NamingEnv({{{items}}})"


__all__ = [
    "RENAME_SEPARATOR",
    "NamingEnv",
    "indexed_name",
]
