"""
analysis_core — Options and Fresh Names for an Analysis Pipeline
=================================================================

This package holds the configuration and identifier-management layer shared
by the tools of a compile / normalize / optimize / instrument / bug-check
pipeline.  The passes themselves live elsewhere; they consult the values
built here.

Core modules
------------
options
    Raw flags → ``CoreOptions``, ``AssertOptions``, ``BugOptions``, with the
    aggregate flags ("all bugs", "all assertions") derived once.
context
    ``OutputContext``: debug and printing switches handed to logging and
    printing collaborators, plus logging setup.
naming
    ``NamingEnv``: persistent name → fresh index environment for renaming.
errors
    Exception hierarchy of the glue layers.
fileutil, system, printing
    File, operating-system and printing helpers.
profile
    S-expression options profiles (``sexpdata``).

Quick start
-----------
>>> from analysis_core import AnalysisOptions, NamingEnv
>>> opts = AnalysisOptions.from_raw({"bug-all": True})
>>> opts.bugs.need_to_check_integer_overflow()
True
>>> idx, env = NamingEnv().allocate_fresh_index("x")
>>> idx is None
True
>>> env.allocate_fresh_index("x")[0]
1
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.2.0"
__author__ = "analysis-core contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated incrementally below

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal registry: (module_name, list_of_names_to_import)
#
# Every module is imported eagerly; failure is fatal.
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "errors": [
        "AnalysisCoreError",
        "OptionsError",
        "UnknownFlagError",
        "FlagValueError",
        "ProfileError",
        "CommandNotFoundError",
        "FileUtilError",
    ],
    "context": [
        "OutputContext",
        "DEEP_DEBUG",
        "deep_debug",
    ],
    "options": [
        "FLAGS",
        "FLAG_TABLE",
        "FlagKind",
        "FlagSpec",
        "Stage",
        "CoreOptions",
        "AssertOptions",
        "IntegerBug",
        "BugOptions",
        "AnalysisOptions",
        "derive_core_options",
        "derive_assert_options",
        "derive_bug_options",
    ],
    "naming": [
        "NamingEnv",
        "indexed_name",
    ],
    "printing": [
        "print_to_string",
        "print_to_comma_separated_string",
    ],
    "fileutil": [
        "save_to_temporary_file",
        "get_file_ext",
        "get_parent_directory",
    ],
    "system": [
        "path_of_command_from_env",
        "ls_dir",
        "get_current_directory",
    ],
    "profile": [
        "load_profile",
        "loads_profile",
        "merge_raw_flags",
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace.

    Parameters
    ----------
    module_rel_name:
        Module name relative to this package (e.g. ``"naming"``).
    names:
        Public symbols to re-export.
    """
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"analysis_core: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        if not hasattr(mod, name):
            raise AttributeError(
                f"analysis_core.{module_rel_name} does not export '{name}'"
            )
        setattr(current_module, name, getattr(mod, name))
        __all__.append(name)

    setattr(current_module, module_rel_name, mod)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names


def list_submodules() -> List[str]:
    """Return the names of all submodules registered in the package."""
    return sorted(_CORE_MODULES.keys())


__all__ += ["list_submodules", "__version__"]

if TYPE_CHECKING:
    from .errors import (
        AnalysisCoreError as AnalysisCoreError,
        OptionsError as OptionsError,
        UnknownFlagError as UnknownFlagError,
        FlagValueError as FlagValueError,
        ProfileError as ProfileError,
        CommandNotFoundError as CommandNotFoundError,
        FileUtilError as FileUtilError,
    )
    from .context import (
        OutputContext as OutputContext,
        DEEP_DEBUG as DEEP_DEBUG,
        deep_debug as deep_debug,
    )
    from .options import (
        FLAGS as FLAGS,
        FLAG_TABLE as FLAG_TABLE,
        FlagKind as FlagKind,
        FlagSpec as FlagSpec,
        Stage as Stage,
        CoreOptions as CoreOptions,
        AssertOptions as AssertOptions,
        IntegerBug as IntegerBug,
        BugOptions as BugOptions,
        AnalysisOptions as AnalysisOptions,
        derive_core_options as derive_core_options,
        derive_assert_options as derive_assert_options,
        derive_bug_options as derive_bug_options,
    )
    from .naming import (
        NamingEnv as NamingEnv,
        indexed_name as indexed_name,
    )
    from .printing import (
        print_to_string as print_to_string,
        print_to_comma_separated_string as print_to_comma_separated_string,
    )
    from .fileutil import (
        save_to_temporary_file as save_to_temporary_file,
        get_file_ext as get_file_ext,
        get_parent_directory as get_parent_directory,
    )
    from .system import (
        path_of_command_from_env as path_of_command_from_env,
        ls_dir as ls_dir,
        get_current_directory as get_current_directory,
    )
    from .profile import (
        load_profile as load_profile,
        loads_profile as loads_profile,
        merge_raw_flags as merge_raw_flags,
    )
