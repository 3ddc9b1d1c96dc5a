"""
analysis_core/options.py
════════════════════════

Option model for one run of the analysis pipeline.

Raw flags come from the command line (``analysis_core.cli``), from an
options profile (``analysis_core.profile``) or from any other parser, as a
plain mapping keyed by flag name::

    {"bug-all": True, "clang-option": ["-O0", "-g"], "debug": False}

This module turns that mapping into three frozen values:

  ┌──────────────────────────────────────────────────────────────┐
  │                      AnalysisOptions                         │
  │  ┌──────────────┐   ┌───────────────┐   ┌─────────────────┐  │
  │  │ CoreOptions  │   │ AssertOptions │   │   BugOptions    │  │
  │  │ debug, pass  │   │ alias,        │   │ per-kind flags, │  │
  │  │ toggles, ... │   │ interval, all │   │ category / all  │  │
  │  └──────┬───────┘   └───────────────┘   └─────────────────┘  │
  │         │ apply_to_core_flags()                              │
  │         ▼                                                    │
  │   OutputContext  (analysis_core.context)                     │
  └──────────────────────────────────────────────────────────────┘

Aggregate flags ("all bugs", "all integer bugs", "all assertions") are
derived exactly once, in ``__post_init__``.  The raw per-kind booleans keep
the parsed values; only the query methods see the implications.  All values
are frozen, use ``dataclasses.replace`` to build a variant.

Missing keys read as ``False`` for boolean flags and as ``()`` for list
flags, so every ``derive_*`` function is total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from analysis_core.context import OutputContext

_log = logging.getLogger(__name__)

RawValue = Union[bool, Sequence[str]]
RawFlags = Mapping[str, RawValue]


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — FLAG TABLE
# ═════════════════════════════════════════════════════════════════════════

class FlagKind(Enum):
    """Shape of a raw flag value."""
    BOOL = "bool"
    LIST = "list"


@dataclass(frozen=True)
class FlagSpec:
    """Declaration of one raw flag: its name, value kind and help text."""
    name: str
    kind: FlagKind
    help: str
    group: str = "general"
    metavar: Optional[str] = None

    @property
    def dest(self) -> str:
        """Python identifier form of the flag name (``bug-all`` → ``bug_all``)."""
        return self.name.replace("-", "_")


# Flag names.  These double as the long command-line option names.

DEBUG = "debug"
DEEP_DEBUG = "deep-debug"
DISABLE_INSTRUMENTATION = "disable-instrumentation"
DISABLE_NORMALIZATION = "disable-normalization"
DISABLE_OPTIMIZATION = "disable-optimization"
DISABLE_PRINTING = "disable-printing"
CLANG_OPTION = "clang-option"
OPT_OPTION = "opt-option"
INCLUDE_DIR = "include-dir"
INCLUDE_FILE = "include-file"
PRINT_INPUT_PROGRAM = "print-input-program"
PRINT_COMPILED_PROGRAM = "print-compiled-program"
PRINT_NORMALIZED_PROGRAM = "print-normalized-program"
PRINT_OPTIMIZED_PROGRAM = "print-optimized-program"
PRINT_INSTRUMENTED_PROGRAM = "print-instrumented-program"
GENERATE_STATS = "generate-stats"
INSTRUMENT = "instrument"

ASSERT_ALIAS = "assert-alias"
ASSERT_INTERVAL = "assert-interval"
ASSERT_ALL = "assert-all"

BUG_DIVISION_BY_ZERO = "bug-division-by-zero"
BUG_INTEGER_OVERFLOW = "bug-integer-overflow"
BUG_INTEGER_UNDERFLOW = "bug-integer-underflow"
BUG_INTEGER_COERCION_ERROR = "bug-integer-coercion-error"
BUG_NUMERIC_TRUNCATION_ERROR = "bug-numeric-truncation-error"
BUG_SIGNEDNESS_ERROR = "bug-signedness-error"
BUG_INTEGER_ALL = "bug-integer-all"
BUG_MEMORY_ALL = "bug-memory-all"
BUG_ALL = "bug-all"


FLAGS: Tuple[FlagSpec, ...] = (
    # core
    FlagSpec(DEBUG, FlagKind.BOOL, "Print debugging information", "core"),
    FlagSpec(DEEP_DEBUG, FlagKind.BOOL,
             "Print deep debugging information (implies --debug)", "core"),
    FlagSpec(DISABLE_INSTRUMENTATION, FlagKind.BOOL,
             "Skip the instrumentation pass", "core"),
    FlagSpec(DISABLE_NORMALIZATION, FlagKind.BOOL,
             "Skip the normalization pass", "core"),
    FlagSpec(DISABLE_OPTIMIZATION, FlagKind.BOOL,
             "Skip the optimization pass", "core"),
    FlagSpec(DISABLE_PRINTING, FlagKind.BOOL,
             "Suppress regular console output", "core"),
    FlagSpec(CLANG_OPTION, FlagKind.LIST,
             "Option passed through to clang (repeatable)", "core", "OPT"),
    FlagSpec(OPT_OPTION, FlagKind.LIST,
             "Option passed through to opt (repeatable)", "core", "OPT"),
    FlagSpec(INCLUDE_DIR, FlagKind.LIST,
             "Include directory (repeatable)", "core", "DIR"),
    FlagSpec(INCLUDE_FILE, FlagKind.LIST,
             "Include file (repeatable)", "core", "FILE"),
    FlagSpec(GENERATE_STATS, FlagKind.BOOL,
             "Generate statistics of the run", "core"),
    FlagSpec(INSTRUMENT, FlagKind.BOOL,
             "Run the instrumentation pass", "core"),
    # printing of intermediate stages
    FlagSpec(PRINT_INPUT_PROGRAM, FlagKind.BOOL,
             "Print the input program", "printing"),
    FlagSpec(PRINT_COMPILED_PROGRAM, FlagKind.BOOL,
             "Print the compiled program", "printing"),
    FlagSpec(PRINT_NORMALIZED_PROGRAM, FlagKind.BOOL,
             "Print the normalized program", "printing"),
    FlagSpec(PRINT_OPTIMIZED_PROGRAM, FlagKind.BOOL,
             "Print the optimized program", "printing"),
    FlagSpec(PRINT_INSTRUMENTED_PROGRAM, FlagKind.BOOL,
             "Print the instrumented program", "printing"),
    # assertions
    FlagSpec(ASSERT_ALIAS, FlagKind.BOOL,
             "Check alias assertions", "assertions"),
    FlagSpec(ASSERT_INTERVAL, FlagKind.BOOL,
             "Check interval assertions", "assertions"),
    FlagSpec(ASSERT_ALL, FlagKind.BOOL,
             "Check all assertions", "assertions"),
    # bugs
    FlagSpec(BUG_DIVISION_BY_ZERO, FlagKind.BOOL,
             "Check division-by-zero bugs", "bugs"),
    FlagSpec(BUG_INTEGER_OVERFLOW, FlagKind.BOOL,
             "Check integer overflow bugs", "bugs"),
    FlagSpec(BUG_INTEGER_UNDERFLOW, FlagKind.BOOL,
             "Check integer underflow bugs", "bugs"),
    FlagSpec(BUG_INTEGER_COERCION_ERROR, FlagKind.BOOL,
             "Check integer coercion errors", "bugs"),
    FlagSpec(BUG_NUMERIC_TRUNCATION_ERROR, FlagKind.BOOL,
             "Check numeric truncation errors", "bugs"),
    FlagSpec(BUG_SIGNEDNESS_ERROR, FlagKind.BOOL,
             "Check signedness / type conversion errors", "bugs"),
    FlagSpec(BUG_INTEGER_ALL, FlagKind.BOOL,
             "Check all integer bugs", "bugs"),
    FlagSpec(BUG_MEMORY_ALL, FlagKind.BOOL,
             "Check all memory bugs", "bugs"),
    FlagSpec(BUG_ALL, FlagKind.BOOL, "Check all bugs", "bugs"),
)

FLAG_TABLE: Dict[str, FlagSpec] = {spec.name: spec for spec in FLAGS}


def _flag(raw: RawFlags, name: str) -> bool:
    return bool(raw.get(name, False))


def _values(raw: RawFlags, name: str) -> Tuple[str, ...]:
    value = raw.get(name)
    if value is None or isinstance(value, bool):
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — CORE OPTIONS
# ═════════════════════════════════════════════════════════════════════════

class Stage(Enum):
    """Pipeline stages whose intermediate program can be printed."""
    INPUT = "input"
    COMPILED = "compiled"
    NORMALIZED = "normalized"
    OPTIMIZED = "optimized"
    INSTRUMENTED = "instrumented"


@dataclass(frozen=True)
class CoreOptions:
    """
    Options shared by every tool of the pipeline.

    Attributes
    ----------
    debug, deep_debug   : raw debug flags; ``debug_mode`` is derived
    disable_*           : pass toggles
    clang_options       : pass-through options for the compiler, in order
    opt_options         : pass-through options for the optimizer, in order
    include_dirs        : include directories, in order
    include_files       : include files, in order
    print_*_program     : print the program after the named stage
    generate_stats      : produce run statistics
    enable_instrumentation : run the instrumentation pass
    """
    debug: bool = False
    deep_debug: bool = False
    disable_instrumentation: bool = False
    disable_normalization: bool = False
    disable_optimization: bool = False
    disable_printing: bool = False
    clang_options: Tuple[str, ...] = ()
    opt_options: Tuple[str, ...] = ()
    include_dirs: Tuple[str, ...] = ()
    include_files: Tuple[str, ...] = ()
    print_input_program: bool = False
    print_compiled_program: bool = False
    print_normalized_program: bool = False
    print_optimized_program: bool = False
    print_instrumented_program: bool = False
    generate_stats: bool = False
    enable_instrumentation: bool = False
    debug_mode: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "debug_mode", self.debug or self.deep_debug)

    @property
    def deep_debug_mode(self) -> bool:
        return self.deep_debug

    def should_print_stage(self, stage: Stage) -> bool:
        """Whether the program must be printed after *stage*."""
        return {
            Stage.INPUT: self.print_input_program,
            Stage.COMPILED: self.print_compiled_program,
            Stage.NORMALIZED: self.print_normalized_program,
            Stage.OPTIMIZED: self.print_optimized_program,
            Stage.INSTRUMENTED: self.print_instrumented_program,
        }[stage]

    def need_normalization(self) -> bool:
        return not self.disable_normalization

    def need_optimization(self) -> bool:
        return not self.disable_optimization

    def apply_to_core_flags(self) -> OutputContext:
        """
        Build the output context consumed by logging and printing.

        The context replaces process-wide debug/print switches: the driver
        builds it once at startup and hands it to every collaborator that
        logs or prints.
        """
        ctx = OutputContext(
            debug_mode=self.debug_mode,
            deep_debug_mode=self.deep_debug_mode,
            disable_printing=self.disable_printing,
        )
        _log.debug("Output context: %s", ctx)
        return ctx


def derive_core_options(raw: RawFlags) -> CoreOptions:
    """Build :class:`CoreOptions` from raw flags."""
    return CoreOptions(
        debug=_flag(raw, DEBUG),
        deep_debug=_flag(raw, DEEP_DEBUG),
        disable_instrumentation=_flag(raw, DISABLE_INSTRUMENTATION),
        disable_normalization=_flag(raw, DISABLE_NORMALIZATION),
        disable_optimization=_flag(raw, DISABLE_OPTIMIZATION),
        disable_printing=_flag(raw, DISABLE_PRINTING),
        clang_options=_values(raw, CLANG_OPTION),
        opt_options=_values(raw, OPT_OPTION),
        include_dirs=_values(raw, INCLUDE_DIR),
        include_files=_values(raw, INCLUDE_FILE),
        print_input_program=_flag(raw, PRINT_INPUT_PROGRAM),
        print_compiled_program=_flag(raw, PRINT_COMPILED_PROGRAM),
        print_normalized_program=_flag(raw, PRINT_NORMALIZED_PROGRAM),
        print_optimized_program=_flag(raw, PRINT_OPTIMIZED_PROGRAM),
        print_instrumented_program=_flag(raw, PRINT_INSTRUMENTED_PROGRAM),
        generate_stats=_flag(raw, GENERATE_STATS),
        enable_instrumentation=_flag(raw, INSTRUMENT),
    )


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — ASSERTION OPTIONS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AssertOptions:
    """Which assertion kinds to check.  ``assert_all`` implies both kinds."""
    assert_alias: bool = False
    assert_interval: bool = False
    assert_all: bool = False

    def need_to_check_aliasing(self) -> bool:
        return self.assert_all or self.assert_alias

    def need_to_check_interval(self) -> bool:
        return self.assert_all or self.assert_interval

    def need_to_check_assertions(self) -> bool:
        return self.need_to_check_aliasing() or self.need_to_check_interval()


def derive_assert_options(raw: RawFlags) -> AssertOptions:
    """Build :class:`AssertOptions` from raw flags."""
    return AssertOptions(
        assert_alias=_flag(raw, ASSERT_ALIAS),
        assert_interval=_flag(raw, ASSERT_INTERVAL),
        assert_all=_flag(raw, ASSERT_ALL),
    )


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — BUG OPTIONS
# ═════════════════════════════════════════════════════════════════════════

class IntegerBug(Enum):
    """Integer bug kinds, valued by their raw flag name."""
    DIVISION_BY_ZERO = BUG_DIVISION_BY_ZERO
    INTEGER_OVERFLOW = BUG_INTEGER_OVERFLOW
    INTEGER_UNDERFLOW = BUG_INTEGER_UNDERFLOW
    INTEGER_COERCION_ERROR = BUG_INTEGER_COERCION_ERROR
    NUMERIC_TRUNCATION_ERROR = BUG_NUMERIC_TRUNCATION_ERROR
    SIGNEDNESS_ERROR = BUG_SIGNEDNESS_ERROR

    @property
    def attribute(self) -> str:
        """Name of the raw field on :class:`BugOptions`."""
        return self.name.lower()


@dataclass(frozen=True)
class BugOptions:
    """
    Which bug kinds to check.

    The raw fields keep the parsed values.  The aggregates are computed once:

    - ``all_bugs``          = ``bug_all``
    - ``all_integer_bugs``  = ``integer_all`` or ``bug_all``
    - ``all_memory_bugs``   = ``memory_all`` or ``bug_all``
    - ``integer_bugs``      = per-kind kinds in effect after the implications
    """
    division_by_zero: bool = False
    integer_overflow: bool = False
    integer_underflow: bool = False
    integer_coercion_error: bool = False
    numeric_truncation_error: bool = False
    signedness_error: bool = False
    integer_all: bool = False
    memory_all: bool = False
    bug_all: bool = False
    all_bugs: bool = field(init=False)
    all_integer_bugs: bool = field(init=False)
    all_memory_bugs: bool = field(init=False)
    integer_bugs: FrozenSet[IntegerBug] = field(init=False)

    def __post_init__(self) -> None:
        all_integer = self.integer_all or self.bug_all
        enabled = frozenset(
            kind for kind in IntegerBug
            if all_integer or getattr(self, kind.attribute)
        )
        object.__setattr__(self, "all_bugs", self.bug_all)
        object.__setattr__(self, "all_integer_bugs", all_integer)
        object.__setattr__(self, "all_memory_bugs",
                           self.memory_all or self.bug_all)
        object.__setattr__(self, "integer_bugs", enabled)

    # ── per-kind queries ─────────────────────────────────────────────

    def need_to_check(self, kind: IntegerBug) -> bool:
        return kind in self.integer_bugs

    def need_to_check_division_by_zero(self) -> bool:
        return self.need_to_check(IntegerBug.DIVISION_BY_ZERO)

    def need_to_check_integer_overflow(self) -> bool:
        return self.need_to_check(IntegerBug.INTEGER_OVERFLOW)

    def need_to_check_integer_underflow(self) -> bool:
        return self.need_to_check(IntegerBug.INTEGER_UNDERFLOW)

    def need_to_check_integer_coercion_error(self) -> bool:
        return self.need_to_check(IntegerBug.INTEGER_COERCION_ERROR)

    def need_to_check_numeric_truncation_error(self) -> bool:
        return self.need_to_check(IntegerBug.NUMERIC_TRUNCATION_ERROR)

    def need_to_check_signedness_error(self) -> bool:
        return self.need_to_check(IntegerBug.SIGNEDNESS_ERROR)

    # ── category queries ─────────────────────────────────────────────

    def need_to_check_integer_bugs(self) -> bool:
        return (
            self.all_bugs
            or self.all_integer_bugs
            or bool(self.integer_bugs)
        )

    def need_to_check_memory_bugs(self) -> bool:
        return self.all_bugs or self.all_memory_bugs

    def need_to_check_bugs(self) -> bool:
        return (
            self.need_to_check_integer_bugs()
            or self.need_to_check_memory_bugs()
        )


def derive_bug_options(raw: RawFlags) -> BugOptions:
    """Build :class:`BugOptions` from raw flags."""
    return BugOptions(
        division_by_zero=_flag(raw, BUG_DIVISION_BY_ZERO),
        integer_overflow=_flag(raw, BUG_INTEGER_OVERFLOW),
        integer_underflow=_flag(raw, BUG_INTEGER_UNDERFLOW),
        integer_coercion_error=_flag(raw, BUG_INTEGER_COERCION_ERROR),
        numeric_truncation_error=_flag(raw, BUG_NUMERIC_TRUNCATION_ERROR),
        signedness_error=_flag(raw, BUG_SIGNEDNESS_ERROR),
        integer_all=_flag(raw, BUG_INTEGER_ALL),
        memory_all=_flag(raw, BUG_MEMORY_ALL),
        bug_all=_flag(raw, BUG_ALL),
    )


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — AGGREGATE
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AnalysisOptions:
    """
    All options of one pipeline run.

    Usage
    -----
    >>> opts = AnalysisOptions.from_raw({"bug-division-by-zero": True})
    >>> opts.bugs.need_to_check_integer_bugs()
    True
    >>> opts.bugs.need_to_check_memory_bugs()
    False
    """
    core: CoreOptions = field(default_factory=CoreOptions)
    asserts: AssertOptions = field(default_factory=AssertOptions)
    bugs: BugOptions = field(default_factory=BugOptions)

    @classmethod
    def from_raw(cls, raw: RawFlags) -> "AnalysisOptions":
        opts = cls(
            core=derive_core_options(raw),
            asserts=derive_assert_options(raw),
            bugs=derive_bug_options(raw),
        )
        _log.debug("Derived options from %d raw flags", len(raw))
        return opts

    def apply_to_core_flags(self) -> OutputContext:
        return self.core.apply_to_core_flags()

    def need_instrumentation(self) -> bool:
        """
        Instrumentation runs unless disabled, when it is requested
        explicitly or when any bug or assertion check needs it.
        """
        if self.core.disable_instrumentation:
            return False
        return (
            self.core.enable_instrumentation
            or self.bugs.need_to_check_bugs()
            or self.asserts.need_to_check_assertions()
        )

    def planned_stages(self) -> List[Stage]:
        """Pipeline stages the driver runs, in execution order."""
        stages = [Stage.INPUT, Stage.COMPILED]
        if self.core.need_normalization():
            stages.append(Stage.NORMALIZED)
        if self.core.need_optimization():
            stages.append(Stage.OPTIMIZED)
        if self.need_instrumentation():
            stages.append(Stage.INSTRUMENTED)
        return stages

    def to_dict(self) -> Dict[str, Any]:
        """Raw values plus derived predicates, for reporting."""
        core = self.core
        return {
            "core": {
                "debug_mode": core.debug_mode,
                "deep_debug_mode": core.deep_debug_mode,
                "disable_printing": core.disable_printing,
                "clang_options": list(core.clang_options),
                "opt_options": list(core.opt_options),
                "include_dirs": list(core.include_dirs),
                "include_files": list(core.include_files),
                "generate_stats": core.generate_stats,
                "print_stages": [
                    s.value for s in Stage if core.should_print_stage(s)
                ],
            },
            "assertions": {
                "aliasing": self.asserts.need_to_check_aliasing(),
                "interval": self.asserts.need_to_check_interval(),
            },
            "bugs": {
                "integer": sorted(b.value for b in self.bugs.integer_bugs),
                "integer_bugs": self.bugs.need_to_check_integer_bugs(),
                "memory_bugs": self.bugs.need_to_check_memory_bugs(),
            },
            "stages": [s.value for s in self.planned_stages()],
        }


__all__ = [
    "RawFlags",
    "FlagKind",
    "FlagSpec",
    "FLAGS",
    "FLAG_TABLE",
    "Stage",
    "CoreOptions",
    "AssertOptions",
    "IntegerBug",
    "BugOptions",
    "AnalysisOptions",
    "derive_core_options",
    "derive_assert_options",
    "derive_bug_options",
]
