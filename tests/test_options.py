# tests/test_options.py
"""
Tests for the option model: raw flags in, derived predicates out.
"""

import dataclasses
import itertools

import pytest

from analysis_core.options import (
    FLAG_TABLE,
    FLAGS,
    AnalysisOptions,
    AssertOptions,
    BugOptions,
    CoreOptions,
    FlagKind,
    IntegerBug,
    Stage,
    derive_assert_options,
    derive_bug_options,
    derive_core_options,
)


class TestAssertOptions:

    def test_alias_only(self):
        opts = derive_assert_options({
            "assert-all": False,
            "assert-alias": True,
            "assert-interval": False,
        })
        assert opts.need_to_check_aliasing()
        assert not opts.need_to_check_interval()
        assert opts.need_to_check_assertions()

    def test_interval_only(self):
        opts = derive_assert_options({"assert-interval": True})
        assert not opts.need_to_check_aliasing()
        assert opts.need_to_check_interval()
        assert opts.need_to_check_assertions()

    def test_all_implies_both(self):
        opts = derive_assert_options({"assert-all": True})
        assert opts.need_to_check_aliasing()
        assert opts.need_to_check_interval()
        # raw values stay as parsed
        assert not opts.assert_alias
        assert not opts.assert_interval

    def test_nothing_set(self):
        opts = derive_assert_options({})
        assert not opts.need_to_check_assertions()

    @pytest.mark.parametrize(
        "alias,interval,everything",
        list(itertools.product([False, True], repeat=3)),
    )
    def test_each_kind_is_own_flag_or_all(self, alias, interval, everything):
        opts = AssertOptions(
            assert_alias=alias, assert_interval=interval, assert_all=everything
        )
        assert opts.need_to_check_aliasing() == (everything or alias)
        assert opts.need_to_check_interval() == (everything or interval)
        assert opts.need_to_check_assertions() == (everything or alias or interval)


class TestBugOptions:

    def test_bug_all_enables_every_integer_kind(self, make_raw):
        opts = derive_bug_options(make_raw(bug_all=True))
        for kind in IntegerBug:
            assert opts.need_to_check(kind)
        assert opts.need_to_check_division_by_zero()
        assert opts.need_to_check_integer_overflow()
        assert opts.need_to_check_integer_underflow()
        assert opts.need_to_check_integer_coercion_error()
        assert opts.need_to_check_numeric_truncation_error()
        assert opts.need_to_check_signedness_error()
        assert opts.need_to_check_integer_bugs()
        assert opts.need_to_check_memory_bugs()
        assert opts.all_integer_bugs
        assert opts.all_memory_bugs

    def test_bug_all_keeps_raw_values(self, make_raw):
        opts = derive_bug_options(make_raw(bug_all=True))
        assert not opts.division_by_zero
        assert not opts.integer_all
        assert not opts.memory_all

    def test_division_by_zero_only(self, make_raw):
        opts = derive_bug_options(make_raw(bug_division_by_zero=True))
        assert opts.need_to_check_integer_bugs()
        assert not opts.need_to_check_memory_bugs()
        assert opts.need_to_check_bugs()
        assert opts.integer_bugs == frozenset({IntegerBug.DIVISION_BY_ZERO})
        assert not opts.need_to_check_integer_overflow()

    def test_integer_all_enables_integer_kinds_only(self, make_raw):
        opts = derive_bug_options(make_raw(bug_integer_all=True))
        assert opts.integer_bugs == frozenset(IntegerBug)
        assert not opts.need_to_check_memory_bugs()

    def test_memory_all_only(self, make_raw):
        opts = derive_bug_options(make_raw(bug_memory_all=True))
        assert opts.need_to_check_memory_bugs()
        assert not opts.need_to_check_integer_bugs()
        assert opts.need_to_check_bugs()

    def test_nothing_set(self):
        opts = derive_bug_options({})
        assert not opts.need_to_check_bugs()
        assert opts.integer_bugs == frozenset()

    def test_bugs_is_union_of_categories_for_all_inputs(self, bug_flag_names):
        for values in itertools.product([False, True], repeat=len(bug_flag_names)):
            opts = derive_bug_options(dict(zip(bug_flag_names, values)))
            assert opts.need_to_check_bugs() == (
                opts.need_to_check_integer_bugs()
                or opts.need_to_check_memory_bugs()
            )
            assert opts.need_to_check_bugs() == any(values)

    def test_derivation_is_idempotent(self, make_raw):
        raw = make_raw(bug_integer_overflow=True, bug_memory_all=True)
        assert derive_bug_options(raw) == derive_bug_options(raw)

    def test_aggregates_are_not_settable(self):
        opts = BugOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            opts.all_bugs = True  # type: ignore[misc]
        with pytest.raises(TypeError):
            BugOptions(all_integer_bugs=True)  # type: ignore[call-arg]

    def test_replace_recomputes_aggregates(self):
        opts = dataclasses.replace(BugOptions(), integer_all=True)
        assert opts.all_integer_bugs
        assert opts.need_to_check_signedness_error()


class TestCoreOptions:

    def test_deep_debug_implies_debug(self):
        opts = derive_core_options({"deep-debug": True})
        assert opts.debug_mode
        assert opts.deep_debug_mode
        assert not opts.debug

    def test_debug_alone(self):
        opts = derive_core_options({"debug": True})
        assert opts.debug_mode
        assert not opts.deep_debug_mode

    def test_lists_keep_order_and_duplicates(self):
        opts = derive_core_options({
            "clang-option": ["-O0", "-g", "-O0"],
            "opt-option": ["-mem2reg"],
            "include-dir": ["b", "a"],
            "include-file": ["x.h"],
        })
        assert opts.clang_options == ("-O0", "-g", "-O0")
        assert opts.opt_options == ("-mem2reg",)
        assert opts.include_dirs == ("b", "a")
        assert opts.include_files == ("x.h",)

    def test_single_string_is_one_value(self):
        opts = derive_core_options({"clang-option": "-O2"})
        assert opts.clang_options == ("-O2",)

    def test_missing_lists_are_empty(self):
        opts = derive_core_options({})
        assert opts.clang_options == ()
        assert opts.include_files == ()

    def test_print_stage_flags(self):
        opts = derive_core_options({
            "print-normalized-program": True,
            "print-instrumented-program": True,
        })
        assert opts.should_print_stage(Stage.NORMALIZED)
        assert opts.should_print_stage(Stage.INSTRUMENTED)
        assert not opts.should_print_stage(Stage.INPUT)
        assert not opts.should_print_stage(Stage.COMPILED)
        assert not opts.should_print_stage(Stage.OPTIMIZED)

    def test_pass_toggles(self):
        opts = derive_core_options({"disable-optimization": True})
        assert opts.need_normalization()
        assert not opts.need_optimization()

    def test_apply_to_core_flags(self):
        ctx = derive_core_options({
            "deep-debug": True, "disable-printing": True,
        }).apply_to_core_flags()
        assert ctx.debug_mode
        assert ctx.deep_debug_mode
        assert ctx.disable_printing

    def test_options_are_frozen(self):
        opts = CoreOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            opts.debug = True  # type: ignore[misc]


class TestAnalysisOptions:

    def test_from_raw_builds_all_parts(self):
        opts = AnalysisOptions.from_raw({
            "debug": True,
            "assert-alias": True,
            "bug-integer-overflow": True,
        })
        assert opts.core.debug_mode
        assert opts.asserts.need_to_check_aliasing()
        assert opts.bugs.need_to_check_integer_overflow()

    def test_default_plan_skips_instrumentation(self):
        opts = AnalysisOptions.from_raw({})
        assert opts.planned_stages() == [
            Stage.INPUT, Stage.COMPILED, Stage.NORMALIZED, Stage.OPTIMIZED,
        ]
        assert not opts.need_instrumentation()

    def test_bug_checks_need_instrumentation(self):
        opts = AnalysisOptions.from_raw({"bug-all": True})
        assert opts.need_instrumentation()
        assert opts.planned_stages()[-1] is Stage.INSTRUMENTED

    def test_assertions_need_instrumentation(self):
        opts = AnalysisOptions.from_raw({"assert-interval": True})
        assert opts.need_instrumentation()

    def test_disabled_instrumentation_wins(self):
        opts = AnalysisOptions.from_raw({
            "bug-all": True, "instrument": True,
            "disable-instrumentation": True,
        })
        assert not opts.need_instrumentation()
        assert Stage.INSTRUMENTED not in opts.planned_stages()

    def test_disabled_passes_leave_plan(self):
        opts = AnalysisOptions.from_raw({
            "disable-normalization": True,
            "disable-optimization": True,
            "instrument": True,
        })
        assert opts.planned_stages() == [
            Stage.INPUT, Stage.COMPILED, Stage.INSTRUMENTED,
        ]

    def test_to_dict(self):
        opts = AnalysisOptions.from_raw({
            "bug-division-by-zero": True,
            "clang-option": ["-g"],
        })
        data = opts.to_dict()
        assert data["bugs"]["integer"] == ["bug-division-by-zero"]
        assert data["bugs"]["memory_bugs"] is False
        assert data["core"]["clang_options"] == ["-g"]
        assert data["stages"][-1] == "instrumented"


class TestFlagTable:

    def test_names_are_unique(self):
        assert len(FLAG_TABLE) == len(FLAGS)

    def test_list_flags(self):
        lists = {s.name for s in FLAGS if s.kind is FlagKind.LIST}
        assert lists == {"clang-option", "opt-option", "include-dir", "include-file"}

    def test_every_integer_bug_has_a_flag(self):
        for kind in IntegerBug:
            assert kind.value in FLAG_TABLE
            assert hasattr(BugOptions(), kind.attribute)

    def test_dest(self):
        assert FLAG_TABLE["bug-all"].dest == "bug_all"
