# tests/test_cli.py
"""
Tests for the command-line wiring of the option model.
"""

import argparse
import io
import json

import pytest

from analysis_core import __version__
from analysis_core.cli import (
    EXIT_INFRA,
    EXIT_OK,
    build_parser,
    main,
    new_argument,
    raw_flags_from_mapping,
    raw_flags_from_namespace,
    render,
    resolve_options,
)
from analysis_core.errors import UnknownFlagError
from analysis_core.options import FLAGS, AnalysisOptions, Stage


class TestParser:

    def test_new_argument_uses_long_name(self):
        parser = argparse.ArgumentParser()
        new_argument(parser, "some-flag", action="store_true")
        args = parser.parse_args(["--some-flag"])
        assert args.some_flag is True

    def test_every_flag_has_an_option(self):
        args = build_parser().parse_args([])
        for spec in FLAGS:
            assert hasattr(args, spec.dest)

    def test_defaults(self):
        raw = raw_flags_from_namespace(build_parser().parse_args([]))
        assert raw["bug-all"] is False
        assert raw["clang-option"] == []
        assert set(raw) == {spec.name for spec in FLAGS}

    def test_repeated_list_options_keep_order(self):
        args = build_parser().parse_args([
            "--clang-option=-O0", "--clang-option=-g", "--clang-option=-O0",
            "--include-dir", "inc",
        ])
        raw = raw_flags_from_namespace(args)
        assert raw["clang-option"] == ["-O0", "-g", "-O0"]
        assert raw["include-dir"] == ["inc"]

    def test_division_by_zero_flag(self):
        args = build_parser().parse_args(["--bug-division-by-zero"])
        opts = AnalysisOptions.from_raw(raw_flags_from_namespace(args))
        assert opts.bugs.need_to_check_integer_bugs()
        assert not opts.bugs.need_to_check_memory_bugs()

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])
        assert __version__ in capsys.readouterr().out


class TestRawFlagsFromMapping:

    def test_accepts_both_spellings(self):
        raw = raw_flags_from_mapping({"bug_all": 1, "clang-option": "-g"})
        assert raw == {"bug-all": True, "clang-option": ["-g"]}

    def test_unknown(self):
        with pytest.raises(UnknownFlagError):
            raw_flags_from_mapping({"bogus": True})


class TestResolveOptions:

    def test_profile_then_flags(self, tmp_path):
        profile = tmp_path / "p.sexp"
        profile.write_text('(profile (assert-alias) (clang-option "-O0"))')
        args = build_parser().parse_args([
            "--profile", str(profile), "--clang-option=-g", "--bug-memory-all",
        ])
        opts = resolve_options(args)
        assert opts.asserts.need_to_check_aliasing()
        assert opts.bugs.need_to_check_memory_bugs()
        assert opts.core.clang_options == ("-O0", "-g")


class TestMain:

    def test_text_output(self):
        out = io.StringIO()
        assert main(["--bug-all"], stdout=out) == EXIT_OK
        text = out.getvalue()
        assert "stages: input, compiled, normalized, optimized, instrumented" in text
        assert "memory bugs: True" in text

    def test_text_output_respects_disable_printing(self):
        out = io.StringIO()
        assert main(["--disable-printing"], stdout=out) == EXIT_OK
        assert out.getvalue() == ""

    def test_json_output(self):
        out = io.StringIO()
        assert main(["--format", "json", "--assert-interval"], stdout=out) == EXIT_OK
        data = json.loads(out.getvalue())
        assert data["assertions"] == {"aliasing": False, "interval": True}
        assert data["stages"][-1] == Stage.INSTRUMENTED.value

    def test_bad_profile(self, tmp_path):
        profile = tmp_path / "bad.sexp"
        profile.write_text("(debug")
        out = io.StringIO()
        assert main(["--profile", str(profile)], stdout=out) == EXIT_INFRA
        assert out.getvalue() == ""

    def test_undecodable_profile(self, tmp_path):
        profile = tmp_path / "latin.sexp"
        profile.write_bytes(b'(debug) (clang-option "\xff\xfe")')
        out = io.StringIO()
        assert main(["--profile", str(profile)], stdout=out) == EXIT_INFRA
        assert out.getvalue() == ""

    def test_missing_profile(self, tmp_path):
        out = io.StringIO()
        code = main(["--profile", str(tmp_path / "none.sexp")], stdout=out)
        assert code == EXIT_INFRA


class TestRender:

    def test_json_round_trips_to_dict(self):
        opts = AnalysisOptions.from_raw({"include-file": ["a.h", "b.h"]})
        assert json.loads(render(opts, "json")) == opts.to_dict()

    def test_text_lists(self):
        opts = AnalysisOptions.from_raw({"include-file": ["a.h", "b.h"]})
        assert "include files: a.h, b.h" in render(opts)
