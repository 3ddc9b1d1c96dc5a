#!/usr/bin/env python3
"""analysis_core/cli.py — command-line wiring for the option model.

Every flag of :data:`analysis_core.options.FLAGS` is exposed as a long option
of the same name.  Tools of the pipeline build their parser with
:func:`build_parser` (adding their own positional arguments) and turn the
parsed namespace into raw flags with :func:`raw_flags_from_namespace`.

Usage examples
--------------
    # Show the configuration derived from a set of flags
    analysis-core --bug-all --clang-option=-O0 --clang-option=-g

    # Start from a profile, then add flags on top of it
    analysis-core --profile nightly.sexp --deep-debug --format json

Exit codes
----------
    0   Success.
    2   Infrastructure failure (unreadable or malformed profile).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, TextIO

from analysis_core import __version__
from analysis_core.context import OutputContext
from analysis_core.errors import AnalysisCoreError, UnknownFlagError
from analysis_core.options import (
    FLAG_TABLE,
    FLAGS,
    AnalysisOptions,
    FlagKind,
    FlagSpec,
    RawValue,
)
from analysis_core.printing import print_to_comma_separated_string
from analysis_core.profile import load_profile, merge_raw_flags

_log = logging.getLogger("analysis_core")

EXIT_OK: int = 0
EXIT_INFRA: int = 2

_GROUP_TITLES = {
    "core": "core options",
    "printing": "printing of intermediate programs",
    "assertions": "assertion checking",
    "bugs": "bug checking",
}


# ===========================================================================
# Parser construction
# ===========================================================================

def new_argument(
    parser: Any, name: str, **kwargs: Any
) -> argparse.Action:
    """Add a long option ``--<name>`` whose destination mirrors *name*."""
    kwargs.setdefault("dest", name.replace("-", "_"))
    return parser.add_argument(f"--{name}", **kwargs)


def add_flag(parser: Any, spec: FlagSpec) -> argparse.Action:
    """Add the option declared by *spec*."""
    if spec.kind is FlagKind.BOOL:
        return new_argument(parser, spec.name, action="store_true",
                            help=spec.help)
    return new_argument(
        parser, spec.name, action="append", default=[],
        metavar=spec.metavar, help=spec.help,
    )


def add_flags(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add every declared flag to *parser*, one argument group per area."""
    groups: Dict[str, Any] = {}
    for spec in FLAGS:
        if spec.group not in groups:
            groups[spec.group] = parser.add_argument_group(
                _GROUP_TITLES.get(spec.group, spec.group)
            )
        add_flag(groups[spec.group], spec)
    return parser


def build_parser(prog: str = "analysis-core") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Resolve the options of an analysis pipeline run.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--profile", metavar="FILE", default=None,
        help="S-expression options profile applied before the flags",
    )
    parser.add_argument(
        "--format", choices=["text", "json"], default="text",
        help="Output format of the resolved configuration",
    )
    return add_flags(parser)


def raw_flags_from_namespace(args: argparse.Namespace) -> Dict[str, RawValue]:
    """Collect the declared flags of *args* into a raw flag mapping."""
    raw: Dict[str, RawValue] = {}
    for spec in FLAGS:
        value = getattr(args, spec.dest)
        raw[spec.name] = list(value) if spec.kind is FlagKind.LIST else bool(value)
    return raw


def raw_flags_from_mapping(values: Dict[str, Any]) -> Dict[str, RawValue]:
    """
    Validate flag names of an already-parsed mapping.

    Accepts both ``bug-all`` and ``bug_all`` spellings.
    """
    raw: Dict[str, RawValue] = {}
    for key, value in values.items():
        name = key.replace("_", "-")
        spec = FLAG_TABLE.get(name)
        if spec is None:
            raise UnknownFlagError(key)
        if spec.kind is FlagKind.LIST:
            raw[name] = [value] if isinstance(value, str) else list(value)
        else:
            raw[name] = bool(value)
    return raw


# ===========================================================================
# Output
# ===========================================================================

def _format_text(opts: AnalysisOptions) -> str:
    data = opts.to_dict()
    core = data["core"]
    lines = [
        f"stages: {print_to_comma_separated_string(data['stages'])}",
        f"debug: {core['debug_mode']} (deep: {core['deep_debug_mode']})",
        f"printing disabled: {core['disable_printing']}",
        f"clang options: {print_to_comma_separated_string(core['clang_options'])}",
        f"opt options: {print_to_comma_separated_string(core['opt_options'])}",
        f"include dirs: {print_to_comma_separated_string(core['include_dirs'])}",
        f"include files: {print_to_comma_separated_string(core['include_files'])}",
        f"print stages: {print_to_comma_separated_string(core['print_stages'])}",
        f"alias assertions: {data['assertions']['aliasing']}",
        f"interval assertions: {data['assertions']['interval']}",
        f"integer bugs: {print_to_comma_separated_string(data['bugs']['integer'])}",
        f"memory bugs: {data['bugs']['memory_bugs']}",
    ]
    return "\n".join(lines)


def render(opts: AnalysisOptions, fmt: str = "text") -> str:
    if fmt == "json":
        return json.dumps(opts.to_dict(), indent=2)
    return _format_text(opts)


# ===========================================================================
# Entry point
# ===========================================================================

def resolve_options(args: argparse.Namespace) -> AnalysisOptions:
    """Apply the profile (if any) and the command-line flags."""
    raw = raw_flags_from_namespace(args)
    if args.profile:
        raw = merge_raw_flags(load_profile(args.profile), raw)
    return AnalysisOptions.from_raw(raw)


def main(
    argv: Optional[Sequence[str]] = None, stdout: Optional[TextIO] = None
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        opts = resolve_options(args)
    except AnalysisCoreError as exc:
        OutputContext().configure_logging()
        _log.error("%s", exc)
        return EXIT_INFRA

    ctx = opts.apply_to_core_flags()
    ctx.configure_logging()
    _log.debug("Resolved stages: %s", [s.value for s in opts.planned_stages()])

    out = stdout if stdout is not None else sys.stdout
    if args.format == "json":
        # machine-readable output ignores --disable-printing
        out.write(render(opts, "json") + "\n")
    else:
        ctx.print(render(opts, "text"), stream=out)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())


__all__: List[str] = [
    "EXIT_OK",
    "EXIT_INFRA",
    "new_argument",
    "add_flag",
    "add_flags",
    "build_parser",
    "raw_flags_from_namespace",
    "raw_flags_from_mapping",
    "render",
    "resolve_options",
    "main",
]
