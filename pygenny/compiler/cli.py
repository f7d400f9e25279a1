"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def build_argument_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pygenny",
        description="Generate type-specific Go code from generic templates",
        allow_abbrev=False,
    )
    ap.add_argument("command", nargs="?", choices=["gen"],
                    help="'gen' generates code from the template")
    ap.add_argument("typesets", nargs="?", metavar="TYPESETS",
                    help='Type sets, e.g. "KeyType=string,int ValueType=int"')
    ap.add_argument("-in", "--in", dest="input", metavar="FILE", default=None,
                    help="Template file (default: stdin)")
    ap.add_argument("-out", "--out", dest="output", metavar="FILE", default=None,
                    help="Output file (default: stdout)")
    ap.add_argument("-pkg", "--pkg", dest="package", metavar="NAME", default=None,
                    help="Package name of the generated file")
    ap.add_argument("-imp", "--imp", dest="imports", metavar="PATH", action="append", default=[],
                    help="Import path to add to the generated file (repeatable)")
    ap.add_argument("-tag", "--tag", dest="tag", metavar="TAG", default=None,
                    help="Build tag to strip from the template (// +build TAG)")
    ap.add_argument("--normalizer", choices=["builtin", "goimports"], default=None,
                    help="Import normalizer (default: builtin, or from config)")
    ap.add_argument("--goimports", metavar="PATH", default=None,
                    help="goimports executable used by --normalizer=goimports")
    ap.add_argument("--config", metavar="FILE", default=None,
                    help="Configuration file (default: ./pygenny.toml or [tool.pygenny])")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="Log each generation stage to stderr")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    return ap


def main(argv: list[str] | None = None) -> int:
    """Main generator entry point. Returns 0 on success, 1 with warnings, 2 on errors."""
    args = build_argument_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.version:
        from pygenny.internals.version import print_banner
        print_banner()
        return 0

    if args.command is None or args.typesets is None:
        print('error: usage is: pygenny [flags] gen "KeyType=string,int ValueType=string,int"',
              file=sys.stderr)
        return 2

    from pygenny.compiler.config import load_config
    from pygenny.compiler.pipeline import STDIN_NAME, read_template, run_generation, write_output
    from pygenny.generics.bindings import parse_type_sets
    from pygenny.generics.exceptions import GennyError
    from pygenny.internals.report import Reporter

    reporter = Reporter(filename=args.input if args.input not in (None, "-") else STDIN_NAME)
    try:
        config = load_config(Path(args.config) if args.config else None)
        if args.normalizer:
            config.normalizer = args.normalizer
        if args.goimports:
            config.goimports = args.goimports
        if args.tag is not None:
            config.tag = args.tag

        binding_sets = parse_type_sets(args.typesets)
        unit = read_template(args.input)
    except GennyError as e:
        e.report(reporter)
        reporter.print()
        return 2

    reporter.source = unit.text
    output = run_generation(unit, binding_sets, config, reporter,
                            package=args.package, imports=args.imports)
    if output is None:
        reporter.print()
        return 2

    try:
        write_output(args.output, output)
    except GennyError as e:
        e.report(reporter)

    reporter.print()
    return reporter.exit_code()


if __name__ == "__main__":
    raise SystemExit(main())
