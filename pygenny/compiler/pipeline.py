"""Template file loading, generation and output writing for the CLI."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from pygenny.compiler.config import GeneratorConfig
from pygenny.generics.bindings import BindingSet, SourceUnit
from pygenny.generics.exceptions import (
    GennyError,
    ImportResolutionError,
    OutputWriteError,
    TemplateReadError,
)
from pygenny.generics.imports import normalizer_named
from pygenny.generics.generate import generate
from pygenny.generics.validate import declared_placeholders, unused_bindings
from pygenny.internals import errors as er
from pygenny.internals.report import Reporter

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"


def read_template(path: Optional[str]) -> SourceUnit:
    """Read the template from `path`, or from stdin when it is None or '-'."""
    if path is None or path == "-":
        return SourceUnit.read(sys.stdin.read(), STDIN_NAME)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateReadError(path, getattr(e, "strerror", None) or str(e)) from e
    return SourceUnit(path, text)


def write_output(path: Optional[str], text: str) -> None:
    """Write generated source to `path`, or to stdout when it is None or '-'."""
    if path is None or path == "-":
        sys.stdout.write(text)
        return
    try:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(path, e.strerror or str(e)) from e


def run_generation(
    unit: SourceUnit,
    binding_sets: list[BindingSet],
    config: GeneratorConfig,
    reporter: Reporter,
    *,
    package: Optional[str] = None,
    imports: Optional[list[str]] = None,
) -> Optional[str]:
    """Generate output for the CLI, reporting problems through `reporter`.

    Wraps `generate()` and adds a warning for every bound name the template
    does not declare. Returns None when an error was reported.
    """
    try:
        placeholders = declared_placeholders(unit)
        warned: set[str] = set()
        for binding_set in binding_sets:
            for name in unused_bindings(placeholders, binding_set):
                if name not in warned:
                    warned.add(name)
                    er.emit(reporter, er.ERR.GW1001, None, placeholder=name)

        output = generate(
            unit,
            binding_sets,
            package=package,
            imports=list(config.imports) + list(imports or []),
            strip_tag=config.tag,
            normalizer=normalizer_named(config.normalizer, config.goimports),
        )
    except ImportResolutionError as e:
        # Its span points into the generated text, not the template
        er.emit(reporter, er.ERR[e.code], None, **e.fields)
        return None
    except GennyError as e:
        e.report(reporter)
        return None

    logger.debug("generated %d byte(s) from %s", len(output), unit.filename)
    return output
