# generics/imports.py
"""
Import normalization of assembled output.

The aggregator emits one import block holding every import any
specialization mentioned, including the `generic` package itself, which is
unused once placeholders are gone. A normalizer turns that into a valid
file:

- BuiltinNormalizer: in-process. Parses with the structural grammar, prunes
  imports the body never qualifies a name with, writes one grouped and
  sorted import block and tidies blank lines.
- GoImportsNormalizer: pipes the source through an external `goimports`
  binary, which can also add missing standard-library imports.

Both raise ImportResolutionError when the source cannot be normalized.
"""
from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from pygenny.generics.exceptions import ImportResolutionError, SourceParseError
from pygenny.internals.parser import ImportSpec, parse_go

logger = logging.getLogger(__name__)


class ImportNormalizer(Protocol):
    def normalize(self, filename: str, source: str) -> str:
        """Return formatted source with imports resolved, or raise ImportResolutionError."""
        ...


_VERSION_ELEMENT = re.compile(r"^v\d+$")
_NOT_IDENTIFIER = re.compile(r"[^\w]")


def assumed_package_name(path: str) -> str:
    """Package name an import path is assumed to provide.

    Same rules goimports applies to packages it cannot load:
        "fmt"                         -> fmt
        "github.com/x/go-yaml"        -> yaml
        "gopkg.in/yaml.v2"            -> yaml
        "github.com/x/pretty/v3"      -> pretty
    """
    elements = [e for e in path.split("/") if e]
    if not elements:
        return ""
    base = elements[-1]
    if _VERSION_ELEMENT.match(base) and len(elements) > 1:
        base = elements[-2]
    if base.startswith("go-"):
        base = base[len("go-"):]
    m = _NOT_IDENTIFIER.search(base)
    if m:
        base = base[:m.start()]
    return base


def is_standard_library(path: str) -> bool:
    return "." not in path.split("/", 1)[0]


def format_import_block(specs: list[ImportSpec]) -> str:
    """One import declaration: stdlib group first, then the rest, each sorted."""
    if not specs:
        return ""
    if len(specs) == 1:
        return f"import {specs[0].render()}"

    std = sorted((s for s in specs if is_standard_library(s.path)), key=lambda s: (s.path, s.name or ""))
    other = sorted((s for s in specs if not is_standard_library(s.path)), key=lambda s: (s.path, s.name or ""))
    lines = ["import ("]
    lines.extend(f"\t{s.render()}" for s in std)
    if std and other:
        lines.append("")
    lines.extend(f"\t{s.render()}" for s in other)
    lines.append(")")
    return "\n".join(lines)


def tidy_blank_lines(source: str) -> str:
    """Strip trailing whitespace, leading blank lines and repeated blank lines."""
    lines = [line.rstrip() for line in source.splitlines()]
    out: list[str] = []
    for line in lines:
        if not line and (not out or not out[-1]):
            continue
        out.append(line)
    while out and not out[-1]:
        out.pop()
    return "\n".join(out) + "\n"


class BuiltinNormalizer:
    """In-process stand-in for goimports: prune, group and sort imports."""

    def normalize(self, filename: str, source: str) -> str:
        try:
            go_file = parse_go(source, filename)
        except SourceParseError as e:
            raise ImportResolutionError(e.detail, filename=filename, span=e.span) from e

        kept: list[ImportSpec] = []
        for spec in go_file.imports:
            if spec in kept:
                continue
            if spec.name in ("_", "."):
                kept.append(spec)
                continue
            name = spec.name or assumed_package_name(spec.path)
            if name in go_file.qualifiers:
                kept.append(spec)
            else:
                logger.debug("dropping unused import %s", spec.render())

        if go_file.import_region is not None:
            start, end = go_file.import_region
            block = format_import_block(kept)
            # Blank lines around the block, collapsed again by tidy_blank_lines
            source = source[:start] + (f"\n{block}\n" if block else "") + source[end:]
        return tidy_blank_lines(source)


class GoImportsNormalizer:
    """Delegates to an external goimports executable."""

    def __init__(self, executable: str = "goimports", timeout: float = 60.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def normalize(self, filename: str, source: str) -> str:
        exe = shutil.which(self.executable)
        if exe is None:
            raise ImportResolutionError(f"'{self.executable}' not found on PATH", filename=filename)

        cmd = [exe, "-srcdir", str(Path(filename).resolve().parent)]
        logger.debug("running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                input=source,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ImportResolutionError(str(e), filename=filename) from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise ImportResolutionError(detail, filename=filename)
        return result.stdout


def normalizer_named(name: str, goimports: str = "goimports") -> ImportNormalizer:
    """Normalizer for a config/CLI name: 'builtin' or 'goimports'."""
    if name == "builtin":
        return BuiltinNormalizer()
    if name == "goimports":
        return GoImportsNormalizer(goimports)
    raise ValueError(f"unknown normalizer: {name!r}")
