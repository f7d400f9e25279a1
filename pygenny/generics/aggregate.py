"""Merging N specializations of a template into one source file."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from typing import Optional

logger = logging.getLogger(__name__)

HEADER = """

// This file was automatically generated by pygenny.
// Any changes will be lost if this file is regenerated.
// see https://github.com/mauricelam/genny

"""

GENERATOR_DIRECTIVES = (
    "//go:generate genny ",
    "//go:generate $GOPATH/bin/genny ",
    "//go:generate pygenny ",
)

_PACKAGE_LINE = re.compile(r"^package\s")
_IMPORT_LINE = re.compile(r"^import(?=[\s(\"`]|$)")


def unwanted_prefixes(strip_tag: str = "") -> tuple[str, ...]:
    """Line prefixes dropped from every specialization."""
    if not strip_tag:
        return GENERATOR_DIRECTIVES
    return GENERATOR_DIRECTIVES + (f"// +build {strip_tag}", f"//go:build {strip_tag}")


class ImportSet:
    """Insertion-ordered set of normalized import entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: dict[str, None] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: str) -> bool:
        """Add `entry` after normalizing it; False if blank or already present."""
        entry = normalize_import_entry(entry)
        if not entry or entry in self._entries:
            return False
        self._entries[entry] = None
        return True

    def __contains__(self, entry: object) -> bool:
        return isinstance(entry, str) and normalize_import_entry(entry) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ImportSet({list(self._entries)!r})"


def normalize_import_entry(entry: str) -> str:
    """`  f   `fmt`;` -> `f "fmt"`: trimmed, single-spaced, double-quoted."""
    entry = entry.strip().rstrip(";").strip()
    if not entry or entry.startswith("//"):
        return ""
    entry = re.sub(r"`([^`]*)`", r'"\1"', entry)
    return " ".join(entry.split())


def _single_line_imports(line: str) -> list[str]:
    """Entries of `import "x"`, `import a "x"` or `import ( "a"; "b" )`."""
    rest = line.strip()[len("import"):].strip()
    if rest.startswith("(") and rest.endswith(")"):
        return rest[1:-1].split(";")
    return [rest]


def aggregate(outputs: Iterable[str], prefixes: Iterable[str] = GENERATOR_DIRECTIVES) -> str:
    """Concatenate specializations and normalize the result.

    Keeps the first package clause, folds every import (block or single
    line) into one de-duplicated block in first-seen order, and drops lines
    starting with any of `prefixes`.
    """
    prefixes = tuple(prefixes)
    package_line: Optional[str] = None
    imports = ImportSet()
    body: list[str] = []
    inside_import_block = False
    specializations = 0

    for output in outputs:
        specializations += 1
        for line in output.splitlines():
            if inside_import_block:
                stripped = line.strip()
                if stripped.endswith(")"):
                    imports.add(stripped[:-1])
                    inside_import_block = False
                else:
                    imports.add(stripped)
                continue

            if _PACKAGE_LINE.match(line):
                if package_line is None:
                    package_line = line.rstrip()
                continue

            if _IMPORT_LINE.match(line):
                if line.rstrip().endswith("("):
                    inside_import_block = True
                else:
                    for entry in _single_line_imports(line):
                        imports.add(entry)
                continue

            if line.startswith(prefixes):
                continue

            body.append(line)

    logger.debug("aggregated %d specialization(s): %d import(s), %d body line(s)",
                 specializations, len(imports), len(body))

    parts = [HEADER]
    if package_line is not None:
        parts.append(f"{package_line}\n")
    parts.append("import (\n")
    parts.extend(f"\t{entry}\n" for entry in imports)
    parts.append(")\n")
    parts.extend(f"{line}\n" for line in body)
    return "".join(parts)
