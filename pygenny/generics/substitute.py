# generics/substitute.py
"""
Line-oriented rewrite of one template against one binding set.

Each template line goes through:
- interface tracking: `type X interface {` opens a buffered block that is
  emitted when it closes, or dropped whole if it referenced the generic
  namespace (a generic-only interface is vacuous once specialized)
- generic declaration removal: `type T generic.Type` lines are dropped
- identifier substitution: exact placeholder tokens become the concrete
  type, placeholders inside larger identifiers become a wordified label
- comment deferral: a comment line is held until the next emitted line so
  the doc comment of a dropped generic declaration disappears with it

The two buffers are small explicit state machines so the dropping rules can
be tested on their own.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from pygenny.generics.bindings import BindingSet, SourceUnit
from pygenny.generics.naming import is_exact_match, typify, wordify

logger = logging.getLogger(__name__)

GENERIC_MARKERS = ("generic.Type", "generic.Number")
INTERFACE_OPEN = re.compile(r"^\s*type\s+\w+\s+interface\s*\{")


def mentions_generic(line: str) -> bool:
    return any(marker in line for marker in GENERIC_MARKERS)


def is_comment(line: str) -> bool:
    return line.lstrip().startswith("//")


class CommentHold:
    """Holds at most one comment line. States: idle, holding."""

    def __init__(self) -> None:
        self._line: Optional[str] = None

    @property
    def holding(self) -> bool:
        return self._line is not None

    def hold(self, line: str) -> None:
        self._line = line

    def release(self) -> Optional[str]:
        """Hand back the held line (if any) for emission and go idle."""
        line, self._line = self._line, None
        return line

    def discard(self) -> None:
        self._line = None


class InterfaceBuffer:
    """Buffers one interface declaration. States: idle, buffering.

    The block closes when its brace depth returns to zero. If any line of the
    block mentioned the generic namespace the whole block is discarded,
    otherwise it is released verbatim.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._depth = 0
        self._generic = False
        self._buffering = False

    @property
    def buffering(self) -> bool:
        return self._buffering

    def open(self, raw: str, line: str, comment: Optional[str] = None) -> Optional[list[str]]:
        self._lines = [comment] if comment is not None else []
        self._depth = 0
        self._generic = False
        self._buffering = True
        return self.feed(raw, line)

    def feed(self, raw: str, line: str) -> Optional[list[str]]:
        """Add one line. Returns None while open, else the lines to emit."""
        self._depth += raw.count("{") - raw.count("}")
        if mentions_generic(raw):
            self._generic = True
        else:
            self._lines.append(line)

        if self._depth > 0:
            return None
        return self.close()

    def close(self) -> list[str]:
        lines = [] if self._generic else self._lines
        self._lines, self._depth, self._generic, self._buffering = [], 0, False, False
        return lines


class Substituter:
    """Rewrites placeholder occurrences in one line, all placeholders in one pass."""

    def __init__(self, binding_set: BindingSet) -> None:
        self.binding_set = binding_set
        # Longest name first so KeyType wins over Type at the same position
        names = sorted(binding_set, key=len, reverse=True)
        self._pattern = re.compile("|".join(re.escape(n) for n in names)) if names else None

    def __call__(self, line: str) -> str:
        if self._pattern is None:
            return line

        def replace(m: re.Match) -> str:
            placeholder = m.group(0)
            spec = self.binding_set[placeholder]
            if is_exact_match(line, m.start(), m.end()):
                return typify(spec)
            return wordify(spec, exported=placeholder[0].isupper())

        return self._pattern.sub(replace, line)


def specialize_lines(lines: list[str], binding_set: BindingSet) -> list[str]:
    """Rewrite template lines for one binding set."""
    substitute = Substituter(binding_set)
    comments = CommentHold()
    interface = InterfaceBuffer()
    out: list[str] = []

    for raw in lines:
        if interface.buffering:
            released = interface.feed(raw, substitute(raw))
            if released is not None:
                out.extend(released)
            continue

        if INTERFACE_OPEN.match(raw):
            released = interface.open(raw, substitute(raw), comment=comments.release())
            if released is not None:
                out.extend(released)
            continue

        if mentions_generic(raw):
            comments.discard()
            continue

        line = substitute(raw)
        held = comments.release()
        if held is not None:
            out.append(held)
        if is_comment(line):
            comments.hold(line)
            continue
        out.append(line)

    if interface.buffering:
        out.extend(interface.close())
    held = comments.release()
    if held is not None:
        out.append(held)
    return out


def specialize(unit: SourceUnit, binding_set: BindingSet) -> SourceUnit:
    """Produce one specialization of `unit`."""
    logger.debug("specializing %s with %r", unit.filename, binding_set)
    lines = specialize_lines(unit.lines(), binding_set)
    return SourceUnit(unit.filename, "".join(f"{line}\n" for line in lines))
