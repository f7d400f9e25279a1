from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from lark import Token, UnexpectedInput


class C:
    """ANSI color/style escape codes."""
    RESET = "\x1b[0m"
    BOLD  = "\x1b[1m"
    DIM   = "\x1b[2m"
    RED   = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN  = "\x1b[36m"
    GRAY  = "\x1b[90m"


@dataclass
class Span:
    line: int
    col: int
    end_line: int
    end_col: int


@dataclass
class Diagnostic:
    kind: str
    code: str
    message: str
    span: Optional[Span] = None
    filename: Optional[str] = None


def span_of(t: Any) -> Optional[Span]:
    """Best-effort source span for a lark token, tree or parse error."""
    if isinstance(t, UnexpectedInput):
        line = getattr(t, "line", None)
        col = getattr(t, "column", None)
        if isinstance(line, int) and isinstance(col, int) and line > 0:
            return Span(line, col, line, col)
        return None
    m = getattr(t, "meta", None)
    if m is not None and not getattr(m, "empty", True):
        return Span(m.line, m.column, m.end_line, m.end_column)
    if isinstance(t, Token):
        line = getattr(t, "line", None)
        col = getattr(t, "column", None)
        if line is not None and col is not None:
            return Span(line, col, t.end_line or line, t.end_column or col)
    return None


def _display_name(filename: str) -> str:
    try:
        rel = Path(filename).resolve().relative_to(Path.cwd())
        return f"./{rel}"
    except (ValueError, OSError):
        return Path(filename).name or filename


class Reporter:
    """Collects diagnostics for one generation run and renders them."""

    def __init__(self, source: Optional[str] = None, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, span: Optional[Span]):
        self.items.append(Diagnostic("error", code, msg, span, filename=self.filename))

    def warn(self, code: str, msg: str, span: Optional[Span]):
        self.items.append(Diagnostic("warning", code, msg, span, filename=self.filename))

    @property
    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.items)

    def exit_code(self) -> int:
        """0 when clean, 1 when only warnings were reported, 2 on errors."""
        if self.has_errors:
            return 2
        if self.has_warnings:
            return 1
        return 0

    def format(self, use_color: bool = True, use_unicode: bool = True) -> str:
        """Render all diagnostics.

        use_color   → ANSI colorize location/kind/markers
        use_unicode → draw the snippet with │ / ╰ guides instead of | and `
        """
        out: List[str] = []
        src_lines = self.source.splitlines() if self.source else None

        for d in self.items:
            name = d.filename or self.filename
            if not name.startswith("<"):
                name = _display_name(name)
            loc = f"{name}:{d.span.line}:{d.span.col}" if d.span else name
            message = d.message if d.message.endswith(".") else f"{d.message}."

            if use_color:
                color = C.RED if d.kind == "error" else C.YELLOW
                head = (f"{C.CYAN}{loc}{C.RESET}: {C.BOLD}{color}{d.kind}{C.RESET} "
                        f"[{C.DIM}{d.code}{C.RESET}]: {message}")
            else:
                head = f"{loc}: {d.kind} [{d.code}]: {message}"
            out.append(head)

            if d.span is None or src_lines is None:
                continue
            idx = d.span.line - 1
            if not 0 <= idx < len(src_lines):
                continue

            line_text = src_lines[idx].expandtabs(4)
            pad = " " * (max(1, d.span.col) - 1)
            bar, corner = ("│", "╰") if use_unicode else ("|", "`")
            caret = "┯" if use_unicode else "^"
            if use_color:
                bar, corner = f"{C.GRAY}{bar}{C.RESET}", f"{C.GRAY}{corner}{C.RESET}"
                caret = f"{C.RED if d.kind == 'error' else C.YELLOW}{caret}{C.RESET}"
            out.append(f"  {bar} {line_text}")
            out.append(f"  {corner} {pad}{caret}")

        return "\n".join(out)

    def print(self, stream=None, use_color: Optional[bool] = None, use_unicode: Optional[bool] = None) -> None:
        """Print diagnostics to `stream` (default: sys.stderr).

        Color and unicode guides are auto-enabled for a TTY unless NO_COLOR,
        NO_UNICODE or TERM=dumb say otherwise.
        """
        import os, sys
        stream = stream or sys.stderr

        is_tty = getattr(stream, "isatty", lambda: False)()
        dumb = os.getenv("TERM") == "dumb"
        if use_color is None:
            use_color = bool(is_tty and os.getenv("NO_COLOR") is None and not dumb)
        if use_unicode is None:
            use_unicode = bool(is_tty and os.getenv("NO_UNICODE") is None and not dumb)

        text = self.format(use_color=use_color, use_unicode=use_unicode)
        if text:
            print(text, file=stream)
