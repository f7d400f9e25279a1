"""Lark parser setup and Go file structure extraction."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional

from lark import Lark, Token, Tree, UnexpectedInput

from pygenny.generics.exceptions import SourceParseError
from pygenny.internals.report import Span, span_of
from pygenny.internals.semicolons import GoSemicolonInserter

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"


@lru_cache(maxsize=1)
def _go_parser() -> Lark:
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        lexer="basic",
        postlex=GoSemicolonInserter(),
        maybe_placeholders=False,
    )


@dataclass(frozen=True)
class ImportSpec:
    path: str
    name: Optional[str] = None  # alias, "_" or "."

    def render(self) -> str:
        if self.name:
            return f'{self.name} "{self.path}"'
        return f'"{self.path}"'


@dataclass(frozen=True)
class TypeSpec:
    name: str
    alias: bool
    selector: Optional[tuple[str, str]]  # ("generic", "Type") for `generic.Type`
    span: Optional[Span] = None


@dataclass
class GoFile:
    """Declaration skeleton of one Go source file."""
    package: str
    imports: list[ImportSpec] = field(default_factory=list)
    import_region: Optional[tuple[int, int]] = None  # [start, end) offsets of all import decls
    type_specs: list[TypeSpec] = field(default_factory=list)
    qualifiers: set[str] = field(default_factory=set)


def iter_tokens(tree: Tree) -> Iterator[Token]:
    """Yield the tokens under `tree` in source order."""
    for child in tree.children:
        if isinstance(child, Tree):
            yield from iter_tokens(child)
        else:
            yield child


def improve_parse_error(e: UnexpectedInput) -> str:
    """First line of a lark error, without the trailing context dump."""
    text = str(e).strip()
    first = text.splitlines()[0] if text else type(e).__name__
    return re.sub(r"\s+", " ", first).rstrip(".")


def parse_tree(src: str, filename: str = "<input>") -> Tree:
    """Parse Go source into a lark tree, raising SourceParseError on failure."""
    try:
        return _go_parser().parse(src)
    except UnexpectedInput as e:
        raise SourceParseError(improve_parse_error(e), filename=filename, span=span_of(e)) from e


def parse_go(src: str, filename: str = "<input>") -> GoFile:
    """Parse Go source and extract its package, imports, type specs and used qualifiers."""
    tree = parse_tree(src, filename)
    go_file = GoFile(package="")
    region_start: Optional[int] = None
    region_end: Optional[int] = None

    for node in tree.children:
        if not isinstance(node, Tree):
            continue
        if node.data == "package_clause":
            go_file.package = node.children[1].value
        elif node.data == "import_decl":
            tokens = list(iter_tokens(node))
            if region_start is None:
                region_start = tokens[0].start_pos
            region_end = tokens[-1].end_pos
            go_file.imports.extend(_import_spec(s) for s in node.children
                                   if isinstance(s, Tree) and s.data == "import_spec")
        else:
            if node.data == "type_decl":
                go_file.type_specs.extend(_type_spec(s) for s in node.children
                                          if isinstance(s, Tree) and s.data == "type_spec")
            go_file.qualifiers.update(_qualifiers(node))

    if region_start is not None and region_end is not None:
        go_file.import_region = (region_start, region_end)
    return go_file


def _import_spec(spec: Tree) -> ImportSpec:
    tokens = list(spec.children)
    path_tok = tokens[-1]
    name = tokens[0].value if len(tokens) > 1 else None
    return ImportSpec(path=path_tok.value[1:-1], name=name)


def _type_spec(spec: Tree) -> TypeSpec:
    name_tok = spec.children[0]
    rest = list(spec.children[1:])
    alias = bool(rest) and isinstance(rest[0], Token) and rest[0].type == "EQUAL"
    if alias:
        rest = rest[1:]

    selector = None
    if (len(rest) == 3 and all(isinstance(t, Token) for t in rest)
            and [t.type for t in rest] == ["NAME", "DOT", "NAME"]):
        selector = (rest[0].value, rest[2].value)
    return TypeSpec(name=name_tok.value, alias=alias, selector=selector, span=span_of(name_tok))


def _qualifiers(decl: Tree) -> set[str]:
    """Names used as `name.` anywhere inside a declaration."""
    used: set[str] = set()
    prev: Optional[Token] = None
    for tok in iter_tokens(decl):
        if tok.type == "DOT" and prev is not None and prev.type == "NAME":
            used.add(prev.value)
        prev = tok
    return used
