"""
Binding model for template specialization.

A template declares placeholder types (`type KeyType generic.Type`). A
BindingSet maps every placeholder to a ConcreteSpec; a SpecializationRequest
is the ordered list of binding sets to apply to one template.

Type set arguments on the command line describe binding sets compactly:

    "KeyType=string,int ValueType=int"

Whitespace separates placeholders, `,` separates alternatives, and the
cartesian product of the alternatives gives one binding set per combination
(here KeyType=string/ValueType=int and KeyType=int/ValueType=int).
"""
from __future__ import annotations

import io
import itertools
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import IO, Union

from pygenny.generics.exceptions import TemplateReadError, TypeSetError

GENERIC_PACKAGE = "generic"

# Wildcards accepted in type set arguments
BUILTINS = (
    "bool", "byte", "complex128", "complex64", "error", "float32", "float64",
    "int", "int16", "int32", "int64", "int8", "rune", "string",
    "uint", "uint16", "uint32", "uint64", "uint8", "uintptr",
)
NUMBERS = (
    "float32", "float64", "int", "int16", "int32", "int64", "int8",
    "uint", "uint16", "uint32", "uint64", "uint8",
)
WILDCARDS = {"BUILTINS": BUILTINS, "NUMBERS": NUMBERS}


class PlaceholderKind(str, Enum):
    TYPE = "Type"
    NUMBER = "Number"
    OTHER = "other"

    @classmethod
    def from_member(cls, member: str) -> "PlaceholderKind":
        for kind in (cls.TYPE, cls.NUMBER):
            if kind.value == member:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class PlaceholderType:
    """A type the template declares as `generic.Type` or `generic.Number`."""
    name: str
    kind: PlaceholderKind = PlaceholderKind.TYPE

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ConcreteSpec:
    """A concrete type, optionally labelled as `Label:ConcreteType`.

    The label names things built from the placeholder (`PairPersonDog`),
    the concrete type replaces the placeholder in type positions
    (`person.Person`). Without a label the raw text plays both roles.
    """
    raw: str

    @property
    def label(self) -> str:
        head, sep, _ = self.raw.partition(":")
        return head if sep else self.raw

    @property
    def type_ref(self) -> str:
        _, sep, tail = self.raw.partition(":")
        return tail if sep else self.raw

    @property
    def has_label(self) -> bool:
        return ":" in self.raw

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class TypeBinding:
    placeholder: str
    spec: ConcreteSpec

    @classmethod
    def of(cls, placeholder: str, spec: Union[str, ConcreteSpec]) -> "TypeBinding":
        if not isinstance(spec, ConcreteSpec):
            spec = ConcreteSpec(spec)
        return cls(placeholder, spec)


class BindingSet(Mapping[str, ConcreteSpec]):
    """Immutable placeholder → ConcreteSpec mapping, in insertion order."""

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Union[Mapping[str, Union[str, ConcreteSpec]], Iterable[TypeBinding]] = ()):
        if isinstance(bindings, Mapping):
            items = [TypeBinding.of(k, v) for k, v in bindings.items()]
        else:
            items = list(bindings)
        table: dict[str, ConcreteSpec] = {}
        for binding in items:
            table[binding.placeholder] = binding.spec
        self._bindings = table

    def __getitem__(self, placeholder: str) -> ConcreteSpec:
        return self._bindings[placeholder]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __hash__(self) -> int:
        return hash(tuple(self._bindings.items()))

    def __repr__(self) -> str:
        inner = " ".join(f"{k}={v}" for k, v in self._bindings.items())
        return f"BindingSet({inner})"


BindingSetLike = Union[BindingSet, Mapping[str, str]]


def as_binding_set(value: BindingSetLike) -> BindingSet:
    return value if isinstance(value, BindingSet) else BindingSet(value)


@dataclass(frozen=True)
class SpecializationRequest:
    """Binding sets to apply to one template, in output order."""
    binding_sets: tuple[BindingSet, ...]

    @classmethod
    def of(cls, binding_sets: Iterable[BindingSetLike]) -> "SpecializationRequest":
        return cls(tuple(as_binding_set(b) for b in binding_sets))

    def __iter__(self) -> Iterator[BindingSet]:
        return iter(self.binding_sets)

    def __len__(self) -> int:
        return len(self.binding_sets)


@dataclass(frozen=True)
class SourceUnit:
    """Text of one template or generated file. Stages return new units."""
    filename: str
    text: str

    def lines(self) -> list[str]:
        return self.text.splitlines()

    @classmethod
    def read(cls, source: Union["SourceUnit", str, bytes, IO], filename: str = "template.go") -> "SourceUnit":
        """Build a unit from text, bytes or a (seekable) stream.

        Raises:
            TemplateReadError: the bytes are not valid UTF-8.
        """
        if isinstance(source, SourceUnit):
            return source
        if isinstance(source, (str, bytes)):
            data = source
        else:
            if source.seekable():
                source.seek(0, io.SEEK_SET)
            data = source.read()
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise TemplateReadError(filename, str(e)) from e
        return cls(filename, data)


#
# --- Type set arguments
#

def parse_type_sets(text: str) -> list[BindingSet]:
    """Parse a type set argument into binding sets.

    Examples:
        "T=int"                    -> [{T: int}]
        "K=string,int V=int"       -> [{K: string, V: int}, {K: int, V: int}]
        "P=Person:person.Person"   -> [{P: Person:person.Person}]
        "N=NUMBERS"                -> one binding set per numeric builtin
    """
    choices: list[tuple[str, list[str]]] = []
    seen: set[str] = set()
    for part in text.split():
        name, sep, values = part.partition("=")
        if not sep:
            raise TypeSetError(text, f"'{part}' is not of the form Name=Type")
        if not name:
            raise TypeSetError(text, f"'{part}' has no generic type name")
        if name in seen:
            raise TypeSetError(text, f"'{name}' is bound more than once")
        seen.add(name)

        alternatives: list[str] = []
        for value in values.split(","):
            if not value:
                raise TypeSetError(text, f"empty type in '{part}'")
            alternatives.extend(WILDCARDS.get(value, (value,)))
        choices.append((name, alternatives))

    if not choices:
        raise TypeSetError(text, "no types given")

    names = [name for name, _ in choices]
    return [
        BindingSet(dict(zip(names, combo)))
        for combo in itertools.product(*(alts for _, alts in choices))
    ]
