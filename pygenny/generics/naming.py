"""Identifier synthesis for specialized code.

A placeholder that stands alone in a type position is replaced by the
concrete type (`typify`). A placeholder inside a larger identifier is
replaced by an identifier-safe word derived from the concrete spec (`wordify`):

    NumberTypeMax  + "int"                  -> IntMax
    PairFirstType  + "Person:person.Person" -> PairPerson
    secretInspect  + "*myType"              -> myTypeInspect
"""
from __future__ import annotations

from typing import Union

from pygenny.generics.bindings import ConcreteSpec


def is_identifier_char(ch: str) -> bool:
    """True for letters, digits and underscore."""
    return ch == "_" or ch.isalnum()


def is_exact_match(text: str, start: int, end: int) -> bool:
    """An occurrence text[start:end] is exact when neither neighbour extends an identifier."""
    before = text[start - 1] if start > 0 else ""
    after = text[end] if end < len(text) else ""
    return not (before and is_identifier_char(before)) and not (after and is_identifier_char(after))


def typify(spec: Union[str, ConcreteSpec]) -> str:
    """Concrete type reference of a spec: the part after `:` if labelled."""
    if not isinstance(spec, ConcreteSpec):
        spec = ConcreteSpec(spec)
    return spec.type_ref


def wordify(spec: Union[str, ConcreteSpec], exported: bool) -> str:
    """Turn a spec into a word for function and type names.

    Stripping rules, applied to the label (or the whole spec when unlabelled):
      - trailing `{` / `}` are removed           (interface{} -> interface)
      - leading `*` / `&` are removed            (*myType     -> myType)
      - every `.` is removed                     (pet.Dog     -> petDog)
    Then the first letter is upper-cased when `exported`, lower-cased otherwise.
    """
    if not isinstance(spec, ConcreteSpec):
        spec = ConcreteSpec(spec)
    word = spec.label.rstrip("{}").lstrip("*&").replace(".", "")
    if not word:
        return word
    first = word[0].upper() if exported else word[0].lower()
    return first + word[1:]
