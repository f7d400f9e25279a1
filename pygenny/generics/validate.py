"""Template validation: every declared placeholder must be bound."""
from __future__ import annotations

from pygenny.generics.bindings import (
    GENERIC_PACKAGE,
    BindingSet,
    PlaceholderKind,
    PlaceholderType,
    SourceUnit,
)
from pygenny.generics.exceptions import MissingBindingError
from pygenny.internals.parser import GoFile, parse_go


def placeholders_of(go_file: GoFile) -> list[PlaceholderType]:
    """Placeholder types declared by an already parsed file, in declaration order."""
    found: list[PlaceholderType] = []
    for spec in go_file.type_specs:
        if spec.selector is None or spec.selector[0] != GENERIC_PACKAGE:
            continue
        found.append(PlaceholderType(spec.name, PlaceholderKind.from_member(spec.selector[1])))
    return found


def declared_placeholders(unit: SourceUnit) -> list[PlaceholderType]:
    """Parse `unit` and list the types it declares in the generic namespace.

    Raises:
        SourceParseError: the unit is not structurally valid Go.
    """
    return placeholders_of(parse_go(unit.text, unit.filename))


def check_coverage(placeholders: list[PlaceholderType], binding_set: BindingSet) -> None:
    """Raise MissingBindingError for the first placeholder `binding_set` does not bind."""
    for placeholder in placeholders:
        if placeholder.name not in binding_set:
            raise MissingBindingError(placeholder.name)


def validate_bindings(unit: SourceUnit, binding_set: BindingSet) -> list[PlaceholderType]:
    """Check that `binding_set` covers every placeholder of `unit`.

    Returns the declared placeholders so callers need not parse twice.
    """
    placeholders = declared_placeholders(unit)
    check_coverage(placeholders, binding_set)
    return placeholders


def unused_bindings(placeholders: list[PlaceholderType], binding_set: BindingSet) -> list[str]:
    """Bound names the template never declares as generic types."""
    declared = {p.name for p in placeholders}
    return [name for name in binding_set if name not in declared]
