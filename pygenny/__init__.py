"""pygenny - generic type specialization for Go source templates."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("pygenny")
    __dev__ = False
except PackageNotFoundError:
    # Source checkout - read from pyproject.toml
    import tomllib
    from pathlib import Path
    try:
        pyproject = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject, "rb") as f:
            __version__ = tomllib.load(f).get("project", {}).get("version", "unknown")
    except (OSError, tomllib.TOMLDecodeError):
        __version__ = "unknown"
    __dev__ = True

from pygenny.generics.bindings import BindingSet, ConcreteSpec, SourceUnit, parse_type_sets
from pygenny.generics.exceptions import (
    GennyError,
    ImportResolutionError,
    MissingBindingError,
    SourceParseError,
)
from pygenny.generics.generate import generate

__all__ = [
    "BindingSet",
    "ConcreteSpec",
    "GennyError",
    "ImportResolutionError",
    "MissingBindingError",
    "SourceParseError",
    "SourceUnit",
    "generate",
    "parse_type_sets",
]
