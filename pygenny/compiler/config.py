"""Generator configuration (pygenny.toml or [tool.pygenny]) loading and validation."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pygenny.generics.exceptions import ConfigError

CONFIG_NAME = "pygenny.toml"
PYPROJECT_NAME = "pyproject.toml"
ENV_GOIMPORTS = "PYGENNY_GOIMPORTS"
NORMALIZERS = ("builtin", "goimports")


@dataclass
class GeneratorConfig:
    normalizer: str = "builtin"
    goimports: str = "goimports"
    tag: str = ""
    imports: list[str] = field(default_factory=list)
    source: Optional[Path] = None


def load_config(path: Optional[Path] = None, directory: Optional[Path] = None) -> GeneratorConfig:
    """Load generator settings.

    An explicit `path` is read as a pygenny.toml file, or as a pyproject.toml
    when it has that name. Otherwise `directory` (default: cwd) is searched
    for pygenny.toml, then for a [tool.pygenny] table in pyproject.toml.
    The PYGENNY_GOIMPORTS environment variable overrides `goimports`.
    """
    if path is not None:
        config = _load_file(path)
    else:
        directory = directory or Path.cwd()
        config = GeneratorConfig()
        for candidate in (directory / CONFIG_NAME, directory / PYPROJECT_NAME):
            if candidate.is_file():
                loaded = _load_file(candidate)
                if loaded.source is not None:
                    config = loaded
                    break

    env_goimports = os.environ.get(ENV_GOIMPORTS)
    if env_goimports:
        config.goimports = env_goimports
    return config


def _load_file(path: Path) -> GeneratorConfig:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(str(path), e.strerror or str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(path), str(e)) from e

    if path.name == PYPROJECT_NAME:
        table = data.get("tool", {}).get("pygenny")
        if table is None:
            return GeneratorConfig()
    else:
        table = data
    return _parse_config(table, path)


def _parse_config(table: dict, path: Path) -> GeneratorConfig:
    config = GeneratorConfig(source=path)
    for key, value in table.items():
        if key == "normalizer":
            if value not in NORMALIZERS:
                raise ConfigError(str(path), f"normalizer must be one of {', '.join(NORMALIZERS)}, got {value!r}")
            config.normalizer = value
        elif key in ("goimports", "tag"):
            if not isinstance(value, str):
                raise ConfigError(str(path), f"'{key}' must be a string")
            setattr(config, key, value)
        elif key == "imports":
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(str(path), "'imports' must be a list of strings")
            config.imports = list(value)
        else:
            raise ConfigError(str(path), f"unknown key '{key}'")
    return config
