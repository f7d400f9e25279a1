from __future__ import annotations

from pathlib import Path

import pytest

from pygenny.compiler.config import GeneratorConfig, load_config
from pygenny.generics.exceptions import ConfigError


def test_defaults_without_config_files(isolated_cwd: Path):
    assert load_config() == GeneratorConfig()


def test_pygenny_toml_in_directory(isolated_cwd: Path):
    (isolated_cwd / "pygenny.toml").write_text(
        'normalizer = "goimports"\n'
        'goimports = "/usr/local/bin/goimports"\n'
        'tag = "ignore"\n'
        'imports = ["example.com/pet"]\n',
        encoding="utf-8",
    )
    config = load_config()

    assert config.normalizer == "goimports"
    assert config.goimports == "/usr/local/bin/goimports"
    assert config.tag == "ignore"
    assert config.imports == ["example.com/pet"]
    assert config.source == isolated_cwd / "pygenny.toml"


def test_pyproject_tool_table(isolated_cwd: Path):
    (isolated_cwd / "pyproject.toml").write_text(
        '[project]\nname = "x"\n\n[tool.pygenny]\ntag = "genny"\n',
        encoding="utf-8",
    )
    config = load_config()
    assert config.tag == "genny"
    assert config.source == isolated_cwd / "pyproject.toml"


def test_pyproject_without_tool_table_is_ignored(isolated_cwd: Path):
    (isolated_cwd / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    assert load_config().source is None


def test_pygenny_toml_wins_over_pyproject(isolated_cwd: Path):
    (isolated_cwd / "pygenny.toml").write_text('tag = "a"\n', encoding="utf-8")
    (isolated_cwd / "pyproject.toml").write_text('[tool.pygenny]\ntag = "b"\n', encoding="utf-8")
    assert load_config().tag == "a"


def test_explicit_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("PYGENNY_GOIMPORTS", raising=False)
    path = tmp_path / "custom.toml"
    path.write_text('normalizer = "builtin"\n', encoding="utf-8")
    assert load_config(path).source == path


def test_environment_overrides_goimports(isolated_cwd: Path, monkeypatch: pytest.MonkeyPatch):
    (isolated_cwd / "pygenny.toml").write_text('goimports = "from-file"\n', encoding="utf-8")
    monkeypatch.setenv("PYGENNY_GOIMPORTS", "/from/env/goimports")
    assert load_config().goimports == "/from/env/goimports"


@pytest.mark.parametrize(
    "content",
    [
        'colour = "blue"\n',
        'normalizer = "gofmt"\n',
        "tag = 3\n",
        'imports = "example.com/pet"\n',
        "normalizer = \n",
    ],
)
def test_invalid_config(isolated_cwd: Path, content: str):
    (isolated_cwd / "pygenny.toml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_config()
    assert excinfo.value.code == "GE1007"


def test_missing_explicit_path(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.toml")
