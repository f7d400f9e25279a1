from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from pygenny.generics.bindings import BindingSet, SourceUnit

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def load_template() -> Callable[[str], SourceUnit]:
    def _load_template(name: str) -> SourceUnit:
        path = FIXTURES_DIR / name
        return SourceUnit(path.name, path.read_text(encoding="utf-8"))

    return _load_template


@pytest.fixture
def bind() -> Callable[..., BindingSet]:
    def _bind(**bindings: str) -> BindingSet:
        return BindingSet(bindings)

    return _bind


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no goimports override in the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PYGENNY_GOIMPORTS", raising=False)
    return tmp_path
