from __future__ import annotations

import pytest

from pygenny.generics.exceptions import ImportResolutionError
from pygenny.generics.imports import (
    BuiltinNormalizer,
    GoImportsNormalizer,
    assumed_package_name,
    format_import_block,
    is_standard_library,
    normalizer_named,
    tidy_blank_lines,
)
from pygenny.generics.postprocess import inject_imports, postprocess, rename_package
from pygenny.internals.parser import ImportSpec


@pytest.mark.parametrize(
    ("path", "name"),
    [
        ("fmt", "fmt"),
        ("net/http", "http"),
        ("github.com/mauricelam/genny/generic", "generic"),
        ("github.com/x/go-yaml", "yaml"),
        ("gopkg.in/yaml.v2", "yaml"),
        ("github.com/x/pretty/v3", "pretty"),
    ],
)
def test_assumed_package_name(path: str, name: str):
    assert assumed_package_name(path) == name


def test_standard_library_detection():
    assert is_standard_library("net/http")
    assert not is_standard_library("github.com/x/y")


def test_import_block_groups_and_sorts():
    block = format_import_block([
        ImportSpec("github.com/b/b"),
        ImportSpec("os"),
        ImportSpec("example.com/a"),
        ImportSpec("fmt"),
    ])
    assert block == 'import (\n\t"fmt"\n\t"os"\n\n\t"example.com/a"\n\t"github.com/b/b"\n)'


def test_single_import_is_written_on_one_line():
    assert format_import_block([ImportSpec("fmt", "f")]) == 'import f "fmt"'


def test_tidy_blank_lines():
    assert tidy_blank_lines("\n\nfoo  \n\n\n\nbar\n\n") == "foo\n\nbar\n"


class TestBuiltinNormalizer:
    def test_unused_imports_are_pruned(self):
        src = (
            "package p\n"
            "\n"
            "import (\n"
            '\t"github.com/mauricelam/genny/generic"\n'
            '\t"strings"\n'
            '\t"fmt"\n'
            '\t_ "embed"\n'
            ")\n"
            "\n"
            "func F() { fmt.Println() }\n"
        )
        out = BuiltinNormalizer().normalize("p.go", src)
        assert 'import (\n\t"embed"' not in out
        assert 'import (\n\t_ "embed"\n\t"fmt"\n)\n' in out
        assert "generic" not in out
        assert "strings" not in out

    def test_alias_decides_usage(self):
        src = 'package p\n\nimport (\n\ty "gopkg.in/yaml.v2"\n\t"os"\n)\n\nvar _ = y.Marshal\n'
        out = BuiltinNormalizer().normalize("p.go", src)
        assert 'import y "gopkg.in/yaml.v2"\n' in out
        assert '"os"' not in out

    def test_all_imports_unused(self):
        src = 'package p\n\nimport (\n\t"os"\n)\n\n\nfunc F() {}\n'
        assert BuiltinNormalizer().normalize("p.go", src) == "package p\n\nfunc F() {}\n"

    def test_broken_output_is_an_import_resolution_error(self):
        with pytest.raises(ImportResolutionError) as excinfo:
            BuiltinNormalizer().normalize("p.go", "package p\nfunc F( {\n")
        assert excinfo.value.code == "GE1003"


def test_goimports_missing_executable():
    normalizer = GoImportsNormalizer("pygenny-no-such-goimports")
    with pytest.raises(ImportResolutionError, match="not found"):
        normalizer.normalize("p.go", "package p\n")


def test_normalizer_named():
    assert isinstance(normalizer_named("builtin"), BuiltinNormalizer)
    goimports = normalizer_named("goimports", "/opt/go/bin/goimports")
    assert isinstance(goimports, GoImportsNormalizer)
    assert goimports.executable == "/opt/go/bin/goimports"
    with pytest.raises(ValueError):
        normalizer_named("gofmt")


def test_rename_package():
    assert rename_package("// c\npackage old\n\nfunc f() {}\n", "fresh") == "// c\npackage fresh\n\nfunc f() {}\n"


def test_inject_imports_after_package_line():
    out = inject_imports("package p\nfunc f() {}\n", ["a/b", "c"])
    assert out == 'package p\nimport "a/b"\nimport "c"\nfunc f() {}\n'


def test_postprocess_keeps_injected_imports_that_are_used():
    src = "package p\n\nimport (\n)\n\nvar d pet.Dog\n"
    out = postprocess(src, "p.go", package="animals", imports=["example.com/pet", "example.com/unused"])
    assert out == 'package animals\n\nimport "example.com/pet"\n\nvar d pet.Dog\n'
