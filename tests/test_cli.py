from __future__ import annotations

import io
import re
from pathlib import Path

import pytest

from pygenny.compiler.cli import main


def test_generate_to_stdout(isolated_cwd, fixtures_dir, capsys):
    code = main(["-in", str(fixtures_dir / "numbers.go"), "gen", "NumberType=int,float64"])
    captured = capsys.readouterr()

    assert code == 0
    assert "func IntMax(a, b int) int {" in captured.out
    assert "func Float64Max(a, b float64) float64 {" in captured.out
    assert captured.err == ""


def test_generate_to_file(isolated_cwd, fixtures_dir, capsys):
    out = isolated_cwd / "gen" / "numbers_gen.go"
    code = main(["-in", str(fixtures_dir / "numbers.go"), "-out", str(out), "-pkg", "maths",
                 "gen", "NumberType=int"])

    assert code == 0
    assert capsys.readouterr().out == ""
    text = out.read_text(encoding="utf-8")
    assert "package maths\n" in text
    assert "func IntMax(a, b int) int {" in text


def test_template_from_stdin(isolated_cwd, fixtures_dir, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO((fixtures_dir / "numbers.go").read_text(encoding="utf-8")))
    assert main(["gen", "NumberType=uint8"]) == 0
    assert "func Uint8Max(a, b uint8) uint8 {" in capsys.readouterr().out


def test_double_dash_flags_and_imports(isolated_cwd, fixtures_dir, capsys):
    code = main([
        "--in=" + str(fixtures_dir / "pair.go"),
        "-imp", "example.com/person",
        "-imp", "example.com/pet",
        "gen", "FirstType=Person:person.Person SecondType=Dog:pet.Dog",
    ])
    out = capsys.readouterr().out

    assert code == 0
    assert '\t"example.com/person"\n\t"example.com/pet"\n' in out
    assert "type PairPersonDog struct {" in out


def test_missing_binding_fails_without_output(isolated_cwd, fixtures_dir, capsys):
    code = main(["-in", str(fixtures_dir / "pair.go"), "gen", "FirstType=int"])
    captured = capsys.readouterr()

    assert code == 2
    assert captured.out == ""
    assert "[GE1002]" in captured.err
    assert "SecondType" in captured.err


def test_unused_binding_is_a_warning(isolated_cwd, fixtures_dir, capsys):
    code = main(["-in", str(fixtures_dir / "numbers.go"), "gen", "NumberType=int Extra=string"])
    captured = capsys.readouterr()

    assert code == 1
    assert "func IntMax" in captured.out
    assert "warning [GW1001]" in captured.err
    assert "'Extra'" in captured.err


def test_invalid_type_set(isolated_cwd, fixtures_dir, capsys):
    assert main(["-in", str(fixtures_dir / "numbers.go"), "gen", "NumberType"]) == 2
    assert "[GE1004]" in capsys.readouterr().err


def test_unreadable_template(isolated_cwd, capsys):
    assert main(["-in", str(isolated_cwd / "absent.go"), "gen", "T=int"]) == 2
    assert "[GE1005]" in capsys.readouterr().err


def test_parse_error_points_at_template(isolated_cwd, capsys):
    template = isolated_cwd / "broken.go"
    template.write_text("package p\n\nfunc f( {\n", encoding="utf-8")

    assert main(["-in", str(template), "gen", "T=int"]) == 2
    err = capsys.readouterr().err
    assert "./broken.go:" in err
    assert "[GE1001]" in err


def test_config_file_supplies_strip_tag(isolated_cwd, fixtures_dir, capsys):
    (isolated_cwd / "pygenny.toml").write_text('tag = "ignore"\n', encoding="utf-8")
    assert main(["-in", str(fixtures_dir / "queue.go"), "gen", "Something=int"]) == 0
    assert "+build" not in capsys.readouterr().out


def test_command_line_tag_overrides_config(isolated_cwd, fixtures_dir, capsys):
    (isolated_cwd / "pygenny.toml").write_text('tag = "other"\n', encoding="utf-8")
    assert main(["-in", str(fixtures_dir / "queue.go"), "-tag", "ignore", "gen", "Something=int"]) == 0
    assert "+build" not in capsys.readouterr().out


def test_invalid_config_file(isolated_cwd, fixtures_dir, capsys):
    (isolated_cwd / "pygenny.toml").write_text('colour = "blue"\n', encoding="utf-8")
    assert main(["-in", str(fixtures_dir / "numbers.go"), "gen", "NumberType=int"]) == 2
    assert "[GE1007]" in capsys.readouterr().err


def test_missing_goimports(isolated_cwd, fixtures_dir, capsys):
    code = main(["-in", str(fixtures_dir / "numbers.go"), "--normalizer", "goimports",
                 "--goimports", "pygenny-no-such-goimports", "gen", "NumberType=int"])
    captured = capsys.readouterr()

    assert code == 2
    assert captured.out == ""
    assert "[GE1003]" in captured.err


def test_usage_error_without_type_sets(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().err


def test_unknown_command():
    with pytest.raises(SystemExit) as excinfo:
        main(["get", "T=int"])
    assert excinfo.value.code == 2


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("pygenny ")


def test_write_failure(isolated_cwd: Path, fixtures_dir, capsys):
    blocker = isolated_cwd / "file"
    blocker.write_text("", encoding="utf-8")

    code = main(["-in", str(fixtures_dir / "numbers.go"), "-out", str(blocker / "out.go"),
                 "gen", "NumberType=int"])
    assert code == 2
    assert "[GE1006]" in capsys.readouterr().err


def test_import_failure_is_not_located_in_template(isolated_cwd, fixtures_dir, capsys):
    code = main(["-in", str(fixtures_dir / "numbers.go"), "gen", "NumberType=int))"])
    err = capsys.readouterr().err

    assert code == 2
    assert "[GE1003]" in err
    assert re.search(r"numbers\.go:\d", err) is None
    assert "\n  |" not in err


def test_stdin_uses_one_name_in_location_and_message(isolated_cwd, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("package p\n\nfunc f( {\n"))
    assert main(["gen", "T=int"]) == 2
    err = capsys.readouterr().err
    assert err.startswith("<stdin>:3:")
    assert "cannot parse <stdin>:" in err
