"""Command-line normalization of YAML files."""

from __future__ import annotations

import pytest

from plainyaml.cli import collect_inputs, main


def test_collect_inputs_sorts_yaml_files(tmp_path):
    for name in ["b.yml", "a.yaml", "notes.txt"]:
        (tmp_path / name).write_text("a: b\n", encoding="utf-8")
    assert [path.name for path in collect_inputs(tmp_path)] == ["a.yaml", "b.yml"]


def test_collect_inputs_errors(tmp_path):
    with pytest.raises(FileNotFoundError, match="No .yaml or .yml files"):
        collect_inputs(tmp_path)
    with pytest.raises(FileNotFoundError, match="does not exist"):
        collect_inputs(tmp_path / "missing.yaml")


def test_writes_normalized_file_to_stdout(tmp_path, capsys):
    source = tmp_path / "config.yaml"
    source.write_text("# note\nport:   8080\nitems:\n- a\n", encoding="utf-8")
    assert main([str(source)]) == 0
    assert capsys.readouterr().out == '# note\nport: "8080"\nitems:\n  - a\n'


def test_writes_into_output_directory(tmp_path, capsys):
    source_dir = tmp_path / "in"
    source_dir.mkdir()
    (source_dir / "one.yaml").write_text("a:\n    b: c\n", encoding="utf-8")
    output_dir = tmp_path / "out"
    assert main([str(source_dir), "-o", str(output_dir), "--indent-size", "4"]) == 0
    assert (output_dir / "one.yaml").read_text(encoding="utf-8") == "a:\n    b: c\n"
    assert "Wrote" in capsys.readouterr().out


def test_check_mode(tmp_path, capsys):
    clean = tmp_path / "clean.yaml"
    clean.write_text("a: b\n", encoding="utf-8")
    messy = tmp_path / "messy.yaml"
    messy.write_text("a:    b\n", encoding="utf-8")

    assert main([str(clean), "--check"]) == 0
    assert main([str(tmp_path), "--check"]) == 1
    assert "Would reformat" in capsys.readouterr().out
    assert messy.read_text(encoding="utf-8") == "a:    b\n"


def test_parse_failures_name_the_file(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("key\n  value\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="broken.yaml"):
        main([str(broken)])
