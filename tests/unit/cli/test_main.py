"""Unit tests for the rigbind CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rigbind.cli.main import build_arg_parser, main


@pytest.fixture
def catalog_file(tmp_path: Path, raw_catalog: dict) -> Path:
    path = tmp_path / "rig.json"
    path.write_text(json.dumps(raw_catalog))
    return path


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args([])


def test_normalize(capsys) -> None:
    assert main(["normalize", "Intensity", "wibble"]) == 0

    out = capsys.readouterr().out
    assert "Intensity" in out
    assert "dimmer" in out


def test_resolve_groups(catalog_file: Path, capsys) -> None:
    code = main(["resolve", "--catalog", str(catalog_file), "--mode", "groups", "--groups", "G2"])

    out = capsys.readouterr().out
    assert code == 0
    assert "F3" in out
    assert "goboRotation" in out
    assert "F1" not in out


def test_resolve_empty_selection(catalog_file: Path, capsys) -> None:
    assert main(["resolve", "--catalog", str(catalog_file)]) == 0

    assert "no fixtures" in capsys.readouterr().out


def test_resolve_missing_catalog(tmp_path: Path, capsys) -> None:
    assert main(["resolve", "--catalog", str(tmp_path / "missing.json")]) == 1

    assert "not found" in capsys.readouterr().out


def test_track(capsys) -> None:
    assert main(["track", "--shape", "square", "--samples", "5"]) == 0

    out = capsys.readouterr().out
    assert "square track" in out
    assert "25.00" in out
    assert "75.00" in out


def test_bindings_reports_collisions(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bindings.json"
    path.write_text(
        json.dumps(
            {
                "version": "1.0.0",
                "midiMappings": {
                    "pan": {"channel": 0, "controller": 7},
                    "tilt": {"channel": 0, "controller": 7},
                },
            }
        )
    )

    assert main(["bindings", str(path)]) == 0

    out = capsys.readouterr().out
    assert "0:cc:7" in out
    assert "midi:0:cc:7 is bound to pan, tilt" in out


def test_bindings_invalid_file(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bindings.json"
    path.write_text(json.dumps({"midiMappings": {}}))

    assert main(["bindings", str(path)]) == 1
    assert "ERROR" in capsys.readouterr().out
