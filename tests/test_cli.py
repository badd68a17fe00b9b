"""Tests for CLI entrypoints."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ogtt_risk import cli


def _write_input(tmp_path: Path, data: dict[str, object]) -> Path:
    p = tmp_path / "obs.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    return p


def test_parse_args_custom_values() -> None:
    ns = cli.parse_args(
        ["--input", "/tmp/obs.json", "--units", "SI", "--out-dir", "/tmp/out", "--xlsx"]
    )
    assert ns.input == "/tmp/obs.json"
    assert ns.units == "SI"
    assert ns.out_dir == "/tmp/out"
    assert ns.xlsx is True
    assert ns.csv is False


def test_parse_args_rejects_unknown_units() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["--input", "x.json", "--units", "metric"])


def test_main_prints_summary_and_exports(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    src = _write_input(
        tmp_path,
        {"units": "US", "age": 45, "g0": 115, "g60": 170, "g120": 160, "a1c": 6.2},
    )
    out_dir = tmp_path / "salidas"
    monkeypatch.setattr(
        "sys.argv",
        ["prog", "--input", str(src), "--out-dir", str(out_dir), "--xlsx", "--csv"],
    )

    assert cli.main() == 0

    out = capsys.readouterr().out
    assert "Step 3 (High-risk prognostic markers): HIGH RISK" in out
    assert "Age 40–49 years" in out
    assert len(list(out_dir.glob("ogtt_risk_*.xlsx"))) == 1
    assert len(list(out_dir.glob("ogtt_risk_*.csv"))) == 1


def test_main_units_flag_overrides_file(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    src = _write_input(tmp_path, {"units": "US", "g0": "6.0"})
    monkeypatch.setattr("sys.argv", ["prog", "--input", str(src), "--units", "SI"])

    assert cli.main() == 0
    assert "Reasons: FPG 100–125 mg/dL" in capsys.readouterr().out


def test_main_propagates_missing_input(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        "sys.argv", ["prog", "--input", str(tmp_path / "missing.json")]
    )
    with pytest.raises(FileNotFoundError):
        cli.main()
