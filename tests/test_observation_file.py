from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from ogtt_risk.model import MeasurementSystem
from ogtt_risk.sources.observation_file import (
    ObservationFileSource,
    ObservationPaths,
    _extract_json_object,
    observation_from_mapping,
)


def _source(path: Path) -> ObservationFileSource:
    return ObservationFileSource(ObservationPaths(root=path))


def test_json_with_form_ids(tmp_path: Path) -> None:
    data = {
        "unitMode": "SI",
        "age": 47,
        "sex": "F",
        "eth": "Asian American",
        "g0": "5.9",
        "i30": 310,
        "a1cUnit": "ifcc",
        "a1c": "41",
        "gdm": True,
        "fdr": "yes",
        "bpMeds": "",
    }
    p = tmp_path / "obs.json"
    p.write_text(json.dumps(data), encoding="utf-8")

    loaded = _source(p).load()

    assert loaded.system is MeasurementSystem.SI
    raw = loaded.raw
    assert raw.age == 47
    assert raw.ethnicity == "Asian American"
    assert raw.glucose_0 == "5.9"
    assert raw.insulin_30 == 310
    assert raw.hba1c_unit == "ifcc"
    assert raw.gestational_diabetes is True
    assert raw.first_degree_relative_t2d is True
    assert raw.pancreatitis is False
    assert raw.bp_medication is None


def test_json_with_field_names_and_no_system(tmp_path: Path) -> None:
    p = tmp_path / "obs.json"
    p.write_text(json.dumps({"glucose_120": 150, "masld": 1}), encoding="utf-8")
    loaded = _source(p).load()
    assert loaded.system is None
    assert loaded.raw.glucose_120 == 150
    assert loaded.raw.masld is True


def test_csv_pairs(tmp_path: Path) -> None:
    p = tmp_path / "obs.csv"
    p.write_text(
        "field,value\nunits,US\ng0,110\ng120,\nsex,M\npcos,no\n", encoding="utf-8"
    )
    loaded = _source(p).load()
    assert loaded.system is MeasurementSystem.US
    assert loaded.raw.glucose_0 == "110"
    assert loaded.raw.glucose_120 is None
    assert loaded.raw.sex == "M"
    assert loaded.raw.pcos is False


def test_csv_without_expected_columns_raises(tmp_path: Path) -> None:
    p = tmp_path / "obs.csv"
    p.write_text("a,b\n1,2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="'field' and 'value'"):
        _source(p).load()


def test_extract_json_object_tolerates_leading_text() -> None:
    assert _extract_json_object('log line\n{"g0": 100}') == {"g0": 100}


def test_non_object_json_raises(tmp_path: Path) -> None:
    p = tmp_path / "list.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError, match="must be an object"):
        _source(p).load()


def test_invalid_json_raises(tmp_path: Path) -> None:
    p = tmp_path / "bad.json"
    p.write_text("not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        _source(p).load()


def test_validate_raises_when_file_missing(tmp_path: Path) -> None:
    missing = tmp_path / "noexiste.json"
    with pytest.raises(FileNotFoundError, match="noexiste"):
        _source(missing).validate()


def test_unknown_system_raises() -> None:
    with pytest.raises(ValueError, match="measurement system"):
        observation_from_mapping({"units": "metric"})


def test_unknown_fields_are_ignored_with_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING):
        loaded = observation_from_mapping({"testDate": "2026-01-01", "hdl": "45"})
    assert loaded.raw.hdl == "45"
    assert "testDate" in caplog.text
