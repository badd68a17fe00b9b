"""Lectura de una observación cruda desde JSON o CSV (campo,valor)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import pandas as pd

from ogtt_risk.canonical import parse_choice
from ogtt_risk.model import MeasurementSystem, RawObservation
from ogtt_risk.sources.base import DataSource, LoadedObservation, SourcePaths

logger = logging.getLogger(__name__)

# Form ids of the web calculator -> RawObservation fields.
FIELD_ALIASES: dict[str, str] = {
    "eth": "ethnicity",
    "tg": "triglycerides",
    "sbp": "systolic_bp",
    "dbp": "diastolic_bp",
    "bpMeds": "bp_medication",
    "a1c": "hba1c",
    "a1cUnit": "hba1c_unit",
    "gdm": "gestational_diabetes",
    "fdr": "first_degree_relative_t2d",
    **{f"g{t}": f"glucose_{t}" for t in (0, 30, 60, 90, 120)},
    **{f"i{t}": f"insulin_{t}" for t in (0, 30, 60, 90, 120)},
}

SYSTEM_KEYS = ("units", "unitMode", "system")

_BOOL_FIELDS = {
    "gestational_diabetes",
    "pancreatitis",
    "masld",
    "pcos",
    "first_degree_relative_t2d",
}
_TRUE_TEXT = {"1", "true", "yes", "y", "si", "sí", "x", "on"}
_RAW_FIELDS = {f.name for f in fields(RawObservation)}


@dataclass(frozen=True)
class ObservationPaths(SourcePaths):
    """Path of a single observation file."""

    # root: .json or .csv file


class ObservationFileSource(DataSource):
    """Observation reader for JSON objects and two-column CSV files."""

    def load(self) -> LoadedObservation:
        """Parse the observation file.

        Returns:
            Loaded raw observation.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file shape is invalid.
        """
        self.validate()
        path = self._paths.root
        if path.suffix.lower() == ".csv":
            values = _read_csv_pairs(path)
        else:
            values = _read_json_object(path)
        return observation_from_mapping(values)


def observation_from_mapping(values: dict[str, Any]) -> LoadedObservation:
    """Build a raw observation from a field -> value mapping.

    Keys may use the dataclass names or the form ids (``g0``, ``a1cUnit``...).
    Unknown keys are ignored.

    Raises:
        ValueError: If the measurement system value is not US or SI.
    """
    system: MeasurementSystem | None = None
    kwargs: dict[str, Any] = {}
    for key, value in values.items():
        if key in SYSTEM_KEYS:
            system = _parse_system(value)
            continue
        name = FIELD_ALIASES.get(key, key)
        if name not in _RAW_FIELDS:
            logger.warning("Ignoring unknown observation field: %s", key)
            continue
        kwargs[name] = _parse_flag(value) if name in _BOOL_FIELDS else _blank(value)
    return LoadedObservation(raw=RawObservation(**kwargs), system=system)


def _parse_system(value: Any) -> MeasurementSystem | None:
    if value is None or not str(value).strip():
        return None
    system = parse_choice(MeasurementSystem, value)
    if system is None:
        raise ValueError(f"Unknown measurement system: {value!r}")
    return system


def _parse_flag(value: Any) -> bool:
    """Checkbox value: bools as-is, text by truthy words, numbers by non-zero."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int | float):
        return value != 0
    return str(value).strip().lower() in _TRUE_TEXT


def _blank(value: Any) -> Any:
    """Texto vacío -> None."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _extract_json_object(text: str) -> Any:
    """Extract JSON object from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("{")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)


def _read_json_object(path: Path) -> dict[str, Any]:
    raw = _extract_json_object(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("Observation JSON must be an object")
    return raw


def _read_csv_pairs(path: Path) -> dict[str, Any]:
    """Lee un CSV de dos columnas (campo, valor)."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df = df.rename(columns={c: c.strip().lower() for c in df.columns})
    if not {"field", "value"}.issubset(df.columns):
        raise ValueError("Observation CSV must have 'field' and 'value' columns")
    return {
        str(row["field"]).strip(): row["value"]
        for _, row in df.iterrows()
        if str(row["field"]).strip()
    }
