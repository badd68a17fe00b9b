"""Normalización de observaciones crudas a unidades canónicas."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from ogtt_risk import units
from ogtt_risk.model import (
    BpMedication,
    CanonicalObservation,
    Ethnicity,
    Hba1cUnit,
    MeasurementSystem,
    RawNumber,
    RawObservation,
    Sex,
)

logger = logging.getLogger(__name__)

_NUMERIC_RX = re.compile(r"^[0-9]*\.?[0-9]*$")

_SEX_ALIASES: dict[str, Sex] = {
    "m": Sex.M,
    "male": Sex.M,
    "f": Sex.F,
    "female": Sex.F,
}

_E = TypeVar("_E", bound=Enum)


def parse_number(value: RawNumber) -> float | None:
    """Parse a raw entry into a non-negative finite float.

    Text is stripped and thousands separators (commas) removed; anything other
    than digits and one decimal point yields ``None``, as do blanks.

    Args:
        value: Raw entry (text or number).

    Returns:
        Parsed value, or ``None`` when the entry is not a usable number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
        if not math.isfinite(number) or number < 0:
            return None
        return number

    text = str(value).strip().replace(",", "")
    if not text or not _NUMERIC_RX.match(text):
        return None
    try:
        number = float(text)
    except ValueError:
        # "." alone passes the pattern
        return None
    return number if math.isfinite(number) else None


def parse_choice(enum_cls: type[_E], value: object) -> _E | None:
    """Map a raw selection onto ``enum_cls`` (case-insensitive); ``None`` if unknown."""
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    if not text:
        return None
    for member in enum_cls:
        if str(member.value).lower() == text.lower():
            return member
    return None


def parse_sex(value: object) -> Sex | None:
    if isinstance(value, Sex):
        return value
    if value is None:
        return None
    return _SEX_ALIASES.get(str(value).strip().lower())


def parse_ethnicity(value: object) -> Ethnicity | None:
    """Known groups map to their member, any other non-blank text to ``OTHER``."""
    if value is None or not str(value).strip():
        return None
    return parse_choice(Ethnicity, value) or Ethnicity.OTHER


def _convert(
    value: RawNumber,
    system: MeasurementSystem,
    us_to_canonical: Callable[[float], float] | None = None,
    si_to_canonical: Callable[[float], float] | None = None,
) -> float | None:
    number = parse_number(value)
    if number is None:
        return None
    fn = us_to_canonical if system is MeasurementSystem.US else si_to_canonical
    if fn is None:
        return number
    converted = fn(number)
    return converted if math.isfinite(converted) else None


def _hba1c_pct(value: RawNumber, unit: str | None) -> float | None:
    number = parse_number(value)
    if number is None:
        return None
    if parse_choice(Hba1cUnit, unit) is Hba1cUnit.IFCC:
        pct = units.a1c_ifcc_to_percent(number)
        return pct if math.isfinite(pct) else None
    return number


def canonicalize(
    raw: RawObservation, system: MeasurementSystem
) -> CanonicalObservation:
    """Convert a raw observation into canonical units.

    Glucose and lipids end in mg/dL, insulin in pmol/L (US entries in µU/mL are
    multiplied by 6), weight in kg, lengths in cm. HbA1c follows its own unit tag,
    not ``system``. Missing or unparseable fields stay ``None``.

    Args:
        raw: Values as entered.
        system: Measurement system the values were entered in.

    Returns:
        Canonical observation.
    """
    system = MeasurementSystem(system)

    def glucose(value: RawNumber) -> float | None:
        return _convert(value, system, si_to_canonical=units.mmol_l_to_mg_dl)

    def insulin(value: RawNumber) -> float | None:
        return _convert(value, system, us_to_canonical=units.mu_l_to_pmol_l)

    obs = CanonicalObservation(
        age=parse_number(raw.age),
        sex=parse_sex(raw.sex),
        ethnicity=parse_ethnicity(raw.ethnicity),
        weight_kg=_convert(raw.weight, system, us_to_canonical=units.lb_to_kg),
        height_cm=_convert(raw.height, system, us_to_canonical=units.in_to_cm),
        waist_cm=_convert(raw.waist, system, us_to_canonical=units.in_to_cm),
        tg_mg_dl=_convert(
            raw.triglycerides, system, si_to_canonical=units.tg_mmol_l_to_mg_dl
        ),
        hdl_mg_dl=_convert(raw.hdl, system, si_to_canonical=units.hdl_mmol_l_to_mg_dl),
        systolic_bp=parse_number(raw.systolic_bp),
        diastolic_bp=parse_number(raw.diastolic_bp),
        bp_medication=parse_choice(BpMedication, raw.bp_medication),
        hba1c_pct=_hba1c_pct(raw.hba1c, raw.hba1c_unit),
        gestational_diabetes=bool(raw.gestational_diabetes),
        pancreatitis=bool(raw.pancreatitis),
        masld=bool(raw.masld),
        pcos=bool(raw.pcos),
        first_degree_relative_t2d=bool(raw.first_degree_relative_t2d),
        glucose_0=glucose(raw.glucose_0),
        glucose_30=glucose(raw.glucose_30),
        glucose_60=glucose(raw.glucose_60),
        glucose_90=glucose(raw.glucose_90),
        glucose_120=glucose(raw.glucose_120),
        insulin_0=insulin(raw.insulin_0),
        insulin_30=insulin(raw.insulin_30),
        insulin_60=insulin(raw.insulin_60),
        insulin_90=insulin(raw.insulin_90),
        insulin_120=insulin(raw.insulin_120),
    )
    logger.debug("Canonical observation (%s): %s", system.value, obs)
    return obs
