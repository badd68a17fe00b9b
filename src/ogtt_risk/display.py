"""Redondeo de pantalla y conversión de valores al cambiar de sistema de unidades."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import replace

from ogtt_risk import units
from ogtt_risk.canonical import parse_choice, parse_number
from ogtt_risk.model import Hba1cUnit, MeasurementSystem, RawNumber, RawObservation

_GLUCOSE_FIELDS = ("glucose_0", "glucose_30", "glucose_60", "glucose_90", "glucose_120")
_INSULIN_FIELDS = ("insulin_0", "insulin_30", "insulin_60", "insulin_90", "insulin_120")

# field -> (US->SI, decimals, SI->US, decimals)
_Rule = tuple[Callable[[float], float], int, Callable[[float], float], int]

_RULES: dict[str, _Rule] = {
    "weight": (units.lb_to_kg, 1, units.kg_to_lb, 1),
    "height": (units.in_to_cm, 1, units.cm_to_in, 1),
    "waist": (units.in_to_cm, 1, units.cm_to_in, 1),
    "triglycerides": (units.tg_mg_dl_to_mmol_l, 2, units.tg_mmol_l_to_mg_dl, 1),
    "hdl": (units.hdl_mg_dl_to_mmol_l, 2, units.hdl_mmol_l_to_mg_dl, 1),
    **{
        name: (units.mg_dl_to_mmol_l, 1, units.mmol_l_to_mg_dl, 1)
        for name in _GLUCOSE_FIELDS
    },
    **{
        name: (units.mu_l_to_pmol_l, 1, units.pmol_l_to_mu_l, 1)
        for name in _INSULIN_FIELDS
    },
}


def round_half_up(value: float | None, decimals: int = 2) -> float | None:
    """Round half up for display (``floor(x * 10**d + 0.5) / 10**d``).

    Returns ``None`` for ``None``, NaN or infinite input, and when scaling
    overflows.
    """
    if value is None or not math.isfinite(value):
        return None
    factor = 10.0**decimals
    scaled = value * factor
    if not math.isfinite(scaled):
        return None
    return math.floor(scaled + 0.5) / factor


def _convert_field(
    value: RawNumber, fn: Callable[[float], float], decimals: int
) -> RawNumber:
    number = parse_number(value)
    if number is None:
        return value
    rounded = round_half_up(fn(number), decimals)
    return value if rounded is None else rounded


def convert_displayed_values(
    raw: RawObservation,
    old_system: MeasurementSystem | None,
    new_system: MeasurementSystem | None,
) -> RawObservation:
    """Rewrite on-screen values so they stay consistent after a unit toggle.

    Must run before the next evaluation under ``new_system``. HbA1c follows
    the new system: percent becomes IFCC when switching to SI, IFCC becomes
    percent when switching to US. Unparseable entries are left as they are.

    Args:
        raw: Values as currently displayed under ``old_system``.
        old_system: Previous measurement system.
        new_system: Newly selected measurement system.

    Returns:
        New raw observation with converted values (``raw`` itself when nothing
        changes).
    """
    if old_system is None or new_system is None:
        return raw
    old_system = MeasurementSystem(old_system)
    new_system = MeasurementSystem(new_system)
    if old_system is new_system:
        return raw

    to_si = new_system is MeasurementSystem.SI
    changes: dict[str, RawNumber | str] = {}
    for name, (us_to_si, si_dec, si_to_us, us_dec) in _RULES.items():
        fn, decimals = (us_to_si, si_dec) if to_si else (si_to_us, us_dec)
        changes[name] = _convert_field(getattr(raw, name), fn, decimals)

    unit = parse_choice(Hba1cUnit, raw.hba1c_unit) or Hba1cUnit.PERCENT
    if to_si and unit is Hba1cUnit.PERCENT:
        changes["hba1c"] = _convert_field(raw.hba1c, units.a1c_percent_to_ifcc, 0)
        changes["hba1c_unit"] = Hba1cUnit.IFCC.value
    elif not to_si and unit is Hba1cUnit.IFCC:
        changes["hba1c"] = _convert_field(raw.hba1c, units.a1c_ifcc_to_percent, 1)
        changes["hba1c_unit"] = Hba1cUnit.PERCENT.value

    return replace(raw, **changes)
