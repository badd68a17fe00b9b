"""Conversiones de unidades entre sistema convencional (US) y SI.

All functions expect a real number; callers check for ``None`` first.
"""

from __future__ import annotations

GLUCOSE_MG_DL_PER_MMOL_L = 18.0
INSULIN_PMOL_L_PER_MU_L = 6.0
KG_PER_LB = 0.45359237
CM_PER_IN = 2.54
TG_MMOL_L_PER_MG_DL = 0.01129
HDL_MMOL_L_PER_MG_DL = 0.02586
A1C_IFCC_SLOPE = 0.09148
A1C_IFCC_INTERCEPT = 2.152


def mg_dl_to_mmol_l(mg_dl: float) -> float:
    """Glucose mg/dL -> mmol/L."""
    return mg_dl / GLUCOSE_MG_DL_PER_MMOL_L


def mmol_l_to_mg_dl(mmol_l: float) -> float:
    """Glucose mmol/L -> mg/dL."""
    return mmol_l * GLUCOSE_MG_DL_PER_MMOL_L


def mu_l_to_pmol_l(mu_l: float) -> float:
    """Insulin µU/mL (== mU/L) -> pmol/L."""
    return mu_l * INSULIN_PMOL_L_PER_MU_L


def pmol_l_to_mu_l(pmol_l: float) -> float:
    """Insulin pmol/L -> µU/mL (== mU/L)."""
    return pmol_l / INSULIN_PMOL_L_PER_MU_L


def lb_to_kg(lb: float) -> float:
    return lb * KG_PER_LB


def kg_to_lb(kg: float) -> float:
    return kg / KG_PER_LB


def in_to_cm(inches: float) -> float:
    return inches * CM_PER_IN


def cm_to_in(cm: float) -> float:
    return cm / CM_PER_IN


def tg_mg_dl_to_mmol_l(mg_dl: float) -> float:
    return mg_dl * TG_MMOL_L_PER_MG_DL


def tg_mmol_l_to_mg_dl(mmol_l: float) -> float:
    return mmol_l / TG_MMOL_L_PER_MG_DL


def hdl_mg_dl_to_mmol_l(mg_dl: float) -> float:
    return mg_dl * HDL_MMOL_L_PER_MG_DL


def hdl_mmol_l_to_mg_dl(mmol_l: float) -> float:
    return mmol_l / HDL_MMOL_L_PER_MG_DL


def a1c_ifcc_to_percent(mmol_mol: float) -> float:
    """HbA1c IFCC (mmol/mol) -> NGSP percent."""
    return A1C_IFCC_SLOPE * mmol_mol + A1C_IFCC_INTERCEPT


def a1c_percent_to_ifcc(pct: float) -> float:
    """HbA1c NGSP percent -> IFCC (mmol/mol)."""
    return (pct - A1C_IFCC_INTERCEPT) / A1C_IFCC_SLOPE
