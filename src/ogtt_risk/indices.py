"""Índices metabólicos derivados de la OGTT.

Insulin is canonical in pmol/L; formulas with coefficients published for
conventional units convert it to mU/L first. Every function returns ``None``
instead of NaN or infinity.
"""

from __future__ import annotations

import math
from statistics import fmean

from ogtt_risk.model import CanonicalObservation, IndexSet
from ogtt_risk.units import pmol_l_to_mu_l


def _finite(value: float) -> float | None:
    return value if math.isfinite(value) else None


def igi(obs: CanonicalObservation) -> float | None:
    """Insulinogenic index: Δinsulin(mU/L) / Δglucose(mg/dL) over 0-30 min.

    ``None`` when an operand is missing or glucose did not change.
    """
    if (
        obs.insulin_0 is None
        or obs.insulin_30 is None
        or obs.glucose_0 is None
        or obs.glucose_30 is None
    ):
        return None
    delta_glucose = obs.glucose_30 - obs.glucose_0
    if delta_glucose == 0:
        return None
    delta_insulin = pmol_l_to_mu_l(obs.insulin_30) - pmol_l_to_mu_l(obs.insulin_0)
    return _finite(delta_insulin / delta_glucose)


def weighted_glucose_auc(obs: CanonicalObservation) -> float | None:
    """Weighted plasma-glucose AUC (g0 + 2·g30 + 3·g60 + 2·g120) / 4.

    The 90-minute value is not used.
    """
    g0, g30, g60, g120 = obs.glucose_0, obs.glucose_30, obs.glucose_60, obs.glucose_120
    if g0 is None or g30 is None or g60 is None or g120 is None:
        return None
    return _finite((g0 + 2 * g30 + 3 * g60 + 2 * g120) / 4)


def matsuda_index(obs: CanonicalObservation) -> float | None:
    """Matsuda whole-body insulin sensitivity index.

    Needs fasting glucose and insulin plus at least two glucose and two insulin
    timepoints overall; means are taken over whatever timepoints are present.
    """
    if obs.glucose_0 is None or obs.insulin_0 is None:
        return None
    glucose = [g for g in obs.glucose_values if g is not None]
    insulin = [pmol_l_to_mu_l(i) for i in obs.insulin_values if i is not None]
    if len(glucose) < 2 or len(insulin) < 2:
        return None

    product = (obs.glucose_0 * pmol_l_to_mu_l(obs.insulin_0)) * (
        fmean(glucose) * fmean(insulin)
    )
    if not math.isfinite(product) or product <= 0:
        return None
    denom = math.sqrt(product)
    if not math.isfinite(denom) or denom <= 0:
        return None
    return _finite(10000 / denom)


def homa_ir(obs: CanonicalObservation) -> float | None:
    """HOMA-IR = glucose0(mg/dL) · insulin0(mU/L) / 405."""
    if obs.glucose_0 is None or obs.insulin_0 is None:
        return None
    return _finite(obs.glucose_0 * pmol_l_to_mu_l(obs.insulin_0) / 405.0)


def disposition_index(obs: CanonicalObservation) -> float | None:
    """Oral disposition index = Matsuda · IGI."""
    matsuda = matsuda_index(obs)
    insulinogenic = igi(obs)
    if matsuda is None or insulinogenic is None:
        return None
    return _finite(matsuda * insulinogenic)


def stumvoll_first_phase(obs: CanonicalObservation) -> float | None:
    """Stumvoll estimated first-phase insulin secretion (pmol/L).

    Coefficients expect insulin in pmol/L (no mU/L conversion here) and glucose
    in mmol/L.
    """
    if obs.insulin_0 is None or obs.insulin_30 is None or obs.glucose_30 is None:
        return None
    glucose_30_mmol = obs.glucose_30 / 18
    return _finite(
        1283
        + 1.829 * obs.insulin_30
        - 138.7 * glucose_30_mmol
        + 3.772 * obs.insulin_0
    )


def compute_indices(obs: CanonicalObservation) -> IndexSet:
    """Compute every derived index for ``obs``."""
    return IndexSet(
        igi=igi(obs),
        matsuda_index=matsuda_index(obs),
        homa_ir=homa_ir(obs),
        disposition_index=disposition_index(obs),
        weighted_glucose_auc=weighted_glucose_auc(obs),
        stumvoll_first_phase=stumvoll_first_phase(obs),
    )
