"""Clasificación en cuatro pasos: indicación de OGTT, síndrome metabólico, alto riesgo y edad."""

from __future__ import annotations

import logging
import math

from ogtt_risk.canonical import canonicalize
from ogtt_risk.indices import compute_indices
from ogtt_risk.model import (
    HIGH_RISK_ETHNICITIES,
    AgeBand,
    BpMedication,
    CanonicalObservation,
    Ethnicity,
    HighRiskMarkers,
    IndexSet,
    MeasurementSystem,
    MetabolicSyndrome,
    OgttIndication,
    Recommendation,
    RawObservation,
    RiskAssessment,
    RiskStatus,
    Sex,
)

logger = logging.getLogger(__name__)

BMI_THRESHOLD = 25.0
BMI_THRESHOLD_ASIAN_AMERICAN = 23.0
IGI_LOW_CUTOFF = 0.82
STUMVOLL_LOW_CUTOFF = 899.0
ONE_HOUR_CUTOFF = 155.0

WAIST = "Waist circumference"
TRIGLYCERIDES = "Triglycerides"
HDL = "HDL"
BLOOD_PRESSURE = "Blood pressure"
FASTING_GLUCOSE = "Fasting glucose"

TRIGGER_IGT_1H_METS = "IGT + 1-hour PG >155 mg/dL + metabolic syndrome"
TRIGGER_IFG_IGT = "Combined IFG and IGT"
TRIGGER_IFG_1H_METS = "IFG + 1-hour PG >155 mg/dL + metabolic syndrome"
TRIGGER_1H_A1C = "IGT or IFG + 1-hour PG >155 mg/dL + HbA1c 6.0–6.4%"
TRIGGER_1H_SECRETION = "IGT or IFG + 1-hour PG >155 mg/dL + {markers}"


def bmi_from_kg_cm(weight_kg: float | None, height_cm: float | None) -> float | None:
    """BMI in kg/m²; ``None`` if an operand is missing or height is not positive."""
    if weight_kg is None or height_cm is None or height_cm <= 0:
        return None
    meters = height_cm / 100.0
    bmi = weight_kg / (meters * meters)
    return bmi if math.isfinite(bmi) else None


def _on_bp_medication(obs: CanonicalObservation) -> bool:
    return obs.bp_medication is BpMedication.YES


def _in_range(value: float | None, low: float, high: float) -> bool:
    """``low <= value < high``; ``False`` when missing."""
    return value is not None and low <= value < high


def ogtt_indication(obs: CanonicalObservation) -> OgttIndication:
    """Step 1: decide whether an OGTT is indicated.

    Args:
        obs: Canonical observation.

    Returns:
        Indication with ordered reasons, BMI and the BMI threshold applied.
    """
    reasons: list[str] = []

    if _in_range(obs.glucose_0, 100, 126):
        reasons.append("FPG 100–125 mg/dL")
    if obs.hba1c_pct is not None and 5.7 <= obs.hba1c_pct <= 6.4:
        reasons.append("HbA1c 5.7–6.4%")
    if obs.gestational_diabetes:
        reasons.append("History of gestational diabetes")
    if obs.pancreatitis:
        reasons.append("History of pancreatitis")

    bmi = bmi_from_kg_cm(obs.weight_kg, obs.height_cm)
    threshold = (
        BMI_THRESHOLD_ASIAN_AMERICAN
        if obs.ethnicity is Ethnicity.ASIAN_AMERICAN
        else BMI_THRESHOLD
    )

    hypertension = _on_bp_medication(obs) or (
        obs.systolic_bp is not None
        and obs.diastolic_bp is not None
        and (obs.systolic_bp >= 130 or obs.diastolic_bp >= 80)
    )
    dyslipidemia = (obs.hdl_mg_dl is not None and obs.hdl_mg_dl < 35) or (
        obs.tg_mg_dl is not None and obs.tg_mg_dl > 250
    )
    companions = [
        (obs.masld, "MASLD"),
        (hypertension, "Hypertension ≥130/80 mm Hg or on treatment"),
        (
            dyslipidemia,
            "Dyslipidemia (HDL <35 mg/dL and/or triglycerides >250 mg/dL)",
        ),
        (obs.pcos, "PCOS"),
        (obs.first_degree_relative_t2d, "First-degree relative with T2D"),
        (obs.ethnicity in HIGH_RISK_ETHNICITIES, "High-risk ethnicity"),
    ]
    matched = [label for flag, label in companions if flag]
    if bmi is not None and bmi >= threshold and matched:
        reasons.append(f"BMI ≥{threshold:g} kg/m² plus one or more of the following:")
        reasons.extend(matched)

    return OgttIndication(
        indicated=bool(reasons),
        reasons=tuple(reasons),
        bmi=bmi,
        bmi_threshold=threshold,
    )


def _criterion(
    name: str,
    outcome: bool | None,
    met: list[str],
    not_met: list[str],
    unknown: list[str],
) -> None:
    if outcome is None:
        unknown.append(name)
    elif outcome:
        met.append(name)
    else:
        not_met.append(name)


def _waist_met(obs: CanonicalObservation) -> bool | None:
    if obs.sex is None or obs.waist_cm is None:
        return None
    return obs.waist_cm > (102 if obs.sex is Sex.M else 88)


def _hdl_met(obs: CanonicalObservation) -> bool | None:
    if obs.sex is None or obs.hdl_mg_dl is None:
        return None
    return obs.hdl_mg_dl < (40 if obs.sex is Sex.M else 50)


def _bp_met(obs: CanonicalObservation) -> bool | None:
    if _on_bp_medication(obs):
        return True
    if obs.systolic_bp is None or obs.diastolic_bp is None:
        return None
    return obs.systolic_bp >= 130 or obs.diastolic_bp >= 85


def metabolic_syndrome(obs: CanonicalObservation) -> MetabolicSyndrome:
    """Step 2: ATP III metabolic syndrome with met / not-met / unknown criteria.

    ``present`` is only asserted when no criterion is unknown.
    """
    met: list[str] = []
    not_met: list[str] = []
    unknown: list[str] = []

    _criterion(WAIST, _waist_met(obs), met, not_met, unknown)
    _criterion(
        TRIGLYCERIDES,
        None if obs.tg_mg_dl is None else obs.tg_mg_dl >= 150,
        met,
        not_met,
        unknown,
    )
    _criterion(HDL, _hdl_met(obs), met, not_met, unknown)
    _criterion(BLOOD_PRESSURE, _bp_met(obs), met, not_met, unknown)
    _criterion(
        FASTING_GLUCOSE,
        None if obs.glucose_0 is None else obs.glucose_0 >= 100,
        met,
        not_met,
        unknown,
    )

    count = len(met)
    complete = not unknown
    return MetabolicSyndrome(
        count=count,
        present=count >= 3 and complete,
        complete=complete,
        met=tuple(met),
        not_met=tuple(not_met),
        unknown=tuple(unknown),
    )


def high_risk_markers(
    obs: CanonicalObservation, mets: MetabolicSyndrome, indices: IndexSet
) -> HighRiskMarkers:
    """Step 3: high-risk prognostic combinations.

    Incomplete metabolic syndrome data counts as not present here, so the
    clauses that require it do not fire.

    Args:
        obs: Canonical observation.
        mets: Step 2 result.
        indices: Derived indices (IGI and Stumvoll are used).

    Returns:
        Marker flags, fired triggers and aggregate status.
    """
    ifg = _in_range(obs.glucose_0, 100, 126)
    igt = _in_range(obs.glucose_120, 140, 200)
    diabetes_fasting = obs.glucose_0 is not None and obs.glucose_0 >= 126
    diabetes_2hr = obs.glucose_120 is not None and obs.glucose_120 >= 200
    one_hour_high = obs.glucose_60 is not None and obs.glucose_60 > ONE_HOUR_CUTOFF
    a1c_mid_range = obs.hba1c_pct is not None and 6.0 <= obs.hba1c_pct <= 6.4
    igi_low = indices.igi is not None and indices.igi <= IGI_LOW_CUTOFF
    stumvoll_low = (
        indices.stumvoll_first_phase is not None
        and indices.stumvoll_first_phase <= STUMVOLL_LOW_CUTOFF
    )
    mets_present = mets.present

    triggers: list[str] = []
    if igt and one_hour_high and mets_present:
        triggers.append(TRIGGER_IGT_1H_METS)
    if ifg and igt:
        triggers.append(TRIGGER_IFG_IGT)
    if ifg and one_hour_high and mets_present:
        triggers.append(TRIGGER_IFG_1H_METS)
    if (igt or ifg) and one_hour_high and a1c_mid_range:
        triggers.append(TRIGGER_1H_A1C)
    if (igt or ifg) and one_hour_high and (igi_low or stumvoll_low):
        markers = []
        if igi_low:
            markers.append("IGI ≤0.82")
        if stumvoll_low:
            markers.append("1st-phase ≤899 pmol/L")
        triggers.append(TRIGGER_1H_SECRETION.format(markers=" and ".join(markers)))

    return HighRiskMarkers(
        status=RiskStatus.HIGH_RISK if triggers else RiskStatus.NOT_HIGH_RISK,
        triggers=tuple(triggers),
        ifg=ifg,
        igt=igt,
        diabetes_fasting=diabetes_fasting,
        diabetes_2hr=diabetes_2hr,
        one_hour_high=one_hour_high,
        a1c_mid_range=a1c_mid_range,
        igi=indices.igi,
        igi_low=igi_low,
        stumvoll_first_phase=indices.stumvoll_first_phase,
        stumvoll_low=stumvoll_low,
    )


def recommendation(
    obs: CanonicalObservation, markers: HighRiskMarkers
) -> Recommendation:
    """Step 4: age-gated recommendation, only for the high-risk group."""
    if not markers.high_risk:
        return Recommendation(
            applicable=False,
            band=AgeBand.NOT_APPLICABLE,
            label="Not applicable",
            text="Not in high-risk group based on Step 3 criteria.",
        )
    if obs.age is None:
        return Recommendation(
            applicable=True,
            band=AgeBand.AGE_NEEDED,
            label="Age needed",
            text="Enter age to apply Step 4.",
        )
    if obs.age < 40:
        return Recommendation(
            applicable=True,
            band=AgeBand.NOT_CANDIDATE,
            label="<40",
            text="Age <40 years — Not a candidate (high risk).",
        )
    if obs.age < 50:
        return Recommendation(
            applicable=True,
            band=AgeBand.CONDITIONAL,
            label="40–49",
            text=(
                "Age 40–49 years — Consider only if able to reverse high-risk "
                "prognostic markers with weight loss on repeat OGTT."
            ),
        )
    return Recommendation(
        applicable=True,
        band=AgeBand.ACCEPTABLE,
        label="≥50",
        text="Age ≥50 years — Can be accepted after risk mitigation with 5–10% weight loss.",
    )


def assess(
    obs: CanonicalObservation, system: MeasurementSystem = MeasurementSystem.US
) -> RiskAssessment:
    """Run indices and Steps 1-4 over an already canonical observation."""
    indices = compute_indices(obs)
    step1 = ogtt_indication(obs)
    step2 = metabolic_syndrome(obs)
    step3 = high_risk_markers(obs, step2, indices)
    step4 = recommendation(obs, step3)
    logger.debug(
        "Assessment: ogtt=%s mets=%d/5 status=%s band=%s",
        step1.indicated,
        step2.count,
        step3.status.value,
        step4.band.value,
    )
    return RiskAssessment(
        system=MeasurementSystem(system),
        observation=obs,
        step1=step1,
        step2=step2,
        step3=step3,
        step4=step4,
        indices=indices,
    )


def evaluate(raw: RawObservation, system: MeasurementSystem) -> RiskAssessment:
    """Evaluate a raw observation entered under ``system``.

    Pure: callers re-run it on every input change.

    Args:
        raw: Values as entered.
        system: Active measurement system.

    Returns:
        Fresh risk assessment.
    """
    return assess(canonicalize(raw, system), system)
