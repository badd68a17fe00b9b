from __future__ import annotations

from ogtt_risk.classifier import evaluate
from ogtt_risk.model import MeasurementSystem, RawObservation
from ogtt_risk.summary import DISCLAIMER, build_summary, format_value


def _high_risk_raw() -> RawObservation:
    return RawObservation(
        age="45",
        sex="M",
        waist="105",
        triglycerides="180",
        hdl="35",
        bp_medication="yes",
        glucose_0="115",
        glucose_60="170",
        glucose_120="160",
    )


def test_format_value() -> None:
    assert format_value(None, 2) == "—"
    assert format_value(2.469135, 2) == "2.47"
    assert format_value(2.5, 2) == "2.5"
    assert format_value(1011.93, 0) == "1012"
    assert format_value(285.0, 1) == "285"


def test_summary_for_high_risk_patient() -> None:
    text = build_summary(evaluate(_high_risk_raw(), MeasurementSystem.US))
    lines = text.split("\n")
    assert lines[0] == "OGTT–DM Risk Stratifier"
    assert "Age: 45" in lines
    assert "Step 1 (OGTT indication): YES" in lines
    assert "Reasons: FPG 100–125 mg/dL" in lines
    assert "Step 2 (Metabolic syndrome): PRESENT (5/5)" in lines
    assert "Step 3 (High-risk prognostic markers): HIGH RISK" in lines
    assert any(
        line.startswith("Triggered findings: IGT + 1-hour PG >155 mg/dL")
        for line in lines
    )
    assert any(line.startswith("Age 40–49 years") for line in lines)
    assert lines[-1] == DISCLAIMER


def test_summary_for_empty_observation() -> None:
    text = build_summary(evaluate(RawObservation(), MeasurementSystem.US))
    assert "Age:" not in text
    assert "BMI:" not in text
    assert "Step 1 (OGTT indication): NO" in text
    assert (
        "Step 2 (Metabolic syndrome): UNKNOWN (0/5 met; missing: Waist "
        "circumference, Triglycerides, HDL, Blood pressure, Fasting glucose)"
    ) in text
    assert "Step 3 (High-risk prognostic markers): Not high-risk" in text
    assert "- IGI: —" in text
    assert "- Stumvoll 1st-phase: —" in text
    assert "Not in high-risk group based on Step 3 criteria." in text


def test_summary_reports_bmi_and_absent_syndrome() -> None:
    raw = RawObservation(
        sex="F",
        weight="70",
        height="170",
        waist="80",
        triglycerides="1.2",
        hdl="1.5",
        systolic_bp="118",
        diastolic_bp="76",
        glucose_0="5.0",
    )
    text = build_summary(evaluate(raw, MeasurementSystem.SI))
    assert "BMI: 24.2 kg/m²" in text
    assert "Step 2 (Metabolic syndrome): ABSENT (0/5)" in text


def test_summary_with_huge_glucose_values_shows_missing_auc() -> None:
    huge = "9" + "0" * 306
    raw = RawObservation(
        glucose_0=huge, glucose_30=huge, glucose_60=huge, glucose_120=huge
    )
    text = build_summary(evaluate(raw, MeasurementSystem.US))
    assert "- PG AUC (weighted): —" in text
