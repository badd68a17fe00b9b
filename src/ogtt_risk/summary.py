"""Resumen de texto plano de una evaluación, apto para copiar o imprimir."""

from __future__ import annotations

from ogtt_risk.display import round_half_up
from ogtt_risk.model import MetabolicSyndrome, RiskAssessment

TITLE = "OGTT–DM Risk Stratifier"
DISCLAIMER = (
    "Disclaimer: Clinical decision support/education tool. "
    "No patient data are stored. Use clinical judgment."
)
MISSING = "—"


def format_value(value: float | None, decimals: int) -> str:
    """Format a nullable number for display; ``—`` when missing."""
    rounded = round_half_up(value, decimals)
    if rounded is None:
        return MISSING
    if decimals <= 0:
        return str(int(rounded))
    return f"{rounded:.{decimals}f}".rstrip("0").rstrip(".")


def metabolic_syndrome_label(step2: MetabolicSyndrome) -> str:
    """PRESENT / ABSENT / UNKNOWN label with criteria count."""
    if step2.complete:
        state = "PRESENT" if step2.present else "ABSENT"
        return f"{state} ({step2.count}/5)"
    missing = ", ".join(step2.unknown) or MISSING
    return f"UNKNOWN ({step2.count}/5 met; missing: {missing})"


def build_summary(assessment: RiskAssessment) -> str:
    """Render the multi-line clinical summary.

    Args:
        assessment: Result of ``evaluate``.

    Returns:
        Summary text, lines separated by ``\\n``.
    """
    obs = assessment.observation
    step1, step2, step3, step4 = (
        assessment.step1,
        assessment.step2,
        assessment.step3,
        assessment.step4,
    )
    idx = assessment.indices

    lines = [TITLE, MISSING]
    if obs.age is not None:
        lines.append(f"Age: {obs.age:g}")
    if assessment.bmi is not None:
        lines.append(f"BMI: {format_value(assessment.bmi, 1)} kg/m²")
    lines.append("")

    lines.append(f"Step 1 (OGTT indication): {'YES' if step1.indicated else 'NO'}")
    lines.append(
        f"Reasons: {'; '.join(step1.reasons)}"
        if step1.indicated
        else "Reasons: No Step 1 criteria met based on current inputs."
    )
    lines.append("")

    lines.append(f"Step 2 (Metabolic syndrome): {metabolic_syndrome_label(step2)}")
    lines.append("")

    status = "HIGH RISK" if step3.high_risk else "Not high-risk"
    lines.append(f"Step 3 (High-risk prognostic markers): {status}")
    lines.append(
        f"Triggered findings: {'; '.join(step3.triggers)}"
        if step3.triggers
        else "Triggered findings: No Step 3 markers triggered based on current inputs."
    )
    lines.append("")

    lines.append("Calculated indices:")
    lines.append(f"- IGI: {format_value(idx.igi, 2)}")
    lines.append(f"- Matsuda index: {format_value(idx.matsuda_index, 2)}")
    lines.append(f"- HOMA-IR: {format_value(idx.homa_ir, 2)}")
    lines.append(f"- DI: {format_value(idx.disposition_index, 2)}")
    lines.append(f"- PG AUC (weighted): {format_value(idx.weighted_glucose_auc, 1)}")
    lines.append(
        f"- Stumvoll 1st-phase: {format_value(idx.stumvoll_first_phase, 0)}"
    )
    lines.append("")

    lines.append("Step 4 recommendation:")
    lines.append(step4.text)
    lines.append("")
    lines.append(DISCLAIMER)
    return "\n".join(lines)
