"""Exportación de una evaluación a CSV y a Excel formateado."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from ogtt_risk.model import RiskAssessment

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: tuple[str, ...] = (
    "system",
    "age",
    "bmi",
    "ogtt_indicated",
    "ogtt_reasons",
    "mets_count",
    "mets_present",
    "mets_complete",
    "mets_met",
    "mets_not_met",
    "mets_unknown",
    "risk_status",
    "risk_triggers",
    "ifg",
    "igt",
    "diabetes_fasting",
    "diabetes_2hr",
    "one_hour_high",
    "a1c_mid_range",
    "igi_low",
    "stumvoll_low",
    "age_band",
    "recommendation",
    "igi",
    "matsuda_index",
    "homa_ir",
    "disposition_index",
    "weighted_glucose_auc",
    "stumvoll_first_phase",
)

_HEADER_MAP: dict[str, str] = {
    "system": "Unidades",
    "age": "Edad",
    "bmi": "IMC\n(kg/m²)",
    "ogtt_indicated": "OGTT\nindicada",
    "ogtt_reasons": "Motivos",
    "mets_count": "SM\ncriterios",
    "mets_present": "SM\npresente",
    "mets_complete": "SM\ncompleto",
    "mets_met": "SM cumplidos",
    "mets_not_met": "SM no cumplidos",
    "mets_unknown": "SM faltantes",
    "risk_status": "Riesgo",
    "risk_triggers": "Hallazgos",
    "ifg": "IFG",
    "igt": "IGT",
    "diabetes_fasting": "Ayuno\n≥126",
    "diabetes_2hr": "2 h\n≥200",
    "one_hour_high": "1 h\n>155",
    "a1c_mid_range": "HbA1c\n6.0–6.4",
    "igi_low": "IGI\n≤0.82",
    "stumvoll_low": "Stumvoll\n≤899",
    "age_band": "Banda\nedad",
    "recommendation": "Recomendación",
    "igi": "IGI",
    "matsuda_index": "Matsuda",
    "homa_ir": "HOMA-IR",
    "disposition_index": "DI",
    "weighted_glucose_auc": "AUC\nglucosa",
    "stumvoll_first_phase": "Stumvoll\n1ª fase",
}

_WIDE_HEADERS = {
    "Motivos": 48,
    "SM cumplidos": 30,
    "SM no cumplidos": 30,
    "SM faltantes": 30,
    "Hallazgos": 48,
    "Recomendación": 48,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Edad": "0.0",
    "IMC\n(kg/m²)": "0.0",
    "SM\ncriterios": "0",
    "IGI": "0.00",
    "Matsuda": "0.00",
    "HOMA-IR": "0.00",
    "DI": "0.00",
    "AUC\nglucosa": "0.0",
    "Stumvoll\n1ª fase": "0",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the assessment sheet."""

    sheet_name: str = "Evaluación OGTT"
    default_width: int = 12


def assessment_to_frame(assessment: RiskAssessment) -> pd.DataFrame:
    """Flatten an assessment into a one-row DataFrame.

    List fields are joined with ``"; "``. Column order is ``EXPORT_COLUMNS``.
    """
    s1, s2, s3, s4 = (
        assessment.step1,
        assessment.step2,
        assessment.step3,
        assessment.step4,
    )
    idx = assessment.indices
    row: dict[str, object] = {
        "system": assessment.system.value,
        "age": assessment.observation.age,
        "bmi": assessment.bmi,
        "ogtt_indicated": s1.indicated,
        "ogtt_reasons": "; ".join(s1.reasons),
        "mets_count": s2.count,
        "mets_present": s2.present,
        "mets_complete": s2.complete,
        "mets_met": "; ".join(s2.met),
        "mets_not_met": "; ".join(s2.not_met),
        "mets_unknown": "; ".join(s2.unknown),
        "risk_status": s3.status.value,
        "risk_triggers": "; ".join(s3.triggers),
        "ifg": s3.ifg,
        "igt": s3.igt,
        "diabetes_fasting": s3.diabetes_fasting,
        "diabetes_2hr": s3.diabetes_2hr,
        "one_hour_high": s3.one_hour_high,
        "a1c_mid_range": s3.a1c_mid_range,
        "igi_low": s3.igi_low,
        "stumvoll_low": s3.stumvoll_low,
        "age_band": s4.band.value,
        "recommendation": s4.text,
        "igi": idx.igi,
        "matsuda_index": idx.matsuda_index,
        "homa_ir": idx.homa_ir,
        "disposition_index": idx.disposition_index,
        "weighted_glucose_auc": idx.weighted_glucose_auc,
        "stumvoll_first_phase": idx.stumvoll_first_phase,
    }
    return pd.DataFrame([row], columns=list(EXPORT_COLUMNS))


def write_assessment_csv(assessment: RiskAssessment, out_path: Path) -> None:
    """Write the one-row export as UTF-8 CSV.

    Args:
        assessment: Evaluated assessment.
        out_path: Output path for the CSV file.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    assessment_to_frame(assessment).to_csv(out_path, index=False, encoding="utf-8")
    logger.info("CSV written: %s", out_path)


def write_assessment_xlsx(
    assessment: RiskAssessment, out_path: Path, layout: ExcelLayout
) -> None:
    """Write a formatted Excel file suitable for printing.

    Args:
        assessment: Evaluated assessment.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_df = assessment_to_frame(assessment).rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws, layout)
    logger.info("XLSX written: %s", out_path)


def _style_rows(ws: Any) -> None:
    """Negrita en cabecera; borde y alineación en todas las celdas."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in ws.iter_rows(min_row=1):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int], default: int) -> None:
    for header, idx in col_index.items():
        letter = ws.cell(row=1, column=idx).column_letter
        ws.column_dimensions[letter].width = _WIDE_HEADERS.get(header, default)


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    for row in ws.iter_rows(min_row=2):
        for header, fmt in _NUMBER_FORMATS.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any, layout: ExcelLayout) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
        layout: Excel layout parameters.
    """
    _style_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index, layout.default_width)
    _apply_number_formats(ws, col_index)
