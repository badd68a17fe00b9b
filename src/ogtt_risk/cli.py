"""CLI para evaluar una observación OGTT y exportar el resultado."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from dateutil import tz

from ogtt_risk.classifier import evaluate
from ogtt_risk.export import ExcelLayout, write_assessment_csv, write_assessment_xlsx
from ogtt_risk.model import MeasurementSystem
from ogtt_risk.sources.observation_file import ObservationFileSource, ObservationPaths
from ogtt_risk.summary import build_summary

_LOCAL_TZ = tz.tzlocal()

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Estratificación de riesgo de diabetes a partir de una OGTT."
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Observación cruda (.json o .csv campo,valor).",
    )
    parser.add_argument(
        "--units",
        choices=[m.value for m in MeasurementSystem],
        default=None,
        help="Sistema de unidades de la entrada (default: el del archivo, o US).",
    )
    parser.add_argument(
        "--out-dir",
        default=str(Path.cwd() / "salidas"),
        help="Directorio de salida para exportaciones (default: ./salidas).",
    )
    parser.add_argument("--xlsx", action="store_true", help="Exportar Excel.")
    parser.add_argument("--csv", action="store_true", help="Exportar CSV.")
    parser.add_argument("--verbose", action="store_true", help="Log DEBUG.")
    return parser.parse_args(argv)


def main() -> int:
    """Run the evaluation CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    in_path = Path(ns.input).expanduser().resolve()
    loaded = ObservationFileSource(ObservationPaths(root=in_path)).load()
    system = (
        MeasurementSystem(ns.units)
        if ns.units
        else loaded.system or MeasurementSystem.US
    )
    logger.info("Evaluating %s (%s units)", in_path, system.value)

    assessment = evaluate(loaded.raw, system)
    print(build_summary(assessment))

    if ns.xlsx or ns.csv:
        out_dir = Path(ns.out_dir).expanduser().resolve()
        ts = datetime.now(tz=_LOCAL_TZ).strftime("%Y-%m-%d_%H-%M-%S")
        stem = f"ogtt_risk_{ts}"
        if ns.xlsx:
            out_path = out_dir / f"{stem}.xlsx"
            write_assessment_xlsx(assessment, out_path, ExcelLayout())
            print(f"OK: Output: {out_path}")
        if ns.csv:
            out_path = out_dir / f"{stem}.csv"
            write_assessment_csv(assessment, out_path)
            print(f"OK: Output: {out_path}")
    return 0
