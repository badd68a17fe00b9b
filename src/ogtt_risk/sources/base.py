"""Clases base para fuentes de observaciones crudas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ogtt_risk.model import MeasurementSystem, RawObservation


@dataclass(frozen=True)
class SourcePaths:
    """Location of the observation to read."""

    root: Path


@dataclass(frozen=True)
class LoadedObservation:
    """Raw observation plus the measurement system stated by the source, if any."""

    raw: RawObservation
    system: MeasurementSystem | None


class DataSource(ABC):
    """Abstract observation source."""

    def __init__(self, paths: SourcePaths) -> None:
        """Create a data source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    def validate(self) -> None:
        """Validate that the source file exists.

        Raises:
            FileNotFoundError: If the file is missing.
        """
        if not self._paths.root.is_file():
            raise FileNotFoundError(str(self._paths.root))

    @abstractmethod
    def load(self) -> LoadedObservation:
        """Read the observation.

        Raises:
            FileNotFoundError: If the file is missing.
            ValueError: If the content shape is invalid.
        """
