"""Modelos tipados para observaciones, índices y resultados de cada paso."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MeasurementSystem(str, Enum):
    """Unit system used to interpret raw numeric entries."""

    US = "US"
    SI = "SI"


class Sex(str, Enum):
    M = "M"
    F = "F"


class Ethnicity(str, Enum):
    ASIAN_AMERICAN = "Asian American"
    AFRICAN_AMERICAN = "African American"
    HISPANIC_LATINO = "Hispanic/Latino"
    NATIVE_AMERICAN = "Native American"
    OTHER = "Other"


HIGH_RISK_ETHNICITIES: frozenset[Ethnicity] = frozenset(
    {
        Ethnicity.AFRICAN_AMERICAN,
        Ethnicity.HISPANIC_LATINO,
        Ethnicity.NATIVE_AMERICAN,
        Ethnicity.ASIAN_AMERICAN,
    }
)


class BpMedication(str, Enum):
    YES = "yes"
    NO = "no"


class Hba1cUnit(str, Enum):
    """HbA1c entry unit, chosen independently of the measurement system."""

    PERCENT = "percent"
    IFCC = "ifcc"


class RiskStatus(str, Enum):
    HIGH_RISK = "HIGH_RISK"
    NOT_HIGH_RISK = "NOT_HIGH_RISK"


class AgeBand(str, Enum):
    """Step 4 outcome."""

    NOT_APPLICABLE = "not_applicable"
    AGE_NEEDED = "age_needed"
    NOT_CANDIDATE = "not_candidate"
    CONDITIONAL = "conditional"
    ACCEPTABLE = "acceptable"


RawNumber = str | int | float | None


@dataclass(frozen=True)
class RawObservation:
    """Form values as entered, under the active measurement system.

    Numeric fields hold whatever the user typed (text or number); parsing happens
    during canonicalization.
    """

    age: RawNumber = None
    sex: str | None = None
    ethnicity: str | None = None
    weight: RawNumber = None
    height: RawNumber = None
    waist: RawNumber = None
    triglycerides: RawNumber = None
    hdl: RawNumber = None
    systolic_bp: RawNumber = None
    diastolic_bp: RawNumber = None
    bp_medication: str | None = None
    hba1c: RawNumber = None
    hba1c_unit: str | None = None
    gestational_diabetes: bool = False
    pancreatitis: bool = False
    masld: bool = False
    pcos: bool = False
    first_degree_relative_t2d: bool = False
    glucose_0: RawNumber = None
    glucose_30: RawNumber = None
    glucose_60: RawNumber = None
    glucose_90: RawNumber = None
    glucose_120: RawNumber = None
    insulin_0: RawNumber = None
    insulin_30: RawNumber = None
    insulin_60: RawNumber = None
    insulin_90: RawNumber = None
    insulin_120: RawNumber = None


@dataclass(frozen=True)
class CanonicalObservation:
    """Observation in fixed units.

    Glucose and lipids in mg/dL, insulin in pmol/L, weight in kg, height and waist
    in cm, HbA1c in percent. Missing values stay ``None``.
    """

    age: float | None = None
    sex: Sex | None = None
    ethnicity: Ethnicity | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    waist_cm: float | None = None
    tg_mg_dl: float | None = None
    hdl_mg_dl: float | None = None
    systolic_bp: float | None = None
    diastolic_bp: float | None = None
    bp_medication: BpMedication | None = None
    hba1c_pct: float | None = None
    gestational_diabetes: bool = False
    pancreatitis: bool = False
    masld: bool = False
    pcos: bool = False
    first_degree_relative_t2d: bool = False
    glucose_0: float | None = None
    glucose_30: float | None = None
    glucose_60: float | None = None
    glucose_90: float | None = None
    glucose_120: float | None = None
    insulin_0: float | None = None
    insulin_30: float | None = None
    insulin_60: float | None = None
    insulin_90: float | None = None
    insulin_120: float | None = None

    @property
    def glucose_values(self) -> tuple[float | None, ...]:
        """Glucose at 0/30/60/90/120 minutes (mg/dL)."""
        return (
            self.glucose_0,
            self.glucose_30,
            self.glucose_60,
            self.glucose_90,
            self.glucose_120,
        )

    @property
    def insulin_values(self) -> tuple[float | None, ...]:
        """Insulin at 0/30/60/90/120 minutes (pmol/L)."""
        return (
            self.insulin_0,
            self.insulin_30,
            self.insulin_60,
            self.insulin_90,
            self.insulin_120,
        )


@dataclass(frozen=True)
class IndexSet:
    """Derived OGTT indices; each is ``None`` when it cannot be computed."""

    igi: float | None = None
    matsuda_index: float | None = None
    homa_ir: float | None = None
    disposition_index: float | None = None
    weighted_glucose_auc: float | None = None
    stumvoll_first_phase: float | None = None


@dataclass(frozen=True)
class OgttIndication:
    """Step 1 result."""

    indicated: bool
    reasons: tuple[str, ...]
    bmi: float | None
    bmi_threshold: float


@dataclass(frozen=True)
class MetabolicSyndrome:
    """Step 2 result (ATP III)."""

    count: int
    present: bool
    complete: bool
    met: tuple[str, ...]
    not_met: tuple[str, ...]
    unknown: tuple[str, ...]


@dataclass(frozen=True)
class HighRiskMarkers:
    """Step 3 result."""

    status: RiskStatus
    triggers: tuple[str, ...]
    ifg: bool
    igt: bool
    diabetes_fasting: bool
    diabetes_2hr: bool
    one_hour_high: bool
    a1c_mid_range: bool
    igi: float | None
    igi_low: bool
    stumvoll_first_phase: float | None
    stumvoll_low: bool

    @property
    def high_risk(self) -> bool:
        return self.status is RiskStatus.HIGH_RISK


@dataclass(frozen=True)
class Recommendation:
    """Step 4 result."""

    applicable: bool
    band: AgeBand
    label: str
    text: str


@dataclass(frozen=True)
class RiskAssessment:
    """Full evaluation of one observation."""

    system: MeasurementSystem
    observation: CanonicalObservation
    step1: OgttIndication
    step2: MetabolicSyndrome
    step3: HighRiskMarkers
    step4: Recommendation
    indices: IndexSet

    @property
    def bmi(self) -> float | None:
        return self.step1.bmi
