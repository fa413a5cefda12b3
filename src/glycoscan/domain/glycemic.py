"""Blood sugar response domain models."""

from dataclasses import dataclass
from enum import Enum


class ImpactLevel(str, Enum):
    """Categorical blood sugar impact."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


@dataclass(frozen=True)
class NutrientMetrics:
    """Derived carbohydrate metrics for a serving."""

    net_carbs: float
    estimated_gi: float
    glycemic_load: float
    protein_fat_ratio: float


@dataclass(frozen=True)
class CurvePoint:
    """Blood sugar rise (mg/dL) at a time offset in minutes."""

    time: float
    value: float


@dataclass(frozen=True)
class BloodSugarImpact:
    """Estimated blood sugar response to a serving."""

    peak_value: float
    time_to_return: float
    overall_impact: ImpactLevel
    curve: tuple[CurvePoint, ...]
