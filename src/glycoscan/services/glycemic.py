"""Estimated blood sugar response model.

This is a heuristic approximation for illustration, not a clinical glycemic
index predictor.
"""

import math

from glycoscan.domain.glycemic import (
    BloodSugarImpact,
    CurvePoint,
    ImpactLevel,
    NutrientMetrics,
)
from glycoscan.domain.nutrition import NutritionRecord

CURVE_STEP_MINUTES = 5
MODERATE_LOAD = 10.0
HIGH_LOAD = 20.0
MIN_BASELINE = 50.0
MAX_BASELINE = 400.0


def calculate_nutrient_metrics(record: NutritionRecord) -> NutrientMetrics:
    """Derive net carbs, estimated GI, glycemic load and protein/fat ratio."""
    net_carbs = max(0.0, record.total_carbs - record.fiber)
    sugar_ratio = record.sugars / max(record.total_carbs, 1.0)
    fiber_impact = 1 - min(0.3, record.fiber / 10)
    estimated_gi = 40 + sugar_ratio * 30 + fiber_impact * 30
    glycemic_load = estimated_gi * net_carbs / 100
    protein_fat_ratio = (record.protein + record.fat) / max(net_carbs, 1.0)
    return NutrientMetrics(
        net_carbs=net_carbs,
        estimated_gi=estimated_gi,
        glycemic_load=glycemic_load,
        protein_fat_ratio=protein_fat_ratio,
    )


def impact_level(glycemic_load: float) -> ImpactLevel:
    """Classify a glycemic load."""
    if glycemic_load < MODERATE_LOAD:
        return ImpactLevel.LOW
    if glycemic_load < HIGH_LOAD:
        return ImpactLevel.MODERATE
    return ImpactLevel.HIGH


def estimate_blood_sugar_impact(metrics: NutrientMetrics) -> BloodSugarImpact:
    """Build the rise and decay curve for a set of metrics."""
    peak_value = metrics.glycemic_load * 5
    # Protein and fat slow absorption: a lower peak...
    if metrics.protein_fat_ratio > 0.5:
        peak_value *= 1 - min(0.4, (metrics.protein_fat_ratio - 0.5) * 0.2)

    time_to_return = 45 + metrics.glycemic_load * 5
    # ...and a longer tail.
    if metrics.protein_fat_ratio > 1:
        time_to_return *= 1 + min(0.5, (metrics.protein_fat_ratio - 1) * 0.1)

    peak_time = time_to_return * 0.3
    curve: list[CurvePoint] = []
    minute = 0
    while minute <= time_to_return:
        curve.append(
            CurvePoint(
                time=minute,
                value=_curve_value(minute, peak_value, peak_time, time_to_return),
            )
        )
        minute += CURVE_STEP_MINUTES

    return BloodSugarImpact(
        peak_value=peak_value,
        time_to_return=time_to_return,
        overall_impact=impact_level(metrics.glycemic_load),
        curve=tuple(curve),
    )


def _curve_value(
    minute: float, peak_value: float, peak_time: float, time_to_return: float
) -> float:
    if minute <= peak_time:
        if minute == 0:
            return 0.0
        ratio = minute / peak_time
        return peak_value * ratio / (0.2 + 0.8 * ratio)
    ratio = (minute - peak_time) / (time_to_return - peak_time)
    return peak_value * math.exp(-2 * ratio)


def compute_blood_sugar_impact(record: NutritionRecord) -> BloodSugarImpact:
    """Estimate the blood sugar response to one serving."""
    return estimate_blood_sugar_impact(calculate_nutrient_metrics(record))


def absolute_curve(impact: BloodSugarImpact, baseline: float) -> list[CurvePoint]:
    """Shift a rise curve onto a fasting baseline in mg/dL."""
    if not MIN_BASELINE <= baseline <= MAX_BASELINE:
        raise ValueError(
            f"Baseline must be between {MIN_BASELINE:g} and {MAX_BASELINE:g} mg/dL"
        )
    return [
        CurvePoint(time=point.time, value=baseline + point.value)
        for point in impact.curve
    ]
