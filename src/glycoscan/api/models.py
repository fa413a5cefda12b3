"""Pydantic models for the HTTP API payloads."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from glycoscan.domain.glycemic import BloodSugarImpact, CurvePoint, NutrientMetrics
from glycoscan.domain.nutrition import (
    DEFAULT_SERVING_SIZE,
    ExtractionDebugInfo,
    NutritionRecord,
)
from glycoscan.parsing.numbers import MAX_QUANTITY
from glycoscan.services.analysis import LabelAnalysis
from glycoscan.services.glycemic import MAX_BASELINE, MIN_BASELINE


class ApiModel(BaseModel):
    """Base model using camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NutritionPayload(ApiModel):
    """Nutrition facts for one serving."""

    serving_size: str = DEFAULT_SERVING_SIZE
    calories: float = Field(default=0.0, ge=0, le=MAX_QUANTITY)
    total_carbs: float = Field(default=0.0, ge=0, le=MAX_QUANTITY)
    sugars: float = Field(default=0.0, ge=0, le=MAX_QUANTITY)
    fiber: float = Field(default=0.0, ge=0, le=MAX_QUANTITY)
    protein: float = Field(default=0.0, ge=0, le=MAX_QUANTITY)
    fat: float = Field(default=0.0, ge=0, le=MAX_QUANTITY)
    salt: float | None = Field(default=None, ge=0, le=MAX_QUANTITY)

    @classmethod
    def from_record(cls, record: NutritionRecord) -> "NutritionPayload":
        return cls(
            serving_size=record.serving_size,
            calories=record.calories,
            total_carbs=record.total_carbs,
            sugars=record.sugars,
            fiber=record.fiber,
            protein=record.protein,
            fat=record.fat,
            salt=record.salt,
        )

    def to_record(self) -> NutritionRecord:
        return NutritionRecord(
            serving_size=self.serving_size,
            calories=self.calories,
            total_carbs=self.total_carbs,
            sugars=self.sugars,
            fiber=self.fiber,
            protein=self.protein,
            fat=self.fat,
            salt=self.salt,
        )


class AnalyzeImageRequest(ApiModel):
    """Uploaded label photo."""

    image_data: str
    country: str | None = None


class ExtractTextRequest(ApiModel):
    """OCR text to parse."""

    text: str
    country: str | None = None


class FieldProvenancePayload(ApiModel):
    """Which matcher produced a field."""

    matcher: str
    source: str | None = None


class AnalysisResponse(ApiModel):
    """Label analysis envelope."""

    text: str
    nutrition: NutritionPayload
    extraction_method: str
    confidence: float
    reasoning: str

    @classmethod
    def from_analysis(cls, analysis: LabelAnalysis) -> "AnalysisResponse":
        return cls(
            text=analysis.text,
            nutrition=NutritionPayload.from_record(analysis.record),
            extraction_method=analysis.extraction_method,
            confidence=analysis.confidence,
            reasoning=analysis.reasoning,
        )


class ExtractTextResponse(AnalysisResponse):
    """Label analysis envelope with per-field provenance."""

    region: str | None = None
    debug: dict[str, FieldProvenancePayload] | None = None

    @classmethod
    def from_analysis(cls, analysis: LabelAnalysis) -> "ExtractTextResponse":
        base = AnalysisResponse.from_analysis(analysis)
        return cls(
            **base.model_dump(),
            region=analysis.debug.region.value if analysis.debug else None,
            debug=_debug_payload(analysis.debug),
        )


class ImpactRequest(ApiModel):
    """Nutrition facts to model, with an optional fasting baseline."""

    nutrition: NutritionPayload
    baseline: float | None = Field(default=None, ge=MIN_BASELINE, le=MAX_BASELINE)


class CurvePointPayload(ApiModel):
    """One sample of the response curve."""

    time: float
    value: float


class MetricsPayload(ApiModel):
    """Derived carbohydrate metrics."""

    net_carbs: float
    estimated_gi: float
    glycemic_load: float
    protein_fat_ratio: float


class ImpactResponse(ApiModel):
    """Estimated blood sugar response."""

    peak_value: float
    time_to_return: float
    overall_impact: str
    curve: list[CurvePointPayload]
    metrics: MetricsPayload
    absolute_curve: list[CurvePointPayload] | None = None

    @classmethod
    def build(
        cls,
        impact: BloodSugarImpact,
        metrics: NutrientMetrics,
        absolute: list[CurvePoint] | None = None,
    ) -> "ImpactResponse":
        return cls(
            peak_value=impact.peak_value,
            time_to_return=impact.time_to_return,
            overall_impact=impact.overall_impact.value,
            curve=_curve_payload(impact.curve),
            metrics=MetricsPayload(
                net_carbs=metrics.net_carbs,
                estimated_gi=metrics.estimated_gi,
                glycemic_load=metrics.glycemic_load,
                protein_fat_ratio=metrics.protein_fat_ratio,
            ),
            absolute_curve=_curve_payload(absolute) if absolute is not None else None,
        )


def _curve_payload(points: Iterable[CurvePoint]) -> list[CurvePointPayload]:
    return [CurvePointPayload(time=point.time, value=point.value) for point in points]


def _debug_payload(
    debug: ExtractionDebugInfo | None,
) -> dict[str, FieldProvenancePayload] | None:
    if debug is None:
        return None
    return {
        name: FieldProvenancePayload(matcher=entry.matcher, source=entry.source)
        for name, entry in debug.fields.items()
    }
