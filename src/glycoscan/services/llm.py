"""LLM-based nutrition extraction from OCR text."""

from dataclasses import dataclass
from typing import Protocol

from glycoscan.domain.llm import LabelExtract
from glycoscan.domain.nutrition import DEFAULT_SERVING_SIZE, NutritionRecord, Region
from glycoscan.parsing.numbers import MAX_QUANTITY

_NULLABLE_NUMBER = {
    "anyOf": [
        {"type": "number", "minimum": 0, "maximum": MAX_QUANTITY},
        {"type": "null"},
    ]
}

LABEL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "serving_size": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "calories": _NULLABLE_NUMBER,
        "total_carbs": _NULLABLE_NUMBER,
        "sugars": _NULLABLE_NUMBER,
        "fiber": _NULLABLE_NUMBER,
        "protein": _NULLABLE_NUMBER,
        "fat": _NULLABLE_NUMBER,
        "salt": _NULLABLE_NUMBER,
    },
    "required": [
        "serving_size",
        "calories",
        "total_carbs",
        "sugars",
        "fiber",
        "protein",
        "fat",
        "salt",
    ],
    "additionalProperties": False,
}

LLM_CONFIDENCE = 0.9


class LabelExtractionError(RuntimeError):
    """Raised when the LLM reply is not a usable JSON object."""


class LabelClient(Protocol):
    """Interface for LLM structured extraction."""

    async def extract(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured extraction data."""


@dataclass
class LlmNutritionService:
    """Prompts an LLM for nutrition facts and validates its answer."""

    client: LabelClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def extract(self, ocr_text: str, region: Region) -> LabelExtract:
        """Extract label values from OCR text via the configured client."""
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            schema=LABEL_SCHEMA,
            prompt=build_prompt(ocr_text, region),
        )
        return LabelExtract.model_validate(raw)


def build_prompt(ocr_text: str, region: Region) -> str:
    """Build the extraction prompt for a label region."""
    if region is Region.UK:
        layout = (
            "This is a UK label with columns per 100g, per serving and %RI. "
            "Use the per serving column (usually the second number on a row), "
            "never the per 100g column. Report calories in kcal. "
            "Describe the serving like '44g (slice)'."
        )
    else:
        layout = (
            "This label lists one value per nutrient for a single serving. "
            "Use total sugars, not added sugars. "
            "Report the serving size as printed, e.g. '1 cup (240ml)'."
        )
    return (
        "You read nutrition labels. Extract per-serving nutrition facts from "
        f"this OCR text of a {region.value} food label.\n"
        f"{layout}\n"
        "Return grams for carbohydrates, sugars, fiber, protein, fat and salt. "
        "Use null for values that are not on the label.\n\n"
        f"OCR text:\n{ocr_text}"
    )


def to_record(extract: LabelExtract, region: Region) -> NutritionRecord:
    """Convert an LLM extract into a record, clamping values to 0..MAX_QUANTITY."""
    return NutritionRecord(
        serving_size=(extract.serving_size or "").strip() or DEFAULT_SERVING_SIZE,
        calories=_bounded(extract.calories),
        total_carbs=_bounded(extract.total_carbs),
        sugars=_bounded(extract.sugars),
        fiber=_bounded(extract.fiber),
        protein=_bounded(extract.protein),
        fat=_bounded(extract.fat),
        salt=_bounded(extract.salt) if region is Region.UK else None,
    )


def _bounded(value: float | None) -> float:
    if value is None:
        return 0.0
    return min(MAX_QUANTITY, max(0.0, value))
