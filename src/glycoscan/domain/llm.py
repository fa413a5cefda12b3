"""Models for LLM nutrition extraction results."""

from pydantic import BaseModel


class LabelExtract(BaseModel):
    """Structured output for LLM label extraction."""

    serving_size: str | None = None
    calories: float | None = None
    total_carbs: float | None = None
    sugars: float | None = None
    fiber: float | None = None
    protein: float | None = None
    fat: float | None = None
    salt: float | None = None
