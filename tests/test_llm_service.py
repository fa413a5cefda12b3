"""Tests for LLM nutrition extraction."""

import asyncio

import pytest
from pydantic import ValidationError

from glycoscan.domain.llm import LabelExtract
from glycoscan.domain.nutrition import NutritionRecord, Region
from glycoscan.parsing.numbers import MAX_QUANTITY
from glycoscan.services.llm import (
    LABEL_SCHEMA,
    LlmNutritionService,
    build_prompt,
    to_record,
)
from tests.conftest import FakeLabelClient


def test_service_returns_validated_extract(llm_service: LlmNutritionService) -> None:
    result = asyncio.run(llm_service.extract("Calories 90", Region.US))

    assert result.calories == 90
    assert result.serving_size == "1 cup (240ml)"
    assert result.salt is None
    assert llm_service.client.prompts[0].endswith("OCR text:\nCalories 90")


def test_service_rejects_malformed_payload() -> None:
    service = LlmNutritionService(
        client=FakeLabelClient(payload={"calories": "lots"}),
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )

    with pytest.raises(ValidationError):
        asyncio.run(service.extract("Calories 90", Region.US))


def test_prompt_describes_region_layout() -> None:
    uk_prompt = build_prompt("Energy 435kJ", Region.UK)
    us_prompt = build_prompt("Calories 90", Region.US)

    assert "UK food label" in uk_prompt
    assert "per serving column" in uk_prompt
    assert "US food label" in us_prompt
    assert "added sugars" in us_prompt


def test_schema_requires_every_field() -> None:
    assert set(LABEL_SCHEMA["required"]) == set(LABEL_SCHEMA["properties"])
    assert LABEL_SCHEMA["additionalProperties"] is False


def test_to_record_clamps_negatives_and_fills_defaults() -> None:
    extract = LabelExtract(calories=-5, total_carbs=12.5, sugars=None, salt=0.3)

    record = to_record(extract, Region.US)

    assert record == NutritionRecord(calories=0, total_carbs=12.5)
    assert record.salt is None


def test_to_record_keeps_salt_for_uk() -> None:
    extract = LabelExtract(serving_size=" 44g (slice) ", calories=105, salt=0.4)

    record = to_record(extract, Region.UK)

    assert record.serving_size == "44g (slice)"
    assert record.salt == 0.4


def test_to_record_caps_values_at_quantity_bound() -> None:
    extract = LabelExtract(calories=25000, total_carbs=1e300, salt=1e12)

    record = to_record(extract, Region.UK)

    assert record.calories == MAX_QUANTITY
    assert record.total_carbs == MAX_QUANTITY
    assert record.salt == MAX_QUANTITY
