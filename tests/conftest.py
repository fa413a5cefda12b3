"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from glycoscan.config import Settings
from glycoscan.containers import AppContainer
from glycoscan.services.analysis import LabelAnalysisService
from glycoscan.services.llm import LabelClient, LlmNutritionService
from glycoscan.services.ocr import OcrClient, OcrService

US_LABEL = (
    "Nutrition Facts\n"
    "Serving Size 1 cup (240ml)\n"
    "Calories 90\n"
    "Total Fat 0g 0%\n"
    "Total Carbohydrate 22g 7%\n"
    "Dietary Fiber 2g 8%\n"
    "Sugars 19g\n"
    "Protein 1g"
)

UK_LABEL = """
Nutrition
Typical values 100g contains Each slice (typically 44g) contains % RI*
RI* for an average adult
Energy 985kJ / 235kcal 435kJ / 105kcal 5% 8400kJ / 2000kcal
Fat 1.5g 0.7g 1% 70g
of which saturates 0.3g 0.1g 1% 20g
Carbohydrate 45.5g 20.0g 260g
of which sugars 3.8g 1.7g 2% 90g
Fibre 2.8g 1.2g 30g
Protein 7.7g 3.4g 50g
Salt 1.0g 0.4g 7% 6g
This pack contains 16 servings
*Reference intake of an average adult (8400kJ / 2000kcal)
"""


@dataclass
class FakeOcrClient(OcrClient):
    """OCR client returning canned text."""

    text: str = US_LABEL
    calls: list[bytes] = field(default_factory=list)

    async def detect_text(self, image_bytes: bytes) -> str:
        self.calls.append(image_bytes)
        return self.text


@dataclass
class FakeLabelClient(LabelClient):
    """LLM client returning a canned extraction."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "serving_size": "1 cup (240ml)",
            "calories": 90,
            "total_carbs": 22,
            "sugars": 19,
            "fiber": 2,
            "protein": 1,
            "fat": 0,
            "salt": None,
        }
    )
    prompts: list[str] = field(default_factory=list)

    async def extract(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload


class FailingLabelClient(LabelClient):
    """LLM client that always fails."""

    async def extract(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        raise RuntimeError("model unavailable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        vision_api_key="vision-key",
    )


@pytest.fixture
def ocr_client() -> FakeOcrClient:
    return FakeOcrClient()


@pytest.fixture
def container(settings: Settings, ocr_client: FakeOcrClient) -> AppContainer:
    analysis_service = LabelAnalysisService(
        ocr_service=OcrService(ocr_client),
        llm_service=None,
        ceilings=settings.serving_ceilings(),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )


@pytest.fixture
def llm_service() -> LlmNutritionService:
    return LlmNutritionService(
        client=FakeLabelClient(),
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )
