"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from glycoscan.adapters.openai_label_client import OpenAILabelClient
from glycoscan.adapters.vision_ocr_client import HttpxVisionOcrClient
from glycoscan.config import Settings
from glycoscan.domain.nutrition import Region
from glycoscan.services.analysis import LabelAnalysisService
from glycoscan.services.llm import LlmNutritionService
from glycoscan.services.ocr import OcrService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: LabelAnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()

    ocr_client: HttpxVisionOcrClient | None = None
    ocr_service: OcrService | None = None
    if resolved_settings.vision_api_key:
        ocr_client = HttpxVisionOcrClient.create(
            api_key=resolved_settings.vision_api_key,
            base_url=resolved_settings.vision_base_url,
        )
        ocr_service = OcrService(ocr_client)

    label_client: OpenAILabelClient | None = None
    llm_service: LlmNutritionService | None = None
    if resolved_settings.openai_api_key and resolved_settings.llm_extraction_enabled:
        label_client = OpenAILabelClient.create(resolved_settings.openai_api_key)
        llm_service = LlmNutritionService(
            client=label_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )

    analysis_service = LabelAnalysisService(
        ocr_service=ocr_service,
        llm_service=llm_service,
        ceilings=resolved_settings.serving_ceilings(),
        default_region=Region.parse(resolved_settings.default_region),
    )

    async def close_resources() -> None:
        if ocr_client is not None:
            await ocr_client.close()
        if label_client is not None:
            await label_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
