"""Tests for container wiring."""

import asyncio

from glycoscan.config import Settings
from glycoscan.containers import build_container
from glycoscan.domain.nutrition import Region


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    service = container.analysis_service
    assert service.ocr_service is not None
    assert service.llm_service is not None
    assert service.llm_service.model == settings.openai_model
    asyncio.run(container.close_resources())


def test_build_container_without_keys_uses_patterns_only() -> None:
    settings = Settings(
        openai_api_key=None,
        vision_api_key=None,
        default_region="gb",
        uk_max_protein_g=20,
    )

    container = build_container(settings)

    service = container.analysis_service
    assert service.ocr_service is None
    assert service.llm_service is None
    assert service.default_region is Region.UK
    assert service.ceilings.protein == 20
    asyncio.run(container.close_resources())


def test_llm_can_be_disabled(settings: Settings) -> None:
    settings.llm_extraction_enabled = False

    container = build_container(settings)

    assert container.analysis_service.llm_service is None
    asyncio.run(container.close_resources())
