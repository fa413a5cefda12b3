"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from glycoscan.parsing.uk_columns import ServingCeilings

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    llm_extraction_enabled: bool = True
    vision_api_key: str | None = None
    vision_base_url: str = "https://vision.googleapis.com/v1"
    default_region: str = "US"
    cors_origins: str | None = None
    debug: bool = False
    uk_max_carbohydrate_g: float = 30.0
    uk_max_sugars_g: float = 20.0
    uk_max_fibre_g: float = 5.0
    uk_max_protein_g: float = 15.0
    uk_max_fat_g: float = 10.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def serving_ceilings(self) -> ServingCeilings:
        """UK per-serving plausibility ceilings."""
        return ServingCeilings(
            carbohydrate=self.uk_max_carbohydrate_g,
            sugars=self.uk_max_sugars_g,
            fibre=self.uk_max_fibre_g,
            protein=self.uk_max_protein_g,
            fat=self.uk_max_fat_g,
        )


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned == "*":
        return ["*"]
    return [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
