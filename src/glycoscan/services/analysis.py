"""Label analysis pipeline: OCR, LLM extraction and pattern fallback."""

import logging
from dataclasses import dataclass

from glycoscan.domain.nutrition import (
    CORE_FIELDS,
    ExtractionDebugInfo,
    NutritionRecord,
    Region,
)
from glycoscan.parsing.dispatcher import extract_nutrition
from glycoscan.parsing.uk_columns import DEFAULT_CEILINGS, ServingCeilings
from glycoscan.services.llm import LLM_CONFIDENCE, LlmNutritionService, to_record
from glycoscan.services.ocr import OcrService

EXTRACTION_LLM = "llm"
EXTRACTION_PATTERN = "pattern"
_REASONING_PREVIEW = 200

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelAnalysis:
    """Outcome of reading one label."""

    text: str
    record: NutritionRecord
    extraction_method: str
    confidence: float
    reasoning: str
    debug: ExtractionDebugInfo | None = None


class OcrUnavailableError(RuntimeError):
    """Raised when image analysis is requested without an OCR backend."""


@dataclass
class LabelAnalysisService:
    """Reads label text with the LLM when available, else with patterns."""

    ocr_service: OcrService | None = None
    llm_service: LlmNutritionService | None = None
    ceilings: ServingCeilings = DEFAULT_CEILINGS
    default_region: Region = Region.US

    async def analyze_image(
        self, image_data: str, region: Region | str | None = None
    ) -> LabelAnalysis:
        """Run OCR on an uploaded image and analyze the detected text."""
        if self.ocr_service is None:
            raise OcrUnavailableError("OCR is not configured")
        text = await self.ocr_service.recognize(image_data)
        return await self.analyze_text(text, region)

    async def analyze_text(
        self, text: str, region: Region | str | None = None
    ) -> LabelAnalysis:
        """Extract nutrition facts from OCR text."""
        resolved = Region.parse(region or self.default_region)
        if self.llm_service is not None and text.strip():
            try:
                extract = await self.llm_service.extract(text, resolved)
            except Exception:
                _logger.warning(
                    "LLM extraction failed, using pattern parser", exc_info=True
                )
            else:
                return LabelAnalysis(
                    text=text,
                    record=to_record(extract, resolved),
                    extraction_method=EXTRACTION_LLM,
                    confidence=LLM_CONFIDENCE,
                    reasoning=(
                        f"Extracted by {self.llm_service.model} from OCR text: "
                        f"{text[:_REASONING_PREVIEW]}"
                    ),
                )
        return self.parse_text(text, resolved)

    def parse_text(
        self, text: str, region: Region | str | None = None
    ) -> LabelAnalysis:
        """Extract nutrition facts with the pattern parsers only."""
        resolved = Region.parse(region or self.default_region)
        record, debug = extract_nutrition(text, resolved, self.ceilings)
        matched = [name for name in CORE_FIELDS if debug.provenance(name).matched]
        return LabelAnalysis(
            text=text,
            record=record,
            extraction_method=EXTRACTION_PATTERN,
            confidence=round(len(matched) / len(CORE_FIELDS), 2),
            reasoning=(
                f"Matched {len(matched)} of {len(CORE_FIELDS)} fields with "
                f"{resolved.value} label patterns"
            ),
            debug=debug,
        )
