"""Region-aware entry point for label text extraction."""

import dataclasses
import logging

from glycoscan.domain.nutrition import ExtractionDebugInfo, NutritionRecord, Region
from glycoscan.parsing.normalizer import normalize_text
from glycoscan.parsing.uk_columns import DEFAULT_CEILINGS, ServingCeilings
from glycoscan.parsing.uk_parser import extract_uk
from glycoscan.parsing.us_parser import extract_us

_logger = logging.getLogger(__name__)


def extract_nutrition(
    raw_text: str,
    region: Region | str | None = Region.US,
    ceilings: ServingCeilings = DEFAULT_CEILINGS,
) -> tuple[NutritionRecord, ExtractionDebugInfo]:
    """Normalize OCR text and parse it with the layout for the region.

    Only UK labels use the three-column layout. EU and CA labels, and any
    unrecognised code, go through the single-column parser.
    """
    resolved = Region.parse(region)
    text = normalize_text(raw_text or "")
    if resolved is Region.UK:
        record, debug = extract_uk(text, ceilings)
    else:
        record, debug = extract_us(text)
        if resolved is not Region.US:
            debug = dataclasses.replace(debug, region=resolved)
    _logger.debug(
        "Extracted %s label: matched=%s", resolved.value, debug.matched_fields()
    )
    return record, debug
