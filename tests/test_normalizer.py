"""Tests for OCR text normalization."""

import pytest

from glycoscan.parsing.normalizer import normalize_text
from tests.conftest import UK_LABEL, US_LABEL


def test_lowercases_and_collapses_spaces_but_keeps_lines() -> None:
    raw = "Total   Fat\t 8g\r\nSODIUM  160mg"

    assert normalize_text(raw) == "total fat 8g\nsodium 160mg"


def test_empty_input_returns_empty_string() -> None:
    assert normalize_text("") == ""


def test_letter_o_before_unit_becomes_zero() -> None:
    assert normalize_text("Sugars 1og") == "sugars 10g"
    assert normalize_text("Total Fat og") == "total fat 0g"


def test_nine_misread_for_gram_unit() -> None:
    assert normalize_text("Protein 45 9") == "protein 45 g"
    assert normalize_text("Total Fat 459 12%") == "total fat 45g 12%"


def test_nine_before_a_unit_or_percent_is_kept() -> None:
    assert normalize_text("Sugars 19g") == "sugars 19g"
    assert normalize_text("Iron 9%") == "iron 9%"
    assert normalize_text("Calories 190") == "calories 190"


def test_stray_glyph_after_gram_unit_is_dropped() -> None:
    assert normalize_text("Fiber 3g9") == "fiber 3g"


def test_decimal_comma_becomes_point() -> None:
    assert normalize_text("Fat 1,5g 0,7g") == "fat 1.5g 0.7g"
    assert normalize_text("8,400kJ") == "8,400kj"


def test_decimal_comma_after_letter_o_repair() -> None:
    assert normalize_text("Total Fat 1,og") == "total fat 1.0g"
    assert normalize_text("Fat 2,og 1,og 1%") == "fat 2.0g 1.0g 1%"


@pytest.mark.parametrize(
    "raw",
    [
        US_LABEL,
        UK_LABEL,
        "Total Fat og 0%\nSugars 1og",
        "Protein 45 9 9\nFat 4599 12%",
        "  Energy 985kJ/235kcal  \n\n\nSalt 1,05g  ",
        "garbage ### 12g9 og 3,5 9",
        "Fat 1,og",
        "89,og",
        "4,og\ngg",
    ],
)
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_text(raw)

    assert normalize_text(once) == once
