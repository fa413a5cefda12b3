"""Parser for single-column (US style) nutrition facts panels."""

import logging
import re

from glycoscan.domain.nutrition import (
    DEFAULT_SERVING_SIZE,
    ExtractionDebugInfo,
    FieldMatch,
    FieldProvenance,
    NutritionRecord,
    Region,
)
from glycoscan.parsing.matchers import (
    KeywordLineMatcher,
    Matcher,
    RegexMatcher,
    first_match,
    number_value,
    text_value,
)
from glycoscan.parsing.numbers import NUMBER, extract_number

_logger = logging.getLogger(__name__)

_CALORIES_BEFORE_DAILY_VALUE = re.compile(
    rf"\bcalories\b(?!\s+from\b)\D*?{NUMBER}\s*%\s*daily\s*values?"
)
_CALORIES_FROM_FAT = re.compile(r"calories\s+(?:from\s+)?fat|fat\s+calories")
_LONE_CALORIE_NUMBER = re.compile(rf"^{NUMBER}\s*(?:k?cal)?$")
_PER_AMOUNT = re.compile(
    r"\bper\s+(\d+(?:\.\d+)?\s*(?:g|ml|oz|cups?|tbsp|tsp|pieces?|packets?"
    r"|pouch(?:es)?|containers?|bottles?|cans?))\b"
)
_NOT_A_SOURCE = ("not a significant source", "not a source of")


def _quantity_after(keyword: str, guard: str = "") -> re.Pattern[str]:
    """Keyword followed on the same line by a gram quantity."""
    return re.compile(
        rf"{guard}\b{re.escape(keyword)}s?[^\S\n]*[:.\-]?[^\S\n]*"
        rf"{NUMBER}[^\S\n]*g(?:rams?)?\b"
    )


def _nutrient_matchers(
    field: str,
    keywords: tuple[str, ...],
    guard: str = "",
    exclude: tuple[str, ...] = (),
) -> list[Matcher]:
    matchers: list[Matcher] = [
        RegexMatcher(f"{field}:text:{keyword}", _quantity_after(keyword, guard))
        for keyword in keywords
    ]
    matchers.extend(
        KeywordLineMatcher(f"{field}:line:{keyword}", keyword, exclude)
        for keyword in keywords
    )
    return matchers


def _calorie_part(line: str) -> str | None:
    """Line text before any "calories from fat" phrase, if it names calories."""
    from_fat = _CALORIES_FROM_FAT.search(line)
    part = line[: from_fat.start()] if from_fat else line
    return part if "calories" in part else None


def _calories_same_line(text: str) -> FieldMatch | None:
    for line in text.split("\n"):
        part = _calorie_part(line)
        if part is None:
            continue
        value = extract_number(part.split("calories", 1)[1])
        if value is not None:
            return FieldMatch(value=value, matcher="calories:same-line", source=line)
    return None


def _calories_adjacent_line(text: str, offset: int) -> FieldMatch | None:
    lines = text.split("\n")
    name = "calories:next-line" if offset > 0 else "calories:previous-line"
    for index, line in enumerate(lines):
        if _calorie_part(line) is None:
            continue
        neighbour = index + offset
        if not 0 <= neighbour < len(lines):
            continue
        match = _LONE_CALORIE_NUMBER.match(lines[neighbour])
        if match:
            return FieldMatch(
                value=float(match.group(1)), matcher=name, source=lines[neighbour]
            )
    return None


def _calories_next_line(text: str) -> FieldMatch | None:
    return _calories_adjacent_line(text, 1)


def _calories_previous_line(text: str) -> FieldMatch | None:
    return _calories_adjacent_line(text, -1)


def _serving_size_line(text: str) -> FieldMatch | None:
    lines = text.split("\n")
    for index, line in enumerate(lines):
        if "serving size" not in line:
            continue
        remainder = line.split("serving size", 1)[1].strip().lstrip(":=-").strip()
        if not remainder and index + 1 < len(lines):
            following = lines[index + 1].strip()
            if any(char.isdigit() for char in following):
                remainder = following
        if remainder:
            return FieldMatch(
                value=remainder, matcher="serving_size:line", source=line
            )
    return None


def _serving_size_per_amount(text: str) -> FieldMatch | None:
    match = _PER_AMOUNT.search(text)
    if match is None:
        return None
    return FieldMatch(
        value=match.group(1).strip(),
        matcher="serving_size:per-amount",
        source=match.group(0),
    )


CALORIE_MATCHERS: list[Matcher] = [
    RegexMatcher("calories:text:daily-value", _CALORIES_BEFORE_DAILY_VALUE),
    _calories_same_line,
    _calories_next_line,
    _calories_previous_line,
]
CARB_MATCHERS = _nutrient_matchers(
    "total_carbs", ("total carbohydrate", "carbohydrate total", "total carbs")
) + [KeywordLineMatcher("total_carbs:line:carbohydrate", "carbohydrate", ("net",))]
SUGAR_MATCHERS = _nutrient_matchers(
    "sugars",
    ("sugars", "sugar"),
    guard=r"(?<!added )",
    exclude=("added", "alcohol"),
)
FIBER_MATCHERS = _nutrient_matchers(
    "fiber", ("dietary fiber", "fiber", "fibre"), exclude=_NOT_A_SOURCE
)
PROTEIN_MATCHERS = _nutrient_matchers("protein", ("protein",))
FAT_MATCHERS = _nutrient_matchers("fat", ("total fat", "fat total"))
SERVING_SIZE_MATCHERS: list[Matcher] = [
    _serving_size_line,
    _serving_size_per_amount,
]


def extract_us(text: str) -> tuple[NutritionRecord, ExtractionDebugInfo]:
    """Extract a single-column nutrition facts panel from normalized text."""
    rows = "\n".join(line for line in text.split("\n") if line.strip())
    matches: dict[str, FieldMatch | None] = {
        "serving_size": first_match(SERVING_SIZE_MATCHERS, rows),
        "calories": first_match(CALORIE_MATCHERS, rows),
        "total_carbs": first_match(CARB_MATCHERS, rows),
        "sugars": first_match(SUGAR_MATCHERS, rows),
        "fiber": first_match(FIBER_MATCHERS, rows),
        "protein": first_match(PROTEIN_MATCHERS, rows),
        "fat": first_match(FAT_MATCHERS, rows),
    }
    for name, match in matches.items():
        if match is None:
            _logger.debug("US %s: no match", name)
        else:
            _logger.debug("US %s=%r via %s", name, match.value, match.matcher)

    record = NutritionRecord(
        serving_size=text_value(matches["serving_size"], DEFAULT_SERVING_SIZE),
        calories=number_value(matches["calories"]),
        total_carbs=number_value(matches["total_carbs"]),
        sugars=number_value(matches["sugars"]),
        fiber=number_value(matches["fiber"]),
        protein=number_value(matches["protein"]),
        fat=number_value(matches["fat"]),
    )
    debug = ExtractionDebugInfo(
        region=Region.US,
        fields={
            name: FieldProvenance.from_match(match) for name, match in matches.items()
        },
    )
    return record, debug

