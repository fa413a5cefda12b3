"""Parser for three-column (UK style) nutrition labels."""

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
    Matcher,
    RegexMatcher,
    first_match,
    number_value,
    text_value,
    within,
)
from glycoscan.parsing.uk_columns import (
    DEFAULT_CEILINGS,
    ServingCeilings,
    select_serving_value,
)

MAX_SERVING_CALORIES = 1000.0

# Record field -> (ceiling name, keywords in priority order).
NUTRIENT_KEYWORDS: dict[str, tuple[str, tuple[str, ...]]] = {
    "total_carbs": (
        "carbohydrate",
        ("carbohydrate", "carbohydrates", "total carbohydrate"),
    ),
    "sugars": ("sugars", ("sugars", "sugar", "of which sugars")),
    "fiber": ("fibre", ("fibre", "fiber", "dietary fibre")),
    "protein": ("protein", ("protein",)),
    "fat": ("fat", ("fat", "total fat")),
    "salt": ("salt", ("salt",)),
}

_logger = logging.getLogger(__name__)

_WEIGHT = r"\d+(?:\.\d+)?\s*g"
_KJ_KCAL_PAIRS = r"\d+\s*kj\s*/\s*\d+\s*kcal\s+\d+\s*kj\s*/\s*(\d+)\s*kcal"

CALORIE_MATCHERS: list[Matcher] = [
    RegexMatcher("calories:energy-row", re.compile(rf"\benergy\s+{_KJ_KCAL_PAIRS}")),
    RegexMatcher(
        "calories:energy-second-kcal",
        re.compile(r"\benergy\b[^\n]*?(?<!\d)\d+\s*kcal\b[^\n]*?(?<!\d)(\d+)\s*kcal"),
    ),
    RegexMatcher("calories:kj-kcal-pairs", re.compile(_KJ_KCAL_PAIRS)),
    RegexMatcher(
        "calories:kcal-pair", re.compile(r"(?<!\d)\d+\s*kcal\s+(\d+)\s*kcal")
    ),
    RegexMatcher(
        "calories:each-contains",
        re.compile(r"\beach\s+\w+(?:\s*\([^)]*\))?\s+contains\D{0,20}?(\d+)\s*kcal"),
    ),
]

_SERVING_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "serving_size:each-typically-contains",
        re.compile(
            rf"\beach\s+(?P<unit>\w+)\s*\(typically\s*"
            rf"(?P<weight>{_WEIGHT})\)\s*contains"
        ),
    ),
    (
        "serving_size:each-typically-contains-weight",
        re.compile(
            rf"\beach\s+(?P<unit>\w+)\s*\(typically[^)]*?contains\s+"
            rf"(?P<weight>{_WEIGHT})\)"
        ),
    ),
    (
        "serving_size:each-weight-contains",
        re.compile(rf"\beach\s+(?P<unit>\w+)\s*\((?P<weight>{_WEIGHT})\)\s*contains"),
    ),
    (
        "serving_size:each-typically",
        re.compile(
            rf"\beach\s+(?P<unit>\w+)\s*\(typically[^)]*?(?P<weight>{_WEIGHT})\)"
        ),
    ),
    (
        "serving_size:each-weight",
        re.compile(rf"\beach\s+(?P<unit>\w+)\s*\((?P<weight>{_WEIGHT})\)"),
    ),
    (
        "serving_size:weight-per-unit",
        re.compile(rf"(?<![\d.])(?P<weight>{_WEIGHT})\s+per\s+(?P<unit>[a-z]+)"),
    ),
    (
        "serving_size:each-loose",
        re.compile(rf"\beach\s+(?P<unit>\w+)[^\n]*?(?<![\d.])(?P<weight>{_WEIGHT})\b"),
    ),
)
_SERVING_WORDS = ("serving", "slice", "cup")
_GRAM_TOKEN = re.compile(rf"(?<![\d.])({_WEIGHT})\b")


def _compact(weight: str) -> str:
    return re.sub(r"\s+", "", weight)


def _serving_description(text: str) -> FieldMatch | None:
    for name, pattern in _SERVING_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        weight = _compact(match.group("weight"))
        return FieldMatch(
            value=f"{weight} ({match.group('unit')})",
            matcher=name,
            source=match.group(0),
        )
    return None


def _serving_weight_line(text: str) -> FieldMatch | None:
    for line in text.split("\n"):
        if not any(word in line for word in _SERVING_WORDS):
            continue
        for token in _GRAM_TOKEN.findall(line):
            weight = _compact(token)
            # "100g" heads the per-100g column.
            if weight == "100g":
                continue
            return FieldMatch(value=weight, matcher="serving_size:line", source=line)
    return None


SERVING_SIZE_MATCHERS: list[Matcher] = [_serving_description, _serving_weight_line]


def extract_uk(
    text: str, ceilings: ServingCeilings = DEFAULT_CEILINGS
) -> tuple[NutritionRecord, ExtractionDebugInfo]:
    """Extract per-serving values from a three-column label."""
    rows = "\n".join(line for line in text.split("\n") if line.strip())
    matches: dict[str, FieldMatch | None] = {
        "serving_size": first_match(SERVING_SIZE_MATCHERS, rows),
        "calories": first_match(
            CALORIE_MATCHERS, rows, accept=within(MAX_SERVING_CALORIES)
        ),
    }
    for field_name, (nutrient, keywords) in NUTRIENT_KEYWORDS.items():
        matches[field_name] = select_serving_value(rows, nutrient, keywords, ceilings)

    for name, match in matches.items():
        if match is None:
            _logger.debug("UK %s: no match", name)
        else:
            _logger.debug("UK %s=%r via %s", name, match.value, match.matcher)

    record = NutritionRecord(
        serving_size=text_value(matches["serving_size"], DEFAULT_SERVING_SIZE),
        calories=number_value(matches["calories"]),
        total_carbs=number_value(matches["total_carbs"]),
        sugars=number_value(matches["sugars"]),
        fiber=number_value(matches["fiber"]),
        protein=number_value(matches["protein"]),
        fat=number_value(matches["fat"]),
        salt=number_value(matches["salt"]),
    )
    debug = ExtractionDebugInfo(
        region=Region.UK,
        fields={
            name: FieldProvenance.from_match(match) for name, match in matches.items()
        },
    )
    return record, debug
