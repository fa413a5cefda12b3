"""Per-serving column selection for three-column (UK style) labels.

UK rows read ``<keyword> <per 100g> <per serving> [<%RI>]``. Every template
here captures the per-serving figure, and a per-nutrient ceiling rejects
values that can only have come from the per-100g column.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from glycoscan.domain.nutrition import FieldMatch
from glycoscan.parsing.matchers import Acceptor, Matcher, RegexMatcher, first_match
from glycoscan.parsing.numbers import MAX_QUANTITY, NUMBER


@dataclass(frozen=True)
class ServingCeilings:
    """Largest plausible grams per serving, keyed by nutrient.

    These are heuristics for spotting a per-100g value, not nutritional limits.
    ``None`` disables the check. When the true per-serving figure exceeds its
    ceiling, the single-value fallback can still return the per-100g figure
    (``Protein 12.0g 18.0g`` reads as 12.0), so a value within the ceiling is
    not proof that the serving column was chosen.
    """

    carbohydrate: float | None = 30.0
    sugars: float | None = 20.0
    fibre: float | None = 5.0
    protein: float | None = 15.0
    fat: float | None = 10.0
    salt: float | None = None

    def for_nutrient(self, nutrient: str) -> float | None:
        return getattr(self, nutrient, None)


DEFAULT_CEILINGS = ServingCeilings()

# Prefixes that turn a keyword into a different row.
_GUARDS = {
    "fat": r"(?<!saturated )(?<!trans )",
    "sugars": r"(?<!added )",
}

_VALUE = rf"(?<![\d.]){NUMBER}"


@lru_cache(maxsize=64)
def serving_column_matchers(nutrient: str, keyword: str) -> tuple[Matcher, ...]:
    """Templates for one keyword, most specific first."""
    escaped = re.escape(keyword)
    row = rf"{_GUARDS.get(nutrient, '')}\b{escaped}"
    return (
        RegexMatcher(
            f"{nutrient}:three-column:{keyword}",
            re.compile(rf"{row}\s+{NUMBER}\s*g\s+{NUMBER}\s*g\s+(\d+)\s*%"),
            group=2,
        ),
        RegexMatcher(
            f"{nutrient}:of-which:{keyword}",
            re.compile(rf"\bof\s+which\s+{escaped}\s+{NUMBER}\s*g\s+{NUMBER}\s*g"),
            group=2,
        ),
        RegexMatcher(
            f"{nutrient}:two-column:{keyword}",
            re.compile(rf"{row}\s+{NUMBER}\s*g\s+{NUMBER}\s*g"),
            group=2,
        ),
        RegexMatcher(
            f"{nutrient}:loose-pair:{keyword}",
            re.compile(rf"{row}[^\n]*?{_VALUE}\s*g\b[^\n]*?{_VALUE}\s*g\b"),
            group=2,
        ),
        RegexMatcher(
            f"{nutrient}:loose-single:{keyword}",
            re.compile(rf"{row}[^\n]*?{_VALUE}\s*g\b"),
        ),
    )


def plausible_serving(ceiling: float | None) -> Acceptor:
    """Accept values in the general range and under the nutrient ceiling."""
    upper = MAX_QUANTITY if ceiling is None else min(ceiling, MAX_QUANTITY)

    def accept(match: FieldMatch) -> bool:
        value = match.value
        return not isinstance(value, str) and 0 <= value <= upper

    return accept


def select_serving_value(
    text: str,
    nutrient: str,
    keywords: tuple[str, ...],
    ceilings: ServingCeilings = DEFAULT_CEILINGS,
) -> FieldMatch | None:
    """Pick the per-serving value for a nutrient from normalized label text."""
    matchers = [
        matcher
        for keyword in keywords
        for matcher in serving_column_matchers(nutrient, keyword)
    ]
    return first_match(
        matchers, text, accept=plausible_serving(ceilings.for_nutrient(nutrient))
    )
