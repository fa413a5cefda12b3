"""Unit-aware numeric token extraction."""

import re

NOT_FOUND = None
MAX_QUANTITY = 10000.0

NUMBER = r"(\d+(?:\.\d+)?)"

_PERCENTAGE = re.compile(r"\d+(?:\.\d+)?\s*%")
_GRAMS = r"g(?:rams?)?\b"
_MILLIGRAMS = r"mg\b"

# Most reliable first: label rows usually end with the quantity.
_CANDIDATES = (
    re.compile(rf"(?<![\d.]){NUMBER}\s*{_GRAMS}\s*$"),
    re.compile(rf"(?<![\d.]){NUMBER}\s*{_MILLIGRAMS}\s*$"),
    re.compile(rf"(?<![\d.]){NUMBER}\s*$"),
    re.compile(rf"(?<![\d.]){NUMBER}\s*{_GRAMS}"),
    re.compile(rf"(?<![\d.]){NUMBER}\s*{_MILLIGRAMS}"),
    re.compile(rf"(?<![\d.]){NUMBER}"),
)


def extract_number(span: str) -> float | None:
    """Return the most plausible quantity in a span, or NOT_FOUND."""
    cleaned = _PERCENTAGE.sub(" ", span)
    for pattern in _CANDIDATES:
        for match in pattern.finditer(cleaned):
            value = float(match.group(1))
            if 0 <= value <= MAX_QUANTITY:
                return value
    return NOT_FOUND
