"""Ordered matcher cascades used by the field locators.

A matcher is any callable taking normalized label text and returning a
``FieldMatch`` or ``None``. Locators list their matchers from most to least
specific and ``first_match`` evaluates them in that order.
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from glycoscan.domain.nutrition import FieldMatch
from glycoscan.parsing.numbers import MAX_QUANTITY, extract_number

Matcher = Callable[[str], FieldMatch | None]
Acceptor = Callable[[FieldMatch], bool]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegexMatcher:
    """Match a compiled pattern anywhere in the text and read one group."""

    name: str
    pattern: re.Pattern[str]
    group: int = 1

    def __call__(self, text: str) -> FieldMatch | None:
        match = self.pattern.search(text)
        if match is None:
            return None
        return FieldMatch(
            value=float(match.group(self.group)),
            matcher=self.name,
            source=match.group(0),
        )


@dataclass(frozen=True)
class KeywordLineMatcher:
    """Read a quantity from the first line containing a keyword."""

    name: str
    keyword: str
    exclude: tuple[str, ...] = ()

    def __call__(self, text: str) -> FieldMatch | None:
        for line in text.split("\n"):
            if self.keyword not in line:
                continue
            if any(word in line for word in self.exclude):
                continue
            value = extract_number(line.split(self.keyword, 1)[1])
            if value is not None:
                return FieldMatch(value=value, matcher=self.name, source=line)
        return None


def within(upper: float = MAX_QUANTITY) -> Acceptor:
    """Accept numeric matches in the closed range 0..upper."""

    def accept(match: FieldMatch) -> bool:
        value = match.value
        if isinstance(value, str):
            return bool(value)
        return 0 <= value <= upper

    return accept


def first_match(
    matchers: Iterable[Matcher],
    text: str,
    accept: Acceptor | None = None,
) -> FieldMatch | None:
    """Return the first accepted match from matchers in priority order."""
    check = accept or within()
    for matcher in matchers:
        match = matcher(text)
        if match is None:
            continue
        if not check(match):
            _logger.debug(
                "Rejected %s from %s (%r)", match.value, match.matcher, match.source
            )
            continue
        return match
    return None


def number_value(match: FieldMatch | None) -> float:
    """Numeric value of a match, or the 0 default."""
    if match is None or isinstance(match.value, str):
        return 0.0
    return match.value


def text_value(match: FieldMatch | None, default: str) -> str:
    """Text value of a match, or the given default."""
    if match is None:
        return default
    return str(match.value)
