"""Nutrition label domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SERVING_SIZE = "1 serving"
NO_MATCH = "no match"

CORE_FIELDS = (
    "serving_size",
    "calories",
    "total_carbs",
    "sugars",
    "fiber",
    "protein",
    "fat",
)


class Region(str, Enum):
    """Label layout regions understood by the parsers."""

    US = "US"
    UK = "UK"
    EU = "EU"
    CA = "CA"

    @classmethod
    def parse(cls, code: "str | Region | None") -> "Region":
        """Resolve a caller-supplied country code, defaulting to US."""
        if isinstance(code, Region):
            return code
        cleaned = (code or "").strip().upper()
        if cleaned == "GB":
            return cls.UK
        try:
            return cls(cleaned)
        except ValueError:
            return cls.US


@dataclass(frozen=True)
class NutritionRecord:
    """Per-serving nutrition facts recovered from a label."""

    serving_size: str = DEFAULT_SERVING_SIZE
    calories: float = 0.0
    total_carbs: float = 0.0
    sugars: float = 0.0
    fiber: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    salt: float | None = None


@dataclass(frozen=True)
class FieldMatch:
    """Value produced by a single matcher."""

    value: float | str
    matcher: str
    source: str


@dataclass(frozen=True)
class FieldProvenance:
    """Which matcher set a field, and from what text."""

    matcher: str = NO_MATCH
    source: str | None = None

    @property
    def matched(self) -> bool:
        return self.matcher != NO_MATCH

    @classmethod
    def from_match(cls, match: FieldMatch | None) -> "FieldProvenance":
        if match is None:
            return cls()
        return cls(matcher=match.matcher, source=match.source)


@dataclass(frozen=True)
class ExtractionDebugInfo:
    """Provenance for every field of an extracted record."""

    region: Region
    fields: Mapping[str, FieldProvenance] = field(default_factory=dict)

    def provenance(self, name: str) -> FieldProvenance:
        """Return provenance for a field, defaulting to no match."""
        return self.fields.get(name, FieldProvenance())

    def matched_fields(self) -> list[str]:
        """Return the names of fields populated by a matcher."""
        return [name for name, entry in self.fields.items() if entry.matched]
