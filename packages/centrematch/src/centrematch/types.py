"""Core types for the centrematch query resolution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class LocationEntry:
    centre_id: int
    centre_name: str
    slug: str | None = None
    suburb: str | None = None
    city: str | None = None
    state: str | None = None
    postcode: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class AreaAlias:
    suburbs: tuple[str, ...] = ()
    cities: tuple[str, ...] = ()
    states: tuple[str, ...] = ()
    postcode_ranges: tuple[tuple[int, int], ...] = ()

    @property
    def has_place_criteria(self) -> bool:
        """True when the alias names suburbs, cities or postcodes (not just states)."""
        return bool(self.suburbs or self.cities or self.postcode_ranges)


@dataclass
class ScoredCandidate:
    entry: LocationEntry
    score: float
    name_score: float = 0.0
    suburb_score: float = 0.0


@dataclass
class NearbyCentre:
    entry: LocationEntry
    distance: float


@dataclass
class ParsedQuery:
    centre_name: str
    original_query: str
    min_size_m2: float | None = None
    min_tables: int | None = None


SuggestionKind = Literal["similar_name", "nearby"]


@dataclass
class SearchSuggestion:
    kind: SuggestionKind
    centre_id: int
    centre_name: str
    reason: str
    similarity: float | None = None


@dataclass
class QueryResolution:
    query: str
    parsed: ParsedQuery
    category_keyword: str | None = None
    matched_categories: list[str] = field(default_factory=list)
    state_filter: str | None = None
    residual_tokens: list[str] = field(default_factory=list)
    candidates: list[ScoredCandidate] = field(default_factory=list)
    collapsed: bool = False
    pure_category: bool = False
    matched_area: str | None = None
    area_matches: list[LocationEntry] = field(default_factory=list)

    @property
    def best(self) -> ScoredCandidate | None:
        return self.candidates[0] if self.candidates else None

    @property
    def centres(self) -> list[LocationEntry]:
        """Entries in result order: scored candidates, else area matches."""
        if self.candidates:
            return [c.entry for c in self.candidates]
        return list(self.area_matches)
