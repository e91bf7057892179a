"""Search suggestions for queries that found no centres."""

from __future__ import annotations

from collections.abc import Iterable

from centrematch.config import SuggestionConfig
from centrematch.similarity import similarity
from centrematch.types import LocationEntry, SearchSuggestion


def find_similar_centres(
    entries: Iterable[LocationEntry],
    query: str,
    max_suggestions: int = 3,
    threshold: float = 0.4,
) -> list[SearchSuggestion]:
    """Centres whose names are close to the query ("did you mean")."""
    scored = [(e, similarity(query, e.centre_name)) for e in entries]
    kept = [item for item in scored if item[1] >= threshold]
    kept.sort(key=lambda item: item[1], reverse=True)

    return [
        SearchSuggestion(
            kind="similar_name",
            centre_id=e.centre_id,
            centre_name=e.centre_name,
            reason=f'Did you mean "{e.centre_name}"?',
            similarity=score,
        )
        for e, score in kept[:max_suggestions]
    ]


def _location_overlaps(entry: LocationEntry, q: str) -> bool:
    city = (entry.city or "").lower()
    suburb = (entry.suburb or "").lower()
    state = (entry.state or "").lower()

    if q in city or q in suburb or q in state:
        return True
    return bool(city and city in q) or bool(suburb and suburb in q)


def find_centres_in_location(
    entries: Iterable[LocationEntry],
    query: str,
    max_suggestions: int = 3,
) -> list[SearchSuggestion]:
    """Centres whose suburb, city or state overlaps the query text."""
    q = query.strip().lower()
    suggestions: list[SearchSuggestion] = []
    for entry in entries:
        if len(suggestions) >= max_suggestions:
            break
        if not _location_overlaps(entry, q):
            continue
        location = entry.suburb or entry.city or entry.state
        reason = f'Try "{entry.centre_name}" in {location}' if location else f'Try "{entry.centre_name}"'
        suggestions.append(
            SearchSuggestion(
                kind="nearby",
                centre_id=entry.centre_id,
                centre_name=entry.centre_name,
                reason=reason,
            )
        )
    return suggestions


def get_search_suggestions(
    entries: Iterable[LocationEntry],
    query: str,
    config: SuggestionConfig | None = None,
) -> list[SearchSuggestion]:
    """Similar-name suggestions first, then location suggestions, one per centre."""
    if config is None:
        config = SuggestionConfig()
    if not query.strip():
        return []

    entries = list(entries)
    similar = find_similar_centres(
        entries, query, config.max_similar, config.similar_threshold
    )
    nearby = find_centres_in_location(entries, query, config.max_nearby)

    seen: set[int] = set()
    combined: list[SearchSuggestion] = []
    for suggestion in similar + nearby:
        if len(combined) >= config.max_total:
            break
        if suggestion.centre_id in seen:
            continue
        seen.add(suggestion.centre_id)
        combined.append(suggestion)
    return combined
