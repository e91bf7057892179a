"""Query resolution: category, state and centre matching plus the collapse decision."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

import structlog

from centrematch.categories import (
    detect_category_keyword,
    find_best_category_matches,
    matches_with_synonyms,
)
from centrematch.config import CategoryConfig, DisambiguationConfig, EngineConfig
from centrematch.location_index import (
    AREA_ALIASES,
    LocationIndex,
    filter_by_alias,
    filter_by_suburb_or_city,
)
from centrematch.query import (
    STOPWORDS,
    find_state,
    parse_search_query,
    residual_tokens,
    tokenize,
)
from centrematch.scoring import rank_candidates, scoring_tokens
from centrematch.types import AreaAlias, LocationEntry, QueryResolution, ScoredCandidate

log = structlog.get_logger()


def _mentioned_in_names(entries: Sequence[LocationEntry], words: Sequence[str]) -> bool:
    """Check whether the words appear, as whole words, in any centre name or suburb."""
    phrase = f" {' '.join(words)} "
    for entry in entries:
        for text in (entry.centre_name, entry.suburb):
            if text and phrase in f" {' '.join(text.lower().split())} ":
                return True
    return False


@dataclass
class ResolverStats:
    """Counters collected across resolved queries."""

    queries: int = 0
    collapsed: int = 0
    ranked: int = 0
    pure_category: int = 0
    area_matches: int = 0
    empty: int = 0


def disambiguate(
    ranked: Sequence[ScoredCandidate],
    config: DisambiguationConfig | None = None,
) -> tuple[list[ScoredCandidate], bool]:
    """Apply the single-centre collapse policy to a ranked list.

    Returns the resulting candidates and whether they were collapsed.
    """
    if config is None:
        config = DisambiguationConfig()
    if not ranked:
        return [], False

    top = ranked[0].score
    if top >= config.min_top_score:
        near_top = [c for c in ranked if c.score >= config.near_tie_ratio * top]
        if len(near_top) == 1 or top >= config.collapse_score:
            return [ranked[0]], True

    return list(ranked), False


def match_categories(
    keyword: str,
    categories: Sequence[str],
    config: CategoryConfig | None = None,
) -> list[str]:
    """Category names for a keyword: ranked direct matches, then synonym matches."""
    if config is None:
        config = CategoryConfig()

    matched = find_best_category_matches(
        keyword,
        categories,
        max_results=config.max_results,
        threshold=config.best_match_threshold,
    )
    for cat in categories:
        if len(matched) >= config.max_results:
            break
        if cat not in matched and matches_with_synonyms(keyword, cat, config.match_threshold):
            matched.append(cat)
    return matched


class CentreResolver:
    """Resolves free-text search queries to centres and a product category."""

    def __init__(
        self,
        index: LocationIndex | None = None,
        config: EngineConfig | None = None,
        aliases: Mapping[str, AreaAlias] | None = None,
    ) -> None:
        self.index = index
        self.config = config or EngineConfig()
        if aliases is not None:
            self.aliases = aliases
        elif index is not None:
            self.aliases = index.aliases
        else:
            self.aliases = AREA_ALIASES
        self.stats = ResolverStats()

    async def resolve(
        self,
        query: str,
        categories: Sequence[str] | None = None,
        category_keyword: str | None = None,
    ) -> QueryResolution:
        """Resolve a query against the location index snapshot."""
        if self.index is None:
            raise RuntimeError("CentreResolver.resolve() needs a LocationIndex")
        entries = await self.index.ensure_index()
        return self.resolve_entries(entries, query, categories, category_keyword)

    def resolve_entries(
        self,
        entries: Iterable[LocationEntry],
        query: str,
        categories: Sequence[str] | None = None,
        category_keyword: str | None = None,
    ) -> QueryResolution:
        """Resolve a query against an explicit list of candidate entries."""
        self.stats.queries += 1
        parsed = parse_search_query(query)
        tokens = tokenize(parsed.centre_name)

        keyword = category_keyword.strip().lower() if category_keyword else None
        if keyword is None and categories:
            keyword = detect_category_keyword(
                tokens,
                categories,
                threshold=self.config.categories.detect_threshold,
                ignore=STOPWORDS,
                match_threshold=self.config.categories.match_threshold,
            )

        matched_categories: list[str] = []
        if keyword and categories:
            matched_categories = match_categories(keyword, categories, self.config.categories)

        pool = list(entries)
        residual = residual_tokens(parsed.centre_name, keyword)
        state, state_words, without_state = find_state(residual)
        if state and _mentioned_in_names(pool, state_words):
            # "Queen Victoria Building" names a centre, not a state
            state = None
        elif state:
            residual = without_state
            pool = [e for e in pool if e.state and e.state.upper() == state]

        resolution = QueryResolution(
            query=query,
            parsed=parsed,
            category_keyword=keyword,
            matched_categories=matched_categories,
            state_filter=state,
            residual_tokens=residual,
        )

        log.debug(
            "resolve_start",
            query=query,
            category_keyword=keyword,
            state=state,
            residual=residual,
            pool_size=len(pool),
        )

        usable = scoring_tokens(residual)
        area_text = " ".join(residual)

        if not usable:
            # Category (and maybe state) alone decides relevance.
            resolution.pure_category = True
            resolution.candidates = [
                ScoredCandidate(entry=e, score=1.0, name_score=1.0, suburb_score=1.0)
                for e in pool
            ]
            self.stats.pure_category += 1
        elif area_text in self.aliases:
            resolution.matched_area = area_text
            resolution.area_matches = filter_by_alias(pool, self.aliases[area_text])
        else:
            ranked = rank_candidates(pool, usable)
            resolution.candidates, resolution.collapsed = disambiguate(
                ranked, self.config.disambiguation
            )
            if not ranked:
                area_matches = filter_by_suburb_or_city(pool, area_text)
                if area_matches:
                    resolution.matched_area = area_text
                    resolution.area_matches = area_matches

        self._record(resolution)
        return resolution

    def _record(self, resolution: QueryResolution) -> None:
        if resolution.area_matches:
            self.stats.area_matches += 1
        elif resolution.collapsed:
            self.stats.collapsed += 1
        elif resolution.candidates and not resolution.pure_category:
            self.stats.ranked += 1
        elif not resolution.candidates:
            self.stats.empty += 1

        best = resolution.best
        log.debug(
            "resolve_done",
            query=resolution.query,
            candidates=len(resolution.candidates),
            collapsed=resolution.collapsed,
            pure_category=resolution.pure_category,
            matched_area=resolution.matched_area,
            area_matches=len(resolution.area_matches),
            best=best.entry.centre_name if best else None,
            best_score=round(best.score, 4) if best else None,
        )
