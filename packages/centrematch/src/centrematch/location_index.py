"""In-memory location index over a snapshot of shopping centres."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Protocol

import structlog

from centrematch.config import DATA_DIR
from centrematch.geo import filter_near_coordinates, find_nearby_centres
from centrematch.records import build_entries
from centrematch.similarity import levenshtein
from centrematch.types import AreaAlias, LocationEntry, NearbyCentre

log = structlog.get_logger()

# Whole suburb/city names within this many edits of the query still match.
MAX_TYPO_DISTANCE = 2


class SnapshotSource(Protocol):
    """Protocol for the collaborator that owns centre data (e.g. a database)."""

    async def fetch_centres(self) -> Sequence[Mapping[str, Any]]: ...


class StaticSnapshotSource:
    """Snapshot source backed by rows held in memory."""

    def __init__(self, rows: Iterable[Mapping[str, Any]]) -> None:
        self.rows = list(rows)
        self.calls = 0

    async def fetch_centres(self) -> Sequence[Mapping[str, Any]]:
        self.calls += 1
        return list(self.rows)


def _parse_alias(raw: Mapping[str, Any]) -> AreaAlias:
    return AreaAlias(
        suburbs=tuple(raw.get("suburbs", ())),
        cities=tuple(raw.get("cities", ())),
        states=tuple(raw.get("states", ())),
        postcode_ranges=tuple(
            (int(lo), int(hi)) for lo, hi in raw.get("postcode_ranges", ())
        ),
    )


def _load_aliases() -> Mapping[str, AreaAlias]:
    path = DATA_DIR / "area_aliases.json"
    if not path.exists():
        log.error("area_alias_table_missing", path=str(path))
        return MappingProxyType({})
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        aliases = {name.strip().lower(): _parse_alias(fields) for name, fields in raw.items()}
    except (json.JSONDecodeError, TypeError, ValueError) as e:
        log.error("area_alias_table_invalid", path=str(path), error=str(e))
        return MappingProxyType({})
    return MappingProxyType(aliases)


AREA_ALIASES: Mapping[str, AreaAlias] = _load_aliases()


def _parse_postcode(postcode: str | None) -> int | None:
    if not postcode:
        return None
    try:
        return int(postcode.strip())
    except ValueError:
        return None


def matches_alias(entry: LocationEntry, alias: AreaAlias) -> bool:
    """Check whether a centre falls inside a named area.

    The state restriction must hold when present. Beyond that, any matching
    suburb, city or postcode is enough; an alias with no such criteria
    matches every centre that passed the state check.
    """
    if alias.states:
        if not entry.state:
            return False
        state = entry.state.upper()
        if not any(s.upper() == state for s in alias.states):
            return False

    if not alias.has_place_criteria:
        return True

    if alias.suburbs and entry.suburb:
        suburb = entry.suburb.strip().lower()
        if any(s.lower() == suburb for s in alias.suburbs):
            return True

    if alias.cities and entry.city:
        city = entry.city.strip().lower()
        if any(c.lower() == city for c in alias.cities):
            return True

    if alias.postcode_ranges:
        pc = _parse_postcode(entry.postcode)
        if pc is not None and any(lo <= pc <= hi for lo, hi in alias.postcode_ranges):
            return True

    return False


def filter_by_alias(entries: Iterable[LocationEntry], alias: AreaAlias) -> list[LocationEntry]:
    return [e for e in entries if matches_alias(e, alias)]


def filter_by_suburb_or_city(entries: Iterable[LocationEntry], query: str) -> list[LocationEntry]:
    """Entries whose suburb or city contains the query or is a near-typo of it."""
    normalised = query.strip().lower()
    if not normalised:
        return []

    matched: list[LocationEntry] = []
    for entry in entries:
        suburb = (entry.suburb or "").strip().lower()
        city = (entry.city or "").strip().lower()

        if normalised in suburb or normalised in city:
            matched.append(entry)
        elif suburb and levenshtein(normalised, suburb) <= MAX_TYPO_DISTANCE:
            matched.append(entry)
        elif city and levenshtein(normalised, city) <= MAX_TYPO_DISTANCE:
            matched.append(entry)

    return matched


class LocationIndex:
    """Lazily built, cached snapshot of centre locations.

    The snapshot is a tuple replaced in a single assignment, so readers
    always see one complete snapshot.
    """

    def __init__(
        self,
        source: SnapshotSource,
        aliases: Mapping[str, AreaAlias] | None = None,
    ) -> None:
        self.source = source
        self.aliases = aliases if aliases is not None else AREA_ALIASES
        self._snapshot: tuple[LocationEntry, ...] | None = None
        self._lock = asyncio.Lock()
        self.builds: int = 0

    @property
    def is_built(self) -> bool:
        return self._snapshot is not None

    @property
    def entries(self) -> tuple[LocationEntry, ...]:
        """The current snapshot, or an empty tuple before the first build."""
        return self._snapshot or ()

    async def _build(self) -> tuple[LocationEntry, ...]:
        log.info("index_build_start")
        rows = await self.source.fetch_centres()
        snapshot = build_entries(rows)
        self.builds += 1
        log.info(
            "index_build_done",
            count=len(snapshot),
            with_coordinates=sum(1 for e in snapshot if e.has_coordinates),
        )
        return snapshot

    async def ensure_index(self) -> tuple[LocationEntry, ...]:
        """Return the snapshot, building it on first use.

        Concurrent first callers wait on the same build.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        async with self._lock:
            if self._snapshot is None:
                self._snapshot = await self._build()
            return self._snapshot

    async def refresh(self) -> tuple[LocationEntry, ...]:
        """Rebuild from the source now and swap the new snapshot in.

        Readers keep getting the old snapshot until the swap. For the lazy
        "centres changed" signal, where the next lookup pays for the rebuild,
        use invalidate().
        """
        async with self._lock:
            self._snapshot = await self._build()
            return self._snapshot

    def invalidate(self) -> None:
        """Drop the snapshot; the next ensure_index() rebuilds it.

        This is the handler for the data owner's "centres changed" signal.
        Use refresh() instead to rebuild eagerly without a gap.
        """
        self._snapshot = None
        log.info("index_invalidated")

    async def find_by_area(self, query: str) -> list[LocationEntry]:
        """Centres in a named area, else suburb/city matches for the query."""
        entries = await self.ensure_index()
        normalised = query.strip().lower()

        alias = self.aliases.get(normalised)
        if alias is not None:
            matched = filter_by_alias(entries, alias)
            log.debug("area_alias_matched", area=normalised, count=len(matched))
            return matched

        return filter_by_suburb_or_city(entries, normalised)

    async def find_by_suburb_or_city(self, query: str) -> list[LocationEntry]:
        entries = await self.ensure_index()
        return filter_by_suburb_or_city(entries, query)

    async def find_near_coordinates(
        self, lat: float, lng: float, radius_km: float
    ) -> list[NearbyCentre]:
        entries = await self.ensure_index()
        return filter_near_coordinates(entries, lat, lng, radius_km)

    async def nearby_centres(self, centre_id: int, radius_km: float = 10.0) -> list[NearbyCentre]:
        entries = await self.ensure_index()
        return find_nearby_centres(entries, centre_id, radius_km)
