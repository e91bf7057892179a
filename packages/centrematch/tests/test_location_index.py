"""Tests for the location index: lazy build, area aliases and radius search."""

import asyncio

import pytest

from centrematch.location_index import (
    AREA_ALIASES,
    LocationIndex,
    StaticSnapshotSource,
    filter_by_suburb_or_city,
    matches_alias,
)
from centrematch.types import AreaAlias, LocationEntry


class SlowSource(StaticSnapshotSource):
    async def fetch_centres(self):
        await asyncio.sleep(0.01)
        return await super().fetch_centres()


class FlakySource(StaticSnapshotSource):
    """Fails the first fetch, then behaves."""

    async def fetch_centres(self):
        rows = await super().fetch_centres()
        if self.calls == 1:
            raise ConnectionError("snapshot unavailable")
        return rows


def _ids(entries):
    return sorted(e.centre_id for e in entries)


class TestBuild:
    @pytest.mark.asyncio
    async def test_lazy(self, centre_rows):
        source = StaticSnapshotSource(centre_rows)
        index = LocationIndex(source)
        assert not index.is_built
        assert index.entries == ()
        assert source.calls == 0

        entries = await index.ensure_index()
        assert index.is_built
        assert len(entries) == 7
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_callers_share_one_build(self, centre_rows):
        source = SlowSource(centre_rows)
        index = LocationIndex(source)

        results = await asyncio.gather(*(index.ensure_index() for _ in range(5)))

        assert source.calls == 1
        assert index.builds == 1
        assert all(r is results[0] for r in results)

    @pytest.mark.asyncio
    async def test_cached_after_build(self, centre_rows):
        source = StaticSnapshotSource(centre_rows)
        index = LocationIndex(source)
        first = await index.ensure_index()
        second = await index.ensure_index()
        assert first is second
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_refresh_swaps_snapshot(self, centre_rows):
        source = StaticSnapshotSource(centre_rows)
        index = LocationIndex(source)
        old = await index.ensure_index()

        source.rows = centre_rows[:2]
        new = await index.refresh()

        assert len(old) == 7
        assert len(new) == 2
        assert index.entries is new
        assert index.builds == 2

    @pytest.mark.asyncio
    async def test_reads_during_refresh_see_old_snapshot(self, centre_rows):
        source = SlowSource(centre_rows)
        index = LocationIndex(source)
        old = await index.ensure_index()

        source.rows = centre_rows[:2]
        task = asyncio.create_task(index.refresh())
        await asyncio.sleep(0)

        assert not task.done()
        assert index.entries is old
        assert await index.ensure_index() is old
        assert len(await index.find_by_area("western sydney")) == 2

        new = await task
        assert len(new) == 2
        assert len(old) == 7
        assert index.entries is new

    @pytest.mark.asyncio
    async def test_invalidate_rebuilds(self, centre_rows):
        source = StaticSnapshotSource(centre_rows)
        index = LocationIndex(source)
        await index.ensure_index()
        index.invalidate()
        assert not index.is_built

        await index.ensure_index()
        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates_and_retries(self, centre_rows):
        index = LocationIndex(FlakySource(centre_rows))
        with pytest.raises(ConnectionError):
            await index.ensure_index()
        assert not index.is_built

        entries = await index.ensure_index()
        assert len(entries) == 7

    @pytest.mark.asyncio
    async def test_invalid_rows_skipped(self, centre_rows):
        rows = centre_rows + [{"id": 99, "name": ""}]
        index = LocationIndex(StaticSnapshotSource(rows))
        entries = await index.ensure_index()
        assert 99 not in [e.centre_id for e in entries]


class TestFindByArea:
    @pytest.fixture
    def index(self, centre_rows):
        return LocationIndex(StaticSnapshotSource(centre_rows))

    @pytest.mark.asyncio
    async def test_suburb_alias(self, index):
        assert _ids(await index.find_by_area("Eastern Suburbs")) == [1, 6]

    @pytest.mark.asyncio
    async def test_city_alias(self, index):
        assert _ids(await index.find_by_area("brisbane")) == [5]

    @pytest.mark.asyncio
    async def test_postcode_alias(self, index):
        assert _ids(await index.find_by_area("central coast")) == [4]

    @pytest.mark.asyncio
    async def test_western_sydney(self, index):
        assert _ids(await index.find_by_area("western sydney")) == [2, 3]

    @pytest.mark.asyncio
    async def test_state_only_alias(self, centre_rows):
        aliases = {"queensland": AreaAlias(states=("QLD",))}
        index = LocationIndex(StaticSnapshotSource(centre_rows), aliases=aliases)
        assert _ids(await index.find_by_area("queensland")) == [5]

    @pytest.mark.asyncio
    async def test_falls_back_to_suburb(self, index):
        assert _ids(await index.find_by_area("parramatta")) == [2]

    @pytest.mark.asyncio
    async def test_suburb_typo(self, index):
        assert _ids(await index.find_by_area("paramatta")) == [2]

    @pytest.mark.asyncio
    async def test_city_contains(self, index):
        assert _ids(await index.find_by_suburb_or_city("sydney")) == [1, 2, 3, 6]

    @pytest.mark.asyncio
    async def test_blank_query(self, index):
        assert await index.find_by_area("   ") == []


class TestMatchesAlias:
    def test_state_required_when_present(self):
        alias = AREA_ALIASES["western sydney"]
        assert matches_alias(LocationEntry(1, "A", suburb="Penrith", state="NSW"), alias)
        assert not matches_alias(LocationEntry(2, "B", suburb="Penrith", state="QLD"), alias)
        assert not matches_alias(LocationEntry(3, "C", suburb="Penrith"), alias)

    def test_suburb_case_insensitive(self):
        alias = AREA_ALIASES["eastern suburbs"]
        assert matches_alias(LocationEntry(1, "A", suburb="RANDWICK ", state="nsw"), alias)

    def test_postcode_range_bounds(self):
        alias = AREA_ALIASES["central coast"]
        assert matches_alias(LocationEntry(1, "A", state="NSW", postcode="2263"), alias)
        assert not matches_alias(LocationEntry(2, "B", state="NSW", postcode="2264"), alias)
        assert not matches_alias(LocationEntry(3, "C", state="NSW", postcode="n/a"), alias)

    def test_state_only_alias_matches_whole_state(self):
        alias = AreaAlias(states=("VIC",))
        assert matches_alias(LocationEntry(1, "A", state="VIC"), alias)
        assert not matches_alias(LocationEntry(2, "B", state="NSW"), alias)


def test_filter_by_suburb_or_city_typo(entries):
    assert _ids(filter_by_suburb_or_city(entries, "marubra")) == [6]
    assert _ids(filter_by_suburb_or_city(entries, "junction")) == [1]
    assert filter_by_suburb_or_city(entries, "") == []


class TestRadiusSearch:
    @pytest.fixture
    def index(self, centre_rows):
        return LocationIndex(StaticSnapshotSource(centre_rows))

    @pytest.mark.asyncio
    async def test_near_coordinates(self, index):
        nearby = await index.find_near_coordinates(-33.8688, 151.2093, 10)
        assert [n.entry.centre_id for n in nearby] == [1]

    @pytest.mark.asyncio
    async def test_near_coordinates_sorted(self, index):
        nearby = await index.find_near_coordinates(-33.8688, 151.2093, 25)
        assert [n.entry.centre_id for n in nearby] == [1, 2]
        assert nearby[0].distance <= nearby[1].distance

    @pytest.mark.asyncio
    async def test_nearby_centres(self, index):
        nearby = await index.nearby_centres(1, 30)
        assert [n.entry.centre_id for n in nearby] == [2]

    @pytest.mark.asyncio
    async def test_nearby_centres_without_coordinates(self, index):
        assert await index.nearby_centres(6, 1000) == []
