"""Tests for the SQLite geocoding store."""

from collections.abc import AsyncGenerator

import pytest_asyncio

from price_paid.geocoding import GeocodeLookup
from price_paid.geocoding.sqlite_store import SqliteGeocodeStore
from price_paid.models import GeoCoordinate


@pytest_asyncio.fixture
async def store() -> AsyncGenerator[SqliteGeocodeStore, None]:
    s = SqliteGeocodeStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


class TestSqliteGeocodeStore:
    async def test_fetch_existing(self, store: SqliteGeocodeStore) -> None:
        await store.upsert("SW1A", "1AA", 51.5, -0.14)
        assert await store.fetch("SW1A", "1AA") == {"Lat": 51.5, "Long": -0.14}

    async def test_fetch_missing(self, store: SqliteGeocodeStore) -> None:
        assert await store.fetch("SW1A", "1AA") is None

    async def test_keys_are_case_sensitive(self, store: SqliteGeocodeStore) -> None:
        await store.upsert("SW1A", "1AA", 51.5, -0.14)
        assert await store.fetch("sw1a", "1aa") is None

    async def test_upsert_replaces(self, store: SqliteGeocodeStore) -> None:
        await store.upsert("E8", "3RH", 1.0, 1.0)
        await store.upsert("E8", "3RH", 51.54, -0.05)
        assert await store.fetch("E8", "3RH") == {"Lat": 51.54, "Long": -0.05}

    async def test_null_coordinate_omitted(self, store: SqliteGeocodeStore) -> None:
        await store.upsert("E8", "3RH", 51.54, None)
        assert await store.fetch("E8", "3RH") == {"Lat": 51.54}

    async def test_works_with_lookup(self, store: SqliteGeocodeStore) -> None:
        await store.upsert("SW1A", "1AA", 51.5, -0.14)
        await store.upsert("E8", "3RH", 51.54, None)
        lookup = GeocodeLookup(store)

        assert await lookup.try_get_geo("SW1A", "1AA") == GeoCoordinate(
            latitude=51.5, longitude=-0.14
        )
        assert await lookup.try_get_geo("E8", "3RH") is None
        assert await lookup.try_get_geo("N1", "5AA") is None

    async def test_close_is_idempotent(self) -> None:
        s = SqliteGeocodeStore(":memory:")
        await s.initialize()
        await s.close()
        await s.close()
