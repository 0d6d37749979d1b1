"""Construction of the process-lifetime backend clients."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

import httpx

from price_paid.config import Settings
from price_paid.geocoding import (
    GeocodeLookup,
    GeocodeStore,
    SqliteGeocodeStore,
    TableStorageGeocodeStore,
)
from price_paid.logging import get_logger
from price_paid.search import PropertySearchService, SearchExecutor

logger = get_logger(__name__)


@asynccontextmanager
async def open_backends(settings: Settings) -> AsyncIterator[PropertySearchService]:
    """Open the geocoding and search clients once and yield a service using them.

    The clients are closed when the context exits.
    """
    async with AsyncExitStack() as stack:
        client = await stack.enter_async_context(
            httpx.AsyncClient(timeout=settings.request_timeout_seconds)
        )

        store: GeocodeStore
        if settings.geocode_backend == "sqlite":
            sqlite_store = SqliteGeocodeStore(settings.geocode_database_path)
            stack.push_async_callback(sqlite_store.close)
            await sqlite_store.initialize()
            store = sqlite_store
        else:
            store = TableStorageGeocodeStore(
                client,
                account_url=settings.table_account_url,
                table_name=settings.table_name,
                sas_token=settings.table_sas_token.get_secret_value(),
            )

        executor = SearchExecutor(
            client,
            service_url=settings.search_service_url,
            index_name=settings.search_index,
            api_key=settings.search_api_key.get_secret_value(),
            api_version=settings.search_api_version,
        )
        logger.info(
            "backends_opened",
            geocode_backend=settings.geocode_backend,
            search_index=settings.search_index,
        )
        yield PropertySearchService(GeocodeLookup(store), executor)
        logger.info("backends_closed")
