"""Postcode radius search: geocode, filter, query, map."""

from __future__ import annotations

from price_paid.geocoding.lookup import GeocodeLookup
from price_paid.logging import get_logger
from price_paid.models import (
    PropertySearchFacets,
    PropertySearchRequest,
    PropertySearchResponse,
    SearchFilter,
)
from price_paid.search.executor import SearchExecutor
from price_paid.search.filters import by_distance, by_town
from price_paid.search.mapper import to_search_result
from price_paid.utils.postcode import validate_postcode

logger = get_logger(__name__)


class PropertySearchService:
    """Answer property searches using a geocoder and a search index.

    Both collaborators are created once per process and shared by every request.
    """

    def __init__(self, geocoder: GeocodeLookup, executor: SearchExecutor) -> None:
        self._geocoder = geocoder
        self._executor = executor

    async def find_properties(self, request: PropertySearchRequest) -> PropertySearchResponse:
        """Find transactions within ``request.distance_km`` of ``request.postcode``.

        A postcode that is malformed, or that the geocoding store does not know,
        yields an empty response and the index is not queried.

        Raises:
            BackendError: If the geocoding store or the search index fails.
        """
        key = validate_postcode(request.postcode)
        if key is None:
            logger.info("postcode_invalid", postcode=request.postcode)
            return PropertySearchResponse.empty()

        geo = await self._geocoder.try_get_geo(key.outward, key.inward)
        if geo is None:
            return PropertySearchResponse.empty()

        return await self._run(by_distance(geo, request.distance_km), request.page)

    async def find_properties_in_town(self, town: str, page: int = 0) -> PropertySearchResponse:
        """Find transactions whose town/city is exactly ``town``.

        Raises:
            SearchBackendError: If the search index fails.
        """
        return await self._run(by_town(town), page)

    async def _run(self, search_filter: SearchFilter, page: int) -> PropertySearchResponse:
        result = await self._executor.search(search_filter, page)
        response = PropertySearchResponse(
            results=[to_search_result(r) for r in result.results],
            facets=PropertySearchFacets.from_counts(result.facets),
        )
        logger.info(
            "search_completed",
            filter=search_filter.expression,
            page=page,
            results=len(response.results),
        )
        return response
