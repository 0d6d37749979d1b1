"""Faceted, paginated queries against the properties search index.

Talks to the Azure Cognitive Search REST API (``POST /indexes/{index}/docs/search``).
"""

from __future__ import annotations

from typing import Any, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from price_paid.errors import SearchBackendError
from price_paid.logging import get_logger
from price_paid.models import FACET_FIELDS, FacetCount, FacetCounts, RawPropertyRecord, SearchFilter

logger = get_logger(__name__)

PAGE_SIZE: Final = 50
DEFAULT_API_VERSION: Final = "2020-06-30"


class SearchPage(BaseModel):
    """One page of search results plus the facet buckets for the whole query."""

    model_config = ConfigDict(frozen=True)

    facets: FacetCounts = Field(default_factory=FacetCounts)
    results: tuple[RawPropertyRecord, ...] = ()


class _FacetBucket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: Any = None
    from_: Any = Field(default=None, alias="from")
    to: Any = None
    count: int = Field(ge=0)


class _SearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: list[RawPropertyRecord] = Field(default_factory=list)
    facets: dict[str, list[_FacetBucket]] | None = Field(default=None, alias="@search.facets")


def facet_label(value: Any) -> str:
    """Render a facet value as a display label.

    Whole-number floats lose their ".0" so price buckets read "250000", not "250000.0".
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _bucket_label(bucket: _FacetBucket) -> str:
    if bucket.value is not None:
        return facet_label(bucket.value)
    # Range facets carry from/to instead of a value
    lower = "" if bucket.from_ is None else facet_label(bucket.from_)
    upper = "" if bucket.to is None else facet_label(bucket.to)
    return f"{lower}-{upper}"


def _parse_facets(raw: dict[str, list[_FacetBucket]]) -> FacetCounts:
    """Build the field -> buckets mapping for one response."""
    return FacetCounts(
        buckets={
            field: tuple(FacetCount(label=_bucket_label(b), count=b.count) for b in buckets)
            for field, buckets in raw.items()
        }
    )


def parse_search_response(payload: Any) -> SearchPage:
    """Parse a search API response body into results and facet buckets.

    Raises:
        ValidationError: If the payload does not match the index schema.
    """
    parsed = _SearchResponse.model_validate(payload)
    return SearchPage(facets=_parse_facets(parsed.facets or {}), results=tuple(parsed.value))


def build_search_body(search_filter: SearchFilter, page: int) -> dict[str, Any]:
    """Build the JSON body for a search request.

    Raises:
        ValueError: If page is negative.
    """
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    return {
        "search": "*",
        "filter": search_filter.expression,
        "skip": page * PAGE_SIZE,
        "top": PAGE_SIZE,
        "facets": list(FACET_FIELDS),
    }


class SearchExecutor:
    """Issue faceted queries against one search index."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        service_url: str,
        index_name: str = "properties",
        api_key: str = "",
        api_version: str = DEFAULT_API_VERSION,
    ) -> None:
        """Initialize the executor.

        Args:
            client: Shared HTTP client, owned by the caller.
            service_url: Search service endpoint, e.g. https://svc.search.windows.net.
            index_name: Name of the properties index.
            api_key: Query or admin key sent as the ``api-key`` header.
            api_version: REST API version.
        """
        self._client = client
        self._url = f"{service_url.rstrip('/')}/indexes/{index_name}/docs/search"
        self._api_key = api_key
        self._api_version = api_version

    async def search(self, search_filter: SearchFilter, page: int) -> SearchPage:
        """Run one page of a filtered search.

        Always asks for the five tracked facets and ``PAGE_SIZE`` results
        starting at ``page * PAGE_SIZE``. Results keep the index's ranking order.

        Raises:
            ValueError: If page is negative.
            SearchBackendError: If the request fails or the payload is unusable.
        """
        body = build_search_body(search_filter, page)
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["api-key"] = self._api_key

        try:
            resp = await self._client.post(
                self._url,
                params={"api-version": self._api_version},
                json=body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error("search_request_failed", filter=search_filter.expression, exc_info=True)
            raise SearchBackendError(
                f"search request failed: {e}",
                timed_out=isinstance(e, httpx.TimeoutException),
            ) from e

        if resp.status_code != 200:
            logger.error(
                "search_bad_status",
                filter=search_filter.expression,
                status=resp.status_code,
            )
            raise SearchBackendError("unexpected response", status_code=resp.status_code)

        try:
            result = parse_search_response(resp.json())
        except (ValueError, ValidationError) as e:
            logger.error("search_response_invalid", filter=search_filter.expression, exc_info=True)
            raise SearchBackendError("search response could not be parsed") from e

        logger.debug(
            "search_page_fetched",
            filter=search_filter.expression,
            page=page,
            results=len(result.results),
        )
        return result
