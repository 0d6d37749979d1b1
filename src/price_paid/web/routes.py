"""JSON API routes."""

import asyncio

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from price_paid.config import Settings
from price_paid.logging import get_logger
from price_paid.models import PropertySearchRequest, PropertySearchResponse
from price_paid.search import PropertySearchService

logger = get_logger(__name__)

router = APIRouter()


def _get_service(request: Request) -> PropertySearchService:
    return request.app.state.service  # type: ignore[no-any-return]


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def _timeout_response(**context: object) -> JSONResponse:
    logger.warning("request_timed_out", **context)
    return JSONResponse({"detail": "search timed out"}, status_code=504)


@router.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok"})


@router.get("/api/properties", response_model=PropertySearchResponse)
async def find_properties(
    request: Request,
    postcode: str = Query(min_length=1),
    distance: int | None = Query(default=None, ge=0),
    page: int = Query(default=0, ge=0),
) -> PropertySearchResponse | JSONResponse:
    """Transactions within ``distance`` km of ``postcode``."""
    settings = _get_settings(request)
    search = PropertySearchRequest(
        postcode=postcode,
        distance_km=settings.default_distance_km if distance is None else distance,
        page=page,
    )
    try:
        async with asyncio.timeout(settings.request_timeout_seconds):
            return await _get_service(request).find_properties(search)
    except TimeoutError:
        return _timeout_response(postcode=postcode, page=page)


@router.get("/api/properties/town", response_model=PropertySearchResponse)
async def find_properties_in_town(
    request: Request,
    town: str = Query(min_length=1),
    page: int = Query(default=0, ge=0),
) -> PropertySearchResponse | JSONResponse:
    """Transactions in a given town/city."""
    settings = _get_settings(request)
    try:
        async with asyncio.timeout(settings.request_timeout_seconds):
            return await _get_service(request).find_properties_in_town(town, page)
    except TimeoutError:
        return _timeout_response(town=town, page=page)
