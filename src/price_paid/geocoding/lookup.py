"""Postcode to coordinate lookup over a key-value geocoding store."""

from __future__ import annotations

import math
from typing import Any, Final, Protocol

from price_paid.logging import get_logger
from price_paid.models import GeoCoordinate

logger = get_logger(__name__)

LATITUDE_FIELD: Final = "Lat"
LONGITUDE_FIELD: Final = "Long"


class GeocodeStore(Protocol):
    """Point reads against a table keyed by (partition key, row key)."""

    async def fetch(self, partition_key: str, row_key: str) -> dict[str, Any] | None:
        """Return the stored entity, or None when no entity has this key.

        Raises:
            GeocodeBackendError: If the store could not be read.
        """
        ...


def _coordinate_value(entity: dict[str, Any], name: str) -> float | None:
    value = entity.get(name)
    # bool is an int subclass; a flag is not a coordinate
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def entity_to_coordinate(entity: dict[str, Any]) -> GeoCoordinate | None:
    """Read the Lat/Long numbers off a stored entity.

    Returns None if either is missing, non-numeric, or out of range.
    """
    lat = _coordinate_value(entity, LATITUDE_FIELD)
    lon = _coordinate_value(entity, LONGITUDE_FIELD)
    if lat is None or lon is None:
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return GeoCoordinate(latitude=lat, longitude=lon)


class GeocodeLookup:
    """Resolve a split postcode to the coordinate cached for it."""

    def __init__(self, store: GeocodeStore) -> None:
        self._store = store

    async def try_get_geo(self, outward: str, inward: str) -> GeoCoordinate | None:
        """Look up the coordinate for a postcode.

        Args:
            outward: Outward code, used as the partition key.
            inward: Inward code, used as the row key.

        Returns:
            The coordinate, or None if the postcode is unknown or its record has
            no usable Lat/Long.

        Raises:
            GeocodeBackendError: If the store lookup itself failed.
        """
        entity = await self._store.fetch(outward, inward)
        if entity is None:
            logger.info("geocode_not_found", outward=outward, inward=inward)
            return None

        coordinate = entity_to_coordinate(entity)
        if coordinate is None:
            logger.warning("geocode_record_malformed", outward=outward, inward=inward)
            return None

        logger.debug(
            "geocode_found",
            outward=outward,
            inward=inward,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
        )
        return coordinate
