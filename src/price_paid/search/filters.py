"""OData filter expressions for the properties index."""

from price_paid.models import TOWN_CITY, GeoCoordinate, SearchFilter


def escape_odata_string(value: str) -> str:
    """Escape a value for use inside a single-quoted OData string literal."""
    return value.replace("'", "''")


def by_distance(center: GeoCoordinate, max_distance_km: int) -> SearchFilter:
    """Match documents whose ``Geo`` lies within ``max_distance_km`` kilometres of ``center``.

    The WKT point is written longitude first and the comparison is inclusive
    (``le``), e.g. ``geo.distance(Geo, geography'POINT(-0.140000 51.500000)') le 1``.
    """
    return SearchFilter(
        expression=(
            f"geo.distance(Geo, geography'POINT({center.longitude:f} {center.latitude:f})') "
            f"le {max_distance_km:d}"
        )
    )


def by_town(name: str) -> SearchFilter:
    """Match documents whose town/city equals ``name`` exactly."""
    return SearchFilter(expression=f"{TOWN_CITY} eq '{escape_odata_string(name)}'")
