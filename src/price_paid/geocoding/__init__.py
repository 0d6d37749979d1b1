"""Postcode geocoding: lookup logic and its backing stores."""

from price_paid.geocoding.lookup import GeocodeLookup, GeocodeStore, entity_to_coordinate
from price_paid.geocoding.sqlite_store import SqliteGeocodeStore
from price_paid.geocoding.table_storage import TableStorageGeocodeStore

__all__ = [
    "GeocodeLookup",
    "GeocodeStore",
    "SqliteGeocodeStore",
    "TableStorageGeocodeStore",
    "entity_to_coordinate",
]
