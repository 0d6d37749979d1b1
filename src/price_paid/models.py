"""Pydantic models for postcode lookups, index documents and search responses."""

from datetime import datetime
from typing import Final, Self

from pydantic import BaseModel, ConfigDict, Field

# Index field names, as defined by the properties index schema
TOWN_CITY: Final = "TownCity"
LOCALITY: Final = "Locality"
DISTRICT: Final = "District"
COUNTY: Final = "County"
PRICE: Final = "Price"

FACET_FIELDS: Final[tuple[str, ...]] = (TOWN_CITY, LOCALITY, DISTRICT, COUNTY, PRICE)


class PostcodeKey(BaseModel):
    """A postcode split into its outward and inward codes."""

    model_config = ConfigDict(frozen=True)

    outward: str = Field(min_length=1)
    inward: str = Field(min_length=1)


class GeoCoordinate(BaseModel):
    """A WGS84 latitude/longitude pair."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class SearchFilter(BaseModel):
    """An OData filter expression understood by the search index."""

    model_config = ConfigDict(frozen=True)

    expression: str


class GeoPoint(BaseModel):
    """GeoJSON point as stored on index documents (longitude first)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = "Point"
    coordinates: tuple[float, float]

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class RawPropertyRecord(BaseModel):
    """A property transaction document from the search index.

    Field aliases match the index schema. Unknown keys (``@search.score`` and
    friends) are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    transaction_id: str = Field(alias="TransactionId")
    price: int = Field(alias="Price")
    date_of_transfer: datetime = Field(alias="DateOfTransfer")
    postcode: str | None = Field(default=None, alias="PostCode")
    property_type: str | None = Field(default=None, alias="PropertyType")
    old_new: str | None = Field(default=None, alias="OldNew")
    duration: str | None = Field(default=None, alias="Duration")
    paon: str | None = Field(default=None, alias="Paon")
    saon: str | None = Field(default=None, alias="Saon")
    street: str | None = Field(default=None, alias="Street")
    locality: str | None = Field(default=None, alias="Locality")
    town_city: str | None = Field(default=None, alias="TownCity")
    district: str | None = Field(default=None, alias="District")
    county: str | None = Field(default=None, alias="County")
    geo: GeoPoint | None = Field(default=None, alias="Geo")


class FacetCount(BaseModel):
    """A single facet value and the number of matching documents."""

    model_config = ConfigDict(frozen=True)

    label: str
    count: int = Field(ge=0)


class FacetCounts(BaseModel):
    """Facet buckets for one search response, keyed by index field name."""

    model_config = ConfigDict(frozen=True)

    buckets: dict[str, tuple[FacetCount, ...]] = Field(default_factory=dict)

    def get(self, field: str) -> list[FacetCount]:
        """Return the buckets for ``field``; unrequested or empty fields give []."""
        return list(self.buckets.get(field, ()))


class BuildDetails(BaseModel):
    """Human-readable classification of a sold property."""

    model_config = ConfigDict(frozen=True)

    property_type: str
    old_new: str
    duration: str


class PropertyAddress(BaseModel):
    """Display address assembled from the index document."""

    model_config = ConfigDict(frozen=True)

    building: str
    street: str | None = None
    locality: str | None = None
    town_city: str | None = None
    district: str | None = None
    county: str | None = None
    postcode: str | None = None


class PropertySearchResult(BaseModel):
    """A property transaction ready for display."""

    model_config = ConfigDict(frozen=True)

    build_details: BuildDetails
    address: PropertyAddress
    price: int
    date_of_transfer: datetime


class PropertySearchRequest(BaseModel):
    """Find transactions within ``distance_km`` of ``postcode``."""

    model_config = ConfigDict(frozen=True)

    postcode: str
    distance_km: int = Field(default=1, ge=0)
    page: int = Field(default=0, ge=0, description="Zero-based results page")


class PropertySearchFacets(BaseModel):
    """The five facet lists returned alongside search results."""

    model_config = ConfigDict(frozen=True)

    towns: list[FacetCount] = Field(default_factory=list)
    localities: list[FacetCount] = Field(default_factory=list)
    districts: list[FacetCount] = Field(default_factory=list)
    counties: list[FacetCount] = Field(default_factory=list)
    prices: list[FacetCount] = Field(default_factory=list)

    @classmethod
    def from_counts(cls, counts: FacetCounts) -> Self:
        """Pick the tracked facet fields out of a response's buckets."""
        return cls(
            towns=counts.get(TOWN_CITY),
            localities=counts.get(LOCALITY),
            districts=counts.get(DISTRICT),
            counties=counts.get(COUNTY),
            prices=counts.get(PRICE),
        )


class PropertySearchResponse(BaseModel):
    """Results and facets for a single search request."""

    model_config = ConfigDict(frozen=True)

    results: list[PropertySearchResult] = Field(default_factory=list)
    facets: PropertySearchFacets = Field(default_factory=PropertySearchFacets)

    @classmethod
    def empty(cls) -> Self:
        """The response for a postcode that could not be geocoded."""
        return cls()
