"""Map index documents to display results."""

from typing import Final

from price_paid.models import BuildDetails, PropertyAddress, PropertySearchResult, RawPropertyRecord

# Price Paid Data category codes
PROPERTY_TYPES: Final[dict[str, str]] = {
    "D": "Detached",
    "S": "Semi-Detached",
    "T": "Terraced",
    "F": "Flats/Maisonettes",
}
OTHER_PROPERTY_TYPE: Final = "Other"


def property_type_label(code: str | None) -> str:
    return PROPERTY_TYPES.get(code or "", OTHER_PROPERTY_TYPE)


def build_status_label(code: str | None) -> str:
    return "New Build" if code == "Y" else "Old Build"


def tenure_label(code: str | None) -> str:
    return "Freehold" if code == "F" else "Leasehold"


def building_label(paon: str | None, saon: str | None) -> str:
    """Join the primary and secondary addressable object names.

    - ("221B", "Flat 2") -> "221B, Flat 2"
    - (None, "Flat 2") -> "Flat 2"
    - (None, None) -> ""
    """
    return ", ".join(part for part in (paon, saon) if part)


def to_search_result(record: RawPropertyRecord) -> PropertySearchResult:
    """Convert one index document; every code combination has a label."""
    return PropertySearchResult(
        build_details=BuildDetails(
            property_type=property_type_label(record.property_type),
            old_new=build_status_label(record.old_new),
            duration=tenure_label(record.duration),
        ),
        address=PropertyAddress(
            building=building_label(record.paon, record.saon),
            street=record.street,
            locality=record.locality,
            town_city=record.town_city,
            district=record.district,
            county=record.county,
            postcode=record.postcode,
        ),
        price=record.price,
        date_of_transfer=record.date_of_transfer,
    )
