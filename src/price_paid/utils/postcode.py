"""Postcode splitting for geocoding lookups."""

from price_paid.models import PostcodeKey


def validate_postcode(raw: str) -> PostcodeKey | None:
    """Split a postcode into outward and inward codes.

    Splits on a single space only, so the parts are kept exactly as given:
    - "SW1A 1AA" -> PostcodeKey(outward="SW1A", inward="1AA")
    - "sw1a 1aa" -> PostcodeKey(outward="sw1a", inward="1aa")
    - "SW1A1AA", "SW1A  1AA", " SW1A 1AA" -> None

    Returns None for anything that is not exactly two non-empty parts.
    """
    parts = raw.split(" ")
    if len(parts) != 2:
        return None
    outward, inward = parts
    if not outward or not inward:
        return None
    return PostcodeKey(outward=outward, inward=inward)
