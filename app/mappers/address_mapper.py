import re
from collections.abc import Callable

from app.schemas.address import (
    Coordinates,
    ParsedAddress,
    PlaceDetails,
    PostcodeSource,
    RawAddressComponent,
)

FULL_POSTCODE_RE = re.compile(r"\b([A-Z]{1,2}[0-9][A-Z0-9]?\s?[0-9][A-Z]{2})\b", re.IGNORECASE)
POSTCODE_PREFIX_RE = re.compile(r"\b([A-Z]{1,2}[0-9][A-Z]?)\b", re.IGNORECASE)


def _find_component(components: list[RawAddressComponent], *types: str) -> str:
    """Long name of the first component matching any of ``types``, in priority order."""
    for t in types:
        for comp in components:
            if t in comp.types and comp.long_name:
                return comp.long_name
    return ""


def _regex_search(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text) if text else None
    return match.group(1) if match else ""


PostcodeStrategy = Callable[[PlaceDetails], str]

# Structured provider data beats regex inference; a full postcode beats a prefix.
POSTCODE_STRATEGIES: tuple[tuple[PostcodeSource, PostcodeStrategy], ...] = (
    (PostcodeSource.structured_full, lambda d: _find_component(d.components, "postal_code")),
    (PostcodeSource.structured_prefix, lambda d: _find_component(d.components, "postal_code_prefix")),
    (PostcodeSource.regex_full, lambda d: _regex_search(FULL_POSTCODE_RE, d.formatted_address)),
    (PostcodeSource.regex_prefix, lambda d: _regex_search(POSTCODE_PREFIX_RE, d.formatted_address)),
)


def resolve_postcode(details: PlaceDetails) -> tuple[str, PostcodeSource]:
    for source, strategy in POSTCODE_STRATEGIES:
        postcode = strategy(details)
        if postcode:
            return postcode, source
    return "", PostcodeSource.none


def decompose(details: PlaceDetails) -> ParsedAddress:
    """Map raw provider components onto the fixed ``ParsedAddress`` shape.

    Missing component classes become empty strings; an unresolvable postcode
    is not an error here, form validation decides whether it is acceptable.
    """
    components = details.components
    postcode, _ = resolve_postcode(details)

    return ParsedAddress(
        street_number=_find_component(components, "street_number"),
        street_name=_find_component(components, "route"),
        city=_find_component(components, "postal_town", "locality"),
        county=_find_component(components, "administrative_area_level_2"),
        country=_find_component(components, "country"),
        postcode=postcode,
        full_address=details.formatted_address,
        coordinates=Coordinates(lat=details.coordinates.lat, lng=details.coordinates.lng),
    )
