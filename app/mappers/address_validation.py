import re

from app.mappers.address_mapper import FULL_POSTCODE_RE
from app.schemas.address import EditableAddress

_REQUIRED: dict[str, str] = {
    "street": "Street address is required",
    "city": "City is required",
    "post_code": "Postcode is required",
}

_FULL_POSTCODE_ONLY = re.compile(rf"^{FULL_POSTCODE_RE.pattern}$", re.IGNORECASE)


def normalize_postcode(postcode: str) -> str:
    """Upper-case and put the single space before the inward code.

    ``"sw1a1aa"`` -> ``"SW1A 1AA"``. Prefixes such as ``"SE1"`` are returned
    upper-cased without a space.
    """
    compact = "".join(postcode.split()).upper()
    if _FULL_POSTCODE_ONLY.match(compact):
        return f"{compact[:-3]} {compact[-3:]}"
    return compact


def is_full_postcode(postcode: str) -> bool:
    return bool(_FULL_POSTCODE_ONLY.match(postcode.strip()))


def validate_address(
    address: EditableAddress,
    field_prefix: str | None = None,
    strict_postcode: bool = False,
) -> dict[str, str]:
    """Return field -> message for every problem found; empty dict when valid."""
    errors: dict[str, str] = {}

    def _key(field: str) -> str:
        return f"{field_prefix}.{field}" if field_prefix else field

    for field, message in _REQUIRED.items():
        if not getattr(address, field).strip():
            errors[_key(field)] = message

    if strict_postcode and address.post_code.strip() and not is_full_postcode(address.post_code):
        errors[_key("post_code")] = "Enter a full UK postcode"

    return errors
