import logging
from collections.abc import Callable

from app.schemas.address import EditableAddress, ParsedAddress

logger = logging.getLogger(__name__)

# Fields a selection owns. address2 is never touched by a selection.
SELECTION_FIELDS = ("street", "city", "county", "post_code", "country")

# Validation error keys cleared when a selection lands.
SELECTION_ERROR_KEYS = ("street", "city", "postcode", "post_code")

_FIELD_ERROR_KEYS: dict[str, tuple[str, ...]] = {
    "post_code": ("post_code", "postcode"),
}

AddressChangeCallback = Callable[[EditableAddress], None]


def join_street(parsed: ParsedAddress) -> str:
    return " ".join(p for p in (parsed.street_number, parsed.street_name) if p)


def to_editable_fields(parsed: ParsedAddress) -> dict[str, str]:
    return {
        "street": join_street(parsed),
        "city": parsed.city,
        "county": parsed.county,
        "post_code": parsed.postcode,
        "country": parsed.country,
    }


def format_search_query(address: EditableAddress) -> str:
    return ", ".join(p for p in (address.street, address.city, address.post_code) if p)


class AddressFieldSynchronizer:
    """Keeps a form's editable address in step with autocomplete selections.

    Two event sources write to the address: a selection overwrites only the
    fields it owns, a manual edit overwrites only its own field. Every manual
    edit bumps ``revision``; passing the revision captured when a selection
    started as ``since_revision`` keeps fields the user edited while the
    place details were still resolving.

    ``errors`` is the host form's error map and is mutated in place.
    """

    def __init__(
        self,
        address: EditableAddress | None = None,
        *,
        errors: dict[str, str] | None = None,
        field_prefix: str = "address",
        on_change: AddressChangeCallback | None = None,
    ):
        self._address = (address or EditableAddress()).model_copy()
        self.errors = errors if errors is not None else {}
        self.field_prefix = field_prefix
        self._on_change = on_change
        self._revision = 0
        self._edited_at: dict[str, int] = {}
        self.search_query = format_search_query(self._address)

    @property
    def address(self) -> EditableAddress:
        return self._address.model_copy()

    @property
    def revision(self) -> int:
        return self._revision

    def on_address_select(
        self, parsed: ParsedAddress, *, since_revision: int | None = None
    ) -> EditableAddress:
        updates = to_editable_fields(parsed)

        if since_revision is not None:
            for field in list(updates):
                if self._edited_at.get(field, 0) > since_revision:
                    logger.debug("Keeping manual edit to %s over selected address", field)
                    del updates[field]

        self._address = self._address.model_copy(update=updates)
        self._clear_errors(SELECTION_ERROR_KEYS)
        self.search_query = parsed.full_address
        self._emit()
        return self.address

    def update_field(self, name: str, value: str) -> EditableAddress:
        if name not in EditableAddress.model_fields:
            raise ValueError(f"Unknown address field: {name}")

        self._revision += 1
        self._edited_at[name] = self._revision
        self._address = self._address.model_copy(update={name: value})
        self._clear_errors(_FIELD_ERROR_KEYS.get(name, (name,)))
        self._emit()
        return self.address

    def field_error(self, field: str) -> str | None:
        return self.errors.get(f"{self.field_prefix}.{field}") or self.errors.get(field)

    def _clear_errors(self, keys: tuple[str, ...]) -> None:
        for key in keys:
            self.errors.pop(key, None)
            self.errors.pop(f"{self.field_prefix}.{key}", None)

    def _emit(self) -> None:
        if self._on_change is not None:
            self._on_change(self.address)
