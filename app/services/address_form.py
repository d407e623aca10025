from app.config import Settings
from app.mappers.address_validation import validate_address
from app.schemas.address import AddressPrediction, EditableAddress, ParsedAddress
from app.services.address_search import (
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_MIN_QUERY_LENGTH,
    AddressSearchController,
    SearchBoxOptions,
)
from app.services.address_sync import AddressChangeCallback, AddressFieldSynchronizer
from app.services.google_places import GooglePlacesService

FORM_SEARCH_OPTIONS = SearchBoxOptions(
    placeholder="Try including house number for better postcode results...",
    label="Search Address",
    show_label=True,
)


class AddressFormSection:
    """One search box plus the manual address fields, as embedded by host forms.

    The country field is shown read-only once populated. The synchronizer
    does not enforce that, so ``update_field("country", ...)`` still writes.
    """

    country_read_only = True

    def __init__(
        self,
        places: GooglePlacesService,
        address: EditableAddress | None = None,
        *,
        errors: dict[str, str] | None = None,
        field_prefix: str = "address",
        title: str = "Address",
        show_title: bool = True,
        disabled: bool = False,
        on_change: AddressChangeCallback | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
    ):
        self.title = title
        self.show_title = show_title
        self.synchronizer = AddressFieldSynchronizer(
            address, errors=errors, field_prefix=field_prefix, on_change=on_change
        )
        self.controller = AddressSearchController(
            places,
            self._handle_address_select,
            options=FORM_SEARCH_OPTIONS,
            initial_value=self.synchronizer.search_query,
            disabled=disabled,
            debounce_seconds=debounce_seconds,
            min_query_length=min_query_length,
        )
        self._selection_revision: int | None = None
        self._selection_calls = 0

    async def __aenter__(self) -> "AddressFormSection":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.controller.aclose()

    @property
    def address(self) -> EditableAddress:
        return self.synchronizer.address

    @property
    def errors(self) -> dict[str, str]:
        return self.synchronizer.errors

    async def select(self, prediction: AddressPrediction) -> ParsedAddress | None:
        # The controller only reports the newest selection, so only the newest
        # call may reset the revision it will be merged against.
        self._selection_calls += 1
        call = self._selection_calls
        self._selection_revision = self.synchronizer.revision
        try:
            return await self.controller.select(prediction)
        finally:
            if call == self._selection_calls:
                self._selection_revision = None

    def update_field(self, name: str, value: str) -> EditableAddress:
        return self.synchronizer.update_field(name, value)

    def validate(self, strict_postcode: bool = False) -> bool:
        problems = validate_address(
            self.synchronizer.address,
            field_prefix=self.synchronizer.field_prefix,
            strict_postcode=strict_postcode,
        )
        self.errors.update(problems)
        return not problems

    def _handle_address_select(self, parsed: ParsedAddress) -> None:
        self.synchronizer.on_address_select(parsed, since_revision=self._selection_revision)
        self.controller.set_initial_value(self.synchronizer.search_query)


def build_form_section(
    places: GooglePlacesService,
    settings: Settings,
    address: EditableAddress | None = None,
    **kwargs,
) -> AddressFormSection:
    """Form section using the configured debounce and minimum query length."""
    return AddressFormSection(
        places,
        address,
        debounce_seconds=settings.autocomplete_debounce_ms / 1000,
        min_query_length=settings.autocomplete_min_length,
        **kwargs,
    )
