import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel

from app.mappers.address_mapper import decompose
from app.schemas.address import AddressPrediction, ParsedAddress
from app.schemas.results import (
    Failure,
    FailureReason,
    Outcome,
    PlaceDetailsResult,
    PredictionResult,
)
from app.services.google_places import GooglePlacesService

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_MIN_QUERY_LENGTH = 3

_FAILURE_LOG: dict[FailureReason, tuple[int, str]] = {
    FailureReason.quota_exceeded: (logging.WARNING, "Google Places quota exceeded"),
    FailureReason.permission_denied: (
        logging.ERROR,
        "Google Places request denied - check API key and permissions",
    ),
    FailureReason.invalid_request: (logging.ERROR, "Invalid request to Google Places"),
    FailureReason.transport: (logging.ERROR, "Could not reach Google Places"),
    FailureReason.unknown: (logging.ERROR, "Google Places error"),
}

AddressSelectCallback = Callable[[ParsedAddress], None]


class SearchState(StrEnum):
    idle = "idle"
    loading = "loading"
    has_predictions = "has_predictions"
    no_results = "no_results"
    error = "error"


class SearchBoxOptions(BaseModel):
    placeholder: str = "Start typing an address..."
    label: str = "Search Address"
    show_label: bool = True
    class_name: str = ""


def log_failure(failure: Failure | None, context: str) -> None:
    if failure is None:
        failure = Failure(reason=FailureReason.unknown)
    level, message = _FAILURE_LOG[failure.reason]
    logger.log(
        level,
        "%s for %r (status=%s): %s",
        message, context, failure.status or failure.http_status, failure.message or "Unknown error",
    )


class AddressSearchController:
    """Search-as-you-type state for one address widget.

    Keystrokes reset a debounce timer owned by this instance; when it fires a
    single autocomplete request goes out. Every keystroke, clear and
    selection bumps a generation counter, and a response is applied only if
    its generation is still current, so late answers to superseded queries
    are dropped rather than cancelled.

    Provider failures never propagate: they are logged and the widget falls
    back to an empty list, leaving the manual address fields usable.
    """

    def __init__(
        self,
        places: GooglePlacesService,
        on_address_select: AddressSelectCallback,
        *,
        options: SearchBoxOptions | None = None,
        initial_value: str = "",
        disabled: bool = False,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
    ):
        self._places = places
        self._on_address_select = on_address_select
        self.options = options or SearchBoxOptions()
        self.query = initial_value
        self._disabled = disabled
        self._debounce_seconds = debounce_seconds
        self._min_query_length = min_query_length

        self._state = SearchState.idle
        self._predictions: list[AddressPrediction] = []
        self._predictions_visible = False
        self._resolving = False

        self._generation = 0
        self._resolve_token = 0
        self._timer: asyncio.Task | None = None
        self._searches: set[asyncio.Task] = set()
        self._closed = False

    async def __aenter__(self) -> "AddressSearchController":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # --- read-only view state ---

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def predictions(self) -> list[AddressPrediction]:
        return list(self._predictions)

    @property
    def prediction_count(self) -> int:
        return len(self._predictions)

    @property
    def show_predictions(self) -> bool:
        return (
            not self._disabled
            and self._predictions_visible
            and self._state == SearchState.has_predictions
        )

    @property
    def show_no_results(self) -> bool:
        return (
            not self._disabled
            and self._state == SearchState.no_results
            and len(self.query.strip()) >= self._min_query_length
        )

    @property
    def resolving(self) -> bool:
        return self._resolving

    @property
    def loading(self) -> bool:
        return self._state == SearchState.loading or self._resolving

    @property
    def disabled(self) -> bool:
        return self._disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self._disabled = value
        if value:
            self._cancel_timer()

    # --- events ---

    def set_initial_value(self, value: str) -> None:
        self.query = value

    def input_changed(self, text: str) -> None:
        if self._disabled or self._closed:
            return

        self.query = text
        self._generation += 1
        # Typing abandons any selection still resolving.
        self._resolve_token += 1
        self._resolving = False
        self._cancel_timer()

        if len(text.strip()) < self._min_query_length:
            self._reset_results()
            return

        self._timer = asyncio.create_task(self._debounced_search(text, self._generation))

    async def select(self, prediction: AddressPrediction) -> ParsedAddress | None:
        """Resolve ``prediction`` and hand the parsed address to the host.

        Returns the parsed address, or ``None`` when the resolve failed or was
        superseded by a newer selection, a keystroke, a clear or a close.
        """
        if self._disabled or self._closed:
            return None

        self._cancel_timer()
        self._generation += 1
        self._reset_results()

        self._resolve_token += 1
        token = self._resolve_token
        self._resolving = True
        try:
            result = await self._places.place_details(prediction.place_id)
        except Exception as exc:
            logger.exception("Place details lookup for %s raised", prediction.place_id)
            result = PlaceDetailsResult.failed(
                Failure(reason=FailureReason.transport, message=str(exc))
            )
        finally:
            # A superseded call leaves the flag to the resolve that replaced it.
            if token == self._resolve_token:
                self._resolving = False

        if token != self._resolve_token:
            logger.debug("Dropping superseded place details for %s", prediction.place_id)
            return None

        if result.outcome != Outcome.ok or result.details is None:
            if result.outcome == Outcome.failure:
                log_failure(result.failure, prediction.place_id)
            else:
                logger.warning("No place details for %s", prediction.place_id)
            return None

        parsed = decompose(result.details)
        self.query = parsed.full_address
        self._on_address_select(parsed)
        return parsed

    def clear(self) -> None:
        if self._disabled:
            return
        self.query = ""
        self._generation += 1
        self._resolve_token += 1
        self._resolving = False
        self._cancel_timer()
        self._reset_results()

    def dismiss(self) -> None:
        """Click outside the widget: hide the list, keep query and state."""
        self._predictions_visible = False

    async def wait_settled(self) -> None:
        """Wait until no debounce timer is pending and no search is in flight."""
        while True:
            pending = {t for t in (self._timer, *self._searches) if t is not None and not t.done()}
            if not pending:
                return
            await asyncio.wait(pending)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._resolve_token += 1
        self._resolving = False
        self._cancel_timer()
        searches = list(self._searches)
        for task in searches:
            task.cancel()
        if searches:
            await asyncio.gather(*searches, return_exceptions=True)

    # --- internals ---

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _reset_results(self) -> None:
        self._state = SearchState.idle
        self._predictions = []
        self._predictions_visible = False

    async def _debounced_search(self, query: str, generation: int) -> None:
        await asyncio.sleep(self._debounce_seconds)
        # The request runs outside the timer so a later reset never aborts it.
        task = asyncio.create_task(self._search(query, generation))
        self._searches.add(task)
        task.add_done_callback(self._searches.discard)

    async def _search(self, query: str, generation: int) -> None:
        if generation != self._generation:
            return
        self._state = SearchState.loading
        try:
            result = await self._places.autocomplete(query.strip())
        except Exception as exc:
            logger.exception("Autocomplete for %r raised", query)
            result = PredictionResult.failed(
                Failure(reason=FailureReason.transport, message=str(exc))
            )

        if generation != self._generation:
            logger.debug("Dropping stale autocomplete response for %r", query)
            return

        self._apply(result, query)

    def _apply(self, result: PredictionResult, query: str) -> None:
        if result.outcome == Outcome.ok and result.predictions:
            self._predictions = list(result.predictions)
            self._predictions_visible = True
            self._state = SearchState.has_predictions
            return

        self._predictions = []
        self._predictions_visible = False
        if result.outcome == Outcome.failure:
            self._state = SearchState.error
            log_failure(result.failure, query)
        else:
            self._state = SearchState.no_results
            logger.info("No address matches found for: %s", query)
