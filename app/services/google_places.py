import logging

import httpx

from app.schemas.address import (
    AddressPrediction,
    Coordinates,
    PlaceDetails,
    RawAddressComponent,
)
from app.schemas.google_places import (
    AutocompleteResponse,
    PlaceDetailsResponse,
    PlaceResult,
    Prediction,
)
from app.schemas.results import (
    Failure,
    FailureReason,
    PlaceDetailsResult,
    PredictionResult,
)

logger = logging.getLogger(__name__)

AUTOCOMPLETE_URL = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"

DETAILS_FIELDS = "address_component,formatted_address,geometry"

_STATUS_REASONS = {
    "OVER_QUERY_LIMIT": FailureReason.quota_exceeded,
    "REQUEST_DENIED": FailureReason.permission_denied,
    "INVALID_REQUEST": FailureReason.invalid_request,
}

_AUTOCOMPLETE_EMPTY = frozenset({"ZERO_RESULTS"})
_DETAILS_EMPTY = frozenset({"ZERO_RESULTS", "NOT_FOUND"})


def _http_failure(resp: httpx.Response) -> Failure | None:
    if resp.status_code == 429:
        reason = FailureReason.quota_exceeded
    elif resp.status_code in (401, 403):
        reason = FailureReason.permission_denied
    elif resp.status_code >= 400:
        reason = FailureReason.unknown
    else:
        return None
    return Failure(reason=reason, message=resp.text, http_status=resp.status_code)


def _status_failure(status: str, message: str | None) -> Failure:
    return Failure(
        reason=_STATUS_REASONS.get(status, FailureReason.unknown),
        status=status,
        message=message,
    )


def to_address_prediction(prediction: Prediction) -> AddressPrediction:
    fmt = prediction.structured_formatting
    return AddressPrediction(
        description=prediction.description,
        place_id=prediction.place_id,
        main_text=fmt.main_text or prediction.description,
        secondary_text=fmt.secondary_text,
    )


def to_place_details(result: PlaceResult) -> PlaceDetails:
    location = result.geometry.location
    return PlaceDetails(
        components=[
            RawAddressComponent(
                long_name=c.long_name,
                short_name=c.short_name,
                types=frozenset(c.types),
            )
            for c in result.address_components
        ],
        formatted_address=result.formatted_address,
        coordinates=Coordinates(lat=location.lat, lng=location.lng),
    )


class GooglePlacesService:
    """Autocomplete and place-details calls against the Google Places API.

    Provider failures come back as values, never as exceptions, so callers
    can degrade quietly. No call is retried.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str, region: str = "gb"):
        self._client = client
        self._api_key = api_key
        self._region = region

    async def _get(self, url: str, params: dict[str, str]) -> httpx.Response | Failure:
        try:
            resp = await self._client.get(url, params={**params, "key": self._api_key})
        except httpx.HTTPError as exc:
            return Failure(reason=FailureReason.transport, message=str(exc) or type(exc).__name__)

        return _http_failure(resp) or resp

    async def autocomplete(self, query: str) -> PredictionResult:
        params = {
            "input": query,
            "components": f"country:{self._region}",
            "types": "address",
        }
        resp = await self._get(AUTOCOMPLETE_URL, params)
        if isinstance(resp, Failure):
            return PredictionResult.failed(resp)

        try:
            data = AutocompleteResponse(**resp.json())
        except ValueError as exc:
            return PredictionResult.failed(
                Failure(reason=FailureReason.transport, message=f"Malformed response: {exc}")
            )

        if data.status in _AUTOCOMPLETE_EMPTY:
            return PredictionResult.empty()
        if data.status != "OK":
            return PredictionResult.failed(_status_failure(data.status, data.error_message))
        if not data.predictions:
            return PredictionResult.empty()

        return PredictionResult.ok([to_address_prediction(p) for p in data.predictions])

    async def place_details(self, place_id: str) -> PlaceDetailsResult:
        params = {"place_id": place_id, "fields": DETAILS_FIELDS}
        resp = await self._get(DETAILS_URL, params)
        if isinstance(resp, Failure):
            return PlaceDetailsResult.failed(resp)

        try:
            data = PlaceDetailsResponse(**resp.json())
        except ValueError as exc:
            return PlaceDetailsResult.failed(
                Failure(reason=FailureReason.transport, message=f"Malformed response: {exc}")
            )

        if data.status in _DETAILS_EMPTY:
            return PlaceDetailsResult.empty()
        if data.status != "OK":
            return PlaceDetailsResult.failed(_status_failure(data.status, data.error_message))
        if data.result is None:
            logger.info("Place %s returned OK without a result", place_id)
            return PlaceDetailsResult.empty()

        return PlaceDetailsResult.ok(to_place_details(data.result))
