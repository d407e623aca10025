import logging
from typing import NoReturn

from fastapi import APIRouter, HTTPException, Query

from app.dependencies import GooglePlacesDep, PostcodesIoDep, SettingsDep
from app.exceptions.custom import PlacesError, RateLimitError
from app.mappers.address_mapper import decompose, resolve_postcode
from app.mappers.address_validation import normalize_postcode
from app.schemas.results import Failure, FailureReason
from app.schemas.responses import (
    AddressDetailsResponse,
    AutocompleteResponse,
    PostcodeLookupResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/address")


def _raise_for_failure(failure: Failure | None) -> NoReturn:
    if failure is None:
        raise PlacesError("Unknown error", reason=FailureReason.unknown)
    if failure.reason == FailureReason.quota_exceeded:
        raise RateLimitError("Google Places")
    raise PlacesError(
        failure.message or failure.status or "Unknown error",
        reason=failure.reason,
        status_code=failure.http_status,
    )


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(
    places: GooglePlacesDep,
    settings: SettingsDep,
    input: str = Query(default=""),
) -> AutocompleteResponse:
    if len(input.strip()) < settings.autocomplete_min_length:
        return AutocompleteResponse(status="ZERO_RESULTS")

    result = await places.autocomplete(input.strip())
    if result.failure is not None:
        _raise_for_failure(result.failure)
    if not result.predictions:
        logger.info("No address matches found for: %s", input)
        return AutocompleteResponse(status="ZERO_RESULTS")

    return AutocompleteResponse(status="OK", predictions=result.predictions)


@router.get("/details", response_model=AddressDetailsResponse)
async def details(
    places: GooglePlacesDep,
    place_id: str = Query(min_length=1),
) -> AddressDetailsResponse:
    result = await places.place_details(place_id)
    if result.failure is not None:
        _raise_for_failure(result.failure)
    if result.details is None:
        logger.warning("No place details for %s", place_id)
        raise HTTPException(status_code=404, detail="Place not found")

    _, source = resolve_postcode(result.details)
    return AddressDetailsResponse(
        status="OK",
        result=decompose(result.details),
        postcode_source=source,
    )


@router.get("/postcode/{postcode}", response_model=PostcodeLookupResponse)
async def postcode_lookup(postcode: str, postcodes: PostcodesIoDep) -> PostcodeLookupResponse:
    area = await postcodes.lookup(postcode)
    return PostcodeLookupResponse(
        postcode=normalize_postcode(postcode),
        city=area.city,
        county=area.county,
    )
