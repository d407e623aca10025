import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import PlacesError, RateLimitError

logger = logging.getLogger(__name__)


async def places_error_handler(_request: Request, exc: PlacesError) -> JSONResponse:
    logger.error(
        "Google Places error: %s (reason=%s, status=%s)",
        exc.message, exc.reason, exc.status_code,
    )
    return JSONResponse(
        status_code=502,
        content={"detail": f"Google Places error: {exc.message}", "reason": exc.reason},
    )


async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning("Rate limit hit for %s", exc.service)
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded for {exc.service}"},
    )
