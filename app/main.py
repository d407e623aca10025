import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.config import Settings
from app.exceptions.custom import PlacesError, RateLimitError
from app.exceptions.handlers import places_error_handler, rate_limit_error_handler
from app.routers.address import router as address_router
from app.services.google_places import GooglePlacesService
from app.services.postcodes_io import PostcodesIoService


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        app.state.settings = settings
        app.state.google_places = GooglePlacesService(
            client, settings.google_places_api_key, region=settings.places_region
        )
        app.state.postcodes_io = PostcodesIoService(client, settings.postcodes_io_url)

        yield


app = FastAPI(title="Dealership Address Resolution", lifespan=lifespan)

app.add_exception_handler(PlacesError, places_error_handler)
app.add_exception_handler(RateLimitError, rate_limit_error_handler)

app.include_router(address_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
