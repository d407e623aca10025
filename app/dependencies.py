from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from app.services.google_places import GooglePlacesService
from app.services.postcodes_io import PostcodesIoService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_google_places_service(request: Request) -> GooglePlacesService:
    return request.app.state.google_places


def get_postcodes_io_service(request: Request) -> PostcodesIoService:
    return request.app.state.postcodes_io


SettingsDep = Annotated[Settings, Depends(get_settings)]
GooglePlacesDep = Annotated[GooglePlacesService, Depends(get_google_places_service)]
PostcodesIoDep = Annotated[PostcodesIoService, Depends(get_postcodes_io_service)]
