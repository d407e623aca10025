from enum import StrEnum

from pydantic import BaseModel


class AddressPrediction(BaseModel):
    description: str
    place_id: str
    main_text: str = ""
    secondary_text: str = ""


class RawAddressComponent(BaseModel):
    long_name: str = ""
    short_name: str = ""
    types: frozenset[str] = frozenset()


class Coordinates(BaseModel):
    lat: float = 0.0
    lng: float = 0.0


class PlaceDetails(BaseModel):
    components: list[RawAddressComponent] = []
    formatted_address: str = ""
    coordinates: Coordinates = Coordinates()


class PostcodeSource(StrEnum):
    structured_full = "structured_full"
    structured_prefix = "structured_prefix"
    regex_full = "regex_full"
    regex_prefix = "regex_prefix"
    none = "none"


class ParsedAddress(BaseModel):
    street_number: str = ""
    street_name: str = ""
    city: str = ""
    county: str = ""
    country: str = ""
    postcode: str = ""
    full_address: str = ""
    coordinates: Coordinates = Coordinates()


class EditableAddress(BaseModel):
    street: str = ""
    address2: str = ""
    city: str = ""
    county: str = ""
    post_code: str = ""
    country: str = ""


class PostcodeArea(BaseModel):
    city: str = ""
    county: str = ""
