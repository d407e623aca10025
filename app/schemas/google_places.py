from pydantic import BaseModel


class StructuredFormatting(BaseModel):
    main_text: str = ""
    secondary_text: str = ""


class Prediction(BaseModel):
    description: str = ""
    place_id: str
    structured_formatting: StructuredFormatting = StructuredFormatting()


class AutocompleteResponse(BaseModel):
    status: str
    predictions: list[Prediction] = []
    error_message: str | None = None


class AddressComponent(BaseModel):
    long_name: str = ""
    short_name: str = ""
    types: list[str] = []


class Location(BaseModel):
    lat: float = 0.0
    lng: float = 0.0


class Geometry(BaseModel):
    location: Location = Location()


class PlaceResult(BaseModel):
    address_components: list[AddressComponent] = []
    formatted_address: str = ""
    geometry: Geometry = Geometry()


class PlaceDetailsResponse(BaseModel):
    status: str
    result: PlaceResult | None = None
    error_message: str | None = None
