from pydantic import BaseModel

from app.schemas.address import AddressPrediction, ParsedAddress, PostcodeSource


class AutocompleteResponse(BaseModel):
    status: str  # "OK" | "ZERO_RESULTS"
    predictions: list[AddressPrediction] = []


class AddressDetailsResponse(BaseModel):
    status: str
    result: ParsedAddress
    postcode_source: PostcodeSource


class PostcodeLookupResponse(BaseModel):
    postcode: str
    city: str
    county: str
