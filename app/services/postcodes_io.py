import logging

import httpx

from app.mappers.postcode_areas import lookup_postcode_area
from app.schemas.address import PostcodeArea

logger = logging.getLogger(__name__)

POSTCODES_IO_URL = "https://api.postcodes.io"


class PostcodesIoService:
    """City/county lookup for a UK postcode via postcodes.io.

    Falls back to the offline area table whenever the API is unreachable or
    does not know the postcode.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str = POSTCODES_IO_URL):
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def lookup(self, postcode: str) -> PostcodeArea:
        compact = "".join(postcode.split()).upper()
        if not compact:
            return PostcodeArea()

        try:
            resp = await self._client.get(f"{self._base_url}/postcodes/{compact}")
        except httpx.HTTPError:
            logger.warning("postcodes.io lookup failed for %s", postcode, exc_info=True)
            return lookup_postcode_area(postcode)

        if resp.status_code != 200:
            logger.info("postcodes.io returned %s for %s", resp.status_code, postcode)
            return lookup_postcode_area(postcode)

        try:
            result = resp.json().get("result")
        except ValueError:
            logger.warning("postcodes.io returned malformed JSON for %s", postcode)
            return lookup_postcode_area(postcode)
        if not result:
            return lookup_postcode_area(postcode)

        return PostcodeArea(
            city=result.get("admin_ward") or result.get("parish") or result.get("admin_district") or "",
            county=result.get("admin_county") or result.get("admin_district") or "",
        )
