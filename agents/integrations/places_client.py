"""
Google Places Autocomplete Client

Thin async proxy used by /api/map-places. The upstream JSON is passed through
unchanged.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from api.config import PLACES_AUTOCOMPLETE_URL
from core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


PLACES_FAILED_MESSAGE = "Failed to fetch suggestions from Google Places API"


class PlacesClient:
    """Address autocomplete against the Google Places API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = PLACES_AUTOCOMPLETE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def autocomplete(self, text: str) -> Dict[str, Any]:
        """
        Address suggestions for a partial input.

        Raises:
            UpstreamServiceError: on transport errors or a non-2xx response
        """
        params = {"input": text, "key": self.api_key, "types": "address"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Google Places API request error: {e}")
            raise UpstreamServiceError(PLACES_FAILED_MESSAGE) from e

        if not response.is_success:
            logger.error(
                f"Google Places API HTTP error: {response.status_code} {response.reason_phrase}"
            )
            raise UpstreamServiceError(PLACES_FAILED_MESSAGE)

        return response.json()


def create_places_client(settings) -> PlacesClient:
    """Factory function to create the places client from settings"""
    if not settings.google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY not set. Place suggestions will fail upstream.")
    return PlacesClient(
        api_key=settings.google_places_api_key,
        base_url=settings.places_api_url,
    )
