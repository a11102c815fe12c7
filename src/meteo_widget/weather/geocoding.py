"""Geocoding client for the weather forecast widget."""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from meteo_widget.config import GEOCODING_BASE_URL, NINJAS_API_KEY, HTTP_TIMEOUT_SECONDS
from meteo_widget.weather.models import Coordinates, Location

logger = logging.getLogger(__name__)


class GeocodingError(LookupError):
    """Raised when a city/country pair cannot be resolved to coordinates."""
    pass


class GeocodingClient:
    """Async client for the API Ninjas geocoding endpoint."""

    def __init__(
        self,
        api_key: str = NINJAS_API_KEY,
        base_url: str = GEOCODING_BASE_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the geocoding client.

        Args:
            api_key: Secret sent in the X-API-KEY header
            base_url: Geocoding endpoint URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to fake the service)
        """
        if not api_key:
            logger.warning("No geocoding API key configured, set NINJAS_API_KEY")
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            headers={"X-API-KEY": api_key},
            timeout=timeout,
            transport=transport
        )

    async def geocode(self, location: Location) -> Coordinates:
        """Resolve a city/country pair to the coordinates of the first match.

        Args:
            location: City and country; empty fields fall back to the defaults

        Returns:
            Coordinates of the first match

        Raises:
            GeocodingError: If there is no match or the request fails
        """
        location = location.resolved()
        params = {"city": location.city, "country": location.country}

        logger.info(f"Geocoding city={location.city}, country={location.country}")

        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()
            matches = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from geocoding API: {e.response.status_code} - {e.response.text}")
            raise GeocodingError(f"Geocoding request failed with status {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error to geocoding API: {e}")
            raise GeocodingError(f"Geocoding service unavailable: {e}") from e
        except ValueError as e:
            logger.error(f"Geocoding API returned invalid JSON: {e}")
            raise GeocodingError("Invalid geocoding response") from e

        if not isinstance(matches, list) or not matches:
            logger.info(f"No geocoding match for '{location.city}, {location.country}'")
            raise GeocodingError(f"City '{location.city}' not found in '{location.country}'")

        try:
            coordinates = Coordinates(**matches[0])
        except (TypeError, ValidationError) as e:
            logger.error(f"Invalid geocoding match format: {e}")
            raise GeocodingError("Invalid geocoding response") from e

        logger.info(
            f"Successfully geocoded '{location.city}, {location.country}' "
            f"to ({coordinates.latitude}, {coordinates.longitude})"
        )
        return coordinates

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
