"""HTTP client for the Open-Meteo forecast API."""

import logging
from typing import Optional, Type

import httpx
from pydantic import ValidationError

from meteo_widget.config import (
    OPEN_METEO_BASE_URL, HTTP_TIMEOUT_SECONDS, DAILY_VARIABLES,
    FORECAST_TIMEZONE, DEFAULT_LAT, DEFAULT_LON
)
from meteo_widget.weather.models import ForecastResult

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a forecast cannot be fetched."""
    pass


class DefaultFetchError(FetchError):
    """Raised when the startup forecast for the reference location fails."""
    pass


class CoordFetchError(FetchError):
    """Raised when the forecast for given coordinates fails."""
    pass


class OpenMeteoClient:
    """Async client for fetching daily forecasts from Open-Meteo."""

    def __init__(
        self,
        base_url: str = OPEN_METEO_BASE_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the forecast client.

        Args:
            base_url: Forecast endpoint URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to fake the service)
        """
        self.base_url = base_url
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def fetch_default(self) -> ForecastResult:
        """Fetch the forecast for the reference location.

        Raises:
            DefaultFetchError: If the request fails or the payload is invalid
        """
        return await self._fetch(DEFAULT_LAT, DEFAULT_LON, DefaultFetchError)

    async def fetch_for_coordinates(self, lat: float, lon: float) -> ForecastResult:
        """Fetch the forecast for given coordinates.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Raises:
            CoordFetchError: If coordinates are invalid, the request fails
                or the payload is invalid
        """
        if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
            raise CoordFetchError(f"Invalid coordinates: lat={lat}, lon={lon}")

        return await self._fetch(lat, lon, CoordFetchError)

    async def _fetch(self, lat: float, lon: float, error_cls: Type[FetchError]) -> ForecastResult:
        params = {
            "latitude": lat,
            "longitude": lon,
            "daily": ",".join(DAILY_VARIABLES),
            "timezone": FORECAST_TIMEZONE,
        }

        logger.info(f"Fetching forecast for lat={lat}, lon={lon}")

        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()
            forecast = ForecastResult(**response.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from Open-Meteo API: {e.response.status_code} - {e.response.text}")
            raise error_cls(f"Forecast request failed with status {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error to Open-Meteo API: {e}")
            raise error_cls(f"Forecast service unavailable: {e}") from e
        except (TypeError, ValueError, ValidationError) as e:
            logger.error(f"Invalid Open-Meteo response format: {e}")
            raise error_cls(f"Invalid forecast response: {e}") from e

        if len(forecast) == 0:
            logger.error(f"Open-Meteo returned no daily entries for lat={lat}, lon={lon}")
            raise error_cls("Forecast response has no days")

        logger.info(f"Successfully fetched forecast with {len(forecast)} days")
        return forecast

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
