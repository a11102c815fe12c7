"""Shared fixtures: fake Open-Meteo and geocoding services."""
from datetime import date, timedelta

import httpx
import pytest

from meteo_widget.weather.client import OpenMeteoClient
from meteo_widget.weather.geocoding import GeocodingClient
from meteo_widget.weather.sessions import ViewRegistry
from meteo_widget.weather.view import ForecastView

PARIS = {"name": "Paris", "latitude": 48.8566, "longitude": 2.3522, "country": "FR"}
MUNICH = {"name": "Munich", "latitude": 48.1374, "longitude": 11.5755, "country": "DE"}


class FakeService:
    """Records requests and answers them with ``responder``."""

    def __init__(self, responder):
        self.responder = responder
        self.requests = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def forecast_payload(days=7, start=date(2024, 1, 1), latitude=52.52, longitude=13.41):
    """Open-Meteo style payload with ``days`` aligned daily entries."""
    return {
        "latitude": latitude,
        "longitude": longitude,
        "timezone": "Europe/Berlin",
        "daily_units": {"time": "iso8601", "temperature_2m_max": "°C"},
        "daily": {
            "time": [(start + timedelta(days=i)).isoformat() for i in range(days)],
            "temperature_2m_max": [10.0 + i for i in range(days)],
            "temperature_2m_min": [1.0 + i for i in range(days)],
            "rain_sum": [0.5 * i for i in range(days)],
        },
    }


def echo_forecast(request: httpx.Request) -> httpx.Response:
    """Answer with a forecast for the requested coordinates."""
    return httpx.Response(200, json=forecast_payload(
        latitude=float(request.url.params["latitude"]),
        longitude=float(request.url.params["longitude"]),
    ))


def geocode_known_cities(request: httpx.Request) -> httpx.Response:
    """Answer with the matching city, or an empty list."""
    city = request.url.params["city"]
    matches = {"Paris": [PARIS], "Munich": [MUNICH]}.get(city, [])
    return httpx.Response(200, json=matches)


@pytest.fixture
def forecast_service():
    return FakeService(echo_forecast)


@pytest.fixture
def geocoding_service():
    return FakeService(geocode_known_cities)


@pytest.fixture
def make_view(forecast_service, geocoding_service):
    """Factory for a view wired to the fake services with short delays."""
    def _make_view(input_delay_ms=10, fetch_delay_ms=20):
        return ForecastView(
            forecast_client=OpenMeteoClient(
                base_url="https://open-meteo.test/v1/forecast",
                transport=forecast_service.transport
            ),
            geocoding_client=GeocodingClient(
                api_key="test-key",
                base_url="https://geocoding.test/v1/geocoding",
                transport=geocoding_service.transport
            ),
            input_delay_ms=input_delay_ms,
            fetch_delay_ms=fetch_delay_ms
        )
    return _make_view


@pytest.fixture
def make_registry(forecast_service, geocoding_service):
    """Factory for a per-session view registry wired to the fake services."""
    def _make_registry(input_delay_ms=10, fetch_delay_ms=20, max_views=100):
        return ViewRegistry(
            forecast_client=OpenMeteoClient(
                base_url="https://open-meteo.test/v1/forecast",
                transport=forecast_service.transport
            ),
            geocoding_client=GeocodingClient(
                api_key="test-key",
                base_url="https://geocoding.test/v1/geocoding",
                transport=geocoding_service.transport
            ),
            input_delay_ms=input_delay_ms,
            fetch_delay_ms=fetch_delay_ms,
            max_views=max_views
        )
    return _make_registry
