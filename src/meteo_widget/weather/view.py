"""Forecast view: input handling, the geocode/forecast chain and rendering."""

import logging
from html import escape
from typing import List, Optional

from meteo_widget.config import (
    INPUT_DEBOUNCE_MS, FETCH_DEBOUNCE_MS,
    DEFAULT_FETCH_FAILED_MESSAGE, CITY_NOT_FOUND_MESSAGE, COORD_FETCH_FAILED_MESSAGE
)
from meteo_widget.debounce import Debouncer
from meteo_widget.weather.client import OpenMeteoClient, DefaultFetchError, CoordFetchError
from meteo_widget.weather.geocoding import GeocodingClient, GeocodingError
from meteo_widget.weather.models import GridCell, ViewState

logger = logging.getLogger(__name__)


def _format_temp(value: Optional[float]) -> str:
    return "&ndash;" if value is None else f"{value}&deg;"


def _format_rain(value: Optional[float]) -> str:
    return "&ndash;" if value is None else f"{value} mm"


class ForecastView:
    """Owns the widget state and drives it from user input.

    Input events pass through one debouncer per field. Once a field settles
    and the view has started, a single shared debouncer runs the
    geocode -> forecast chain. Failures are stored in ``state.error_message``
    and never raised to the caller; the last good forecast is kept.
    """

    def __init__(
        self,
        forecast_client: Optional[OpenMeteoClient] = None,
        geocoding_client: Optional[GeocodingClient] = None,
        input_delay_ms: float = INPUT_DEBOUNCE_MS,
        fetch_delay_ms: float = FETCH_DEBOUNCE_MS
    ):
        """Initialize the view.

        Args:
            forecast_client: Forecast client instance (creates default if None)
            geocoding_client: Geocoding client instance (creates default if None)
            input_delay_ms: Debounce delay for each text input
            fetch_delay_ms: Debounce delay for the geocode/forecast chain
        """
        self._owns_forecast_client = forecast_client is None
        self._owns_geocoding_client = geocoding_client is None
        self.forecast_client = forecast_client or OpenMeteoClient()
        self.geocoding_client = geocoding_client or GeocodingClient()
        self.state = ViewState()

        self._city_input = Debouncer(self.set_city, input_delay_ms)
        self._country_input = Debouncer(self.set_country, input_delay_ms)
        self._fetch = Debouncer(self.refresh_location, fetch_delay_ms)

    async def start(self) -> None:
        """Load the forecast for the reference location, once."""
        if self.state.initialized:
            return

        try:
            self.state.forecast = await self.forecast_client.fetch_default()
            logger.info("Default forecast loaded")
        except DefaultFetchError as e:
            logger.error(f"Default forecast failed: {e}")
            self.state.error_message = DEFAULT_FETCH_FAILED_MESSAGE
        finally:
            self.state.initialized = True

    def on_city_input(self, value: str) -> None:
        """Raw change event from the city input."""
        self._city_input(value)

    def on_country_input(self, value: str) -> None:
        """Raw change event from the country input."""
        self._country_input(value)

    def set_city(self, value: str) -> None:
        if value == self.state.location.city:
            return
        self.state.location.city = value
        self._location_changed()

    def set_country(self, value: str) -> None:
        if value == self.state.location.country:
            return
        self.state.location.country = value
        self._location_changed()

    def _location_changed(self) -> None:
        # Edits arriving before the startup fetch settle the field only
        if not self.state.initialized:
            logger.debug("Location changed before start, not fetching")
            return
        self._fetch()

    async def refresh_location(self) -> None:
        """Geocode the current location and fetch its forecast."""
        location = self.state.location
        try:
            coordinates = await self.geocoding_client.geocode(location)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for {location.city}, {location.country}: {e}")
            self.state.error_message = CITY_NOT_FOUND_MESSAGE
            return

        try:
            forecast = await self.forecast_client.fetch_for_coordinates(
                coordinates.latitude, coordinates.longitude
            )
        except CoordFetchError as e:
            logger.warning(f"Forecast failed for ({coordinates.latitude}, {coordinates.longitude}): {e}")
            self.state.error_message = COORD_FETCH_FAILED_MESSAGE
            return

        self.state.forecast = forecast
        self.state.error_message = ""
        logger.info(f"Forecast updated for {location.city}, {location.country}")

    def cells(self) -> List[GridCell]:
        """Grid cells for the current forecast, empty if there is none."""
        if not self.state.has_forecast:
            return []

        cells = []
        for index, day in enumerate(self.state.forecast.days()):
            cells.append(GridCell(
                label="Today" if index == 0 else day.weekday_name,
                temp_max=day.temp_max,
                temp_min=day.temp_min,
                rain_sum=day.rain_sum
            ))
        return cells

    def render(self) -> str:
        """Render the grid, or the error message when there is no forecast."""
        cells = self.cells()
        if not cells:
            return f"<p>{escape(self.state.error_message)}</p>"

        parts = ['<div class="weathergrid mx-auto">']
        for cell in cells:
            parts.append(
                '<div class="weathergrid__el">'
                f'<p class="weekday">{escape(cell.label)}</p>'
                '<div class="temp-wrapper">'
                f'<span class="temp">{_format_temp(cell.temp_max)}</span>'
                '<span class="temp-type">Max</span>'
                '</div>'
                '<div class="temp-wrapper">'
                f'<span class="temp">{_format_temp(cell.temp_min)}</span>'
                '<span class="temp-type">Min</span>'
                '</div>'
                '<div class="temp-wrapper">'
                f'<span class="temp">{_format_rain(cell.rain_sum)}</span>'
                '<span class="temp-type">Rain</span>'
                '</div>'
                '</div>'
            )
        parts.append('</div>')
        return "".join(parts)

    async def settle(self) -> None:
        """Wait for pending input and fetch debouncers to finish."""
        await self._city_input.wait()
        await self._country_input.wait()
        await self._fetch.wait()

    async def aclose(self) -> None:
        """Cancel pending work and close the clients this view created.

        Clients passed in by the caller may be shared between views and
        are left open.
        """
        debouncers = (self._city_input, self._country_input, self._fetch)
        for debouncer in debouncers:
            debouncer.cancel()
        for debouncer in debouncers:
            await debouncer.wait()

        try:
            if self._owns_forecast_client:
                await self.forecast_client.aclose()
        finally:
            if self._owns_geocoding_client:
                await self.geocoding_client.aclose()
