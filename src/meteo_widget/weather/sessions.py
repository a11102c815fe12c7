"""Per-session forecast views."""

import asyncio
import logging
from collections import OrderedDict
from typing import Optional

from meteo_widget.config import INPUT_DEBOUNCE_MS, FETCH_DEBOUNCE_MS, MAX_SESSIONS
from meteo_widget.weather.client import OpenMeteoClient
from meteo_widget.weather.geocoding import GeocodingClient
from meteo_widget.weather.view import ForecastView

logger = logging.getLogger(__name__)


class ViewRegistry:
    """Keeps one started ForecastView per browser session.

    All views share the registry's HTTP clients. When more than
    ``max_views`` sessions exist, the least recently used view is closed.
    """

    def __init__(
        self,
        forecast_client: Optional[OpenMeteoClient] = None,
        geocoding_client: Optional[GeocodingClient] = None,
        input_delay_ms: float = INPUT_DEBOUNCE_MS,
        fetch_delay_ms: float = FETCH_DEBOUNCE_MS,
        max_views: int = MAX_SESSIONS
    ):
        """Initialize the registry.

        Args:
            forecast_client: Forecast client instance (creates default if None)
            geocoding_client: Geocoding client instance (creates default if None)
            input_delay_ms: Debounce delay for each text input of a view
            fetch_delay_ms: Debounce delay for a view's geocode/forecast chain
            max_views: Number of sessions kept before the oldest is closed
        """
        self.forecast_client = forecast_client or OpenMeteoClient()
        self.geocoding_client = geocoding_client or GeocodingClient()
        self.input_delay_ms = input_delay_ms
        self.fetch_delay_ms = fetch_delay_ms
        self.max_views = max_views
        self._views: "OrderedDict[str, ForecastView]" = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._views)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._views

    async def get(self, session_id: str) -> ForecastView:
        """Return the session's view, creating and starting it on first use."""
        async with self._lock:
            view = self._views.get(session_id)
            if view is not None:
                self._views.move_to_end(session_id)
                return view

            view = ForecastView(
                forecast_client=self.forecast_client,
                geocoding_client=self.geocoding_client,
                input_delay_ms=self.input_delay_ms,
                fetch_delay_ms=self.fetch_delay_ms
            )
            self._views[session_id] = view
            logger.info(f"Created forecast view for session {session_id[:8]}, {len(self._views)} active")

            evicted = []
            while len(self._views) > self.max_views:
                _, oldest = self._views.popitem(last=False)
                evicted.append(oldest)

            await view.start()

        for oldest in evicted:
            await oldest.aclose()
        if evicted:
            logger.info(f"Closed {len(evicted)} least recently used forecast view(s)")
        return view

    async def aclose(self) -> None:
        """Close every view, then the shared clients."""
        views = list(self._views.values())
        self._views.clear()
        for view in views:
            await view.aclose()
        logger.info(f"Closed {len(views)} forecast view(s)")

        try:
            await self.forecast_client.aclose()
        finally:
            await self.geocoding_client.aclose()
