"""API endpoints for the weather forecast widget."""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import HTMLResponse

from meteo_widget.config import (
    DEFAULT_LAT, DEFAULT_LON, DEFAULT_CITY, DEFAULT_COUNTRY, FORECAST_TIMEZONE,
    SESSION_COOKIE_NAME
)
from meteo_widget.weather.client import FetchError
from meteo_widget.weather.geocoding import GeocodingError
from meteo_widget.weather.models import (
    Coordinates, ErrorResponse, ForecastResult, InputEvent, Location, ViewState
)
from meteo_widget.weather.sessions import ViewRegistry
from meteo_widget.weather.view import ForecastView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weather", tags=["weather"])
widget_router = APIRouter(prefix="/widget", tags=["widget"])


def get_view_registry(request: Request) -> ViewRegistry:
    """Return the view registry owned by the running application."""
    return request.app.state.views


async def get_forecast_view(request: Request, response: Response) -> ForecastView:
    """Dependency returning the caller's own view, issuing a session cookie if needed."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        session_id = uuid.uuid4().hex
        response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return await get_view_registry(request).get(session_id)


@widget_router.get("/grid", response_class=HTMLResponse)
async def get_widget_grid(view: ForecastView = Depends(get_forecast_view)) -> str:
    """Rendered forecast grid, or the error message when there is no forecast."""
    return view.render()


@widget_router.get("/state", response_model=ViewState)
async def get_widget_state(view: ForecastView = Depends(get_forecast_view)) -> ViewState:
    """Current widget state, including an error hidden behind a stale grid."""
    return view.state


@widget_router.post("/input", status_code=202)
async def post_widget_input(
    event: InputEvent,
    view: ForecastView = Depends(get_forecast_view)
) -> dict:
    """Forward a raw change event from one of the text inputs.

    Returns:
        Acknowledgement; the grid updates once the input settles
    """
    if event.field == "city":
        view.on_city_input(event.value)
    else:
        view.on_country_input(event.value)
    return {"accepted": event.field}


@router.get(
    "/",
    response_model=ForecastResult,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
async def get_weather_forecast(
    request: Request,
    lat: Optional[float] = Query(
        None,
        ge=-90,
        le=90,
        description="Latitude in decimal degrees (use with lon)"
    ),
    lon: Optional[float] = Query(
        None,
        ge=-180,
        le=180,
        description="Longitude in decimal degrees (use with lat)"
    )
) -> ForecastResult:
    """Get the daily forecast for coordinates, or for the reference location.

    Raises:
        HTTPException: If only one coordinate is given or the forecast fails
    """
    if (lat is None) != (lon is None):
        raise HTTPException(
            status_code=400,
            detail="Both latitude and longitude must be provided when using coordinates."
        )

    client = get_view_registry(request).forecast_client
    try:
        if lat is None:
            forecast = await client.fetch_default()
        else:
            forecast = await client.fetch_for_coordinates(lat, lon)
    except FetchError as e:
        logger.error(f"Error getting forecast: {e}")
        raise HTTPException(status_code=502, detail="Weather service temporarily unavailable")

    logger.info(f"Successfully retrieved forecast with {len(forecast)} days")
    return forecast


@router.get(
    "/geocode",
    response_model=Coordinates,
    responses={404: {"model": ErrorResponse}}
)
async def get_coordinates(
    request: Request,
    city: str = Query("", description="City name, defaults to Munich when empty"),
    country: str = Query("", description="Country name, defaults to Germany when empty")
) -> Coordinates:
    """Resolve a city/country pair to coordinates.

    Raises:
        HTTPException: If the city cannot be found
    """
    client = get_view_registry(request).geocoding_client
    try:
        return await client.geocode(Location(city=city, country=country))
    except GeocodingError as e:
        logger.error(f"Error geocoding {city}, {country}: {e}")
        raise HTTPException(status_code=404, detail="Couldn't find city.")


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "meteo-widget"}


@router.get("/info")
async def get_service_info() -> dict:
    """Get service information.

    Returns:
        Service information including default location and features
    """
    return {
        "service": "Open-Meteo Weather Widget",
        "version": "0.1.0",
        "default_location": {
            "city": DEFAULT_CITY,
            "country": DEFAULT_COUNTRY,
            "latitude": DEFAULT_LAT,
            "longitude": DEFAULT_LON,
            "timezone": FORECAST_TIMEZONE
        },
        "features": [
            "Daily max/min temperature and rain forecast",
            "City and country lookup"
        ],
        "data_source": "Open-Meteo API, API Ninjas geocoding"
    }
