"""Configuration settings for the weather forecast widget."""

import os
from typing import Final, Tuple
from dotenv import load_dotenv

load_dotenv()

# API Configuration
OPEN_METEO_BASE_URL: str = os.getenv("OPEN_METEO_BASE_URL", "https://api.open-meteo.com/v1/forecast")
GEOCODING_BASE_URL: str = os.getenv("GEOCODING_BASE_URL", "https://api.api-ninjas.com/v1/geocoding")
# Get a key at https://api-ninjas.com/api/geocoding
NINJAS_API_KEY: str = os.getenv("NINJAS_API_KEY", "")
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

# Forecast request
DAILY_VARIABLES: Final[Tuple[str, ...]] = ("temperature_2m_max", "temperature_2m_min", "rain_sum")
FORECAST_TIMEZONE: Final[str] = "Europe/Berlin"

# Reference location used for the startup forecast (Berlin)
DEFAULT_LAT: Final[float] = 52.52
DEFAULT_LON: Final[float] = 13.41

# Default input values
DEFAULT_CITY: Final[str] = "Munich"
DEFAULT_COUNTRY: Final[str] = "Germany"

# Debounce delays in milliseconds
INPUT_DEBOUNCE_MS: int = int(os.getenv("INPUT_DEBOUNCE_MS", "500"))
FETCH_DEBOUNCE_MS: int = int(os.getenv("FETCH_DEBOUNCE_MS", "1000"))

# Messages shown in place of the grid
NO_DATA_MESSAGE: Final[str] = "No weather data found."
DEFAULT_FETCH_FAILED_MESSAGE: Final[str] = "Couldn't fetch default weather data."
CITY_NOT_FOUND_MESSAGE: Final[str] = "Couldn't find city."
COORD_FETCH_FAILED_MESSAGE: Final[str] = "Couldn't fetch weather data with given input values."

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Browser sessions, each owning its own forecast view
SESSION_COOKIE_NAME: Final[str] = "meteo_session"
MAX_SESSIONS: int = int(os.getenv("MAX_SESSIONS", "1000"))
