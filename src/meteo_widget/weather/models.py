"""Data models for the weather forecast widget."""

import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from meteo_widget.config import DEFAULT_CITY, DEFAULT_COUNTRY, NO_DATA_MESSAGE

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


class Location(BaseModel):
    """City/country pair as typed by the user."""
    city: str = Field(DEFAULT_CITY, description="Free-text city name")
    country: str = Field(DEFAULT_COUNTRY, description="Free-text country name")

    def resolved(self) -> "Location":
        """Return a copy with empty fields replaced by the defaults."""
        return Location(
            city=self.city.strip() or DEFAULT_CITY,
            country=self.country.strip() or DEFAULT_COUNTRY,
        )


class Coordinates(BaseModel):
    """Geographic coordinates of a geocoding match."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")


class ForecastDay(BaseModel):
    """One day of the forecast."""
    date: str = Field(..., description="Date in YYYY-MM-DD format")
    temp_max: Optional[float] = Field(None, description="Maximum temperature in Celsius")
    temp_min: Optional[float] = Field(None, description="Minimum temperature in Celsius")
    rain_sum: Optional[float] = Field(None, description="Rain sum in millimetres")

    @property
    def weekday_name(self) -> str:
        # isoweekday() is Monday=1..Sunday=7, the table starts on Sunday
        return DAY_NAMES[datetime.date.fromisoformat(self.date).isoweekday() % 7]


class DailySeries(BaseModel):
    """Open-Meteo `daily` block: parallel sequences indexed by day."""
    time: List[str] = Field(..., description="ISO dates, ascending")
    temperature_2m_max: List[Optional[float]] = Field(..., description="Daily maximum temperatures")
    temperature_2m_min: List[Optional[float]] = Field(..., description="Daily minimum temperatures")
    rain_sum: List[Optional[float]] = Field(..., description="Daily rain sums")

    @model_validator(mode="after")
    def check_aligned(self) -> "DailySeries":
        lengths = {
            "time": len(self.time),
            "temperature_2m_max": len(self.temperature_2m_max),
            "temperature_2m_min": len(self.temperature_2m_min),
            "rain_sum": len(self.rain_sum),
        }
        if len(set(lengths.values())) != 1:
            raise ValueError(f"Daily series have different lengths: {lengths}")
        return self


class ForecastResult(BaseModel):
    """Forecast payload returned by the Open-Meteo forecast endpoint."""
    latitude: Optional[float] = Field(None, description="Latitude of the forecast grid cell")
    longitude: Optional[float] = Field(None, description="Longitude of the forecast grid cell")
    timezone: Optional[str] = Field(None, description="Timezone of the daily aggregation")
    daily: DailySeries = Field(..., description="Daily forecast series")

    def __len__(self) -> int:
        return len(self.daily.time)

    def days(self) -> List[ForecastDay]:
        """Zip the parallel daily series into per-day records."""
        daily = self.daily
        return [
            ForecastDay(date=day, temp_max=temp_max, temp_min=temp_min, rain_sum=rain)
            for day, temp_max, temp_min, rain in zip(
                daily.time,
                daily.temperature_2m_max,
                daily.temperature_2m_min,
                daily.rain_sum,
            )
        ]


class GridCell(BaseModel):
    """A rendered cell of the forecast grid."""
    label: str = Field(..., description="'Today' or a weekday name")
    temp_max: Optional[float] = Field(None, description="Maximum temperature in Celsius")
    temp_min: Optional[float] = Field(None, description="Minimum temperature in Celsius")
    rain_sum: Optional[float] = Field(None, description="Rain sum in millimetres")


class ViewState(BaseModel):
    """State owned by a single forecast view."""
    forecast: Optional[ForecastResult] = Field(None, description="Last successfully fetched forecast")
    location: Location = Field(default_factory=Location, description="Current input values")
    error_message: str = Field(NO_DATA_MESSAGE, description="Shown when there is no forecast")
    initialized: bool = Field(False, description="Set once the startup forecast has been attempted")

    @property
    def has_forecast(self) -> bool:
        return self.forecast is not None and len(self.forecast) > 0


class InputEvent(BaseModel):
    """Raw change event from one of the widget's text inputs."""
    field: str = Field(..., pattern="^(city|country)$", description="Input that changed")
    value: str = Field("", description="Current value of the input")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
