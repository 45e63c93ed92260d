"""OpenWeatherMap forecast data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ForecastPeriod:
    timestamp: datetime  # aware, UTC
    temp_max: float
    temp_min: float
    humidity: float
    wind_speed: float
    cloud_coverage: float
    feels_like: float
    precipitation: float  # mm over the provider window, 0 when absent
    condition: str
