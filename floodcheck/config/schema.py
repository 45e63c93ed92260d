"""Pydantic v2 configuration schema with strict validation."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

OPENWEATHER_BASE_URL = "https://api.openweathermap.org"
PREDICTION_URL = "https://minanasser.pythonanywhere.com/predict"
FCM_BASE_URL = "https://fcm.googleapis.com"


def _check_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {value}") from e
    return value


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str = "Alexandria,EG"
    units: str = "metric"
    elevation_meters: float = 250.0
    timezone: str = "Africa/Cairo"

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        return _check_timezone(value)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class RiskConfig(BaseModel):
    model_config = {"extra": "forbid"}

    threshold_pct: float = Field(default=60.0, ge=0.0, le=100.0)

    @property
    def threshold(self) -> float:
        """Alert threshold as a probability in [0, 1]."""
        return self.threshold_pct / 100.0


class ScheduleConfig(BaseModel):
    model_config = {"extra": "forbid"}

    cron: str = "0 0 * * *"  # midnight
    timezone: str = "Africa/Cairo"

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        return _check_timezone(value)

    @field_validator("cron")
    @classmethod
    def five_fields(cls, value: str) -> str:
        if len(value.split()) != 5:
            raise ValueError(f"cron expression needs 5 fields: {value!r}")
        return value


class WeatherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = OPENWEATHER_BASE_URL
    api_key: str = ""
    timeout: float = Field(default=30.0, gt=0.0)

    def resolved_api_key(self) -> str:
        return self.api_key or os.environ.get("OPENWEATHER_API_KEY", "")


class PredictionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    url: str = PREDICTION_URL
    timeout: float = Field(default=30.0, gt=0.0)


class PushConfig(BaseModel):
    model_config = {"extra": "forbid"}

    project_id: str = ""
    credentials_file: str | None = None
    base_url: str = FCM_BASE_URL
    click_action: str = "FLUTTER_NOTIFICATION_CLICK"
    timeout: float = Field(default=30.0, gt=0.0)

    def resolved_project_id(self) -> str:
        return self.project_id or os.environ.get("FCM_PROJECT_ID", "")


class FloodCheckConfig(BaseModel):
    model_config = {"extra": "forbid"}

    location: LocationConfig = LocationConfig()
    risk: RiskConfig = RiskConfig()
    schedule: ScheduleConfig = ScheduleConfig()
    weather: WeatherConfig = WeatherConfig()
    prediction: PredictionConfig = PredictionConfig()
    push: PushConfig = PushConfig()
