"""Forecast fetcher: retrieves and parses the forecast for the target location."""

import logging
from datetime import UTC, datetime

from floodcheck.config.schema import LocationConfig
from floodcheck.errors import UpstreamUnavailable
from floodcheck.ingest.openweather_client import OpenWeatherClient
from floodcheck.models.forecast import ForecastPeriod

logger = logging.getLogger(__name__)


class ForecastFetcher:
    def __init__(self, client: OpenWeatherClient):
        self.client = client

    def fetch(self, location: LocationConfig) -> list[ForecastPeriod]:
        """Fetch forecast periods in provider order.

        The number of periods is whatever the provider returns. Entries that
        cannot be parsed are skipped; provider failures propagate as
        UpstreamUnavailable.
        """
        raw = self.client.get_forecast(location.name, location.units)
        entries = raw.get("list") if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            raise UpstreamUnavailable(
                f"Forecast response for {location.name} has no 'list' array"
            )

        periods: list[ForecastPeriod] = []
        for entry in entries:
            try:
                periods.append(parse_period(entry))
            except (KeyError, IndexError, TypeError, ValueError) as e:
                logger.warning(
                    "Skipping malformed forecast entry dt=%s: %s",
                    entry.get("dt") if isinstance(entry, dict) else None, e,
                )

        logger.info(
            "Received %d forecast periods for %s", len(periods), location.name
        )
        return periods


def parse_period(entry: dict) -> ForecastPeriod:
    """Convert one OpenWeather `list` entry into a ForecastPeriod."""
    main = entry["main"]
    return ForecastPeriod(
        timestamp=datetime.fromtimestamp(int(entry["dt"]), tz=UTC),
        temp_max=float(main["temp_max"]),
        temp_min=float(main["temp_min"]),
        humidity=float(main["humidity"]),
        wind_speed=float(entry["wind"]["speed"]),
        cloud_coverage=float(entry["clouds"]["all"]),
        feels_like=float(main["feels_like"]),
        precipitation=_precipitation(entry),
        condition=str(entry["weather"][0]["main"]),
    )


def _precipitation(entry: dict) -> float:
    """Rain volume for the last 3 hours; absent means none fell."""
    rain = entry.get("rain") or {}
    return float(rain.get("3h") or 0.0)
