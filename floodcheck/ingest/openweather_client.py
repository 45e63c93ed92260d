"""OpenWeatherMap 5-day / 3-hour forecast API client."""

import logging

import httpx

from floodcheck.config.schema import OPENWEATHER_BASE_URL
from floodcheck.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_BASE_URL,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    def get_forecast(self, location: str, units: str = "metric") -> dict:
        """Fetch the multi-day forecast for a location name like 'Alexandria,EG'.

        Raises UpstreamUnavailable on transport errors, non-2xx statuses and
        non-JSON bodies. No retries.
        """
        url = f"{self.base_url}/data/2.5/forecast"
        params = {"q": location, "appid": self.api_key, "units": units}
        try:
            resp = httpx.get(url, params=params, timeout=self.timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("OpenWeather request failed for %s: %s", location, e)
            raise UpstreamUnavailable(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            logger.error(
                "OpenWeather %d for %s: %s", resp.status_code, location, resp.text
            )
            raise UpstreamUnavailable(
                f"HTTP {resp.status_code}: {resp.text}", resp.status_code
            )

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamUnavailable(f"Invalid JSON from OpenWeather: {e}") from e
