"""Client for the remote flood prediction model."""

import logging
import math

import httpx

from floodcheck.config.schema import PREDICTION_URL
from floodcheck.errors import PredictionFailure

logger = logging.getLogger(__name__)


class PredictionClient:
    def __init__(self, url: str = PREDICTION_URL, timeout: float = 30.0):
        self.url = url
        self.timeout = timeout

    def predict(self, features: dict) -> float:
        """POST one feature row and return `flood_prediction` as a float.

        Any transport, status or payload problem raises PredictionFailure.
        """
        try:
            resp = httpx.post(
                self.url,
                json=features,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise PredictionFailure(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            raise PredictionFailure(
                f"HTTP {resp.status_code}: {resp.text}", resp.status_code
            )

        try:
            data = resp.json()
            value = float(data["flood_prediction"])
        except (ValueError, KeyError, TypeError) as e:
            raise PredictionFailure(f"Malformed prediction response: {e}") from e

        if math.isnan(value):
            raise PredictionFailure("Prediction is NaN")
        return value
