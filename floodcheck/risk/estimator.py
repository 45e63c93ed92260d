"""Risk estimator: one remote prediction per forecast period, zero on failure."""

import logging
from collections.abc import Iterable, Iterator
from zoneinfo import ZoneInfo

from floodcheck.config.schema import LocationConfig
from floodcheck.errors import PredictionFailure
from floodcheck.models.common import to_pct
from floodcheck.models.forecast import ForecastPeriod
from floodcheck.models.risk import RiskAssessment
from floodcheck.risk.prediction_client import PredictionClient

logger = logging.getLogger(__name__)


def _failed(period: ForecastPeriod) -> RiskAssessment:
    return RiskAssessment(
        risk=0.0,
        timestamp=period.timestamp,
        condition=period.condition,
        precipitation=period.precipitation,
        failed=True,
    )


class RiskEstimator:
    def __init__(self, client: PredictionClient, location: LocationConfig):
        self.client = client
        self.elevation = location.elevation_meters
        self.tz: ZoneInfo = location.tz

    def build_features(self, period: ForecastPeriod) -> dict:
        """Request body expected by the prediction model."""
        local = period.timestamp.astimezone(self.tz)
        return {
            "Year": local.year,
            "Month": local.month,
            "Max_Temp": period.temp_max,
            "Min_Temp": period.temp_min,
            "Rainfall": period.precipitation,
            "Relative_Humidity": period.humidity,
            "Wind_Speed": period.wind_speed,
            "Cloud_Coverage": period.cloud_coverage,
            "Bright_Sunshine": period.feels_like,
            "ALT": self.elevation,
        }

    def estimate(self, period: ForecastPeriod) -> RiskAssessment:
        """Estimate flood risk for one period. Never raises."""
        try:
            raw = self.client.predict(self.build_features(period))
        except PredictionFailure as e:
            logger.error(
                "Flood prediction failed for %s, using zero risk: %s",
                period.timestamp.isoformat(), e,
            )
            return _failed(period)
        except Exception:
            logger.exception(
                "Unexpected prediction error for %s, using zero risk",
                period.timestamp.isoformat(),
            )
            return _failed(period)

        risk = min(max(raw, 0.0), 1.0)
        if risk != raw:
            logger.warning(
                "Prediction %.4f for %s outside [0, 1], clamped",
                raw, period.timestamp.isoformat(),
            )
        logger.info(
            "Forecast for %s - flood risk: %d%%",
            period.timestamp.astimezone(self.tz).isoformat(), to_pct(risk),
        )
        return RiskAssessment(
            risk=risk,
            timestamp=period.timestamp,
            condition=period.condition,
            precipitation=period.precipitation,
        )

    def estimate_all(
        self, periods: Iterable[ForecastPeriod]
    ) -> Iterator[tuple[ForecastPeriod, RiskAssessment]]:
        """Lazily estimate each period in order, one request at a time."""
        for period in periods:
            yield period, self.estimate(period)
