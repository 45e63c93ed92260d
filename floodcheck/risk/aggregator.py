"""Daily aggregator: folds per-period assessments into per-day maxima."""

from collections.abc import Iterable
from zoneinfo import ZoneInfo

from floodcheck.models.forecast import ForecastPeriod
from floodcheck.models.risk import (
    AggregationResult,
    DailyRiskSummary,
    HighRiskPeriod,
    RiskAssessment,
)


class DailyAggregator:
    def __init__(self, threshold: float, tz: ZoneInfo):
        self.threshold = threshold
        self.tz = tz

    def date_key(self, period: ForecastPeriod) -> str:
        """Location-local calendar date of a period, YYYY-MM-DD."""
        return period.timestamp.astimezone(self.tz).date().isoformat()

    def aggregate(
        self, pairs: Iterable[tuple[ForecastPeriod, RiskAssessment]]
    ) -> AggregationResult:
        """Fold (period, assessment) pairs in order. Pairs are consumed once."""
        result = AggregationResult()

        for period, assessment in pairs:
            result.periods_assessed += 1
            if assessment.failed:
                result.prediction_failures += 1

            key = self.date_key(period)
            risk = assessment.risk

            # First-seen wins ties
            current = result.daily.get(key)
            if current is None or risk > current.risk:
                result.daily[key] = DailyRiskSummary(
                    date=key,
                    risk=risk,
                    time=period.timestamp,
                    condition=assessment.condition,
                    precipitation=assessment.precipitation,
                )

            if risk >= self.threshold:
                local = period.timestamp.astimezone(self.tz)
                result.high_risk_periods.append(
                    HighRiskPeriod(
                        date=key,
                        time=local.strftime("%H:%M"),
                        timestamp=period.timestamp,
                        risk=risk,
                        condition=assessment.condition,
                        precipitation=assessment.precipitation,
                    )
                )

            if risk > result.max_risk:
                result.max_risk = risk

        return result
