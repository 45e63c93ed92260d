"""Flood risk assessment and aggregation models.

Every risk value here is a probability in [0, 1].
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RiskAssessment:
    risk: float
    timestamp: datetime
    condition: str
    precipitation: float
    failed: bool = False  # prediction call failed, risk defaulted to zero


@dataclass(frozen=True)
class DailyRiskSummary:
    date: str  # YYYY-MM-DD, location-local
    risk: float
    time: datetime
    condition: str
    precipitation: float

    def to_dict(self) -> dict:
        return {
            "risk": self.risk,
            "time": self.time.isoformat(),
            "weather": self.condition,
            "rain": self.precipitation,
        }


@dataclass(frozen=True)
class HighRiskPeriod:
    date: str  # YYYY-MM-DD, location-local
    time: str  # HH:MM, location-local
    timestamp: datetime
    risk: float
    condition: str
    precipitation: float

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "time": self.time,
            "timestamp": self.timestamp.isoformat(),
            "risk": self.risk,
            "weather": self.condition,
            "rain": self.precipitation,
        }


@dataclass
class AggregationResult:
    daily: dict[str, DailyRiskSummary] = field(default_factory=dict)
    high_risk_periods: list[HighRiskPeriod] = field(default_factory=list)
    max_risk: float = 0.0
    periods_assessed: int = 0
    prediction_failures: int = 0

    def risk_for(self, date_key: str) -> float:
        """Max risk recorded for a date, 0.0 when the date is outside the window."""
        summary = self.daily.get(date_key)
        return summary.risk if summary is not None else 0.0
