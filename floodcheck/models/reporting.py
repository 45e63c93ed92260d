"""Run audit and operational health models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RunRecord:
    run_id: str
    max_risk: float
    today_risk: float
    high_risk_periods: list[dict] = field(default_factory=list)
    daily_risks: dict[str, dict] = field(default_factory=dict)
    notification_type: str = ""
    config_hash: str = ""


@dataclass(frozen=True)
class HealthStatus:
    db_connected: bool
    weather_api_reachable: bool
    prediction_api_reachable: bool
    registered_devices: int
    last_run_age_minutes: float | None
