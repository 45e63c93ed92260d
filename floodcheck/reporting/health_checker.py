"""Health checker: DB connectivity, upstream reachability, last run age."""

import sqlite3
from datetime import UTC, datetime

import httpx

from floodcheck.config.schema import FloodCheckConfig
from floodcheck.models.reporting import HealthStatus
from floodcheck.storage import audit_repo, token_repo


class HealthChecker:
    def __init__(self, conn: sqlite3.Connection, config: FloodCheckConfig):
        self.conn = conn
        self.config = config

    def check(self) -> HealthStatus:
        db_ok = self._check_db()
        return HealthStatus(
            db_connected=db_ok,
            weather_api_reachable=self._reachable(self.config.weather.base_url),
            prediction_api_reachable=self._reachable(self.config.prediction.url),
            registered_devices=token_repo.count_device_tokens(self.conn) if db_ok else 0,
            last_run_age_minutes=self._last_run_age_minutes() if db_ok else None,
        )

    def _check_db(self) -> bool:
        try:
            self.conn.execute("SELECT 1 FROM daily_flood_checks LIMIT 1")
            return True
        except sqlite3.Error:
            return False

    def _reachable(self, url: str) -> bool:
        """Any HTTP answer counts; the prediction endpoint only accepts POST."""
        try:
            resp = httpx.get(url, timeout=10.0)
            return resp.status_code < 500
        except (httpx.HTTPError, httpx.InvalidURL):
            return False

    def _last_run_age_minutes(self) -> float | None:
        latest = audit_repo.get_latest_run_record(self.conn)
        if latest is None:
            return None
        try:
            created = datetime.fromisoformat(latest["created_at"])
        except (ValueError, TypeError):
            return None
        if created.tzinfo is None:
            # SQLite CURRENT_TIMESTAMP is UTC
            created = created.replace(tzinfo=UTC)
        return (datetime.now(UTC) - created).total_seconds() / 60
