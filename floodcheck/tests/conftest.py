"""Shared test fixtures."""

import json
import sqlite3
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from floodcheck.config.schema import FloodCheckConfig
from floodcheck.models.forecast import ForecastPeriod
from floodcheck.storage.database import open_database


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def forecast_json(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "openweather_forecast_alexandria.json") as f:
        return json.load(f)


@pytest.fixture
def default_config() -> FloodCheckConfig:
    return FloodCheckConfig()


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    conn = open_database(tmp_path / "test.db")
    yield conn
    conn.close()


@pytest.fixture
def add_tokens() -> Callable[[sqlite3.Connection, list[str | None]], None]:
    """Insert raw rows into the device token registry."""

    def _add(conn: sqlite3.Connection, tokens: list[str | None]) -> None:
        conn.executemany(
            "INSERT INTO device_tokens (token) VALUES (?)", [(t,) for t in tokens]
        )
        conn.commit()

    return _add


@pytest.fixture
def make_period() -> Callable[..., ForecastPeriod]:
    """Factory for ForecastPeriods at a given UTC time."""

    def _make(
        when: str,
        precipitation: float = 0.0,
        condition: str = "Rain",
    ) -> ForecastPeriod:
        return ForecastPeriod(
            timestamp=datetime.fromisoformat(when).replace(tzinfo=UTC),
            temp_max=25.0,
            temp_min=22.0,
            humidity=80.0,
            wind_speed=6.0,
            cloud_coverage=90.0,
            feels_like=25.5,
            precipitation=precipitation,
            condition=condition,
        )

    return _make
