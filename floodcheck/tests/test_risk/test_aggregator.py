"""Tests for the daily aggregator fold."""

from zoneinfo import ZoneInfo

import pytest

from floodcheck.models.risk import RiskAssessment
from floodcheck.risk.aggregator import DailyAggregator

CAIRO = ZoneInfo("Africa/Cairo")


def _pairs(make_period, rows: list[tuple[str, float]], failed: set[int] = frozenset()):
    pairs = []
    for i, (when, risk) in enumerate(rows):
        period = make_period(when, condition=f"c{i}")
        pairs.append((
            period,
            RiskAssessment(
                risk=risk,
                timestamp=period.timestamp,
                condition=period.condition,
                precipitation=period.precipitation,
                failed=i in failed,
            ),
        ))
    return pairs


@pytest.fixture
def aggregator() -> DailyAggregator:
    return DailyAggregator(threshold=0.60, tz=CAIRO)


SCENARIO_A = [
    ("2026-10-19T09:00:00", 0.2),
    ("2026-10-19T12:00:00", 0.7),
    ("2026-10-19T15:00:00", 0.5),
    ("2026-10-20T09:00:00", 0.1),
    ("2026-10-20T12:00:00", 0.3),
]


class TestAggregate:
    def test_two_day_forecast(self, aggregator, make_period):
        result = aggregator.aggregate(_pairs(make_period, SCENARIO_A))

        assert list(result.daily) == ["2026-10-19", "2026-10-20"]
        assert result.daily["2026-10-19"].risk == 0.7
        assert result.daily["2026-10-19"].condition == "c1"
        assert result.daily["2026-10-20"].risk == 0.3
        assert result.max_risk == 0.7
        assert result.periods_assessed == 5

        assert len(result.high_risk_periods) == 1
        high = result.high_risk_periods[0]
        assert high.date == "2026-10-19"
        assert high.risk == 0.7

    def test_daily_max_matches_brute_force(self, aggregator, make_period):
        rows = SCENARIO_A + [
            ("2026-10-21T00:00:00", 0.65),
            ("2026-10-21T03:00:00", 0.9),
            ("2026-10-21T06:00:00", 0.62),
        ]
        result = aggregator.aggregate(_pairs(make_period, rows))

        for date, summary in result.daily.items():
            expected = max(
                r for w, r in rows
                if aggregator.date_key(make_period(w)) == date
            )
            assert summary.risk == expected
        assert result.max_risk == max(r for _, r in rows)

    def test_high_risk_periods_once_each_with_date(self, aggregator, make_period):
        rows = [
            ("2026-10-21T00:00:00", 0.65),
            ("2026-10-21T03:00:00", 0.9),
            ("2026-10-22T03:00:00", 0.61),
        ]
        result = aggregator.aggregate(_pairs(make_period, rows))

        assert [(p.date, p.risk) for p in result.high_risk_periods] == [
            ("2026-10-21", 0.65),
            ("2026-10-21", 0.9),
            ("2026-10-22", 0.61),
        ]

    def test_threshold_is_inclusive(self, aggregator, make_period):
        result = aggregator.aggregate(
            _pairs(make_period, [("2026-10-19T09:00:00", 0.60)])
        )
        assert len(result.high_risk_periods) == 1

    def test_first_seen_wins_ties(self, aggregator, make_period):
        result = aggregator.aggregate(_pairs(make_period, [
            ("2026-10-19T09:00:00", 0.4),
            ("2026-10-19T12:00:00", 0.4),
        ]))
        assert result.daily["2026-10-19"].condition == "c0"

    def test_zero_risk_day_still_summarized(self, aggregator, make_period):
        result = aggregator.aggregate(
            _pairs(make_period, [("2026-10-19T09:00:00", 0.0)], failed={0})
        )
        assert result.daily["2026-10-19"].risk == 0.0
        assert result.max_risk == 0.0
        assert result.prediction_failures == 1

    def test_date_key_is_local(self, aggregator, make_period):
        # 22:00 UTC is past midnight in Cairo
        period = make_period("2026-10-19T22:00:00")
        assert aggregator.date_key(period) == "2026-10-20"

    def test_local_time_on_high_risk_period(self, make_period):
        utc_agg = DailyAggregator(threshold=0.6, tz=ZoneInfo("UTC"))
        result = utc_agg.aggregate(_pairs(make_period, [("2026-10-19T15:00:00", 0.8)]))
        assert result.high_risk_periods[0].time == "15:00"

    def test_empty_forecast(self, aggregator):
        result = aggregator.aggregate([])
        assert result.daily == {}
        assert result.high_risk_periods == []
        assert result.max_risk == 0.0

    def test_risk_for_missing_date_is_zero(self, aggregator, make_period):
        result = aggregator.aggregate(_pairs(make_period, SCENARIO_A))
        assert result.risk_for("2026-10-19") == 0.7
        assert result.risk_for("2026-11-01") == 0.0
