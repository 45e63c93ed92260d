"""Tests for run record formatters."""

from floodcheck.models.reporting import RunRecord
from floodcheck.reporting.formatters import format_history_row, format_run_record_text


def _record() -> RunRecord:
    return RunRecord(
        run_id="abcdef123456",
        max_risk=0.7,
        today_risk=0.2,
        high_risk_periods=[{"date": "2026-10-19", "risk": 0.7}],
        daily_risks={
            "2026-10-19": {"risk": 0.7, "time": "", "weather": "Rain", "rain": 18.7},
            "2026-10-20": {"risk": 0.3, "time": "", "weather": "Clear", "rain": 0.0},
        },
        notification_type="danger",
    )


class TestFormatters:
    def test_run_record_text(self):
        text = format_run_record_text(_record())
        assert "Run abcdef12" in text
        assert "Max risk: 70% | Today: 20%" in text
        assert "High-risk periods: 1" in text
        assert "2026-10-19: 70% (Rain, rain 18.7mm)" in text
        assert "2026-10-20: 30%" in text

    def test_history_row(self):
        row = {
            "created_at": "2026-10-19 00:00:03",
            "notification_type": "safe",
            "max_risk": 0.25,
            "today_risk": 0.1,
            "high_risk_periods": [],
        }
        line = format_history_row(row)
        assert line.startswith("2026-10-19 00:00:03")
        assert "safe" in line
        assert "max  25%" in line
        assert "high-risk periods 0" in line
