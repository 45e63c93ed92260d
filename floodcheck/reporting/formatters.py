"""Output formatters for run records."""

from floodcheck.models.common import to_pct
from floodcheck.models.reporting import RunRecord


def format_run_record_text(r: RunRecord) -> str:
    """Plain text summary for logging."""
    lines = [
        f"=== Flood Check ({r.notification_type or 'none'}) | Run {r.run_id[:8]} ===",
        f"Max risk: {to_pct(r.max_risk)}% | Today: {to_pct(r.today_risk)}%",
        f"High-risk periods: {len(r.high_risk_periods)}",
    ]
    for date, day in r.daily_risks.items():
        lines.append(
            f"  {date}: {to_pct(day['risk'])}% ({day['weather']}, rain {day['rain']}mm)"
        )
    return "\n".join(lines)


def format_history_row(row: dict) -> str:
    """One line per stored audit row for the CLI."""
    return (
        f"{row['created_at']}  {row.get('notification_type') or '-':6}  "
        f"max {to_pct(row['max_risk']):3d}%  today {to_pct(row['today_risk']):3d}%  "
        f"high-risk periods {len(row['high_risk_periods'])}"
    )
