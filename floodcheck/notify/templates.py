"""Danger and safe push notification templates."""

import json
from datetime import datetime
from zoneinfo import ZoneInfo

from floodcheck.models.common import to_pct
from floodcheck.models.notification import NotificationType, PushMessage
from floodcheck.models.risk import HighRiskPeriod

DANGER_TITLE = "⚠️ Flood Risk Alert"
DANGER_TITLE_MULTI = "⚠️ Flood Risk ({count} Days)"
SAFE_TITLE = "🌤️ Good News!"


def day_label(timestamp: datetime, tz: ZoneInfo) -> str:
    """Human-readable local day, e.g. 'Monday, Oct 19'."""
    local = timestamp.astimezone(tz)
    return f"{local:%A, %b} {local.day}"


def group_by_day(
    periods: list[HighRiskPeriod], tz: ZoneInfo
) -> dict[str, dict]:
    """Group high-risk periods by day label, tracking each day's max risk.

    Days keep first-seen (chronological) order.
    """
    days: dict[str, dict] = {}
    for p in periods:
        label = day_label(p.timestamp, tz)
        day = days.setdefault(label, {"maxRisk": p.risk, "periods": []})
        day["periods"].append({"time": p.time, "risk": p.risk})
        if p.risk > day["maxRisk"]:
            day["maxRisk"] = p.risk
    return days


def danger_body(days: dict[str, dict]) -> str:
    if len(days) > 1:
        day_list = ", ".join(
            f"{label} ({to_pct(d['maxRisk'])}%)" for label, d in days.items()
        )
        return f"High flood risk expected on: {day_list}. Stay alert!"
    label, d = next(iter(days.items()))
    return f"High flood risk ({to_pct(d['maxRisk'])}%) expected on {label}. Be prepared!"


def build_danger_message(
    periods: list[HighRiskPeriod],
    max_risk: float,
    tz: ZoneInfo,
    tokens: list[str],
    click_action: str,
) -> PushMessage:
    days = group_by_day(periods, tz)
    if not days:
        raise ValueError("Danger notification needs at least one high-risk period")
    title = (
        DANGER_TITLE_MULTI.format(count=len(days)) if len(days) > 1 else DANGER_TITLE
    )
    return PushMessage(
        title=title,
        body=danger_body(days),
        data={
            "type": NotificationType.DANGER.value,
            "days": json.dumps(days),
            "max_risk": str(max_risk),
            "click_action": click_action,
        },
        tokens=tokens,
    )


def build_safe_message(
    today_risk: float, tokens: list[str], click_action: str
) -> PushMessage:
    return PushMessage(
        title=SAFE_TITLE,
        body=(
            f"Good morning! Today's flood risk is low ({to_pct(today_risk)}%). "
            "Have a safe day!"
        ),
        data={
            "type": NotificationType.SAFE.value,
            "riskLevel": str(today_risk),
            "click_action": click_action,
        },
        tokens=tokens,
    )
