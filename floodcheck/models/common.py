"""Common types and helpers shared across models."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TypeAlias

RunId: TypeAlias = str
Clock: TypeAlias = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def to_pct(risk: float) -> int:
    """Render a [0, 1] risk as a whole percentage for display."""
    return round(risk * 100)
