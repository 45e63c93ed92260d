"""Push notification message and delivery models."""

from dataclasses import dataclass, field
from enum import StrEnum


class NotificationType(StrEnum):
    DANGER = "danger"
    SAFE = "safe"


@dataclass(frozen=True)
class PushMessage:
    title: str
    body: str
    data: dict[str, str]
    tokens: list[str] = field(default_factory=list)

    @property
    def notification_type(self) -> str:
        return self.data.get("type", "")


@dataclass(frozen=True)
class SendResponse:
    token: str
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class BatchResponse:
    responses: list[SendResponse]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.responses if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.responses if not r.success)
