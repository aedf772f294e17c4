"""Local notification and alert check models."""

from dataclasses import dataclass
from enum import StrEnum


class NotificationKind(StrEnum):
    HEAT_ALERT = "heat_alert"
    HYDRATION = "hydration"
    SUNSCREEN = "sunscreen"
    SHADE_BREAK = "shade_break"


class NotificationStatus(StrEnum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


REMINDER_KINDS = (
    NotificationKind.HYDRATION,
    NotificationKind.SUNSCREEN,
    NotificationKind.SHADE_BREAK,
)


@dataclass(frozen=True)
class Notification:
    id: int
    kind: NotificationKind
    title: str
    body: str
    fire_at: str  # ISO UTC
    repeat_minutes: int | None
    sound: bool
    status: NotificationStatus
    attempts: int = 0
    last_error: str = ""
    created_at: str = ""


class SuppressReason(StrEnum):
    ALERTS_DISABLED = "ALERTS_DISABLED"
    NOTIFICATIONS_DISABLED = "NOTIFICATIONS_DISABLED"
    BELOW_THRESHOLD = "BELOW_THRESHOLD"
    FALLBACK_DATA = "FALLBACK_DATA"


@dataclass(frozen=True)
class AlertCheckResult:
    check_name: str
    passed: bool
    suppress_reason: SuppressReason | None
    detail: str


@dataclass(frozen=True)
class AlertVerdict:
    should_alert: bool
    checks: list[AlertCheckResult]

    @property
    def suppress_reasons(self) -> list[SuppressReason]:
        return [c.suppress_reason for c in self.checks if c.suppress_reason is not None]
