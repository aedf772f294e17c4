"""Notifications toggle check: nothing is scheduled while notifications are off."""

from heatshield.models.notification import AlertCheckResult, SuppressReason


def check(notifications_enabled: bool) -> AlertCheckResult:
    if not notifications_enabled:
        return AlertCheckResult(
            check_name="notifications_enabled",
            passed=False,
            suppress_reason=SuppressReason.NOTIFICATIONS_DISABLED,
            detail="notifications are disabled",
        )
    return AlertCheckResult(
        check_name="notifications_enabled", passed=True, suppress_reason=None, detail="ok"
    )
