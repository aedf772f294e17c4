"""Alerts toggle check: blocks when the user turned heat alerts off."""

from heatshield.models.notification import AlertCheckResult, SuppressReason


def check(alerts_enabled: bool) -> AlertCheckResult:
    if not alerts_enabled:
        return AlertCheckResult(
            check_name="alerts_enabled",
            passed=False,
            suppress_reason=SuppressReason.ALERTS_DISABLED,
            detail="heat alerts are disabled",
        )
    return AlertCheckResult(
        check_name="alerts_enabled", passed=True, suppress_reason=None, detail="ok"
    )
