"""Threshold check: alert only at or above the user's temperature threshold."""

from heatshield.models.notification import AlertCheckResult, SuppressReason


def check(temperature: int, threshold: float) -> AlertCheckResult:
    if temperature < threshold:
        return AlertCheckResult(
            check_name="threshold",
            passed=False,
            suppress_reason=SuppressReason.BELOW_THRESHOLD,
            detail=f"{temperature}°C < {threshold:g}°C threshold",
        )
    return AlertCheckResult(
        check_name="threshold",
        passed=True,
        suppress_reason=None,
        detail=f"{temperature}°C >= {threshold:g}°C",
    )
