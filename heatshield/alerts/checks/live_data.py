"""Live data check: fallback readings never trigger an alert."""

from heatshield.models.notification import AlertCheckResult, SuppressReason
from heatshield.models.weather import DataSource


def check(source: DataSource) -> AlertCheckResult:
    if source != DataSource.LIVE:
        return AlertCheckResult(
            check_name="live_data",
            passed=False,
            suppress_reason=SuppressReason.FALLBACK_DATA,
            detail=f"reading source is {source}",
        )
    return AlertCheckResult(
        check_name="live_data", passed=True, suppress_reason=None, detail="ok"
    )
