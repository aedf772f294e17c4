"""Alert engine: runs all heat alert checks (no short-circuit) and returns verdict."""

from heatshield.alerts.checks import (
    alerts_enabled,
    live_data,
    notifications_enabled,
    threshold,
)
from heatshield.config.schema import UserSettings
from heatshield.models.notification import AlertCheckResult, AlertVerdict
from heatshield.models.weather import WeatherData


class AlertEngine:
    def evaluate(self, weather: WeatherData, settings: UserSettings) -> AlertVerdict:
        """Run every check so the verdict records each reason an alert was held back."""
        checks: list[AlertCheckResult] = [
            alerts_enabled.check(settings.alerts_enabled),
            notifications_enabled.check(settings.notifications_enabled),
            threshold.check(weather.temperature, settings.temperature_threshold),
            live_data.check(weather.source),
        ]
        return AlertVerdict(should_alert=all(c.passed for c in checks), checks=checks)
