"""Refresh summarizer: aggregates refresh cycle outputs into a RefreshSummary."""

from heatshield.models.notification import AlertVerdict
from heatshield.models.reporting import RefreshSummary
from heatshield.models.weather import WeatherData


class RefreshSummarizer:
    def __init__(self, run_id: str):
        self.summary = RefreshSummary(run_id=run_id)

    def record_location(self, name: str) -> None:
        self.summary.location_name = name

    def record_weather(self, weather: WeatherData) -> None:
        self.summary.source = weather.source.value
        self.summary.temperature = weather.temperature
        self.summary.heat_index = weather.heat_index.value

    def record_forecast(self, days: int) -> None:
        self.summary.forecast_days = days

    def record_alert_verdict(self, verdict: AlertVerdict) -> None:
        self.summary.alert_scheduled = verdict.should_alert
        self.summary.suppress_reasons = [r.value for r in verdict.suppress_reasons]

    def record_dispatch(self, sent: int, failed: int) -> None:
        self.summary.notifications_sent += sent
        self.summary.notifications_failed += failed

    def record_duration(self, seconds: float) -> None:
        self.summary.duration_seconds = seconds

    def record_error(self, error: str) -> None:
        self.summary.errors.append(error)

    def finalize(self) -> RefreshSummary:
        return self.summary
