"""Tests for the alert engine: all pass, single fail, every reason recorded."""

from heatshield.alerts.engine import AlertEngine
from heatshield.config.schema import UserSettings
from heatshield.models.notification import SuppressReason
from heatshield.models.weather import DataSource, WeatherData


def _weather(temp: int, source: DataSource = DataSource.LIVE) -> WeatherData:
    return WeatherData(
        temperature=temp, feels_like=temp, humidity=30, description="Cielo Claro",
        icon="clear", wind_speed=2.0, uv_index=None, source=source,
    )


class TestAlertEngine:
    def test_all_checks_pass(self):
        verdict = AlertEngine().evaluate(_weather(38), UserSettings())
        assert verdict.should_alert is True
        assert len(verdict.checks) == 4
        assert verdict.suppress_reasons == []

    def test_check_order(self):
        verdict = AlertEngine().evaluate(_weather(38), UserSettings())
        assert [c.check_name for c in verdict.checks] == [
            "alerts_enabled", "notifications_enabled", "threshold", "live_data",
        ]

    def test_below_threshold(self):
        verdict = AlertEngine().evaluate(_weather(30), UserSettings())
        assert verdict.should_alert is False
        assert verdict.suppress_reasons == [SuppressReason.BELOW_THRESHOLD]

    def test_custom_threshold(self):
        settings = UserSettings(temperature_threshold=28)
        assert AlertEngine().evaluate(_weather(30), settings).should_alert is True

    def test_fallback_never_alerts(self):
        verdict = AlertEngine().evaluate(_weather(44, DataSource.FALLBACK), UserSettings())
        assert verdict.should_alert is False
        assert verdict.suppress_reasons == [SuppressReason.FALLBACK_DATA]

    def test_no_short_circuit(self):
        settings = UserSettings(alerts_enabled=False, notifications_enabled=False)
        verdict = AlertEngine().evaluate(_weather(20, DataSource.FALLBACK), settings)
        assert verdict.suppress_reasons == [
            SuppressReason.ALERTS_DISABLED,
            SuppressReason.NOTIFICATIONS_DISABLED,
            SuppressReason.BELOW_THRESHOLD,
            SuppressReason.FALLBACK_DATA,
        ]
