"""Tests for the individual heat alert checks."""

from heatshield.alerts.checks import alerts_enabled, live_data, notifications_enabled, threshold
from heatshield.models.notification import SuppressReason
from heatshield.models.weather import DataSource


class TestAlertsEnabled:
    def test_pass(self):
        assert alerts_enabled.check(True).passed is True

    def test_fail(self):
        r = alerts_enabled.check(False)
        assert r.passed is False
        assert r.suppress_reason == SuppressReason.ALERTS_DISABLED


class TestNotificationsEnabled:
    def test_pass(self):
        assert notifications_enabled.check(True).suppress_reason is None

    def test_fail(self):
        r = notifications_enabled.check(False)
        assert r.passed is False
        assert r.suppress_reason == SuppressReason.NOTIFICATIONS_DISABLED


class TestThreshold:
    def test_equal_passes(self):
        assert threshold.check(35, 35.0).passed is True

    def test_above_passes(self):
        assert threshold.check(40, 35.0).passed is True

    def test_below_fails(self):
        r = threshold.check(34, 35.0)
        assert r.passed is False
        assert r.suppress_reason == SuppressReason.BELOW_THRESHOLD
        assert r.detail == "34°C < 35°C threshold"

    def test_fractional_threshold(self):
        assert threshold.check(37, 37.5).passed is False


class TestLiveData:
    def test_live_passes(self):
        assert live_data.check(DataSource.LIVE).passed is True

    def test_fallback_fails(self):
        r = live_data.check(DataSource.FALLBACK)
        assert r.passed is False
        assert r.suppress_reason == SuppressReason.FALLBACK_DATA
