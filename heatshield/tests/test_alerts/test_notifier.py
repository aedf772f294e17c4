"""Tests for notification delivery."""

import json

import httpx
import respx

from heatshield.alerts.notifier import Notifier
from heatshield.models.notification import Notification, NotificationKind, NotificationStatus

HOOK = "https://hooks.example.com/heat"


def _notification() -> Notification:
    return Notification(
        id=7,
        kind=NotificationKind.HEAT_ALERT,
        title="⚠️ Alerta de Calor Extremo",
        body="Temperatura actual: 41°C.",
        fire_at="2026-06-11T18:00:01+00:00",
        repeat_minutes=None,
        sound=True,
        status=NotificationStatus.PENDING,
    )


class TestNotifier:
    def test_no_webhook_logs(self, caplog):
        with caplog.at_level("INFO"):
            ok, error = Notifier().deliver(_notification())
        assert ok is True
        assert error == ""
        assert "Alerta de Calor" in caplog.text

    @respx.mock
    def test_webhook_payload(self):
        route = respx.post(HOOK).mock(return_value=httpx.Response(204))
        ok, _ = Notifier(webhook_url=HOOK, haptic=False).deliver(_notification())
        assert ok is True
        payload = json.loads(route.calls[0].request.content)
        assert payload["id"] == 7
        assert payload["kind"] == "heat_alert"
        assert payload["sound"] is True
        assert payload["haptic"] is False

    @respx.mock
    def test_webhook_error_status(self):
        respx.post(HOOK).mock(return_value=httpx.Response(500))
        ok, error = Notifier(webhook_url=HOOK).deliver(_notification())
        assert ok is False
        assert error == "webhook returned 500"

    @respx.mock
    def test_webhook_unreachable(self):
        respx.post(HOOK).mock(side_effect=httpx.ConnectError("refused"))
        ok, error = Notifier(webhook_url=HOOK).deliver(_notification())
        assert ok is False
        assert error.startswith("webhook request failed")
