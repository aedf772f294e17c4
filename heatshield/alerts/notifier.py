"""Notification delivery: webhook POST when configured, log otherwise."""

import logging

import httpx

from heatshield.models.notification import Notification

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self, webhook_url: str = "", timeout: float = 10.0, haptic: bool = True):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.haptic = haptic

    def deliver(self, notification: Notification) -> tuple[bool, str]:
        """Deliver one notification. Returns (ok, error message)."""
        if not self.webhook_url:
            logger.info("[%s] %s: %s", notification.kind, notification.title, notification.body)
            return True, ""

        payload = {
            "id": notification.id,
            "kind": notification.kind.value,
            "title": notification.title,
            "body": notification.body,
            "fire_at": notification.fire_at,
            "sound": notification.sound,
            "haptic": self.haptic,
        }
        try:
            resp = httpx.post(self.webhook_url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            return True, ""
        except httpx.HTTPStatusError as e:
            return False, f"webhook returned {e.response.status_code}"
        except httpx.RequestError as e:
            return False, f"webhook request failed: {e}"
