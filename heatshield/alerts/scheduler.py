"""Local notification scheduler: heat alerts, protection reminders, and dispatch."""

import logging
import sqlite3
from datetime import datetime, timedelta

from heatshield.alerts.notifier import Notifier
from heatshield.config.schema import UserSettings
from heatshield.models.common import parse_iso, utc_now
from heatshield.models.notification import (
    REMINDER_KINDS,
    NotificationKind,
    NotificationStatus,
)
from heatshield.storage import notification_repo

logger = logging.getLogger(__name__)

HEAT_ALERT_TITLE = "⚠️ Alerta de Calor Extremo"
HEAT_ALERT_BODY = "Temperatura actual: {temperature}°C. Busca refugio inmediatamente."
HEAT_ALERT_DELAY_SECONDS = 1

REMINDER_TEXT: dict[NotificationKind, tuple[str, str]] = {
    NotificationKind.HYDRATION: (
        "💧 Hora de hidratarte",
        "Bebe un vaso de agua aunque no tengas sed.",
    ),
    NotificationKind.SUNSCREEN: (
        "🧴 Reaplica protector solar",
        "Vuelve a aplicar protector solar FPS 30+ si estás al aire libre.",
    ),
    NotificationKind.SHADE_BREAK: (
        "🌳 Descanso en sombra",
        "Toma unos minutos en la sombra o en un lugar fresco.",
    ),
}


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def reminder_interval(settings: UserSettings, kind: NotificationKind) -> int:
    return {
        NotificationKind.HYDRATION: settings.hydration_reminder_minutes,
        NotificationKind.SUNSCREEN: settings.sunscreen_reminder_minutes,
        NotificationKind.SHADE_BREAK: settings.shade_break_reminder_minutes,
    }[kind]


class NotificationScheduler:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def schedule(
        self,
        kind: NotificationKind,
        title: str,
        body: str,
        delay_seconds: float,
        repeat_minutes: int | None = None,
        sound: bool = True,
        now: datetime | None = None,
    ) -> int:
        """Schedule a notification ``delay_seconds`` from now. Returns its id."""
        now = now or utc_now()
        fire_at = _iso(now + timedelta(seconds=delay_seconds))
        notification_id = notification_repo.insert_notification(
            self.conn, kind, title, body, fire_at, repeat_minutes, sound
        )
        logger.info("Scheduled %s #%d for %s", kind, notification_id, fire_at)
        return notification_id

    def schedule_heat_alert(
        self, temperature: int, sound: bool = True, now: datetime | None = None
    ) -> int:
        return self.schedule(
            NotificationKind.HEAT_ALERT,
            HEAT_ALERT_TITLE,
            HEAT_ALERT_BODY.format(temperature=temperature),
            HEAT_ALERT_DELAY_SECONDS,
            sound=sound,
            now=now,
        )

    def cancel_reminders(self) -> int:
        cancelled = notification_repo.cancel_pending(self.conn, REMINDER_KINDS)
        if cancelled:
            logger.info("Cancelled %d pending reminders", cancelled)
        return cancelled

    def sync_reminders(self, settings: UserSettings, now: datetime | None = None) -> list[int]:
        """Replace pending reminders with ones matching the current settings.

        Nothing is re-scheduled while reminders or notifications are off.
        """
        self.cancel_reminders()
        if not (settings.reminders_enabled and settings.notifications_enabled):
            return []

        ids = []
        for kind in REMINDER_KINDS:
            minutes = reminder_interval(settings, kind)
            title, body = REMINDER_TEXT[kind]
            ids.append(
                self.schedule(
                    kind, title, body,
                    delay_seconds=minutes * 60,
                    repeat_minutes=minutes,
                    sound=settings.sound_enabled,
                    now=now,
                )
            )
        return ids

    def dispatch_due(self, notifier: Notifier, now: datetime | None = None) -> tuple[int, int]:
        """Deliver every due notification. Returns (sent, failed).

        Repeating notifications are re-armed one interval after their fire
        time, skipping intervals that are already in the past. One-shot
        notifications end as sent or failed.
        """
        now = now or utc_now()
        sent = failed = 0
        for notification in notification_repo.get_due(self.conn, _iso(now)):
            ok, error = notifier.deliver(notification)
            if ok:
                sent += 1
            else:
                failed += 1
                logger.warning("Delivery of notification #%d failed: %s", notification.id, error)

            if notification.repeat_minutes:
                interval = timedelta(minutes=notification.repeat_minutes)
                next_fire = parse_iso(notification.fire_at) + interval
                while next_fire <= now:
                    next_fire += interval
                notification_repo.reschedule(self.conn, notification.id, _iso(next_fire), error)
            else:
                status = NotificationStatus.SENT if ok else NotificationStatus.FAILED
                notification_repo.mark_status(self.conn, notification.id, status, error)
        return sent, failed
