"""Health checker: DB connectivity, API reachability, refresh freshness."""

import sqlite3
from datetime import UTC, datetime

import httpx

from heatshield.config.schema import HeatShieldConfig
from heatshield.models.common import parse_iso
from heatshield.models.reporting import HealthStatus
from heatshield.storage import notification_repo, settings_repo, state_repo


class HealthChecker:
    def __init__(self, conn: sqlite3.Connection, config: HeatShieldConfig):
        self.conn = conn
        self.config = config

    def check(self) -> HealthStatus:
        db_ok = self._check_db()
        settings = settings_repo.load_settings(self.conn) if db_ok else None
        return HealthStatus(
            db_connected=db_ok,
            weather_api_reachable=self._check_url(self.config.weather.base_url),
            places_api_reachable=self._check_url(self.config.zones.overpass_url),
            api_key_configured=self.config.weather.has_api_key,
            last_refresh_age_minutes=self._last_refresh_age_minutes() if db_ok else None,
            pending_notifications=notification_repo.count_pending(self.conn) if db_ok else 0,
            notifications_enabled=settings.notifications_enabled if settings else False,
            alerts_enabled=settings.alerts_enabled if settings else False,
        )

    def _check_db(self) -> bool:
        try:
            self.conn.execute("SELECT 1")
            return True
        except sqlite3.Error:
            return False

    def _check_url(self, url: str) -> bool:
        """Any HTTP answer counts as reachable; only transport errors do not."""
        try:
            httpx.get(url, timeout=10.0)
            return True
        except httpx.HTTPError:
            return False

    def _last_refresh_age_minutes(self) -> float | None:
        run = state_repo.get_latest_run(self.conn)
        if run is None or run.get("completed_at") is None:
            return None
        try:
            end = parse_iso(run["completed_at"])
        except (ValueError, TypeError):
            return None
        return (datetime.now(UTC) - end).total_seconds() / 60
