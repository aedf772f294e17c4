"""Reporting and operational health models."""

from dataclasses import dataclass, field


@dataclass
class RefreshSummary:
    run_id: str
    source: str = ""
    location_name: str = ""
    temperature: int | None = None
    heat_index: str = ""
    forecast_days: int = 0
    alert_scheduled: bool = False
    suppress_reasons: list[str] = field(default_factory=list)
    notifications_sent: int = 0
    notifications_failed: int = 0
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HealthStatus:
    db_connected: bool
    weather_api_reachable: bool
    places_api_reachable: bool
    api_key_configured: bool
    last_refresh_age_minutes: float | None
    pending_notifications: int
    notifications_enabled: bool
    alerts_enabled: bool
