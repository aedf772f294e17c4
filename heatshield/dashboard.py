"""HeatShield dashboard: FastAPI JSON backend for weather, zones, quiz, settings and alerts."""

import sqlite3
from contextlib import closing
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, StrictInt, ValidationError

from heatshield.alerts.notifier import Notifier
from heatshield.alerts.scheduler import NotificationScheduler
from heatshield.config.loader import build_config, load_config
from heatshield.config.schema import HeatShieldConfig, UserSettings
from heatshield.heat.advice import SAFETY_TIPS
from heatshield.ingest.location import LocationPermissionError, resolve_location
from heatshield.ingest.weather_fetcher import WeatherFetcher
from heatshield.ingest.zone_search import ZoneSearcher
from heatshield.models.common import parse_iso
from heatshield.models.zones import Coordinate, CoolZoneType
from heatshield.quiz.questions import QUESTIONS
from heatshield.quiz.scoring import evaluate
from heatshield.reporting.formatters import (
    forecast_to_dict,
    notification_to_dict,
    quiz_result_to_dict,
    weather_to_dict,
    zone_distance_to_dict,
)
from heatshield.storage import (
    notification_repo,
    quiz_repo,
    settings_repo,
    state_repo,
    weather_repo,
    zone_repo,
)
from heatshield.storage.database import open_db
from heatshield.zones.finder import ZoneFinder, zones_from_config
from heatshield.zones.heat_grid import build_heat_grid

FORECAST_FIELDS = (
    "forecast_date",
    "day_name",
    "max_temp",
    "min_temp",
    "description",
    "icon",
    "precipitation_probability",
    "heat_index",
    "source",
)

DB_PATH = Path(__file__).parent.parent / "data" / "heatshield.db"
CONFIG_PATH = Path(__file__).parent.parent / "ops" / "configs" / "default.yaml"

app = FastAPI(title="HeatShield Dashboard", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _conn() -> sqlite3.Connection:
    return open_db(DB_PATH)


def _config() -> HeatShieldConfig:
    return load_config(CONFIG_PATH)


def _fetcher(config: HeatShieldConfig) -> WeatherFetcher:
    return WeatherFetcher.from_config(config.weather)


def _locate(
    conn: sqlite3.Connection,
    config: HeatShieldConfig,
    lat: float | None,
    lon: float | None,
) -> tuple[UserSettings, Coordinate, str]:
    settings = settings_repo.load_settings(conn)
    try:
        location, name = resolve_location(settings, config, lat, lon)
    except LocationPermissionError as e:
        raise HTTPException(403, str(e)) from e
    except ValueError as e:
        raise HTTPException(422, str(e)) from e
    return settings, location, name


def _coord_dict(c: Coordinate) -> dict:
    return {"latitude": round(c.latitude, 6), "longitude": round(c.longitude, 6)}


def _finder(conn: sqlite3.Connection, config: HeatShieldConfig) -> ZoneFinder:
    return ZoneFinder(zones_from_config(config.cool_zones), zone_repo.get_detected_zones(conn))


# ── Weather ─────────────────────────────────────────────────────


@app.get("/api/weather")
def get_weather(lat: float | None = None, lon: float | None = None):
    """Current weather and heat index for a location."""
    config = _config()
    with closing(_conn()) as conn:
        settings, location, name = _locate(conn, config, lat, lon)
        fetcher = _fetcher(config)
        weather = fetcher.current(location)
        weather_repo.save_weather(conn, location, weather)
        return {
            "location": name,
            "latitude": location.latitude,
            "longitude": location.longitude,
            "temperature_unit": settings.temperature_unit.value,
            "error": fetcher.last_error,
            **weather_to_dict(weather),
        }


@app.get("/api/weather/latest")
def get_latest_weather():
    """Last stored reading and forecast batch, without calling OpenWeather."""
    with closing(_conn()) as conn:
        row = weather_repo.get_latest_weather(conn)
        if row is None:
            raise HTTPException(404, "No weather stored yet")
        forecast = weather_repo.get_latest_forecast(conn)
    return {
        "fetched_at": row["fetched_at"],
        "latitude": row["latitude"],
        "longitude": row["longitude"],
        **weather_to_dict(weather_repo.weather_from_row(row)),
        "forecast": [
            {k: day[k] for k in FORECAST_FIELDS}
            for day in forecast
        ],
    }


@app.get("/api/forecast")
def get_forecast(lat: float | None = None, lon: float | None = None):
    """Daily forecast for a location."""
    config = _config()
    with closing(_conn()) as conn:
        _, location, name = _locate(conn, config, lat, lon)
        fetcher = _fetcher(config)
        days, source = fetcher.forecast(location)
        weather_repo.save_forecast(conn, location, days, source)
        return {
            "location": name,
            "source": source.value,
            "error": fetcher.last_error,
            "days": [forecast_to_dict(d) for d in days],
        }


# ── Zones ───────────────────────────────────────────────────────


@app.get("/api/zones")
def get_zones(
    lat: float | None = None,
    lon: float | None = None,
    zone_type: CoolZoneType | None = None,
):
    """All cool zones, nearest first."""
    config = _config()
    with closing(_conn()) as conn:
        _, location, _ = _locate(conn, config, lat, lon)
        ranked = _finder(conn, config).ranked(location)
        if zone_type is not None:
            ranked = [zd for zd in ranked if zd.zone.zone_type == zone_type]
        return [zone_distance_to_dict(zd) for zd in ranked]


@app.get("/api/zones/nearest")
def get_nearest_zone(lat: float | None = None, lon: float | None = None):
    config = _config()
    with closing(_conn()) as conn:
        _, location, _ = _locate(conn, config, lat, lon)
        nearest = _finder(conn, config).nearest(location)
        if nearest is None:
            raise HTTPException(404, "No cool zones available")
        return zone_distance_to_dict(nearest)


@app.post("/api/zones/search")
def search_zones(lat: float | None = None, lon: float | None = None):
    """Search nearby places and replace the stored results."""
    config = _config()
    with closing(_conn()) as conn:
        _, location, _ = _locate(conn, config, lat, lon)
        found = ZoneSearcher.from_config(config).search(location)
        zone_repo.replace_detected_zones(conn, location, found)
        ranked = _finder(conn, config).ranked(location)
        return {
            "found": len(found),
            "zones": [zone_distance_to_dict(zd) for zd in ranked],
        }


@app.get("/api/heatmap")
def get_heatmap(lat: float | None = None, lon: float | None = None):
    """Cooling grid around a location. Row 0 is the northern edge."""
    config = _config()
    with closing(_conn()) as conn:
        _, location, _ = _locate(conn, config, lat, lon)
        zones = _finder(conn, config).all_zones()

    grid = build_heat_grid(
        location,
        zones,
        size=config.zones.grid_size,
        span_deg=config.zones.grid_span_deg,
        falloff_m=config.zones.grid_falloff_m,
    )
    return {
        "center": {"latitude": location.latitude, "longitude": location.longitude},
        "north_west_cell": _coord_dict(grid.cell_center(0, 0)),
        "south_east_cell": _coord_dict(grid.cell_center(grid.size - 1, grid.size - 1)),
        "size": grid.size,
        "span_deg": grid.span_deg,
        "legend": grid.legend_counts(),
        "intensities": grid.intensities.round(3).tolist(),
    }


# ── Quiz ────────────────────────────────────────────────────────


class QuizSubmission(BaseModel):
    answers: list[StrictInt]


@app.get("/api/quiz")
def get_quiz():
    return [{"prompt": q.prompt, "hint": q.hint} for q in QUESTIONS]


@app.post("/api/quiz")
def submit_quiz(submission: QuizSubmission):
    try:
        result = evaluate(submission.answers)
    except ValueError as e:
        raise HTTPException(422, str(e)) from e
    with closing(_conn()) as conn:
        quiz_repo.save_quiz_result(conn, result)
    return quiz_result_to_dict(result)


@app.get("/api/quiz/history")
def get_quiz_history(limit: int = 20):
    with closing(_conn()) as conn:
        return quiz_repo.get_quiz_history(conn, limit)


# ── Settings ────────────────────────────────────────────────────


@app.get("/api/settings")
def get_settings():
    with closing(_conn()) as conn:
        return settings_repo.load_settings(conn).model_dump(mode="json")


@app.post("/api/settings")
def update_settings(update: dict[str, str | int | float | bool | None]):
    """Validate and apply a partial settings update, then re-sync reminders."""
    with closing(_conn()) as conn:
        current = settings_repo.load_settings(conn).model_dump()
        unknown = [k for k in update if k not in UserSettings.model_fields]
        if unknown:
            raise HTTPException(422, f"Unknown settings: {', '.join(unknown)}")
        try:
            updated = UserSettings(**{**current, **update})
        except ValidationError as e:
            raise HTTPException(422, str(e)) from e
        settings_repo.save_settings(conn, updated)
        NotificationScheduler(conn).sync_reminders(updated)
        return updated.model_dump(mode="json")


# ── Notifications ───────────────────────────────────────────────


@app.get("/api/notifications")
def get_notifications(pending: bool = False, limit: int = 50):
    with closing(_conn()) as conn:
        items = (
            notification_repo.get_pending(conn)
            if pending
            else notification_repo.get_recent(conn, limit)
        )
        return [notification_to_dict(n) for n in items]


@app.get("/api/notifications/{notification_id}")
def get_notification(notification_id: int):
    with closing(_conn()) as conn:
        notification = notification_repo.get_notification(conn, notification_id)
    if notification is None:
        raise HTTPException(404, f"Notification {notification_id} not found")
    return notification_to_dict(notification)


@app.post("/api/notifications/dispatch")
def dispatch_notifications():
    config = _config()
    with closing(_conn()) as conn:
        settings = settings_repo.load_settings(conn)
        notifier = Notifier(
            webhook_url=config.alerts.webhook_url,
            timeout=config.alerts.timeout_seconds,
            haptic=settings.haptic_enabled,
        )
        sent, failed = NotificationScheduler(conn).dispatch_due(notifier)
        return {"sent": sent, "failed": failed}


# ── Tips / runs / health ────────────────────────────────────────


@app.get("/api/tips")
def get_tips():
    return [{"emoji": t.emoji, "title": t.title, "detail": t.detail} for t in SAFETY_TIPS]


@app.get("/api/runs")
def get_runs(limit: int = 20):
    """Recent refresh cycles."""
    with closing(_conn()) as conn:
        return state_repo.get_recent_runs(conn, limit)


def _minutes_since(iso_ts: str | None) -> float | None:
    if not iso_ts:
        return None
    try:
        elapsed = datetime.now(UTC) - parse_iso(iso_ts)
    except (ValueError, TypeError):
        return None
    return round(elapsed.total_seconds() / 60, 1)


@app.get("/api/runs/{run_id}")
def get_run(run_id: str):
    with closing(_conn()) as conn:
        run = state_repo.get_run(conn, run_id)
    if run is None:
        raise HTTPException(404, f"Run {run_id} not found")
    return run


@app.get("/api/health")
def get_health():
    """Database reachability, age of the last refresh and pending notification count."""
    with closing(_conn()) as conn:
        try:
            latest = state_repo.get_latest_run(conn)
            pending = notification_repo.count_pending(conn)
        except sqlite3.Error as e:
            return {"db_ok": False, "error": str(e)}

    completed_at = latest["completed_at"] if latest else None
    return {
        "db_ok": True,
        "last_refresh_at": completed_at,
        "last_refresh_age_minutes": _minutes_since(completed_at),
        "pending_notifications": pending,
    }


# ── Config file ─────────────────────────────────────────────────

CONFIG_SECTIONS = ("weather", "location", "zones", "alerts", "ops")


class ConfigUpdate(BaseModel):
    """Per-section field overrides. Omitted sections stay as they are."""
    weather: dict[str, Any] | None = None
    location: dict[str, Any] | None = None
    zones: dict[str, Any] | None = None
    alerts: dict[str, Any] | None = None
    ops: dict[str, Any] | None = None


def _read_config_file() -> dict:
    if not CONFIG_PATH.exists():
        raise HTTPException(404, f"No config file at {CONFIG_PATH}")
    return yaml.safe_load(CONFIG_PATH.read_text()) or {}


def _apply_overrides(raw: dict, update: ConfigUpdate) -> list[str]:
    """Write overrides into ``raw`` in place and describe each actual change."""
    changes = []
    for section in CONFIG_SECTIONS:
        overrides = getattr(update, section) or {}
        target = raw.setdefault(section, {}) if overrides else raw.get(section, {})
        for key, value in overrides.items():
            previous = target.get(key)
            if previous == value:
                continue
            target[key] = value
            changes.append(f"{section}.{key}: {previous} → {value}")
    return changes


@app.get("/api/config")
def get_config():
    return _read_config_file()


@app.post("/api/config")
def update_config(update: ConfigUpdate):
    """Apply overrides, validate the result and rewrite the YAML file with a .bak copy."""
    raw = _read_config_file()
    changes = _apply_overrides(raw, update)
    if not changes:
        return {"status": "no_change", "changed": []}

    try:
        build_config(raw)
    except ValidationError as e:
        raise HTTPException(422, str(e)) from e

    CONFIG_PATH.with_suffix(".yaml.bak").write_text(CONFIG_PATH.read_text())
    CONFIG_PATH.write_text(
        yaml.safe_dump(raw, default_flow_style=False, sort_keys=False, allow_unicode=True)
    )
    return {"status": "updated", "changed": changes}


def main() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8777)


if __name__ == "__main__":
    main()
