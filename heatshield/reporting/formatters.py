"""Output formatters for weather, zones, quiz results, and refresh summaries."""

import json
from dataclasses import asdict

from heatshield.config.schema import TemperatureUnit
from heatshield.heat.advice import SAFETY_TIPS, advice_for
from heatshield.heat.units import format_temperature
from heatshield.models.notification import Notification
from heatshield.models.quiz import QuizResult
from heatshield.models.reporting import HealthStatus, RefreshSummary
from heatshield.models.weather import DailyForecast, DataSource, WeatherData
from heatshield.models.zones import ZoneDistance
from heatshield.zones.distance import format_distance

# --- Weather ---

def weather_to_dict(w: WeatherData) -> dict:
    advice = advice_for(w.heat_index)
    return {
        "temperature": w.temperature,
        "feels_like": w.feels_like,
        "humidity": w.humidity,
        "wind_speed": w.wind_speed,
        "uv_index": w.uv_index,
        "description": w.description,
        "icon": w.icon,
        "source": w.source.value,
        "heat_index": w.heat_index.value,
        "heat_index_label": w.heat_index.label,
        "advice": {"title": advice.title, "reason": advice.reason, "actions": advice.actions},
    }


def format_weather_text(w: WeatherData, location_name: str, unit: TemperatureUnit) -> str:
    advice = advice_for(w.heat_index)
    lines = [
        f"=== {location_name} ===",
        f"{format_temperature(w.temperature, unit)} {w.description} "
        f"(sensación {format_temperature(w.feels_like, unit)})",
        f"Humedad: {w.humidity}% | Viento: {w.wind_speed:.1f} m/s"
        + (f" | UV: {w.uv_index}" if w.uv_index is not None else ""),
        f"Índice de calor: {w.heat_index.label}",
        f"{advice.title}: {advice.reason}",
    ]
    lines.extend(f"  - {a}" for a in advice.actions)
    if w.source == DataSource.FALLBACK:
        lines.append("(datos de respaldo: el servicio del clima no está disponible)")
    return "\n".join(lines)


def forecast_to_dict(d: DailyForecast) -> dict:
    data = asdict(d)
    data["heat_index"] = d.heat_index.value
    data["heat_index_label"] = d.heat_index.label
    return data


def format_forecast_text(days: list[DailyForecast], unit: TemperatureUnit) -> str:
    if not days:
        return "Sin pronóstico disponible."
    lines = ["=== Pronóstico ==="]
    for d in days:
        lines.append(
            f"{d.day_name:<10} {d.date}  "
            f"{format_temperature(d.max_temp, unit):>6} / {format_temperature(d.min_temp, unit):<6} "
            f"{d.precipitation_probability:>3}%  {d.description} [{d.heat_index.label}]"
        )
    return "\n".join(lines)


# --- Zones ---

def zone_distance_to_dict(zd: ZoneDistance) -> dict:
    z = zd.zone
    return {
        "name": z.name,
        "zone_type": z.zone_type.value,
        "type_label": z.zone_type.label,
        "latitude": z.coordinate.latitude,
        "longitude": z.coordinate.longitude,
        "open_24_hours": z.open_24_hours,
        "description": z.description,
        "verified": z.verified,
        "phone": z.phone,
        "url": z.url,
        "distance_m": round(zd.distance_m, 1),
        "distance": format_distance(zd.distance_m),
    }


def format_zones_text(ranked: list[ZoneDistance]) -> str:
    if not ranked:
        return "No se encontraron zonas frescas."
    lines = []
    for zd in ranked:
        z = zd.zone
        flags = " 24h" if z.open_24_hours else ""
        flags += " ✓" if z.verified else ""
        lines.append(
            f"{format_distance(zd.distance_m):>8}  {z.name} ({z.zone_type.label}){flags}"
        )
        lines.append(f"          {z.description}")
    return "\n".join(lines)


# --- Quiz ---

def quiz_result_to_dict(r: QuizResult) -> dict:
    return {
        "answers": r.answers,
        "score": r.score,
        "tier": r.tier.value,
        "tier_label": r.profile.label,
        "emoji": r.profile.emoji,
        "summary": r.profile.summary,
        "recommendations": r.profile.recommendations,
        "savings_percent": r.savings_percent,
        "temperature_reduction_c": r.temperature_reduction_c,
        "thermal_efficiency_percent": r.thermal_efficiency_percent,
        "monthly_savings_mxn": r.monthly_savings_mxn,
        "show_savings": r.show_savings,
        "explanations": [asdict(e) for e in r.explanations],
    }


def format_quiz_result_text(r: QuizResult) -> str:
    lines = [
        f"{r.profile.emoji} {r.profile.label} ({r.score}/16)",
        r.profile.summary,
        f"Eficiencia térmica: {r.thermal_efficiency_percent}%",
        "",
        "Recomendaciones:",
    ]
    lines.extend(f"  - {rec}" for rec in r.profile.recommendations)
    if r.show_savings:
        lines.append("")
        lines.append(
            f"Ahorro potencial: {r.savings_percent}% en aire acondicionado "
            f"(~${r.monthly_savings_mxn} MXN/mes), "
            f"hasta {r.temperature_reduction_c}°C menos en casa"
        )
        for e in r.explanations:
            lines.append(f"  * {e.title}: {e.description}")
    return "\n".join(lines)


# --- Tips ---

def format_tips_text() -> str:
    return "\n".join(f"{t.emoji} {t.title}\n   {t.detail}" for t in SAFETY_TIPS)


# --- Notifications ---

def notification_to_dict(n: Notification) -> dict:
    data = asdict(n)
    data["kind"] = n.kind.value
    data["status"] = n.status.value
    return data


def format_notifications_text(items: list[Notification]) -> str:
    if not items:
        return "Sin notificaciones."
    return "\n".join(
        f"#{n.id:<4} {n.status.value:<9} {n.fire_at}  {n.title}"
        + (f" (cada {n.repeat_minutes} min)" if n.repeat_minutes else "")
        for n in items
    )


# --- Refresh / health ---

def format_refresh_text(s: RefreshSummary) -> str:
    """Plain text summary for logging."""
    lines = [
        f"=== Refresh Complete | Run {s.run_id[:8]} ===",
        f"Location: {s.location_name or '-'}",
        f"Weather: {s.temperature if s.temperature is not None else '-'}°C "
        f"{s.heat_index or '-'} ({s.source or '-'}), forecast {s.forecast_days} days",
    ]
    if s.alert_scheduled:
        lines.append("Heat alert: scheduled")
    else:
        reasons = ", ".join(s.suppress_reasons) or "-"
        lines.append(f"Heat alert: suppressed ({reasons})")
    lines.append(
        f"Notifications: {s.notifications_sent} sent, {s.notifications_failed} failed"
    )
    if s.errors:
        lines.append(f"Errors: {len(s.errors)}")
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_refresh_json(s: RefreshSummary) -> str:
    """JSON summary for programmatic consumption."""
    return json.dumps(asdict(s), indent=2)


def format_health_text(h: HealthStatus) -> str:
    age = (
        f"{h.last_refresh_age_minutes:.0f}min ago"
        if h.last_refresh_age_minutes is not None
        else "never"
    )
    return "\n".join([
        f"DB: {'OK' if h.db_connected else 'FAIL'}",
        f"OpenWeather: {'OK' if h.weather_api_reachable else 'FAIL'}"
        f" (API key {'set' if h.api_key_configured else 'missing'})",
        f"Overpass: {'OK' if h.places_api_reachable else 'FAIL'}",
        f"Last refresh: {age}",
        f"Pending notifications: {h.pending_notifications}",
        f"Notifications: {'on' if h.notifications_enabled else 'off'} | "
        f"Alerts: {'on' if h.alerts_enabled else 'off'}",
    ])
