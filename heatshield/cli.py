"""CLI entry point for HeatShield."""

import argparse
import json
import logging

from pydantic import ValidationError

from heatshield.alerts.engine import AlertEngine
from heatshield.alerts.notifier import Notifier
from heatshield.alerts.scheduler import NotificationScheduler
from heatshield.config.loader import (
    get_config_value,
    load_config,
    set_config_file_value,
)
from heatshield.config.schema import UserSettings
from heatshield.ingest.location import LocationPermissionError, resolve_location
from heatshield.ingest.weather_fetcher import WeatherFetcher
from heatshield.ingest.zone_search import ZoneSearcher
from heatshield.pipeline.refresh_pipeline import RefreshPipeline
from heatshield.quiz.questions import QUESTIONS
from heatshield.quiz.scoring import evaluate, parse_answers
from heatshield.reporting.formatters import (
    forecast_to_dict,
    format_forecast_text,
    format_health_text,
    format_notifications_text,
    format_quiz_result_text,
    format_refresh_json,
    format_refresh_text,
    format_tips_text,
    format_weather_text,
    format_zones_text,
    notification_to_dict,
    quiz_result_to_dict,
    weather_to_dict,
    zone_distance_to_dict,
)
from heatshield.reporting.health_checker import HealthChecker
from heatshield.storage import (
    notification_repo,
    quiz_repo,
    settings_repo,
    weather_repo,
    zone_repo,
)
from heatshield.storage.database import open_db
from heatshield.zones.finder import ZoneFinder, zones_from_config
from heatshield.zones.heat_grid import LEGEND, build_heat_grid

DEFAULT_CONFIG = "ops/configs/default.yaml"
DEFAULT_DB = "data/heatshield.db"

EXIT_PERMISSION = 2

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heatshield",
        description="Heat safety assistant: weather, cool zones, alerts and home assessment",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config file")
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite database file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (stderr)",
    )

    sub = parser.add_subparsers(dest="command")

    # weather / forecast
    for name, help_text in (
        ("weather", "Show current weather and heat index"),
        ("forecast", "Show the daily forecast"),
    ):
        p = sub.add_parser(name, help=help_text)
        _add_location_args(p)
        p.add_argument("--json", action="store_true", help="JSON output")

    # zones
    zones_p = sub.add_parser("zones", help="List cool zones by distance")
    _add_location_args(zones_p)
    zones_p.add_argument("--nearest", action="store_true", help="Only the nearest zone")
    zones_p.add_argument(
        "--search", action="store_true", help="Search nearby places before listing"
    )
    zones_p.add_argument("--json", action="store_true", help="JSON output")

    # heatmap
    heat_p = sub.add_parser("heatmap", help="Cooling grid around a location")
    _add_location_args(heat_p)
    heat_p.add_argument("--json", action="store_true", help="JSON output")

    # quiz
    quiz_p = sub.add_parser("quiz", help="Home heat preparedness assessment")
    quiz_p.add_argument(
        "--answers", help="8 comma-separated answers: 0-2 or si/parcial/no"
    )
    quiz_p.add_argument("--history", action="store_true", help="Show past results")
    quiz_p.add_argument("--json", action="store_true", help="JSON output")

    # tips
    sub.add_parser("tips", help="Heat safety tips")

    # settings show / settings set
    settings_p = sub.add_parser("settings", help="User settings")
    settings_sub = settings_p.add_subparsers(dest="settings_command")
    settings_sub.add_parser("show", help="Display current settings")
    sset_p = settings_sub.add_parser("set", help="Set a setting")
    sset_p.add_argument("keyvalue", help="key=value to set")

    config_p = sub.add_parser("config", help="Inspect or edit the YAML config")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Print the effective config as JSON")
    cset_p = config_sub.add_parser("set", help="Change one value and save the file")
    cset_p.add_argument("keyvalue", help="dotted.key=value")

    # alerts check
    alerts_p = sub.add_parser("alerts", help="Heat alert operations")
    alerts_sub = alerts_p.add_subparsers(dest="alerts_command")
    check_p = alerts_sub.add_parser("check", help="Evaluate the heat alert now")
    _add_location_args(check_p)
    check_p.add_argument(
        "--schedule", action="store_true", help="Schedule the alert if all checks pass"
    )

    # notifications
    notif_p = sub.add_parser("notifications", help="Scheduled notifications")
    notif_sub = notif_p.add_subparsers(dest="notifications_command")
    list_p = notif_sub.add_parser("list", help="List recent notifications")
    list_p.add_argument("--pending", action="store_true", help="Only pending")
    list_p.add_argument("--json", action="store_true", help="JSON output")
    notif_sub.add_parser("dispatch", help="Deliver due notifications")
    notif_sub.add_parser("sync", help="Re-schedule reminders from settings")

    # health / refresh / daemon
    sub.add_parser("health", help="Check the database and remote services")
    refresh_p = sub.add_parser("refresh", help="Run one refresh cycle")
    _add_location_args(refresh_p)
    refresh_p.add_argument("--json", action="store_true", help="JSON output")

    daemon_p = sub.add_parser("daemon", help="Run refresh cycles continuously")
    daemon_p.add_argument("--interval", type=int, help="Seconds between cycles")
    daemon_p.add_argument("--stop", action="store_true", help="Stop running daemon")
    daemon_p.add_argument("--status", action="store_true", help="Show daemon status")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    config = load_config(args.config)

    handlers = {
        "weather": _cmd_weather,
        "forecast": _cmd_forecast,
        "zones": _cmd_zones,
        "heatmap": _cmd_heatmap,
        "quiz": _cmd_quiz,
        "tips": _cmd_tips,
        "settings": _cmd_settings,
        "config": _cmd_config,
        "alerts": _cmd_alerts,
        "notifications": _cmd_notifications,
        "health": _cmd_health,
        "refresh": _cmd_refresh,
        "daemon": _cmd_daemon,
    }
    try:
        return handlers[args.command](config, args)
    except LocationPermissionError as e:
        print(str(e))
        return EXIT_PERMISSION
    except (ValueError, KeyError, ValidationError) as e:
        print(f"Error: {e}")
        return 1


def _add_location_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, help="Latitude")
    p.add_argument("--lon", type=float, help="Longitude")


def _locate(conn, config, args) -> tuple:
    """Resolve the location and remember explicit coordinates as the last known one."""
    settings = settings_repo.load_settings(conn)
    location, name = resolve_location(settings, config, args.lat, args.lon)
    if args.lat is not None and args.lon is not None:
        settings_repo.remember_location(conn, args.lat, args.lon)
    return settings, location, name


def _cmd_weather(config, args) -> int:
    conn = open_db(args.db)
    try:
        settings, location, name = _locate(conn, config, args)
        fetcher = WeatherFetcher.from_config(config.weather)
        weather = fetcher.current(location)
        weather_repo.save_weather(conn, location, weather)
    finally:
        conn.close()

    if args.json:
        print(json.dumps({"location": name, **weather_to_dict(weather)}, indent=2, ensure_ascii=False))
    else:
        print(format_weather_text(weather, name, settings.temperature_unit))
    return 0


def _cmd_forecast(config, args) -> int:
    conn = open_db(args.db)
    try:
        settings, location, name = _locate(conn, config, args)
        fetcher = WeatherFetcher.from_config(config.weather)
        days, source = fetcher.forecast(location)
        weather_repo.save_forecast(conn, location, days, source)
    finally:
        conn.close()

    if args.json:
        data = {
            "location": name,
            "source": source.value,
            "days": [forecast_to_dict(d) for d in days],
        }
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        print(format_forecast_text(days, settings.temperature_unit))
    return 0


def _cmd_zones(config, args) -> int:
    conn = open_db(args.db)
    try:
        _, location, _ = _locate(conn, config, args)
        if args.search:
            found = ZoneSearcher.from_config(config).search(location)
            zone_repo.replace_detected_zones(conn, location, found)
            print(f"Found {len(found)} nearby places")
        finder = ZoneFinder(
            zones_from_config(config.cool_zones), zone_repo.get_detected_zones(conn)
        )
    finally:
        conn.close()

    if args.nearest:
        nearest = finder.nearest(location)
        ranked = [nearest] if nearest is not None else []
    else:
        ranked = finder.ranked(location)

    if args.json:
        print(json.dumps([zone_distance_to_dict(zd) for zd in ranked], indent=2, ensure_ascii=False))
    else:
        print(format_zones_text(ranked))
    return 0


def _cmd_heatmap(config, args) -> int:
    conn = open_db(args.db)
    try:
        _, location, name = _locate(conn, config, args)
        finder = ZoneFinder(
            zones_from_config(config.cool_zones), zone_repo.get_detected_zones(conn)
        )
    finally:
        conn.close()

    grid = build_heat_grid(
        location,
        finder.all_zones(),
        size=config.zones.grid_size,
        span_deg=config.zones.grid_span_deg,
        falloff_m=config.zones.grid_falloff_m,
    )
    counts = grid.legend_counts()
    if args.json:
        print(json.dumps({"location": name, "size": grid.size, "legend": counts}, indent=2, ensure_ascii=False))
    else:
        total = grid.size * grid.size
        print(f"=== Mapa de calor: {name} ({grid.size}x{grid.size}) ===")
        for label in LEGEND:
            print(f"{label:<9} {counts[label]:>5} celdas ({counts[label] / total:.0%})")
    return 0


def _cmd_quiz(config, args) -> int:
    conn = open_db(args.db)
    try:
        if args.history:
            history = quiz_repo.get_quiz_history(conn)
            if args.json:
                print(json.dumps(history, indent=2, ensure_ascii=False))
            elif not history:
                print("Sin evaluaciones previas.")
            else:
                for h in history:
                    print(f"{h['created_at']}  {h['score']:>2}/16  {h['tier']}")
            return 0

        if not args.answers:
            for i, q in enumerate(QUESTIONS, 1):
                print(f"{i}. {q.prompt}\n   {q.hint}")
            print("\nResponde con: heatshield quiz --answers si,parcial,no,...")
            return 0

        result = evaluate(parse_answers(args.answers))
        quiz_repo.save_quiz_result(conn, result)
    finally:
        conn.close()

    if args.json:
        print(json.dumps(quiz_result_to_dict(result), indent=2, ensure_ascii=False))
    else:
        print(format_quiz_result_text(result))
    return 0


def _cmd_tips(config, args) -> int:
    print(format_tips_text())
    return 0


def _cmd_settings(config, args) -> int:
    conn = open_db(args.db)
    try:
        if args.settings_command == "show":
            settings = settings_repo.load_settings(conn)
            print(settings.model_dump_json(indent=2))
            return 0
        elif args.settings_command == "set":
            kv = args.keyvalue
            if "=" not in kv:
                print("Error: use key=value format")
                return 1
            key, value = kv.split("=", 1)
            settings = settings_repo.update_setting(conn, key.strip(), value)
            NotificationScheduler(conn).sync_reminders(settings)
            print(f"Set {key.strip()} = {getattr(settings, key.strip())}")
            return 0
        else:
            print("Use: settings show | settings set key=value")
            print("Keys: " + ", ".join(UserSettings.model_fields))
            return 1
    finally:
        conn.close()


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    if args.config_command != "set":
        print("Usage: heatshield config {show,set KEY=VALUE}")
        return 1

    key, sep, value = args.keyvalue.partition("=")
    key = key.strip()
    if not sep or not key:
        print(f"Error: expected KEY=VALUE, got {args.keyvalue!r}")
        return 1
    updated = set_config_file_value(args.config, key, value.strip())
    print(f"{key} -> {get_config_value(updated, key)} (saved to {args.config})")
    return 0


def _cmd_alerts(config, args) -> int:
    if args.alerts_command != "check":
        print("Use: alerts check [--lat --lon] [--schedule]")
        return 1

    conn = open_db(args.db)
    try:
        settings, location, name = _locate(conn, config, args)
        weather = WeatherFetcher.from_config(config.weather).current(location)
        verdict = AlertEngine().evaluate(weather, settings)

        print(f"{name}: {weather.temperature}°C ({weather.source})")
        for c in verdict.checks:
            print(f"  [{'PASS' if c.passed else 'FAIL'}] {c.check_name}: {c.detail}")
        print(f"Alert: {'YES' if verdict.should_alert else 'no'}")

        if verdict.should_alert and args.schedule:
            nid = NotificationScheduler(conn).schedule_heat_alert(
                weather.temperature, sound=settings.sound_enabled
            )
            print(f"Scheduled heat alert #{nid}")
    finally:
        conn.close()
    return 0


def _cmd_notifications(config, args) -> int:
    conn = open_db(args.db)
    try:
        if args.notifications_command == "list":
            items = (
                notification_repo.get_pending(conn)
                if args.pending
                else notification_repo.get_recent(conn)
            )
            if args.json:
                print(json.dumps([notification_to_dict(n) for n in items], indent=2, ensure_ascii=False))
            else:
                print(format_notifications_text(items))
            return 0
        elif args.notifications_command == "dispatch":
            settings = settings_repo.load_settings(conn)
            notifier = Notifier(
                webhook_url=config.alerts.webhook_url,
                timeout=config.alerts.timeout_seconds,
                haptic=settings.haptic_enabled,
            )
            sent, failed = NotificationScheduler(conn).dispatch_due(notifier)
            print(f"Dispatched: {sent} sent, {failed} failed")
            return 0 if failed == 0 else 1
        elif args.notifications_command == "sync":
            settings = settings_repo.load_settings(conn)
            ids = NotificationScheduler(conn).sync_reminders(settings)
            print(f"Scheduled {len(ids)} reminders")
            return 0
        else:
            print("Use: notifications list | dispatch | sync")
            return 1
    finally:
        conn.close()


def _cmd_health(config, args) -> int:
    conn = open_db(args.db)
    try:
        status = HealthChecker(conn, config).check()
    finally:
        conn.close()
    print(format_health_text(status))
    return 0


def _cmd_refresh(config, args) -> int:
    if (args.lat is None) != (args.lon is None):
        raise ValueError("Both latitude and longitude are required")
    summary = RefreshPipeline(config, args.db).run(args.lat, args.lon)
    if args.json:
        print(format_refresh_json(summary))
    else:
        print(format_refresh_text(summary))
    return 0 if not summary.errors else 1


def _cmd_daemon(config, args) -> int:
    from heatshield.daemon import RefreshDaemon, daemon_status, stop_daemon

    if args.stop:
        return stop_daemon()
    if args.status:
        return daemon_status()

    daemon = RefreshDaemon(config=config, db_path=args.db, interval=args.interval)
    daemon.start()
    return 0
