"""Refresh pipeline: one full refresh cycle orchestration."""

import json
import logging
import time
import uuid

from heatshield.alerts.engine import AlertEngine
from heatshield.alerts.notifier import Notifier
from heatshield.alerts.scheduler import HEAT_ALERT_DELAY_SECONDS, NotificationScheduler
from heatshield.config.schema import HeatShieldConfig
from heatshield.ingest.location import LocationPermissionError, resolve_location
from heatshield.ingest.weather_fetcher import WeatherFetcher
from heatshield.models.notification import REMINDER_KINDS
from heatshield.models.reporting import RefreshSummary
from heatshield.reporting.formatters import format_refresh_text
from heatshield.reporting.run_summarizer import RefreshSummarizer
from heatshield.storage import notification_repo, settings_repo, state_repo, weather_repo
from heatshield.storage.database import open_db

logger = logging.getLogger(__name__)


class RefreshPipeline:
    def __init__(
        self,
        config: HeatShieldConfig,
        db_path: str = "data/heatshield.db",
        fetcher: WeatherFetcher | None = None,
        notifier: Notifier | None = None,
    ):
        self.config = config
        self.db_path = db_path
        self.fetcher = fetcher or WeatherFetcher.from_config(config.weather)
        self.notifier = notifier or Notifier(
            webhook_url=config.alerts.webhook_url,
            timeout=config.alerts.timeout_seconds,
        )

    def run(self, latitude: float | None = None, longitude: float | None = None) -> RefreshSummary:
        """Execute a full refresh cycle."""
        start_time = time.monotonic()
        run_id = str(uuid.uuid4())

        # 1. INIT
        conn = open_db(self.db_path)
        state_repo.create_run(conn, run_id)
        summarizer = RefreshSummarizer(run_id)

        try:
            settings = settings_repo.load_settings(conn)
            self.notifier.haptic = settings.haptic_enabled

            # 2. LOCATION
            try:
                location, name = resolve_location(settings, self.config, latitude, longitude)
            except LocationPermissionError as e:
                logger.warning("Location unavailable, aborting refresh")
                summarizer.record_error(str(e))
                summarizer.record_duration(time.monotonic() - start_time)
                state_repo.complete_run(conn, run_id, "aborted", error_message=str(e))
                return summarizer.finalize()
            if latitude is not None and longitude is not None:
                settings_repo.remember_location(conn, latitude, longitude)
            summarizer.record_location(name)

            # 3. WEATHER
            weather = self.fetcher.current(location)
            if self.fetcher.last_error:
                summarizer.record_error(f"weather: {self.fetcher.last_error}")
            weather_repo.save_weather(conn, location, weather)
            summarizer.record_weather(weather)

            days, source = self.fetcher.forecast(location)
            if self.fetcher.last_error:
                summarizer.record_error(f"forecast: {self.fetcher.last_error}")
            weather_repo.save_forecast(conn, location, days, source)
            summarizer.record_forecast(len(days))
            logger.info(
                "Weather for %s: %d°C %s (%s), %d forecast days",
                name, weather.temperature, weather.heat_index, weather.source, len(days),
            )

            # 4. ALERTS
            scheduler = NotificationScheduler(conn)
            verdict = AlertEngine().evaluate(weather, settings)
            summarizer.record_alert_verdict(verdict)
            if verdict.should_alert:
                scheduler.schedule_heat_alert(weather.temperature, sound=settings.sound_enabled)
            else:
                logger.info(
                    "Heat alert suppressed: %s",
                    [r.value for r in verdict.suppress_reasons],
                )

            if (
                settings.reminders_enabled
                and settings.notifications_enabled
                and not notification_repo.get_pending(conn, REMINDER_KINDS)
            ):
                scheduler.sync_reminders(settings)

            # 5. DISPATCH
            if verdict.should_alert:
                # let the heat alert trigger elapse
                time.sleep(HEAT_ALERT_DELAY_SECONDS)
            sent, failed = scheduler.dispatch_due(self.notifier)
            summarizer.record_dispatch(sent, failed)

            # 6. REPORT
            summarizer.record_duration(time.monotonic() - start_time)
            summary = summarizer.finalize()
            state_repo.complete_run(
                conn,
                run_id,
                "completed",
                summary_json=json.dumps({
                    "location": summary.location_name,
                    "suppress_reasons": summary.suppress_reasons,
                    "errors": summary.errors,
                }),
                source=summary.source,
                temperature=summary.temperature,
                heat_index=summary.heat_index,
                alert_scheduled=int(summary.alert_scheduled),
                notifications_sent=summary.notifications_sent,
                notifications_failed=summary.notifications_failed,
            )

            logger.info("\n%s", format_refresh_text(summary))
            return summary

        except Exception as e:
            logger.exception("Refresh pipeline failed")
            summarizer.record_error(str(e))
            summarizer.record_duration(time.monotonic() - start_time)
            summary = summarizer.finalize()
            state_repo.complete_run(conn, run_id, "failed", error_message=str(e))
            return summary

        finally:
            conn.close()
