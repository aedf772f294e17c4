"""Weather fetcher: decodes OpenWeather responses and substitutes fallback data on failure."""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta

import httpx

from heatshield.config.schema import WeatherConfig
from heatshield.ingest.openweather_client import OpenWeatherClient
from heatshield.models.weather import DailyForecast, DataSource, WeatherData
from heatshield.models.zones import Coordinate

logger = logging.getLogger(__name__)

DAY_NAMES = ["Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo"]

FALLBACK_WEATHER = WeatherData(
    temperature=34,
    feels_like=38,
    humidity=65,
    description="Calor extremo",
    icon="clear",
    wind_speed=12.0,
    uv_index=8,
    source=DataSource.FALLBACK,
)

# (max, min, description, icon, precipitation %) for today and the next four days
_FALLBACK_DAYS = [
    (36, 24, "Cielo claro", "clear", 0),
    (37, 25, "Cielo claro", "clear", 5),
    (35, 24, "Nubes dispersas", "partly-cloudy", 10),
    (33, 23, "Nubes", "cloudy", 20),
    (31, 22, "Lluvia ligera", "rain", 45),
]

_DECODE_ERRORS = (KeyError, TypeError, ValueError, IndexError, AttributeError)


def map_weather_icon(code: str) -> str:
    """Map an OpenWeather icon code such as '10d' to a condition slug."""
    prefix = code[:2]
    if prefix == "01":
        return "clear"
    if prefix == "02":
        return "partly-cloudy"
    if prefix in ("03", "04"):
        return "cloudy"
    if prefix in ("09", "10"):
        return "rain"
    if prefix == "11":
        return "thunderstorm"
    if prefix == "13":
        return "snow"
    if prefix == "50":
        return "fog"
    return "clear"


def day_name(d: date) -> str:
    return DAY_NAMES[d.weekday()]


def parse_current_weather(raw: dict) -> WeatherData:
    """Decode a /data/2.5/weather payload. Temperatures truncate toward zero."""
    main = raw["main"]
    conditions = raw.get("weather") or [{}]
    return WeatherData(
        temperature=int(main["temp"]),
        feels_like=int(main["feels_like"]),
        humidity=int(main["humidity"]),
        description=conditions[0].get("description", "").title(),
        icon=map_weather_icon(conditions[0].get("icon", "01d")),
        wind_speed=float(raw["wind"]["speed"]),
        uv_index=None,
        source=DataSource.LIVE,
    )


def parse_forecast(raw: dict) -> list[DailyForecast]:
    """Group 3-hourly /data/2.5/forecast items into one entry per day.

    Max/min come from the truncated item temperatures, precipitation is the
    mean probability, and description/icon come from the first item between
    12:00 and 15:00 (or the day's first item).
    """
    grouped: dict[str, list[tuple[datetime, dict]]] = defaultdict(list)
    for item in raw["list"]:
        ts = datetime.strptime(item["dt_txt"], "%Y-%m-%d %H:%M:%S")
        grouped[ts.date().isoformat()].append((ts, item))

    days = []
    for day, entries in grouped.items():
        temps = [int(item["main"]["temp"]) for _, item in entries]
        avg_pop = sum(float(item.get("pop", 0.0)) for _, item in entries) / len(entries)
        midday = next(
            (item for ts, item in entries if 12 <= ts.hour <= 15),
            entries[0][1],
        )
        conditions = midday.get("weather") or [{}]
        days.append(
            DailyForecast(
                date=day,
                day_name=day_name(date.fromisoformat(day)),
                max_temp=max(temps),
                min_temp=min(temps),
                description=conditions[0].get("description", "").title(),
                icon=map_weather_icon(conditions[0].get("icon", "01d")),
                precipitation_probability=int(avg_pop * 100),
            )
        )
    return sorted(days, key=lambda d: d.date)


def fallback_forecast(start: date | None = None) -> list[DailyForecast]:
    start = start or date.today()
    days = []
    for offset, (hi, lo, desc, icon, pop) in enumerate(_FALLBACK_DAYS):
        d = start + timedelta(days=offset)
        days.append(
            DailyForecast(
                date=d.isoformat(),
                day_name=day_name(d),
                max_temp=hi,
                min_temp=lo,
                description=desc,
                icon=icon,
                precipitation_probability=pop,
            )
        )
    return days


class WeatherFetcher:
    """Fetches current weather and forecast, never raising on remote failure.

    Without a client (no API key configured) the fallback values are
    returned directly. The last failure, if any, is kept in ``last_error``.
    """

    def __init__(self, client: OpenWeatherClient | None):
        self.client = client
        self.last_error: str | None = None

    @classmethod
    def from_config(cls, config: WeatherConfig) -> "WeatherFetcher":
        if not config.has_api_key:
            logger.info("No OpenWeather API key configured, using fallback data")
            return cls(None)
        return cls(
            OpenWeatherClient(
                api_key=config.api_key,
                base_url=config.base_url,
                units=config.units,
                lang=config.lang,
                timeout=config.timeout_seconds,
                max_retries=config.max_retries,
                retry_base_delay=config.retry_base_delay,
            )
        )

    def current(self, location: Coordinate) -> WeatherData:
        if self.client is None:
            self.last_error = None
            return FALLBACK_WEATHER
        try:
            raw = self.client.get_current_weather(location.latitude, location.longitude)
            weather = parse_current_weather(raw)
            self.last_error = None
            return weather
        except httpx.HTTPError as e:
            self.last_error = f"network: {e}"
            logger.warning("Current weather request failed, using fallback: %s", e)
        except _DECODE_ERRORS as e:
            self.last_error = f"decode: {e!r}"
            logger.exception("Could not decode current weather response")
        return FALLBACK_WEATHER

    def forecast(self, location: Coordinate) -> tuple[list[DailyForecast], DataSource]:
        if self.client is None:
            self.last_error = None
            return fallback_forecast(), DataSource.FALLBACK
        try:
            raw = self.client.get_forecast(location.latitude, location.longitude)
            days = parse_forecast(raw)
            self.last_error = None
            return days, DataSource.LIVE
        except httpx.HTTPError as e:
            self.last_error = f"network: {e}"
            logger.warning("Forecast request failed, using fallback: %s", e)
        except _DECODE_ERRORS as e:
            self.last_error = f"decode: {e!r}"
            logger.exception("Could not decode forecast response")
        return fallback_forecast(), DataSource.FALLBACK
