"""OpenWeather client for current conditions and the 5-day forecast."""

import httpx

from heatshield.ingest.retry import RetryPolicy, send_with_retry

OPENWEATHER_BASE_URL = "https://api.openweathermap.org"


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = "metric",
        lang: str = "es",
        timeout: float = 15.0,
        max_retries: int = 2,
        retry_base_delay: float = 2.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.lang = lang
        self.timeout = timeout
        self.retry = RetryPolicy(max_retries, retry_base_delay)

    def get_current_weather(self, latitude: float, longitude: float) -> dict:
        """Raw /data/2.5/weather payload."""
        return self._get("/data/2.5/weather", latitude, longitude)

    def get_forecast(self, latitude: float, longitude: float) -> dict:
        """Raw /data/2.5/forecast payload (3-hour steps over five days)."""
        return self._get("/data/2.5/forecast", latitude, longitude)

    def _get(self, path: str, latitude: float, longitude: float) -> dict:
        params = {
            "lat": latitude,
            "lon": longitude,
            "appid": self.api_key,
            "units": self.units,
            "lang": self.lang,
        }
        resp = send_with_retry(
            lambda: httpx.get(self.base_url + path, params=params, timeout=self.timeout),
            self.retry,
            f"OpenWeather {path}",
        )
        return resp.json()
