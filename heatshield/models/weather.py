"""Current weather and daily forecast models."""

from dataclasses import dataclass
from enum import StrEnum

from heatshield.heat.index import classify_heat_index
from heatshield.models.heat import HeatIndex


class DataSource(StrEnum):
    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class WeatherData:
    temperature: int  # °C
    feels_like: int
    humidity: int  # %
    description: str
    icon: str
    wind_speed: float  # m/s
    uv_index: int | None
    source: DataSource = DataSource.LIVE

    @property
    def heat_index(self) -> HeatIndex:
        return classify_heat_index(self.temperature)


@dataclass(frozen=True)
class DailyForecast:
    date: str  # YYYY-MM-DD
    day_name: str
    max_temp: int
    min_temp: int
    description: str
    icon: str
    precipitation_probability: int  # %

    @property
    def heat_index(self) -> HeatIndex:
        return classify_heat_index(self.max_temp)

