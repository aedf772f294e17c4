"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field

from heatshield.models.zones import CoolZoneType

PLACEHOLDER_API_KEY = "TU_API_KEY_AQUI"


class AppearanceMode(StrEnum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"

    @property
    def label(self) -> str:
        return {
            AppearanceMode.SYSTEM: "Sistema",
            AppearanceMode.LIGHT: "Claro",
            AppearanceMode.DARK: "Oscuro",
        }[self]


class TemperatureUnit(StrEnum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def symbol(self) -> str:
        return "°C" if self is TemperatureUnit.CELSIUS else "°F"

    @property
    def label(self) -> str:
        return "Celsius" if self is TemperatureUnit.CELSIUS else "Fahrenheit"


class CoolZoneConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    zone_type: CoolZoneType
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    open_24_hours: bool = False
    description: str = ""
    phone: str | None = None
    url: str | None = None


class WeatherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = PLACEHOLDER_API_KEY
    base_url: str = "https://api.openweathermap.org"
    units: str = "metric"
    lang: str = "es"
    timeout_seconds: float = Field(default=15.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=2.0, ge=0.0)

    @property
    def has_api_key(self) -> bool:
        key = self.api_key.strip()
        return bool(key) and key != PLACEHOLDER_API_KEY


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str = "Monterrey, NL"
    latitude: float = Field(default=25.6866, ge=-90.0, le=90.0)
    longitude: float = Field(default=-100.3161, ge=-180.0, le=180.0)


class ZoneSearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    overpass_url: str = "https://overpass-api.de/api/interpreter"
    search_radius_m: int = Field(default=2500, ge=100, le=20000)
    timeout_seconds: float = Field(default=25.0, gt=0.0)
    grid_size: int = Field(default=50, ge=2, le=200)
    grid_span_deg: float = Field(default=0.05, gt=0.0, le=1.0)
    grid_falloff_m: float = Field(default=2000.0, gt=0.0)


class AlertConfig(BaseModel):
    model_config = {"extra": "forbid"}

    webhook_url: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    refresh_interval_minutes: int = Field(default=30, ge=1)
    request_delay_ms: int = Field(default=200, ge=0)


class HeatShieldConfig(BaseModel):
    model_config = {"extra": "forbid"}

    weather: WeatherConfig = WeatherConfig()
    location: LocationConfig = LocationConfig()
    zones: ZoneSearchConfig = ZoneSearchConfig()
    alerts: AlertConfig = AlertConfig()
    ops: OpsConfig = OpsConfig()
    cool_zones: list[CoolZoneConfig] = []


class UserSettings(BaseModel):
    """User preferences persisted in the settings store."""

    model_config = {"extra": "forbid", "validate_assignment": True}

    appearance_mode: AppearanceMode = AppearanceMode.SYSTEM
    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
    notifications_enabled: bool = True
    sound_enabled: bool = True
    haptic_enabled: bool = True
    alerts_enabled: bool = True
    temperature_threshold: float = Field(default=35.0, ge=25.0, le=45.0)
    location_enabled: bool = True
    last_latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    last_longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    reminders_enabled: bool = True
    hydration_reminder_minutes: int = Field(default=20, ge=5, le=240)
    sunscreen_reminder_minutes: int = Field(default=120, ge=5, le=480)
    shade_break_reminder_minutes: int = Field(default=30, ge=5, le=240)
