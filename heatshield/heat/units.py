"""Temperature unit conversion and display."""

from heatshield.config.schema import TemperatureUnit


def c_to_f(celsius: float) -> float:
    return celsius * 9.0 / 5.0 + 32.0


def format_temperature(celsius: float, unit: TemperatureUnit) -> str:
    """Render a Celsius reading in the user's unit, rounded to whole degrees."""
    value = celsius if unit is TemperatureUnit.CELSIUS else c_to_f(celsius)
    return f"{round(value)}{unit.symbol}"
