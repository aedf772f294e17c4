"""Heat index classification from air temperature."""

from heatshield.models.heat import HeatIndex

# Lower bound (°C, inclusive) of each category above SAFE.
CAUTION_MIN_C = 27
WARNING_MIN_C = 32
DANGER_MIN_C = 37
EXTREME_MIN_C = 42


def classify_heat_index(temperature_c: int) -> HeatIndex:
    """Bucket a Celsius temperature into a heat index category.

    Bins are half-open: <27 safe, [27,32) caution, [32,37) warning,
    [37,42) danger, >=42 extreme.
    """
    if temperature_c < CAUTION_MIN_C:
        return HeatIndex.SAFE
    if temperature_c < WARNING_MIN_C:
        return HeatIndex.CAUTION
    if temperature_c < DANGER_MIN_C:
        return HeatIndex.WARNING
    if temperature_c < EXTREME_MIN_C:
        return HeatIndex.DANGER
    return HeatIndex.EXTREME
