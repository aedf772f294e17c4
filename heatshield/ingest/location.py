"""Resolves the user's location from explicit input, settings, or configured home."""

import logging

from heatshield.config.schema import HeatShieldConfig, UserSettings
from heatshield.models.zones import Coordinate

logger = logging.getLogger(__name__)

PERMISSION_PROMPT = (
    "El acceso a la ubicación está desactivado. "
    "Actívalo con: heatshield settings set location_enabled=true"
)


class LocationPermissionError(Exception):
    """Location access is disabled and no explicit coordinate was given."""

    def __init__(self, message: str = PERMISSION_PROMPT):
        super().__init__(message)


def resolve_location(
    settings: UserSettings,
    config: HeatShieldConfig,
    latitude: float | None = None,
    longitude: float | None = None,
) -> tuple[Coordinate, str]:
    """Return (coordinate, display name).

    Order: explicit coordinates, last known location, configured home.

    Raises:
        ValueError: only one of latitude/longitude given, or out of range.
        LocationPermissionError: location disabled and nothing explicit given.
    """
    if (latitude is None) != (longitude is None):
        raise ValueError("Both latitude and longitude are required")

    if latitude is not None and longitude is not None:
        if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
            raise ValueError(f"Coordinate out of range: {latitude}, {longitude}")
        return Coordinate(latitude, longitude), f"{latitude:.4f}, {longitude:.4f}"

    if not settings.location_enabled:
        raise LocationPermissionError()

    if settings.last_latitude is not None and settings.last_longitude is not None:
        return (
            Coordinate(settings.last_latitude, settings.last_longitude),
            "Última ubicación conocida",
        )

    logger.debug("No known location, using configured home %s", config.location.name)
    return (
        Coordinate(config.location.latitude, config.location.longitude),
        config.location.name,
    )
