"""Curated cool zones for the default region (Monterrey, NL)."""

from heatshield.config.schema import CoolZoneConfig
from heatshield.models.zones import CoolZoneType

DEFAULT_COOL_ZONES: list[CoolZoneConfig] = [
    CoolZoneConfig(
        name="Biblioteca Central",
        zone_type=CoolZoneType.LIBRARY,
        latitude=25.6866,
        longitude=-100.3161,
        open_24_hours=False,
        description="Aire acondicionado gratuito, agua disponible",
    ),
    CoolZoneConfig(
        name="Plaza Fiesta San Agustín",
        zone_type=CoolZoneType.MALL,
        latitude=25.6785,
        longitude=-100.3099,
        open_24_hours=False,
        description="Centro comercial con múltiples áreas frescas",
    ),
    CoolZoneConfig(
        name="Hospital Universitario",
        zone_type=CoolZoneType.HOSPITAL,
        latitude=25.6947,
        longitude=-100.3143,
        open_24_hours=True,
        description="Área de emergencias disponible 24/7",
    ),
    CoolZoneConfig(
        name="Parque Fundidora",
        zone_type=CoolZoneType.PARK,
        latitude=25.6782,
        longitude=-100.2836,
        open_24_hours=True,
        description="Áreas sombreadas y fuentes de agua",
    ),
    CoolZoneConfig(
        name="Centro Comunitario Independencia",
        zone_type=CoolZoneType.COMMUNITY,
        latitude=25.6945,
        longitude=-100.3234,
        open_24_hours=False,
        description="Refugio climático autorizado",
    ),
]
