"""Cool zone models."""

from dataclasses import dataclass
from enum import StrEnum


class CoolZoneType(StrEnum):
    LIBRARY = "library"
    MALL = "mall"
    COMMUNITY = "community"
    HOSPITAL = "hospital"
    PARK = "park"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def default_description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def usually_open_24_hours(self) -> bool:
        return self in (CoolZoneType.PARK, CoolZoneType.HOSPITAL)


_LABELS = {
    CoolZoneType.LIBRARY: "Biblioteca",
    CoolZoneType.MALL: "Centro Comercial",
    CoolZoneType.COMMUNITY: "Centro Comunitario",
    CoolZoneType.HOSPITAL: "Hospital",
    CoolZoneType.PARK: "Parque con Sombra",
}

_DESCRIPTIONS = {
    CoolZoneType.MALL: "Aire acondicionado, múltiples áreas de descanso",
    CoolZoneType.PARK: "Áreas sombreadas, espacios naturales frescos",
    CoolZoneType.LIBRARY: "Aire acondicionado gratuito, espacios tranquilos",
    CoolZoneType.COMMUNITY: "Refugio climático con servicios básicos",
    CoolZoneType.HOSPITAL: "Instalaciones médicas con climatización",
}


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class CoolZone:
    name: str
    zone_type: CoolZoneType
    coordinate: Coordinate
    open_24_hours: bool
    description: str
    verified: bool = False
    phone: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class ZoneDistance:
    zone: CoolZone
    distance_m: float
