"""Nearest cool zone search and distance ordering."""

from heatshield.config.schema import CoolZoneConfig
from heatshield.models.zones import Coordinate, CoolZone, ZoneDistance
from heatshield.zones.distance import haversine_m


def nearest_zone(user: Coordinate, zones: list[CoolZone]) -> ZoneDistance | None:
    """Return the zone closest to the user, or None for an empty list.

    Ties resolve to the zone that appears first in the input.
    """
    best: ZoneDistance | None = None
    for zone in zones:
        d = haversine_m(user, zone.coordinate)
        if best is None or d < best.distance_m:
            best = ZoneDistance(zone=zone, distance_m=d)
    return best


def sort_by_distance(user: Coordinate, zones: list[CoolZone]) -> list[ZoneDistance]:
    """All zones ordered nearest first. Equal distances keep input order."""
    ranked = [ZoneDistance(zone=z, distance_m=haversine_m(user, z.coordinate)) for z in zones]
    return sorted(ranked, key=lambda zd: zd.distance_m)


def zones_from_config(entries: list[CoolZoneConfig]) -> list[CoolZone]:
    return [
        CoolZone(
            name=e.name,
            zone_type=e.zone_type,
            coordinate=Coordinate(e.latitude, e.longitude),
            open_24_hours=e.open_24_hours,
            description=e.description or e.zone_type.default_description,
            verified=False,
            phone=e.phone,
            url=e.url,
        )
        for e in entries
    ]


class ZoneFinder:
    """Combines curated zones with zones detected by a nearby-places search."""

    def __init__(self, curated: list[CoolZone], detected: list[CoolZone] | None = None):
        self.curated = curated
        self.detected = detected or []

    def all_zones(self) -> list[CoolZone]:
        seen: set[tuple[str, float, float]] = set()
        merged = []
        for zone in self.curated + self.detected:
            key = (
                zone.name.lower(),
                round(zone.coordinate.latitude, 4),
                round(zone.coordinate.longitude, 4),
            )
            if key in seen:
                continue
            seen.add(key)
            merged.append(zone)
        return merged

    def ranked(self, user: Coordinate) -> list[ZoneDistance]:
        return sort_by_distance(user, self.all_zones())

    def nearest(self, user: Coordinate) -> ZoneDistance | None:
        return nearest_zone(user, self.all_zones())
