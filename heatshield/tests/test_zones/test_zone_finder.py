"""Tests for haversine distance, nearest zone search and zone merging."""

import pytest

from heatshield.config.defaults import DEFAULT_COOL_ZONES
from heatshield.models.zones import Coordinate, CoolZone, CoolZoneType
from heatshield.zones.distance import format_distance, haversine_m
from heatshield.zones.finder import (
    ZoneFinder,
    nearest_zone,
    sort_by_distance,
    zones_from_config,
)

USER = Coordinate(25.6866, -100.3161)


def _zone(name: str, lat: float, lon: float, zone_type=CoolZoneType.PARK) -> CoolZone:
    return CoolZone(
        name=name,
        zone_type=zone_type,
        coordinate=Coordinate(lat, lon),
        open_24_hours=False,
        description="",
    )


class TestHaversine:
    def test_zero(self):
        assert haversine_m(USER, USER) == 0.0

    def test_one_degree_latitude(self):
        d = haversine_m(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
        assert d == pytest.approx(111_195, rel=1e-3)

    def test_symmetric(self):
        other = Coordinate(25.6782, -100.2836)
        assert haversine_m(USER, other) == pytest.approx(haversine_m(other, USER))


class TestFormatDistance:
    def test_meters(self):
        assert format_distance(850.7) == "850m"

    def test_kilometers(self):
        assert format_distance(1000) == "1.0km"
        assert format_distance(3456) == "3.5km"


class TestNearestZone:
    def test_empty(self):
        assert nearest_zone(USER, []) is None

    def test_single(self):
        z = _zone("A", 25.70, -100.30)
        result = nearest_zone(USER, [z])
        assert result is not None
        assert result.zone == z

    def test_picks_closest(self):
        far = _zone("far", 25.80, -100.40)
        near = _zone("near", 25.687, -100.316)
        result = nearest_zone(USER, [far, near])
        assert result.zone.name == "near"

    def test_tie_keeps_first(self):
        # mirror images across the prime meridian are equidistant from (0, 0)
        origin = Coordinate(0.0, 0.0)
        east = _zone("east", 0.0, 0.5)
        west = _zone("west", 0.0, -0.5)
        assert nearest_zone(origin, [east, west]).zone.name == "east"
        assert nearest_zone(origin, [west, east]).zone.name == "west"

    def test_same_coordinate_tie(self):
        a = _zone("a", 25.70, -100.30)
        b = _zone("b", 25.70, -100.30)
        assert nearest_zone(USER, [a, b]).zone.name == "a"


class TestSortByDistance:
    def test_ordered(self):
        zones = [_zone("far", 25.80, -100.40), _zone("near", 25.687, -100.316)]
        ranked = sort_by_distance(USER, zones)
        assert [zd.zone.name for zd in ranked] == ["near", "far"]
        assert ranked[0].distance_m < ranked[1].distance_m

    def test_stable_for_ties(self):
        a = _zone("a", 25.70, -100.30)
        b = _zone("b", 25.70, -100.30)
        assert [zd.zone.name for zd in sort_by_distance(USER, [b, a])] == ["b", "a"]


class TestZoneFinder:
    def test_from_config(self):
        zones = zones_from_config(DEFAULT_COOL_ZONES)
        assert len(zones) == 5
        assert zones[2].zone_type == CoolZoneType.HOSPITAL
        assert zones[2].open_24_hours is True
        assert all(not z.verified for z in zones)

    def test_nearest_default_zone(self):
        finder = ZoneFinder(zones_from_config(DEFAULT_COOL_ZONES))
        # The user stands on Biblioteca Central
        assert finder.nearest(USER).zone.name == "Biblioteca Central"

    def test_merge_dedupes(self):
        curated = zones_from_config(DEFAULT_COOL_ZONES)
        detected = [
            _zone("Parque Fundidora", 25.67821, -100.28361),
            _zone("Plaza Zaragoza", 25.6870, -100.3170),
        ]
        merged = ZoneFinder(curated, detected).all_zones()
        names = [z.name for z in merged]
        assert names.count("Parque Fundidora") == 1
        assert "Plaza Zaragoza" in names
        assert len(merged) == 6

    def test_ranked(self):
        finder = ZoneFinder(zones_from_config(DEFAULT_COOL_ZONES))
        ranked = finder.ranked(USER)
        distances = [zd.distance_m for zd in ranked]
        assert distances == sorted(distances)

    def test_empty_finder(self):
        assert ZoneFinder([]).nearest(USER) is None
