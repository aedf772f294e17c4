"""Tests for the cooling grid built from cool zone distances."""

import numpy as np
import pytest

from heatshield.models.zones import Coordinate, CoolZone, CoolZoneType
from heatshield.zones.distance import haversine_m
from heatshield.zones.heat_grid import LEGEND, MAX_INTENSITY, build_heat_grid, legend_levels

CENTER = Coordinate(25.6866, -100.3161)


def _zone(lat: float, lon: float) -> CoolZone:
    return CoolZone("z", CoolZoneType.LIBRARY, Coordinate(lat, lon), False, "")


class TestBuildHeatGrid:
    def test_no_zones_all_hot(self):
        grid = build_heat_grid(CENTER, [], size=10)
        assert grid.intensities.shape == (10, 10)
        assert np.all(grid.intensities == MAX_INTENSITY)
        assert grid.legend_counts()["Caliente"] == 100

    def test_intensity_matches_haversine(self):
        zone = _zone(25.69, -100.31)
        grid = build_heat_grid(CENTER, [zone], size=8, falloff_m=2000.0)
        for row, col in [(0, 0), (3, 5), (7, 7)]:
            d = haversine_m(grid.cell_center(row, col), zone.coordinate)
            expected = min(d / 2000.0, 1.0) * MAX_INTENSITY
            assert grid.intensities[row, col] == pytest.approx(expected, abs=1e-6)

    def test_cooler_near_zone(self):
        grid = build_heat_grid(CENTER, [_zone(CENTER.latitude, CENTER.longitude)], size=11)
        center_value = grid.intensities[5, 5]
        assert center_value == grid.intensities.min()
        assert center_value < grid.intensities[0, 0]

    def test_far_zone_saturates(self):
        grid = build_heat_grid(CENTER, [_zone(10.0, -80.0)], size=5)
        assert np.allclose(grid.intensities, MAX_INTENSITY)

    def test_row_zero_is_north(self):
        grid = build_heat_grid(CENTER, [], size=4)
        assert grid.cell_center(0, 0).latitude > grid.cell_center(3, 0).latitude
        assert grid.cell_center(0, 0).longitude < grid.cell_center(0, 3).longitude

    @pytest.mark.parametrize("kwargs", [{"size": 0}, {"falloff_m": 0.0}])
    def test_invalid_args(self, kwargs):
        with pytest.raises(ValueError):
            build_heat_grid(CENTER, [], **kwargs)


class TestLegend:
    def test_levels(self):
        levels = legend_levels(np.array([0.0, 0.17, 0.33, 0.49, 0.65, 0.8]))
        assert levels.tolist() == [0, 1, 2, 3, 4, 4]

    def test_counts_sum(self):
        grid = build_heat_grid(CENTER, [_zone(25.69, -100.31)], size=20)
        counts = grid.legend_counts()
        assert list(counts) == LEGEND
        assert sum(counts.values()) == 400
