"""Cooling grid: heat intensity per cell from distance to the nearest cool zone."""

from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from heatshield.models.zones import Coordinate, CoolZone
from heatshield.zones.distance import EARTH_RADIUS_M

MAX_INTENSITY = 0.8

LEGEND = ["Fresco", "Cómodo", "Templado", "Cálido", "Caliente"]


@dataclass(frozen=True)
class HeatGrid:
    center: Coordinate
    span_deg: float
    size: int
    intensities: np.ndarray  # shape (size, size), row 0 is the northern edge

    def cell_center(self, row: int, col: int) -> Coordinate:
        step = self.span_deg / self.size
        north = self.center.latitude + self.span_deg / 2
        west = self.center.longitude - self.span_deg / 2
        return Coordinate(north - (row + 0.5) * step, west + (col + 0.5) * step)

    def legend_counts(self) -> dict[str, int]:
        levels = legend_levels(self.intensities)
        return {label: int((levels == i).sum()) for i, label in enumerate(LEGEND)}


def _unit_vectors(lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    lat_r = np.radians(lats)
    lon_r = np.radians(lons)
    return np.column_stack(
        (
            np.cos(lat_r) * np.cos(lon_r),
            np.cos(lat_r) * np.sin(lon_r),
            np.sin(lat_r),
        )
    )


def build_heat_grid(
    center: Coordinate,
    zones: list[CoolZone],
    size: int = 50,
    span_deg: float = 0.05,
    falloff_m: float = 2000.0,
) -> HeatGrid:
    """Compute a size x size intensity grid centered on `center`.

    Each cell's intensity is min(d / falloff_m, 1) * 0.8 where d is the
    great-circle distance from the cell center to the nearest zone. With no
    zones every cell is at 0.8.
    """
    if size < 1:
        raise ValueError(f"grid size must be positive, got {size}")
    if falloff_m <= 0:
        raise ValueError(f"falloff_m must be positive, got {falloff_m}")

    if not zones:
        return HeatGrid(center, span_deg, size, np.full((size, size), MAX_INTENSITY))

    step = span_deg / size
    offsets = (np.arange(size) + 0.5) * step
    lats = center.latitude + span_deg / 2 - offsets
    lons = center.longitude - span_deg / 2 + offsets
    grid_lat, grid_lon = np.meshgrid(lats, lons, indexing="ij")

    zone_xyz = _unit_vectors(
        np.array([z.coordinate.latitude for z in zones]),
        np.array([z.coordinate.longitude for z in zones]),
    )
    cell_xyz = _unit_vectors(grid_lat.ravel(), grid_lon.ravel())

    chord, _ = cKDTree(zone_xyz).query(cell_xyz)
    # chord length on the unit sphere -> central angle -> meters
    distance_m = 2.0 * np.arcsin(np.clip(chord / 2.0, 0.0, 1.0)) * EARTH_RADIUS_M

    intensity = np.minimum(distance_m / falloff_m, 1.0) * MAX_INTENSITY
    return HeatGrid(center, span_deg, size, intensity.reshape(size, size))


def legend_levels(intensities: np.ndarray) -> np.ndarray:
    """Map intensities in [0, 0.8] to legend indices 0 (Fresco) .. 4 (Caliente)."""
    levels = np.floor(intensities / MAX_INTENSITY * len(LEGEND)).astype(int)
    return np.clip(levels, 0, len(LEGEND) - 1)
