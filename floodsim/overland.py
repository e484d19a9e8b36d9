"""Explicit overland flow model driven by IDF rainfall."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .rainfall import IDF_A, IDF_B, IDF_N, MINUTES_TO_SECONDS

_SECONDS_PER_HOUR = 3600.0


def rainfall_depth(time_seconds, dt=0.1) -> float:
    """Rain added per step: IDF intensity in mm/h scaled by the step length in hours."""
    time_minutes = time_seconds / MINUTES_TO_SECONDS
    intensity_mm_per_hour = IDF_A / (time_minutes + IDF_B) ** IDF_N
    return intensity_mm_per_hour * (dt / _SECONDS_PER_HOUR)


@dataclass
class OverlandModel:
    """Water depth on fixed terrain, moved by surface-slope fluxes.

    Arrays are indexed ``[y, x]``. Flux arrays keep zero on their edges.
    """

    elevation: np.ndarray
    dx: float = 1.0
    dy: float = 1.0
    dt: float = 0.1
    c: float = 50.0
    water: np.ndarray = field(init=False)
    flow_x: np.ndarray = field(init=False)
    flow_y: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.elevation = np.array(self.elevation, dtype=np.float32)
        if self.elevation.ndim != 2 or min(self.elevation.shape) < 3:
            raise ValueError("elevation must be two-dimensional and at least 3x3")
        self.water = np.zeros_like(self.elevation)
        self.flow_x = np.zeros_like(self.elevation)
        self.flow_y = np.zeros_like(self.elevation)

    def apply_rainfall(self, rain) -> None:
        """Add a uniform depth of rain to every cell."""
        self.water += np.float32(rain)

    def update_flow(self) -> None:
        """Recompute interior fluxes from the water-surface slope."""
        surface = self.elevation + self.water
        centre = surface[1:-1, 1:-1]
        c = np.float32(self.c)
        with np.errstate(all="ignore"):
            dhdx = (centre - surface[1:-1, 2:]) / np.float32(self.dx)
            dhdy = (centre - surface[2:, 1:-1]) / np.float32(self.dy)
            self.flow_x[1:-1, 1:-1] = -c * dhdx
            self.flow_y[1:-1, 1:-1] = -c * dhdy

    def update_water(self) -> None:
        """Apply the flux divergence to interior cells, keeping depths non-negative."""
        with np.errstate(all="ignore"):
            dqx = (self.flow_x[1:-1, :-2] - self.flow_x[1:-1, 1:-1]) / np.float32(self.dx)
            dqy = (self.flow_y[:-2, 1:-1] - self.flow_y[1:-1, 1:-1]) / np.float32(self.dy)
            inner = self.water[1:-1, 1:-1] + np.float32(self.dt) * (dqx + dqy)
        self.water[1:-1, 1:-1] = np.maximum(inner, np.float32(0.0))

    def total_volume(self) -> float:
        """Total stored water volume."""
        return float(self.water.sum(dtype=np.float64)) * self.dx * self.dy

    def step(self, time_seconds) -> tuple[float, float]:
        """Rain, move water and return ``(rain depth, total volume)``."""
        rain = rainfall_depth(time_seconds, self.dt)
        self.apply_rainfall(rain)
        self.update_flow()
        self.update_water()
        return rain, self.total_volume()