"""Diffusive-wave flood model that discards non-finite or runaway values."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

_INNER = (slice(1, -1), slice(1, -1))


@dataclass
class StabilizedStats:
    """Stored water volume and surface extremes."""

    eta_volume: float
    max_eta: float
    min_eta: float


@dataclass
class StabilizedModel:
    """Undamped diffusive-wave solver with value limiting.

    Fluxes and surface values that are not finite or exceed ``limit`` in
    magnitude are reset to zero. Edge cells are not computed and stay zero.
    """

    dx: float = 1.0
    dy: float = 1.0
    dt: float = 0.1
    c: float = 1.0
    threshold: float = 0.001
    limit: float = 1e5

    def step(self, eta, z, rain_source) -> np.ndarray:
        """Advance the water surface ``eta`` by one time step."""
        eta = np.asarray(eta, dtype=np.float32)
        z = np.asarray(z, dtype=np.float32)
        if eta.shape != z.shape:
            raise ValueError(f"eta shape {eta.shape} does not match z shape {z.shape}")
        if eta.ndim != 2 or min(eta.shape) < 3:
            raise ValueError("grid must be two-dimensional and at least 3x3")
        rain = np.broadcast_to(np.asarray(rain_source, dtype=np.float32), eta.shape)

        f32 = np.float32
        two = f32(2.0)
        zero = f32(0.0)
        dx, dy, dt = f32(self.dx), f32(self.dy), f32(self.dt)
        c2 = f32(self.c) * f32(self.c)
        limit = f32(self.limit)

        p = np.zeros_like(eta)
        q = np.zeros_like(eta)
        eta_new = np.zeros_like(eta)
        with np.errstate(all="ignore"):
            depth = eta[_INNER] - z[_INNER]
            deta_dx = (eta[2:, 1:-1] - eta[:-2, 1:-1]) / (two * dx)
            deta_dy = (eta[1:-1, 2:] - eta[1:-1, :-2]) / (two * dy)
            usable = (
                (depth > f32(self.threshold))
                & np.isfinite(depth)
                & np.isfinite(deta_dx)
                & np.isfinite(deta_dy)
            )
            flux_x = -depth * np.sqrt(np.maximum(zero, c2 * np.abs(deta_dx))) * np.sign(deta_dx)
            flux_y = -depth * np.sqrt(np.maximum(zero, c2 * np.abs(deta_dy))) * np.sign(deta_dy)
            p[_INNER] = np.where(usable & self._bounded(flux_x, limit), flux_x, zero)
            q[_INNER] = np.where(usable & self._bounded(flux_y, limit), flux_y, zero)

            dpdx = (p[2:, 1:-1] - p[:-2, 1:-1]) / (two * dx)
            dqdy = (q[1:-1, 2:] - q[1:-1, :-2]) / (two * dy)
            inner = eta[_INNER] - dt * (dpdx + dqdy) + dt * rain[_INNER]
            eta_new[_INNER] = np.where(self._bounded(inner, limit), inner, zero)
        return eta_new

    @staticmethod
    def _bounded(values: np.ndarray, limit: np.float32) -> np.ndarray:
        return np.isfinite(values) & (np.abs(values) <= limit)


def stabilized_stats(eta, z, dx, dy) -> StabilizedStats:
    """Volume of positive water depth and the extremes of the surface."""
    eta = np.asarray(eta, dtype=np.float32)
    z = np.asarray(z, dtype=np.float32)
    with np.errstate(all="ignore"):
        depth = eta - z
    positive = depth[depth > 0.0]
    eta_volume = float(positive.sum(dtype=np.float64)) * dx * dy
    comparable = eta[~np.isnan(eta)]
    if comparable.size:
        max_eta = float(comparable.max())
        min_eta = float(comparable.min())
    else:
        max_eta, min_eta = float("-inf"), float("inf")
    return StabilizedStats(eta_volume, max_eta, min_eta)