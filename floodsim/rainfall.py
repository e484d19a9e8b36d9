"""Rainfall intensity curves and spatial rain patterns on a grid."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

IDF_A = 1000.0
IDF_B = 10.0
IDF_N = 0.75
MINUTES_TO_SECONDS = 60.0
MM_PER_HOUR_TO_M_PER_SEC = 1.0 / 3_600_000.0
CHICAGO_PEAK_RATIO = 0.3

FLASH_START = 3.0
FLASH_END = 4.0
FLASH_FACTOR = 5.0

DECAY_PEAK = 0.01
DECAY_RATE = 0.1
DECAY_PERIOD = 50.0

ORBIT_AMPLITUDE = 100.0
ORBIT_RADIUS = 100.0
ORBIT_INTENSITY = 0.005

RANDOM_SCALE = 0.001

_U32 = 0xFFFFFFFF
_LCG_MULTIPLIER = 1103515245
_LCG_INCREMENT = 12345
_LCG_MASK = 0x7FFFFFFF
_XORSHIFT_STRIDE = 1234567


class RainPattern(Enum):
    """Spatial distribution of rainfall over the grid."""

    RANDOM = "random"
    MOVING = "moving"
    FLASH = "flash"


@dataclass
class Lcg:
    """Linear congruential generator producing floats in [0, 1]."""

    seed: int = 0

    def __post_init__(self) -> None:
        self.seed &= _U32

    def random(self) -> float:
        """Advance the state and return the next value."""
        self.seed = (self.seed * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
        return float(np.float32(self.seed) / np.float32(_LCG_MASK))


def idf_intensity(t_seconds: float) -> float:
    """Rain intensity in m/s from the intensity-duration-frequency curve."""
    t_min = t_seconds / MINUTES_TO_SECONDS
    intensity_mmhr = IDF_A / (t_min + IDF_B) ** IDF_N
    return intensity_mmhr * MM_PER_HOUR_TO_M_PER_SEC


def chicago_intensity(t: float, total_time: float) -> float:
    """Triangular design storm peaking at 30% of the total duration."""
    tp = CHICAGO_PEAK_RATIO * total_time
    peak = idf_intensity(tp)
    if t <= tp:
        return (peak / tp) * t
    if t <= total_time:
        return (peak / (total_time - tp)) * (total_time - t)
    return 0.0


def random_rain(shape, intensity, rng=None) -> np.ndarray:
    """Uniformly random rain in [0, intensity] on every cell."""
    generator = rng if rng is not None else np.random.default_rng()
    return np.float32(intensity) * generator.random(tuple(shape), dtype=np.float32)


def xorshift_rain(shape, intensity, seed) -> np.ndarray:
    """Random rain drawn from xorshift32 streams, one stream per row."""
    rows, _ = shape
    mask = np.uint64(_U32)
    state = (
        np.uint64(seed & _U32)
        + np.arange(rows, dtype=np.uint64) * np.uint64(_XORSHIFT_STRIDE)
    ) & mask
    out = np.empty(tuple(shape), dtype=np.float32)
    scale = np.float32(intensity)
    for column in out.T:
        state ^= (state << np.uint64(13)) & mask
        state ^= state >> np.uint64(17)
        state ^= (state << np.uint64(5)) & mask
        fraction = (state % np.uint64(10000)).astype(np.float32) / np.float32(10000)
        column[:] = scale * fraction
    return out


def _radial_rain(shape, center_i, center_j, intensity, radius) -> np.ndarray:
    rows, cols = shape
    di = np.arange(rows, dtype=np.int64)[:, None] - center_i
    dj = np.arange(cols, dtype=np.int64)[None, :] - center_j
    dist = np.sqrt((di * di + dj * dj).astype(np.float32))
    r = np.float32(radius)
    inside = np.float32(intensity) * (np.float32(1.0) - dist / r)
    return np.where(dist < r, inside, np.float32(0.0)).astype(np.float32)


def moving_rain(shape, intensity, step, radius=30) -> np.ndarray:
    """A cone of rain whose centre advances one row every two steps."""
    rows, cols = shape
    return _radial_rain(shape, (step // 2) % rows, cols // 2, intensity, radius)


def flash_rain(shape, intensity, t) -> np.ndarray:
    """Five-fold rain on the central block while 3 <= t <= 4, none otherwise."""
    rain = np.zeros(tuple(shape), dtype=np.float32)
    if FLASH_START <= t <= FLASH_END:
        rows, cols = shape
        block = np.float32(intensity) * np.float32(FLASH_FACTOR)
        rain[3 * rows // 10 : 7 * rows // 10, 3 * cols // 10 : 7 * cols // 10] = block
    return rain


def decaying_intensity(time) -> float:
    """Exponentially decaying intensity repeating every 50 seconds."""
    return DECAY_PEAK * math.exp(-DECAY_RATE * math.fmod(time, DECAY_PERIOD))


def orbiting_rain(shape, time) -> np.ndarray:
    """A cone of rain whose centre swings along the rows with sin(time)."""
    rows, cols = shape
    center_i = int(rows // 2 + ORBIT_AMPLITUDE * math.sin(time))
    return _radial_rain(shape, center_i, cols // 2, ORBIT_INTENSITY, ORBIT_RADIUS)


def _lcg_grid(shape, seed) -> np.ndarray:
    rows, _ = shape
    state = (np.uint64(seed & _U32) + np.arange(rows, dtype=np.uint64)) & np.uint64(_U32)
    out = np.empty(tuple(shape), dtype=np.float32)
    multiplier = np.uint64(_LCG_MULTIPLIER)
    increment = np.uint64(_LCG_INCREMENT)
    mask = np.uint64(_LCG_MASK)
    for column in out.T:
        state = (state * multiplier + increment) & mask
        column[:] = state.astype(np.float32) / np.float32(_LCG_MASK)
    return out


def compute_rainfall(shape, time, pattern, dx, dy):
    """Return the rain field for ``time`` and its volume per unit time."""
    pattern = RainPattern(pattern)
    if pattern is RainPattern.RANDOM:
        seed = int(np.float32(time) * np.float32(1000.0)) & _U32
        rain = (np.float32(RANDOM_SCALE) * _lcg_grid(shape, seed)).astype(np.float32)
    elif pattern is RainPattern.MOVING:
        rain = orbiting_rain(shape, time)
    else:
        rain = np.full(tuple(shape), np.float32(decaying_intensity(time)), dtype=np.float32)
    volume = float(rain.sum(dtype=np.float64)) * dx * dy
    return rain, volume