"""Command-line entry points that run the flood models and write CSV logs."""

from __future__ import annotations

import argparse
import sys
import time
from typing import TextIO

import numpy as np

from .dem import DemError, read_asc, read_asc_lenient, read_asc_skip_header
from .diffusive import DiffusiveModel, run
from .overland import OverlandModel
from .rainfall import (
    RainPattern,
    chicago_intensity,
    compute_rainfall,
    flash_rain,
    moving_rain,
    xorshift_rain,
)
from .stabilized import StabilizedModel, stabilized_stats

DX = 0.000078055556
DY = 0.000081111111
DT = 0.1
GRID_SIZE = 1000

DIFFUSIVE_C = 50.0
DIFFUSIVE_THRESHOLD = 1e-6
MOVING_RADIUS = 30

STABILIZED_C = 1.0
STABILIZED_THRESHOLD = 0.001
STABILIZED_STEPS = 1000

OVERLAND_C = 50.0

PROGRESS_INTERVAL = 10

STEP_LOG_HEADER = "step,time,rain_volume,eta_volume,max_eta,min_eta\n"
OVERLAND_LOG_HEADER = "Time(s),Rain(m),Total_Volume(m3)\n"

_STABILIZED_PATTERNS = {
    0: RainPattern.RANDOM,
    1: RainPattern.MOVING,
    2: RainPattern.FLASH,
}


def _step_count(total_time, dt) -> int:
    return int(np.float32(total_time) / np.float32(dt))


def _sim_time(step, dt) -> float:
    return float(np.float32(step) * np.float32(dt))


def format_eta(eta, step) -> str:
    """Render a surface grid as text, one output line per second-axis index."""
    grid = np.asarray(eta, dtype=np.float32)
    if grid.ndim != 2:
        raise ValueError("eta must be two-dimensional")
    lines = [f"ETA STEP {step}:"]
    lines.extend("".join(f"{float(value):6.2f} " for value in column) for column in grid.T)
    return "\n".join(lines) + "\n\n"


def run_diffusive(
    dem_path,
    log_path="log_parallel.csv",
    pattern=RainPattern.MOVING,
    total_time=100.0,
    out: TextIO | None = None,
) -> np.ndarray:
    """Run the damped diffusive model over a DEM under a design storm.

    Writes one CSV row per step to ``log_path`` and returns the final surface.
    """
    out = out if out is not None else sys.stdout
    pattern = RainPattern(pattern)
    if total_time <= 0:
        raise ValueError(f"total time must be positive, got {total_time}")
    z = read_asc(dem_path).elevation
    print("DEM loaded.", file=out)

    shape = z.shape
    model = DiffusiveModel(
        dx=DX, dy=DY, dt=DT, c=DIFFUSIVE_C, threshold=DIFFUSIVE_THRESHOLD
    )

    def rain_for_step(step: int) -> np.ndarray:
        t = _sim_time(step, DT)
        intensity = chicago_intensity(t, total_time)
        if pattern is RainPattern.RANDOM:
            return xorshift_rain(shape, intensity, int(time.time()))
        if pattern is RainPattern.MOVING:
            return moving_rain(shape, intensity, step, MOVING_RADIUS)
        return flash_rain(shape, intensity, t)

    eta = np.zeros(shape, dtype=np.float32)
    start = time.perf_counter()
    with open(log_path, "w", newline="") as log:
        log.write(STEP_LOG_HEADER)
        for step, eta, stats in run(model, eta, z, rain_for_step, _step_count(total_time, DT)):
            t = _sim_time(step, DT)
            log.write(
                f"{step},{t:.2f},{stats.rain_volume:.6f},{stats.eta_volume:.6f},"
                f"{stats.max_eta:.4f},{stats.min_eta:.4f}\n"
            )
            if step % PROGRESS_INTERVAL == 0:
                print(f"Step {step}, time {t:.2f}s", file=out)
    elapsed = time.perf_counter() - start
    print(f"Simulation finished in {elapsed:.3f} seconds.", file=out)
    return eta


def _stabilized_pattern(pattern) -> RainPattern | None:
    if isinstance(pattern, RainPattern):
        return pattern
    return _STABILIZED_PATTERNS.get(int(pattern))


def run_stabilized(
    dem_path,
    log_path="log_parallel_v3.csv",
    pattern=0,
    steps=STABILIZED_STEPS,
) -> np.ndarray:
    """Run the value-limited model on a fixed-size grid and return the final surface.

    ``pattern`` is 0 (random), 1 (moving), 2 (decaying uniform) or a
    :class:`RainPattern`; any other number brings no rain at all.
    """
    shape = (GRID_SIZE, GRID_SIZE)
    z = read_asc_lenient(dem_path, shape).elevation
    eta = z.copy()
    rain_pattern = _stabilized_pattern(pattern)
    no_rain = np.zeros(shape, dtype=np.float32)
    model = StabilizedModel(
        dx=DX, dy=DY, dt=DT, c=STABILIZED_C, threshold=STABILIZED_THRESHOLD
    )

    start = time.perf_counter()
    with open(log_path, "w", newline="") as log:
        log.write(STEP_LOG_HEADER)
        for step in range(steps):
            sim_time = _sim_time(step, DT)
            if rain_pattern is None:
                rain, rain_volume = no_rain, 0.0
            else:
                rain, rain_volume = compute_rainfall(shape, sim_time, rain_pattern, DX, DY)
            eta = model.step(eta, z, rain)
            stats = stabilized_stats(eta, z, DX, DY)
            log.write(
                f"{step},{sim_time:.2f},{rain_volume:f},{stats.eta_volume:f},"
                f"{stats.max_eta:f},{stats.min_eta:f}\n"
            )
    elapsed = time.perf_counter() - start
    print(f"Simulation completed in {elapsed:.2f} seconds.")
    return eta


def run_overland(
    dem_path,
    log_path="simulation_log.csv",
    total_time=10.0,
) -> OverlandModel:
    """Run the overland flow model on a fixed-size grid and return the model."""
    elevation = read_asc_skip_header(dem_path, (GRID_SIZE, GRID_SIZE)).elevation
    model = OverlandModel(elevation, dx=DX, dy=DY, dt=DT, c=OVERLAND_C)
    with open(log_path, "w", newline="") as log:
        log.write(OVERLAND_LOG_HEADER)
        for step in range(_step_count(total_time, DT)):
            t = _sim_time(step, DT)
            rain, volume = model.step(t)
            log.write(f"{t:.2f},{rain:.6f},{volume:.6f}\n")
    print(f"Simulation finished. Results saved in {log_path}")
    return model


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="floodsim", description="Grid-based flood simulations driven by rainfall."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    diffusive = commands.add_parser("diffusive", help="damped diffusive-wave model")
    diffusive.add_argument("dem", nargs="?", default="dem_reproject.asc")
    diffusive.add_argument(
        "--pattern",
        choices=[p.value for p in RainPattern],
        default=RainPattern.MOVING.value,
    )
    diffusive.add_argument("--total-time", type=float, default=100.0)
    diffusive.add_argument("--log", default="log_parallel.csv")

    stabilized = commands.add_parser("stabilized", help="value-limited diffusive model")
    stabilized.add_argument("dem")
    stabilized.add_argument(
        "pattern", type=int, help="0=random, 1=moving, 2=decaying uniform"
    )
    stabilized.add_argument("--steps", type=int, default=STABILIZED_STEPS)
    stabilized.add_argument("--log", default="log_parallel_v3.csv")

    overland = commands.add_parser("overland", help="overland flow model")
    overland.add_argument("dem", nargs="?", default="dem_reproject.asc")
    overland.add_argument("--total-time", type=float, default=10.0)
    overland.add_argument("--log", default="simulation_log.csv")
    return parser


def main(argv=None) -> int:
    """Parse arguments, run the chosen model and return an exit status."""
    args = _parser().parse_args(argv)
    try:
        if args.command == "diffusive":
            run_diffusive(args.dem, args.log, args.pattern, args.total_time)
        elif args.command == "stabilized":
            run_stabilized(args.dem, args.log, args.pattern, args.steps)
        else:
            run_overland(args.dem, args.log, args.total_time)
    except (DemError, OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())