"""Reading elevation grids stored as ASCII raster files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import numpy as np

NODATA_FLOOR = -1000.0

_HEADER_FIELDS = (
    ("ncols", int),
    ("nrows", int),
    ("xllcorner", float),
    ("yllcorner", float),
    ("dx", float),
    ("dy", float),
    ("NODATA_value", float),
)
_HEADER_LINES = 6


class DemError(ValueError):
    """Raised when an elevation file cannot be opened or parsed."""


@dataclass
class Dem:
    """An elevation grid with its optional header metadata."""

    elevation: np.ndarray
    xllcorner: float | None = None
    yllcorner: float | None = None
    dx: float | None = None
    dy: float | None = None
    nodata: float | None = None

    @property
    def shape(self) -> tuple[int, ...]:
        return self.elevation.shape


def _read_text(path) -> str:
    try:
        return Path(path).read_text()
    except OSError as exc:
        raise DemError(f"cannot open DEM file: {path}") from exc


def _parse_header(tokens, strict):
    header = {}
    pos = 0
    for key, kind in _HEADER_FIELDS:
        if pos >= len(tokens) or tokens[pos] != key:
            continue
        try:
            header[key] = kind(tokens[pos + 1])
        except (IndexError, ValueError) as exc:
            if strict:
                raise DemError(f"invalid value for {key} in DEM header") from exc
            pos += 1
            continue
        pos += 2
    return header, pos


def _parse_values(tokens, count) -> np.ndarray:
    """Parse up to ``count`` numbers, stopping at the first unreadable token."""
    chunk = tokens[:count]
    try:
        return np.array(chunk, dtype=np.float64).astype(np.float32)
    except ValueError:
        values = []
        for token in chunk:
            try:
                values.append(float(token))
            except ValueError:
                break
        return np.array(values, dtype=np.float64).astype(np.float32)


def _dem_from_header(grid, header) -> Dem:
    return Dem(
        elevation=grid,
        xllcorner=header.get("xllcorner"),
        yllcorner=header.get("yllcorner"),
        dx=header.get("dx"),
        dy=header.get("dy"),
        nodata=header.get("NODATA_value"),
    )


def _split_header_lines(text):
    parts = text.split("\n", _HEADER_LINES)
    header_lines = parts[:_HEADER_LINES]
    body = parts[_HEADER_LINES] if len(parts) > _HEADER_LINES else ""
    return header_lines, body


def read_asc(path, expected_shape=None) -> Dem:
    """Read a DEM with a full header, replacing NODATA cells with zero.

    If ``expected_shape`` (rows, cols) is given the file must match it.
    """
    tokens = _read_text(path).split()
    header, pos = _parse_header(tokens, strict=True)
    if "ncols" not in header or "nrows" not in header:
        raise DemError("DEM header lacks ncols or nrows")
    ncols, nrows = header["ncols"], header["nrows"]
    if ncols < 0 or nrows < 0:
        raise DemError(f"invalid DEM size {ncols}x{nrows}")
    if expected_shape is not None and (nrows, ncols) != tuple(expected_shape):
        rows, cols = expected_shape
        raise DemError(
            f"DEM size {ncols}x{nrows} does not match expected {cols}x{rows}"
        )
    count = nrows * ncols
    values = _parse_values(tokens[pos:], count)
    if values.size < count:
        i, j = divmod(values.size, ncols)
        raise DemError(f"failed to read elevation at [{i}][{j}]")
    grid = values.reshape(nrows, ncols)
    nodata = header.get("NODATA_value")
    if nodata is not None:
        grid = np.where(grid == np.float32(nodata), np.float32(0.0), grid)
    return _dem_from_header(grid.astype(np.float32), header)


def read_asc_lenient(path, shape) -> Dem:
    """Read a grid of the given shape, filling unreadable or missing cells with zero."""
    tokens = _read_text(path).split()
    header, pos = _parse_header(tokens, strict=False)
    grid = np.zeros(tuple(shape), dtype=np.float32)
    values = _parse_values(tokens[pos:], grid.size)
    grid.flat[: values.size] = values
    return _dem_from_header(grid, header)


def _scan_int(key, line, current):
    match = re.match(rf"{key}\s*([+-]?\d+)", line)
    return int(match.group(1)) if match else current


def read_asc_sized(path) -> Dem:
    """Read a grid whose size comes from ncols/nrows in a six-line header."""
    header_lines, body = _split_header_lines(_read_text(path))
    ncols = nrows = None
    for line in header_lines:
        if "ncols" in line:
            ncols = _scan_int("ncols", line, ncols)
        elif "nrows" in line:
            nrows = _scan_int("nrows", line, nrows)
    if ncols is None or nrows is None:
        raise DemError("DEM header lacks ncols or nrows")
    if ncols < 0 or nrows < 0:
        raise DemError(f"invalid DEM size {ncols}x{nrows}")
    count = nrows * ncols
    values = _parse_values(body.split(), count)
    if values.size < count:
        i, j = divmod(values.size, ncols)
        raise DemError(f"error reading elevation at row {i} column {j}")
    return Dem(elevation=values.reshape(nrows, ncols))


def read_asc_skip_header(path, shape) -> Dem:
    """Skip a six-line header and read a grid; values below -1000 become zero."""
    _, body = _split_header_lines(_read_text(path))
    rows, cols = shape
    count = rows * cols
    values = _parse_values(body.split(), count)
    if values.size < count:
        i, j = divmod(values.size, cols)
        raise DemError(f"failed to read elevation at [{i}][{j}]")
    grid = values.reshape(rows, cols)
    grid = np.where(grid < np.float32(NODATA_FLOOR), np.float32(0.0), grid)
    return Dem(elevation=grid.astype(np.float32))