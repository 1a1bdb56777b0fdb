"""Helpers for writing synthetic DEM tiles.

Used by scripts/gen_fixtures.py and by the test suite. Tiles are written in
the exact byte layout of their FormatProfile (row-major, 16-bit samples,
profile endianness and signedness) so they exercise the real reader.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from domain.elevation.sampling import sample_dtype
from domain.elevation.value_objects import FormatProfile


def constant_grid(profile: FormatProfile, value: int) -> NDArray[np.int64]:
    """Grid of ``profile``'s shape filled with ``value``."""
    return np.full((profile.row_count, profile.column_count), value, dtype=np.int64)


def gradient_grid(
    profile: FormatProfile, base: int = 1000, row_step: int = 10, col_step: int = 1
) -> NDArray[np.int64]:
    """Grid with ``base + row_step * row + col_step * col`` in every cell.

    Bilinear interpolation over a linear surface is exact, so expected
    elevations follow directly from the fractional grid position.
    """
    rows = np.arange(profile.row_count, dtype=np.int64)[:, None]
    cols = np.arange(profile.column_count, dtype=np.int64)[None, :]
    return base + row_step * rows + col_step * cols


def write_tile(
    directory: Path | str,
    profile: FormatProfile,
    filename: str,
    data: NDArray[np.integer],
    overrides: Mapping[tuple[int, int], int] | None = None,
) -> Path:
    """Encode ``data`` per ``profile`` and write it to ``directory/filename``.

    Args:
        directory: Target directory (created if needed)
        profile: Format to encode with
        filename: Tile filename, e.g. "N35W079.hgt"
        data: (row_count, column_count) integer grid
        overrides: Optional {(row, col): raw value} cells to replace

    Returns:
        Path of the written tile
    """
    expected_shape = (profile.row_count, profile.column_count)
    if data.shape != expected_shape:
        raise ValueError(f"Grid shape {data.shape} != {expected_shape}")

    grid = np.array(data, dtype=np.int64, copy=True)
    for (row, col), value in (overrides or {}).items():
        grid[row, col] = value

    dtype = sample_dtype(profile.is_big_endian, profile.signed_samples)
    info = np.iinfo(dtype)
    if grid.min() < info.min or grid.max() > info.max:
        raise ValueError(f"Values outside {dtype} range [{info.min}, {info.max}]")

    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    tile_path = path / filename
    grid.astype(dtype).tofile(tile_path)
    return tile_path
