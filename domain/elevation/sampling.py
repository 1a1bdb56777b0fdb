"""Elevation sampling: grid position math and raw sample decoding.

Tiles are row-major grids of 16-bit samples. Row 0 is the northernmost row and
column 0 the westernmost column. Every supported format starts in the NW corner
and proceeds eastward first, then southward after each row.

Reading goes through the TileHandle port, so nothing here opens files.
"""

from __future__ import annotations

import math

import numpy as np

from domain.elevation.errors import InvalidTileError
from domain.elevation.repositories import TileHandle
from domain.elevation.value_objects import (
    Coordinate,
    CornerSamples,
    FormatProfile,
    GridPosition,
)

# Row/column positions are truncated to this many decimal digits before
# flooring, so points sitting exactly on a grid line do not fall one cell short.
POSITION_DECIMALS = 6
_POSITION_SCALE = 10**POSITION_DECIMALS


def _truncate(value: float) -> float:
    return math.trunc(value * _POSITION_SCALE) / _POSITION_SCALE


def sample_dtype(big_endian: bool, signed: bool) -> np.dtype:
    """Return the numpy dtype of one 16-bit sample."""
    order = ">" if big_endian else "<"
    kind = "i" if signed else "u"
    return np.dtype(f"{order}{kind}2")


def decode_sample(raw: bytes, big_endian: bool, signed: bool = False) -> int:
    """Decode two raw bytes into an integer sample.

    Big-endian reads ``byte0 << 8 | byte1``, little-endian ``byte1 << 8 | byte0``.
    With ``signed`` the 16-bit value is two's complement.

    Raises:
        ValueError: If ``raw`` is not exactly two bytes
    """
    if len(raw) != 2:
        raise ValueError(f"Expected 2 bytes per sample, got {len(raw)}")
    return int(np.frombuffer(raw, dtype=sample_dtype(big_endian, signed))[0])


def tile_origin(profile: FormatProfile, coord: Coordinate) -> tuple[float, float]:
    """Return (latitude, longitude) of grid row 0 / column 0 for ``coord``'s tile.

    The tile's NW corner is (ceil(lat), floor(lon)). Padding rows/columns shared
    with neighbors push the first sample outward by half the padding. With an
    even sample count the whole-degree lines fall between samples, so the
    origin moves back by half a cell.
    """
    nw_lat = math.ceil(coord.latitude)
    nw_lon = math.floor(coord.longitude)

    # A single row of overlap needs no offset: 1 // 2 == 0
    start_offset_lat = (round(profile.extra_rows) // 2) * -profile.latitude_interval
    start_offset_lon = (
        round(profile.extra_columns) // 2
    ) * -profile.longitude_interval

    if profile.row_count % 2 == 0:
        start_offset_lat += profile.latitude_interval / 2
    if profile.column_count % 2 == 0:
        start_offset_lon += profile.longitude_interval / 2

    return (nw_lat + start_offset_lat, nw_lon + start_offset_lon)


def byte_offset(profile: FormatProfile, row: int, col: int) -> int:
    """Byte offset of cell (row, col) in a row-major tile."""
    return (row * profile.column_count + col) * profile.bytes_per_record


def grid_position(profile: FormatProfile, coord: Coordinate) -> GridPosition:
    """Locate ``coord`` in its tile's grid.

    Args:
        profile: Format of the tile
        coord: Target point

    Returns:
        GridPosition with the NW cell indices, the fractional distances to the
        next row/column and the byte offsets of the four surrounding cells.
    """
    starting_lat, starting_lon = tile_origin(profile, coord)

    requested_row = _truncate(
        (coord.latitude - starting_lat) / profile.latitude_interval
    )
    requested_col = _truncate(
        (coord.longitude - starting_lon) / profile.longitude_interval
    )

    lower_row = math.floor(requested_row)
    lower_col = math.floor(requested_col)
    higher_row = lower_row + 1
    higher_col = lower_col + 1

    return GridPosition(
        lower_row=lower_row,
        lower_col=lower_col,
        row_fraction=requested_row - lower_row,
        col_fraction=requested_col - lower_col,
        nw_offset=byte_offset(profile, lower_row, lower_col),
        ne_offset=byte_offset(profile, lower_row, higher_col),
        sw_offset=byte_offset(profile, higher_row, lower_col),
        se_offset=byte_offset(profile, higher_row, higher_col),
    )


def read_corners(
    handle: TileHandle, profile: FormatProfile, position: GridPosition
) -> CornerSamples:
    """Read and decode the four samples surrounding ``position``.

    Raises:
        InvalidTileError: If the handle cannot serve a full record
    """
    samples = []
    for offset in position.offsets():
        raw = handle.read_at(offset, profile.bytes_per_record)
        if len(raw) != profile.bytes_per_record:
            raise InvalidTileError(
                handle.name,
                f"short read at offset {offset}: {len(raw)} bytes",
            )
        samples.append(
            decode_sample(raw, profile.is_big_endian, profile.signed_samples)
        )
    nw, ne, sw, se = samples
    return CornerSamples(nw=nw, ne=ne, sw=sw, se=se)
