"""Elevation Bounded Context - Value Objects.

Immutable data structures for tile addressing and sampling.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.elevation.errors import InvalidProfileError

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
# Tolerance when checking row/column counts against 1/|interval|
GRID_COUNT_TOLERANCE = 1e-6


class Coordinate(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Invariants:
        C-1: latitude in [-90, 90]
        C-2: longitude in [-180, 180]

    Pydantic frozen models compare by value, so two coordinates with the same
    latitude and longitude are equal and hash alike.
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


class NamingConvention(str, Enum):
    """Which tile corner a data source uses to name its files."""

    SOUTHWEST_CORNER = "southwest"
    NORTHWEST_CORNER = "northwest"


class FormatProfile(BaseModel):
    """Grid geometry and encoding of one elevation data source (Value Object).

    The engine has no per-source branching; everything that differs between
    NED and SRTM tiles lives in these fields.

    Invariants:
        FP-1: latitude_interval < 0 (rows run southward)
        FP-2: longitude_interval > 0 (columns run eastward)
        FP-3: row_count >= 1/|latitude_interval|, and the difference is the
              overlap shared with neighboring tiles
        FP-4: column_count >= 1/|longitude_interval|, likewise
        FP-5: bytes_per_record == 2
    """

    name: str = Field(min_length=1)
    extension: str = Field(min_length=1)
    naming: NamingConvention
    row_count: int = Field(gt=1)
    column_count: int = Field(gt=1)
    bytes_per_record: int = 2
    latitude_interval: float  # degrees per row, negative
    longitude_interval: float  # degrees per column, positive
    is_big_endian: bool
    signed_samples: bool = True  # two's complement (SRTM) vs offset-encoded (NED)
    no_elevation_data_value: int
    add_to_elevation_result: float = 0.0
    elevation_result_multiplier: float = 1.0

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_geometry(self) -> "FormatProfile":
        if self.latitude_interval >= 0:
            raise InvalidProfileError(
                f"{self.name}: latitude_interval must be negative, "
                f"got {self.latitude_interval}"
            )
        if self.longitude_interval <= 0:
            raise InvalidProfileError(
                f"{self.name}: longitude_interval must be positive, "
                f"got {self.longitude_interval}"
            )
        if self.bytes_per_record != 2:
            raise InvalidProfileError(
                f"{self.name}: only 2-byte records are supported, "
                f"got {self.bytes_per_record}"
            )
        if self.extra_rows < -GRID_COUNT_TOLERANCE:
            raise InvalidProfileError(
                f"{self.name}: row_count {self.row_count} smaller than "
                f"1/|latitude_interval| ({self.rows_per_degree:.3f})"
            )
        if self.extra_columns < -GRID_COUNT_TOLERANCE:
            raise InvalidProfileError(
                f"{self.name}: column_count {self.column_count} smaller than "
                f"1/|longitude_interval| ({self.columns_per_degree:.3f})"
            )
        return self

    @property
    def rows_per_degree(self) -> float:
        return 1.0 / abs(self.latitude_interval)

    @property
    def columns_per_degree(self) -> float:
        return 1.0 / abs(self.longitude_interval)

    @property
    def extra_rows(self) -> float:
        """Rows of padding shared with the tiles to the north and south."""
        return self.row_count - self.rows_per_degree

    @property
    def extra_columns(self) -> float:
        """Columns of padding shared with the tiles to the east and west."""
        return self.column_count - self.columns_per_degree

    @property
    def tile_size_bytes(self) -> int:
        """Exact byte count of a well-formed tile file."""
        return self.row_count * self.column_count * self.bytes_per_record


# ---------------------------------------------------------------------------
# Sampling results
# ---------------------------------------------------------------------------
class GridPosition(BaseModel):
    """Location of a point inside a tile's grid (Value Object).

    Invariants:
        GPOS-1: 0 <= row_fraction < 1
        GPOS-2: 0 <= col_fraction < 1
        GPOS-3: offsets are NW < NE < SW < SE for a row-major grid
    """

    lower_row: int
    lower_col: int
    row_fraction: float = Field(ge=0, lt=1)
    col_fraction: float = Field(ge=0, lt=1)
    nw_offset: int
    ne_offset: int
    sw_offset: int
    se_offset: int

    model_config = ConfigDict(frozen=True)

    @property
    def higher_row(self) -> int:
        return self.lower_row + 1

    @property
    def higher_col(self) -> int:
        return self.lower_col + 1

    def offsets(self) -> tuple[int, int, int, int]:
        """Return corner byte offsets in (nw, ne, sw, se) order."""
        return (self.nw_offset, self.ne_offset, self.sw_offset, self.se_offset)


class CornerSamples(BaseModel):
    """The four raw samples surrounding a point (Value Object)."""

    nw: int
    ne: int
    sw: int
    se: int

    model_config = ConfigDict(frozen=True)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.nw, self.ne, self.sw, self.se)
