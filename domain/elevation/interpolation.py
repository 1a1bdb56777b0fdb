"""Corner recovery, bilinear interpolation and calibration.

Pure domain logic operating on decoded samples.
"""

from __future__ import annotations

from domain.elevation.errors import UnrecoverableNoDataError
from domain.elevation.value_objects import CornerSamples, FormatProfile, GridPosition

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
NO_DATA_SENTINEL = -32768  # canonical "no measurement" after normalization
MISSING_THRESHOLD = -999  # samples at or below this are treated as missing
INVALID_SAMPLE = -1
RESULT_DECIMALS = 3


def _is_missing(sample: int) -> bool:
    return sample <= MISSING_THRESHOLD


def _average(a: int, b: int) -> int:
    # Integer average truncated toward zero
    return int((a + b) / 2)


def normalize_no_data(corners: CornerSamples, no_data_value: int) -> CornerSamples:
    """Replace the source's own no-data value with NO_DATA_SENTINEL."""
    nw, ne, sw, se = (
        NO_DATA_SENTINEL if sample == no_data_value else sample
        for sample in corners.as_tuple()
    )
    return CornerSamples(nw=nw, ne=ne, sw=sw, se=se)


def recover_missing_corners(corners: CornerSamples) -> CornerSamples:
    """Fill an isolated missing corner from its two diagonal-adjacent neighbors.

    Single pass: every condition reads the ORIGINAL corner values, so a
    corner patched here never feeds the recovery of another corner.
    """
    nw, ne, sw, se = corners.as_tuple()
    new_nw, new_ne, new_sw, new_se = nw, ne, sw, se

    if _is_missing(nw) and not _is_missing(ne) and not _is_missing(sw):
        new_nw = _average(ne, sw)
    if _is_missing(ne) and not _is_missing(nw) and not _is_missing(se):
        new_ne = _average(nw, se)
    if _is_missing(sw) and not _is_missing(nw) and not _is_missing(se):
        new_sw = _average(nw, se)
    if _is_missing(se) and not _is_missing(ne) and not _is_missing(sw):
        new_se = _average(ne, sw)

    return CornerSamples(nw=new_nw, ne=new_ne, sw=new_sw, se=new_se)


def has_missing_corner(corners: CornerSamples) -> bool:
    """True if any corner is missing or holds the invalid marker (-1)."""
    return any(
        _is_missing(sample) or sample == INVALID_SAMPLE
        for sample in corners.as_tuple()
    )


def bilinear_blend(
    corners: CornerSamples, row_fraction: float, col_fraction: float
) -> float:
    """Proportionally average the four corners.

    Blends along the north and south edges first (directly N and S of the
    point), then between those two by the row fraction.
    """
    north = col_fraction * corners.ne + (1 - col_fraction) * corners.nw
    south = col_fraction * corners.se + (1 - col_fraction) * corners.sw
    return row_fraction * south + (1 - row_fraction) * north


def calibrate(elevation: float, profile: FormatProfile) -> float:
    """Convert an interpolated raw value to meters, rounded to millimeters."""
    elevation = (
        elevation + profile.add_to_elevation_result
    ) * profile.elevation_result_multiplier
    return round(elevation, RESULT_DECIMALS)


def interpolate_elevation(
    profile: FormatProfile, corners: CornerSamples, position: GridPosition
) -> float:
    """Turn four raw corner samples into a calibrated elevation in meters.

    Args:
        profile: Format the samples were decoded from
        corners: Raw decoded samples
        position: Fractional position of the point between the corners

    Returns:
        Elevation in meters

    Raises:
        UnrecoverableNoDataError: If a corner is still missing after recovery
    """
    corners = normalize_no_data(corners, profile.no_elevation_data_value)
    corners = recover_missing_corners(corners)

    # Interpolation needs four numbers
    if has_missing_corner(corners):
        raise UnrecoverableNoDataError(corners)

    elevation = bilinear_blend(corners, position.row_fraction, position.col_fraction)
    return calibrate(elevation, profile)
