"""Single source of truth for expected elevation fixtures.

This module defines the fixtures used by both:
- scripts/gen_fixtures.py (synthetic tile generation and verification)
- tests/elevation/test_reference_tiles.py (real-data checks, skipped when the
  real tiles are not present)

Location: shared/ (not tests/) to avoid scripts->tests dependency.
"""

from __future__ import annotations

from typing import NamedTuple


class ReferencePoint(NamedTuple):
    label: str
    latitude: float
    longitude: float
    tile: str  # SRTM tile expected to contain the point
    expected_m: float
    tolerance_m: float


# Known elevations from real SRTM tiles (not shipped; drop them into
# tests/fixtures/SRTM1/ or tests/fixtures/SRTM3/ to enable the checks).
REFERENCE_POINTS: list[ReferencePoint] = [
    ReferencePoint("Raleigh, NC", 35.9297645, -78.5790372, "N35W079.hgt", 79.4, 1.0),
    ReferencePoint(
        "Anchorage, AK", 61.218056, -149.900278, "N61W150.hgt", 35.966, 1.0
    ),
]

# Synthetic tiles written by scripts/gen_fixtures.py, per source directory.
# Both cover the Raleigh reference point under each source's naming convention.
# Sorted for deterministic comparison.
EXPECTED_SYNTHETIC_TILES: dict[str, list[str]] = {
    "NED1": sorted(["N35W079.ele"]),
    "NED2": sorted(["N36W079.ele"]),
    "SRTM1": sorted(["N35W079.hgt"]),
    "SRTM3": sorted(["N35W079.hgt"]),
}

# Raw sample value written everywhere in a synthetic tile; the calibrated
# elevation of every point is therefore constant per source.
SYNTHETIC_RAW_VALUE = 1794
