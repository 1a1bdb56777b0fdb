#!/usr/bin/env python3
"""Generate a synthetic elevation data root for manual testing.

Writes one full-size tile per data source, each covering the Raleigh
reference point, in the exact byte layout of its format. Tiles are constant
synthetic surfaces - not real terrain data.

Usage:
    python scripts/gen_fixtures.py [OUTPUT_ROOT]

Then:
    geo-elevation lookup 35.9297645 -78.5790372 --data-root OUTPUT_ROOT

Output:
    OUTPUT_ROOT/{NED1,NED2,SRTM1,SRTM3}/<tile> (default tests/fixtures/synthetic)

Dependencies:
    This script imports from shared/ (not tests/) to avoid circular
    dependencies between scripts and tests packages.
"""

from __future__ import annotations

import sys
from pathlib import Path

from domain.elevation.profiles import PRIORITY
from shared.fixtures_expected import EXPECTED_SYNTHETIC_TILES, SYNTHETIC_RAW_VALUE
from shared.tile_builders import constant_grid, write_tile

DEFAULT_ROOT = Path(__file__).parent.parent / "tests" / "fixtures" / "synthetic"


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    root = Path(args[0]) if args else DEFAULT_ROOT
    print(f"Output root: {root}")

    for profile in PRIORITY:
        directory = root / profile.name
        for filename in EXPECTED_SYNTHETIC_TILES[profile.name]:
            path = write_tile(
                directory,
                profile,
                filename,
                constant_grid(profile, SYNTHETIC_RAW_VALUE),
            )
            print(f"  Created: {profile.name}/{path.name} ({path.stat().st_size}B)")

    # Verify generated tiles match the expected list exactly
    ok = True
    for source, expected in EXPECTED_SYNTHETIC_TILES.items():
        found = sorted(f.name for f in (root / source).iterdir() if f.is_file())
        if found != expected:
            print(f"ERROR: {source}: expected {expected}, found {found}")
            ok = False

    if not ok:
        print("\nUpdate shared/fixtures_expected.py to match generated tiles.")
        return 1
    print("\nAll synthetic tiles verified successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
