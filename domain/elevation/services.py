"""Elevation Bounded Context - Domain Services.

Resolves elevations across data sources in priority order.
NO file I/O here - tiles are obtained through the TileSource port, implemented
by infrastructure adapters under `src/infrastructure/elevation/`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TypeVar

from domain.elevation.addressing import tile_name
from domain.elevation.errors import NoElevationDataError
from domain.elevation.interpolation import interpolate_elevation
from domain.elevation.repositories import ElevationPoint, TileSource
from domain.elevation.sampling import grid_position, read_corners
from domain.elevation.value_objects import Coordinate, FormatProfile

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=ElevationPoint)


# ---------------------------------------------------------------------------
# Single-source lookup
# ---------------------------------------------------------------------------
def sample_elevation(
    profile: FormatProfile, source: TileSource, coord: Coordinate
) -> float | None:
    """Interpolate the elevation at ``coord`` from one data source.

    Returns:
        Elevation in meters, or None if the tile is unavailable or the
        surrounding samples cannot be recovered.
    """
    filename = tile_name(coord, profile)
    handle = source.get_or_open(filename)
    if handle is None:
        return None

    try:
        position = grid_position(profile, coord)
        corners = read_corners(handle, profile, position)
        return interpolate_elevation(profile, corners, position)
    except NoElevationDataError as e:
        logger.debug(
            "%s: no data in %s at (%.6f, %.6f): %s",
            profile.name,
            filename,
            coord.latitude,
            coord.longitude,
            e,
        )
        return None


# ---------------------------------------------------------------------------
# Main Service: ElevationResolver
# ---------------------------------------------------------------------------
class ElevationResolver:
    """Resolve ground elevation by trying data sources in priority order.

    The resolver owns its tile sources: ``close()`` (or leaving a ``with``
    block) releases every tile they hold open.

    Args:
        sources: (profile, tile source) pairs, highest priority first

    Example:
        >>> resolver = build_resolver(DataDirectories.from_root("/data/dem"))
        >>> resolver.get_elevation(Coordinate(latitude=35.93, longitude=-78.58))
        79.4
    """

    def __init__(self, sources: Sequence[tuple[FormatProfile, TileSource]]) -> None:
        if not sources:
            raise ValueError("At least one data source is required")
        names = [profile.name for profile, _ in sources]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate data source names: {names}")
        self._sources = tuple(sources)

    @property
    def profiles(self) -> tuple[FormatProfile, ...]:
        return tuple(profile for profile, _ in self._sources)

    def _source(self, name: str) -> tuple[FormatProfile, TileSource]:
        for profile, source in self._sources:
            if profile.name.upper() == name.upper():
                return profile, source
        raise KeyError(f"Unknown data source {name!r}")

    def get_elevation(self, coord: Coordinate) -> float | None:
        """Return the elevation from the first source that has data.

        No retries: each source is tried once. Repeat lookups of an absent
        tile are absorbed by the source's permanent missing marker.
        """
        for profile, source in self._sources:
            elevation = sample_elevation(profile, source, coord)
            if elevation is not None:
                return elevation
        return None

    def get_elevation_at(self, latitude: float, longitude: float) -> float | None:
        """Convenience wrapper over get_elevation for plain floats."""
        return self.get_elevation(Coordinate(latitude=latitude, longitude=longitude))

    def lookup(self, source_name: str, coord: Coordinate) -> float | None:
        """Return the elevation from one named source only."""
        profile, source = self._source(source_name)
        return sample_elevation(profile, source, coord)

    def elevations_by_source(self, coord: Coordinate) -> dict[str, float | None]:
        """Query every source (no short-circuit), keyed by source name."""
        return {
            profile.name: sample_elevation(profile, source, coord)
            for profile, source in self._sources
        }

    def update_elevations(self, points: list[P]) -> list[P]:
        """Fill ``altitude_calculated`` on every point that can be resolved.

        Points without both latitude and longitude, with out-of-range
        coordinates, or with no data at their location are left unmodified.
        The list is mutated in place and returned.
        """
        updated = 0
        for point in points:
            if point.latitude is None or point.longitude is None:
                continue
            try:
                coord = Coordinate(
                    latitude=float(point.latitude), longitude=float(point.longitude)
                )
            except ValueError as e:
                logger.warning("Skipping point with invalid coordinates: %s", e)
                continue

            elevation = self.get_elevation(coord)
            if elevation is None:
                continue
            point.altitude_calculated = elevation
            updated += 1

        logger.info("Updated elevation on %d of %d points", updated, len(points))
        return points

    def close(self) -> None:
        """Release every tile held open by the sources."""
        for _, source in self._sources:
            source.close()

    def __enter__(self) -> "ElevationResolver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
