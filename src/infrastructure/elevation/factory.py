"""Build an ElevationResolver backed by tile directories on disk."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from domain.elevation.profiles import PRIORITY
from domain.elevation.services import ElevationResolver
from domain.elevation.value_objects import FormatProfile

from .config import DataDirectories
from .tile_cache import TileCache
from .tile_file import TileFileRepository

logger = logging.getLogger(__name__)


def build_resolver(
    directories: DataDirectories,
    max_open_tiles: int | None = None,
    profiles: Sequence[FormatProfile] = PRIORITY,
) -> ElevationResolver:
    """Create a resolver with one owned TileCache per data source.

    Every directory is validated before the resolver exists, so a missing
    directory fails here and never at query time.

    Args:
        directories: Tile directory per source
        max_open_tiles: Optional LRU bound on open handles, per source
        profiles: Sources to use, highest priority first

    Raises:
        ConfigurationError: If any configured directory does not exist
    """
    repositories = [
        TileFileRepository(directories.for_source(profile.name), profile)
        for profile in profiles
    ]
    sources = [
        (repository.profile, TileCache(repository, max_open_tiles=max_open_tiles))
        for repository in repositories
    ]
    logger.debug(
        "Elevation resolver ready: %s",
        ", ".join(profile.name for profile, _ in sources),
    )
    return ElevationResolver(sources)
