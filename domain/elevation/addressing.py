"""Tile addressing: coordinate -> tile filename.

Pure functions, no I/O.
"""

from __future__ import annotations

import math

from domain.elevation.value_objects import Coordinate, FormatProfile, NamingConvention


def _latitude_part(latitude: float, naming: NamingConvention) -> str:
    if naming is NamingConvention.NORTHWEST_CORNER:
        # One tile further north than the southwest convention
        if latitude >= 0:
            return f"N{math.ceil(latitude):02d}"
        return f"S{math.floor(abs(latitude)):02d}"
    if latitude >= 0:
        return f"N{math.floor(latitude):02d}"
    return f"S{math.ceil(abs(latitude)):02d}"


def _longitude_part(longitude: float) -> str:
    if longitude >= 0:
        return f"E{math.floor(longitude):03d}"
    return f"W{math.ceil(abs(longitude)):03d}"


def tile_filename(coord: Coordinate, naming: NamingConvention) -> str:
    """Return the tile basename (no extension) covering ``coord``.

    Example:
        >>> tile_filename(Coordinate(latitude=35.93, longitude=-78.58),
        ...               NamingConvention.SOUTHWEST_CORNER)
        'N35W079'
    """
    return _latitude_part(coord.latitude, naming) + _longitude_part(coord.longitude)


def tile_name(coord: Coordinate, profile: FormatProfile) -> str:
    """Return the full tile filename for ``coord`` under ``profile``."""
    return f"{tile_filename(coord, profile.naming)}.{profile.extension}"
