"""Elevation Bounded Context - Error Hierarchy.

Custom exceptions for elevation lookups.

Only ConfigurationError escapes to callers of the resolver. Everything derived
from NoElevationDataError is absorbed per tile and surfaces as ``None``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from domain.elevation.value_objects import CornerSamples


class ElevationError(Exception):
    """Base error for elevation operations."""


class ConfigurationError(ElevationError):
    """A configured data directory does not exist.

    Attributes:
        source: Name of the data source (e.g. "NED1")
        directory: The offending directory
    """

    def __init__(self, source: str, directory: "Path | str") -> None:
        self.source = source
        self.directory = directory
        super().__init__(f"{source} data directory not found: {directory}")


class InvalidProfileError(ElevationError, ValueError):
    """Format profile geometry is inconsistent."""


# ---------------------------------------------------------------------------
# "No data" outcomes
# ---------------------------------------------------------------------------
class NoElevationDataError(ElevationError):
    """Base for failures that surface as "no data" to the caller."""


class TileUnavailableError(NoElevationDataError):
    """Tile file is absent on disk."""

    def __init__(self, filename: str, reason: str = "not found") -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Tile {filename} unavailable: {reason}")


class InvalidTileError(TileUnavailableError):
    """Tile file exists but cannot be used (size mismatch, permissions, I/O)."""


class UnrecoverableNoDataError(NoElevationDataError):
    """Interpolation corners are missing and could not be recovered.

    Attributes:
        corners: Corner samples after the recovery pass
    """

    def __init__(self, corners: "CornerSamples") -> None:
        self.corners = corners
        super().__init__(
            f"Unrecoverable corners (nw={corners.nw}, ne={corners.ne}, "
            f"sw={corners.sw}, se={corners.se})"
        )
