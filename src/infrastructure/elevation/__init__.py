"""Infrastructure adapters for the elevation bounded context.

This module provides the I/O side of elevation lookups: memory-mapped tile
files, the owned tile cache, directory configuration, the device point XML
format and the command line harness.

Adapters and the resolver factory are exported for simplified imports.
"""

from .config import DataDirectories
from .device_points import DevicePoint, read_device_points, write_device_points
from .factory import build_resolver
from .tile_cache import TileCache
from .tile_file import MemmapTileHandle, TileFileRepository

__all__ = [
    "DataDirectories",
    "DevicePoint",
    "MemmapTileHandle",
    "TileCache",
    "TileFileRepository",
    "build_resolver",
    "read_device_points",
    "write_device_points",
]
