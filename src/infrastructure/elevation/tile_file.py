"""File-backed tiles for the TileSource port.

Lifecycle:
1) TileFileRepository validates its data directory at construction
2) open_tile() stats the file and checks the exact byte count for the format
3) The file is mapped read-only with numpy.memmap
4) read_at() slices the map: positioned, cursor-free, safe across threads
5) close() drops the map; the OS mapping is released when the last
   reference (including in-flight reads) goes away
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from domain.elevation.errors import (
    ConfigurationError,
    InvalidTileError,
    TileUnavailableError,
)
from domain.elevation.value_objects import FormatProfile

logger = logging.getLogger(__name__)


class MemmapTileHandle:
    """Read-only memory-mapped tile implementing the TileHandle port."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.name = self.path.name
        self._data: np.memmap | None = np.memmap(self.path, dtype=np.uint8, mode="r")
        self.size = int(self._data.shape[0])

    @property
    def closed(self) -> bool:
        return self._data is None

    def read_at(self, offset: int, size: int) -> bytes:
        data = self._data  # local reference keeps the map alive for this read
        if data is None:
            raise InvalidTileError(self.name, "handle is closed")
        if offset < 0 or offset + size > self.size:
            raise InvalidTileError(
                self.name,
                f"read of {size} bytes at offset {offset} outside "
                f"{self.size}-byte tile",
            )
        return data[offset : offset + size].tobytes()

    def close(self) -> None:
        self._data = None

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{self.size} bytes"
        return f"MemmapTileHandle({self.name!r}, {state})"


class TileFileRepository:
    """Opens tiles of one format from one directory.

    Raises:
        ConfigurationError: If ``directory`` does not exist
    """

    def __init__(self, directory: Path | str, profile: FormatProfile) -> None:
        path = Path(directory)
        if not path.is_dir():
            raise ConfigurationError(profile.name, path)
        self.directory = path
        self.profile = profile

    def open_tile(self, filename: str) -> MemmapTileHandle:
        """Open ``filename`` from the data directory.

        Raises:
            TileUnavailableError: File does not exist
            InvalidTileError: File exists but has the wrong size or cannot
                be read
        """
        path = self.directory / filename

        try:
            st = path.stat()
        except FileNotFoundError as e:
            raise TileUnavailableError(filename) from e
        except OSError as e:
            # Filename, errno and strerror only; no absolute paths
            raise InvalidTileError(
                filename, f"stat failed (errno={e.errno}, strerror={e.strerror})"
            ) from e

        expected = self.profile.tile_size_bytes
        if st.st_size != expected:
            raise InvalidTileError(
                filename,
                f"expected {expected} bytes for {self.profile.name}, "
                f"got {st.st_size}",
            )

        try:
            handle = MemmapTileHandle(path)
        except OSError as e:
            raise InvalidTileError(
                filename, f"open failed (errno={e.errno}, strerror={e.strerror})"
            ) from e

        logger.debug("%s: opened tile %s", self.profile.name, filename)
        return handle
