"""Pytest configuration for elevation tests.

Provides small format profiles (12 cells per degree) so tiles can be built in
a few hundred bytes, plus helpers for writing tiles and counting opens.

For full-size formats, tests use the real profiles from domain.elevation.profiles
with constant grids.
"""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from domain.elevation.errors import TileUnavailableError
from domain.elevation.value_objects import FormatProfile, NamingConvention


def get_fixtures_dir() -> Path:
    """Return path to tests/fixtures/ directory (real tiles, when present)."""
    return Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# Small profiles
# ---------------------------------------------------------------------------
@pytest.fixture
def small_srtm() -> FormatProfile:
    """SRTM-like: odd count, one row of overlap, big-endian signed."""
    return FormatProfile(
        name="SMALL_SRTM",
        extension="hgt",
        naming=NamingConvention.SOUTHWEST_CORNER,
        row_count=13,
        column_count=13,
        latitude_interval=-1.0 / 12.0,
        longitude_interval=1.0 / 12.0,
        is_big_endian=True,
        no_elevation_data_value=-32768,
    )


@pytest.fixture
def small_ned() -> FormatProfile:
    """NED-like: even count, four rows of overlap, little-endian unsigned."""
    return FormatProfile(
        name="SMALL_NED",
        extension="ele",
        naming=NamingConvention.SOUTHWEST_CORNER,
        row_count=16,
        column_count=16,
        latitude_interval=-1.0 / 12.0,
        longitude_interval=1.0 / 12.0,
        is_big_endian=False,
        signed_samples=False,
        no_elevation_data_value=65535,
        add_to_elevation_result=-1000,
        elevation_result_multiplier=0.1,
    )


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------
class BytesTileHandle:
    """In-memory TileHandle over a bytes buffer."""

    def __init__(self, data: bytes, name: str = "memory.hgt") -> None:
        self.data = data
        self.name = name
        self.closed = False
        self.reads: list[tuple[int, int]] = []

    def read_at(self, offset: int, size: int) -> bytes:
        self.reads.append((offset, size))
        return self.data[offset : offset + size]

    def close(self) -> None:
        self.closed = True


class CountingOpener:
    """TileOpener that records every open attempt.

    Filenames in ``available`` open to a fresh BytesTileHandle, everything
    else raises TileUnavailableError. ``delay`` widens race windows.
    """

    def __init__(self, available: set[str] | None = None, delay: float = 0.0) -> None:
        self.available = available or set()
        self.delay = delay
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def open_tile(self, filename: str) -> BytesTileHandle:
        with self._lock:
            self.calls.append(filename)
        if self.delay:
            time.sleep(self.delay)
        if filename not in self.available:
            raise TileUnavailableError(filename)
        return BytesTileHandle(b"\x00" * 64, filename)


@pytest.fixture
def counting_opener() -> type[CountingOpener]:
    return CountingOpener


@pytest.fixture
def bytes_handle() -> type[BytesTileHandle]:
    return BytesTileHandle
