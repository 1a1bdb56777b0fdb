"""Tests for ElevationResolver: priority order, fallback, batch updates.

Most tests use the small profiles with hand-checkable gradient tiles. The
end-to-end tests at the bottom write full-size constant tiles so the real
format profiles and directory layout are exercised.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from domain.elevation.errors import ConfigurationError
from domain.elevation.profiles import NED2, SRTM3
from domain.elevation.services import ElevationResolver, sample_elevation
from domain.elevation.value_objects import Coordinate
from infrastructure.elevation import (
    DataDirectories,
    DevicePoint,
    TileCache,
    TileFileRepository,
    build_resolver,
)
from shared.tile_builders import constant_grid, gradient_grid, write_tile

POINT = Coordinate(latitude=10.5, longitude=20.25)
# small_ned: fractions (0.5, 0.5) over (2074, 2075, 2084, 2085) -> 2079.5 raw
NED_EXPECTED = (2079.5 - 1000) * 0.1
# small_srtm: exactly on grid cell (6, 3) -> 1063
SRTM_EXPECTED = 1063.0


class _Handle:
    def __init__(self, data: bytes, name: str) -> None:
        self.data = data
        self.name = name

    def read_at(self, offset: int, size: int) -> bytes:
        return self.data[offset : offset + size]

    def close(self) -> None:
        pass


class SpySource:
    """TileSource over in-memory tiles that records every request."""

    def __init__(self, tiles: dict[str, bytes] | None = None) -> None:
        self.tiles = tiles or {}
        self.calls: list[str] = []
        self.closed = False

    def get_or_open(self, filename: str):
        self.calls.append(filename)
        if filename not in self.tiles:
            return None
        return _Handle(self.tiles[filename], filename)

    def close(self) -> None:
        self.closed = True


class CountingRepository:
    """Wraps a TileFileRepository and counts opens per filename."""

    def __init__(self, repository: TileFileRepository) -> None:
        self.repository = repository
        self.calls: list[str] = []

    def open_tile(self, filename: str):
        self.calls.append(filename)
        return self.repository.open_tile(filename)


def _ned_bytes(profile, overrides=None) -> bytes:
    grid = gradient_grid(profile, base=2000)
    for (row, col), value in (overrides or {}).items():
        grid[row, col] = value
    return grid.astype("<u2").tobytes()


def _srtm_bytes(profile) -> bytes:
    return gradient_grid(profile).astype(">i2").tobytes()


# ===========================================================================
# Construction
# ===========================================================================
def test_requires_at_least_one_source():
    with pytest.raises(ValueError, match="At least one"):
        ElevationResolver([])


def test_rejects_duplicate_source_names(small_srtm):
    with pytest.raises(ValueError, match="Duplicate"):
        ElevationResolver([(small_srtm, SpySource()), (small_srtm, SpySource())])


# ===========================================================================
# Priority and fallback
# ===========================================================================
def test_first_source_with_data_wins_and_later_sources_untouched(small_ned, small_srtm):
    ned = SpySource({"N10E020.ele": _ned_bytes(small_ned)})
    srtm = SpySource({"N10E020.hgt": _srtm_bytes(small_srtm)})
    resolver = ElevationResolver([(small_ned, ned), (small_srtm, srtm)])

    assert resolver.get_elevation(POINT) == pytest.approx(NED_EXPECTED)
    assert ned.calls == ["N10E020.ele"]
    assert srtm.calls == []


def test_falls_back_when_tile_absent(small_ned, small_srtm):
    ned = SpySource()
    srtm = SpySource({"N10E020.hgt": _srtm_bytes(small_srtm)})
    resolver = ElevationResolver([(small_ned, ned), (small_srtm, srtm)])

    assert resolver.get_elevation(POINT) == SRTM_EXPECTED
    assert ned.calls == ["N10E020.ele"]
    assert srtm.calls == ["N10E020.hgt"]


def test_falls_back_when_corners_unrecoverable(small_ned, small_srtm):
    # NW (7, 4) and NE (7, 5) both no-data: nothing to recover them from
    ned = SpySource(
        {"N10E020.ele": _ned_bytes(small_ned, {(7, 4): 65535, (7, 5): 65535})}
    )
    srtm = SpySource({"N10E020.hgt": _srtm_bytes(small_srtm)})
    resolver = ElevationResolver([(small_ned, ned), (small_srtm, srtm)])

    assert resolver.get_elevation(POINT) == SRTM_EXPECTED


def test_single_no_data_corner_recovered_without_fallback(small_ned, small_srtm):
    # NW recovered as trunc((NE + SW) / 2) = trunc((2075 + 2084) / 2) = 2079
    ned = SpySource({"N10E020.ele": _ned_bytes(small_ned, {(7, 4): 65535})})
    srtm = SpySource({"N10E020.hgt": _srtm_bytes(small_srtm)})
    resolver = ElevationResolver([(small_ned, ned), (small_srtm, srtm)])

    expected = ((2079 + 2075 + 2084 + 2085) / 4 - 1000) * 0.1
    assert resolver.get_elevation(POINT) == pytest.approx(expected, abs=1e-3)
    assert srtm.calls == []


def test_no_data_anywhere_returns_none(small_ned, small_srtm):
    resolver = ElevationResolver([(small_ned, SpySource()), (small_srtm, SpySource())])
    assert resolver.get_elevation(POINT) is None


def test_truncated_tile_read_is_no_data(small_srtm):
    # Handle serves short reads: rejected as an invalid tile, surfaced as no data
    source = SpySource({"N10E020.hgt": b"\x00" * 10})
    assert sample_elevation(small_srtm, source, POINT) is None


def test_get_elevation_at_accepts_floats(small_srtm):
    resolver = ElevationResolver(
        [(small_srtm, SpySource({"N10E020.hgt": _srtm_bytes(small_srtm)}))]
    )
    assert resolver.get_elevation_at(10.5, 20.25) == SRTM_EXPECTED
    with pytest.raises(ValueError):
        resolver.get_elevation_at(91.0, 0.0)


# ===========================================================================
# Idempotence and tile reuse
# ===========================================================================
def test_repeat_queries_identical_and_tile_opened_once(tmp_path, small_srtm):
    write_tile(tmp_path, small_srtm, "N10E020.hgt", gradient_grid(small_srtm))
    opener = CountingRepository(TileFileRepository(tmp_path, small_srtm))
    cache = TileCache(opener)
    resolver = ElevationResolver([(small_srtm, cache)])

    first = resolver.get_elevation(POINT)
    second = resolver.get_elevation(POINT)
    nearby = resolver.get_elevation(Coordinate(latitude=10.55, longitude=20.3))

    assert first == second == SRTM_EXPECTED
    # row 5.4, col 3.6 on a linear surface: 1000 + 54 + 3.6
    assert nearby == pytest.approx(1057.6, abs=1e-3)
    assert opener.calls == ["N10E020.hgt"]


def test_absent_tile_looked_for_once(tmp_path, small_srtm):
    opener = CountingRepository(TileFileRepository(tmp_path, small_srtm))
    resolver = ElevationResolver([(small_srtm, TileCache(opener))])

    for _ in range(3):
        assert resolver.get_elevation(POINT) is None

    assert opener.calls == ["N10E020.hgt"]


# ===========================================================================
# Per-source queries
# ===========================================================================
def test_lookup_queries_named_source_only(small_ned, small_srtm):
    ned = SpySource({"N10E020.ele": _ned_bytes(small_ned)})
    srtm = SpySource({"N10E020.hgt": _srtm_bytes(small_srtm)})
    resolver = ElevationResolver([(small_ned, ned), (small_srtm, srtm)])

    assert resolver.lookup("small_srtm", POINT) == SRTM_EXPECTED
    assert ned.calls == []
    with pytest.raises(KeyError):
        resolver.lookup("ASTER", POINT)


def test_elevations_by_source_queries_all(small_ned, small_srtm):
    ned = SpySource({"N10E020.ele": _ned_bytes(small_ned)})
    srtm = SpySource()
    resolver = ElevationResolver([(small_ned, ned), (small_srtm, srtm)])

    result = resolver.elevations_by_source(POINT)

    assert list(result) == ["SMALL_NED", "SMALL_SRTM"]
    assert result["SMALL_NED"] == pytest.approx(NED_EXPECTED)
    assert result["SMALL_SRTM"] is None
    assert srtm.calls == ["N10E020.hgt"]


# ===========================================================================
# Batch update
# ===========================================================================
def test_update_elevations_in_place(small_srtm):
    resolver = ElevationResolver(
        [(small_srtm, SpySource({"N10E020.hgt": _srtm_bytes(small_srtm)}))]
    )
    points = [
        DevicePoint(latitude=Decimal("10.5"), longitude=Decimal("20.25")),
        DevicePoint(latitude=None, longitude=Decimal("20.25")),
        DevicePoint(latitude=Decimal("50.5"), longitude=Decimal("20.25")),  # no tile
        DevicePoint(
            latitude=Decimal("95"), longitude=Decimal("20.25"), altitude_calculated=1
        ),
    ]

    result = resolver.update_elevations(points)

    assert result is points
    assert points[0].altitude_calculated == Decimal("1063.0")
    assert points[1].altitude_calculated is None
    assert points[2].altitude_calculated is None
    # Invalid coordinates are skipped, existing values left as they were
    assert points[3].altitude_calculated == Decimal("1")


def test_update_elevations_empty_list(small_srtm):
    resolver = ElevationResolver([(small_srtm, SpySource())])
    assert resolver.update_elevations([]) == []


# ===========================================================================
# Teardown
# ===========================================================================
def test_close_closes_every_source(small_ned, small_srtm):
    ned, srtm = SpySource(), SpySource()
    with ElevationResolver([(small_ned, ned), (small_srtm, srtm)]):
        pass
    assert ned.closed and srtm.closed


# ===========================================================================
# End to end over a data root
# ===========================================================================
RALEIGH = Coordinate(latitude=35.9297645, longitude=-78.5790372)


@pytest.fixture
def data_root(tmp_path):
    for name in ("NED1", "NED2", "SRTM1", "SRTM3"):
        (tmp_path / name).mkdir()
    return tmp_path


def test_build_resolver_missing_directory(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        build_resolver(DataDirectories.from_root(tmp_path))
    assert exc_info.value.source == "NED1"


def test_end_to_end_prefers_ned2_over_srtm3(data_root):
    # NED2 names tiles by their northwest corner
    write_tile(data_root / "NED2", NED2, "N36W079.ele", constant_grid(NED2, 1794))
    write_tile(data_root / "SRTM3", SRTM3, "N35W079.hgt", constant_grid(SRTM3, 79))

    with build_resolver(DataDirectories.from_root(data_root)) as resolver:
        assert resolver.get_elevation(RALEIGH) == pytest.approx(79.4)
        by_source = resolver.elevations_by_source(RALEIGH)

    assert by_source["NED1"] is None
    assert by_source["NED2"] == pytest.approx(79.4)
    assert by_source["SRTM1"] is None
    assert by_source["SRTM3"] == pytest.approx(79.0)


def test_end_to_end_falls_back_to_srtm3(data_root):
    write_tile(data_root / "SRTM3", SRTM3, "N35W079.hgt", constant_grid(SRTM3, 79))

    with build_resolver(DataDirectories.from_root(data_root)) as resolver:
        assert resolver.get_elevation(RALEIGH) == 79.0
        # Outside every tile
        assert resolver.get_elevation_at(10.0, 10.0) is None


def test_end_to_end_wrong_size_tile_is_no_data(data_root):
    (data_root / "SRTM3" / "N35W079.hgt").write_bytes(b"\x00" * 100)

    with build_resolver(DataDirectories.from_root(data_root)) as resolver:
        assert resolver.get_elevation(RALEIGH) is None
