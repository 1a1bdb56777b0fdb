"""Domain Port(s) for Elevation I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol


class TileHandle(Protocol):
    """An open, byte-addressable tile file.

    Reads are positioned: no cursor is shared between callers.
    """

    name: str  # tile filename, for diagnostics

    def read_at(self, offset: int, size: int) -> bytes:
        """Return exactly ``size`` bytes starting at ``offset``.

        Raises InvalidTileError if fewer bytes are available.
        """
        ...

    def close(self) -> None: ...


class TileSource(Protocol):
    """Port for obtaining tile handles by filename.

    Implementations live in infrastructure (e.g., TileCache over a directory).
    ``None`` means the tile is permanently unavailable.
    """

    def get_or_open(self, filename: str) -> TileHandle | None: ...

    def close(self) -> None: ...


class ElevationPoint(Protocol):
    """A track point whose calculated altitude can be filled in.

    Only these three attributes are touched; everything else on the record is
    passed through untouched.
    """

    latitude: float | Decimal | None
    longitude: float | Decimal | None
    altitude_calculated: float | Decimal | None
