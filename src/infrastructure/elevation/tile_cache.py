"""Tile cache implementing the TileSource port.

Maps filename -> open TileHandle or a permanent missing marker.

Thread Safety:
    ``_lock`` protects the entry map. Opening runs outside it under a
    per-filename lock, so concurrent callers asking for the same file wait for
    the single open attempt and share its outcome, while opens of different
    files proceed in parallel.

Lifetime:
    Entries live until ``close()``. With ``max_open_tiles`` set, the least
    recently used open handle is dropped from the cache (not closed) once the
    bound is exceeded, so callers already holding it can finish; missing
    markers are never evicted, so an absent tile is looked for on disk once.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Protocol

from domain.elevation.errors import InvalidTileError, TileUnavailableError
from domain.elevation.repositories import TileHandle

logger = logging.getLogger(__name__)


class TileOpener(Protocol):
    def open_tile(self, filename: str) -> TileHandle: ...


class _Missing:
    """Marker for a tile known to be unavailable."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


class TileCache:
    """Lazily opened, explicitly owned cache of tile handles.

    Args:
        opener: Adapter that opens a tile by filename (e.g. TileFileRepository)
        max_open_tiles: Optional LRU bound on open handles. None = unbounded.
    """

    def __init__(self, opener: TileOpener, max_open_tiles: int | None = None) -> None:
        if max_open_tiles is not None and max_open_tiles < 1:
            raise ValueError("max_open_tiles must be positive")
        self._opener = opener
        self._max_open = max_open_tiles
        self._entries: OrderedDict[str, TileHandle | _Missing] = OrderedDict()
        self._opening: dict[str, threading.Lock] = {}
        self._open_count = 0
        self._lock = threading.Lock()
        self._closed = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, filename: object) -> bool:
        with self._lock:
            return filename in self._entries

    def is_missing(self, filename: str) -> bool:
        """True if ``filename`` has been marked permanently unavailable."""
        with self._lock:
            return self._entries.get(filename) is MISSING

    @property
    def open_count(self) -> int:
        """Number of handles currently held open."""
        with self._lock:
            return self._open_count

    def _lookup(self, filename: str) -> TileHandle | _Missing | None:
        # Caller holds self._lock
        entry = self._entries.get(filename)
        if entry is not None and entry is not MISSING:
            self._entries.move_to_end(filename)
        return entry

    def get_or_open(self, filename: str) -> TileHandle | None:
        """Return the open handle for ``filename``, opening it on first use.

        Returns:
            The shared handle, or None if the tile is unavailable.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("TileCache is closed")
            entry = self._lookup(filename)
            if entry is None:
                key_lock = self._opening.setdefault(filename, threading.Lock())
        if entry is not None:
            return None if entry is MISSING else entry

        with key_lock:
            with self._lock:
                entry = self._lookup(filename)
            if entry is not None:
                # Another caller finished the open while we waited
                return None if entry is MISSING else entry

            outcome = self._open(filename)

            with self._lock:
                if self._closed:
                    if outcome is not MISSING:
                        outcome.close()
                    raise RuntimeError("TileCache is closed")
                self._entries[filename] = outcome
                self._opening.pop(filename, None)
                if outcome is not MISSING:
                    self._open_count += 1
                    self._evict_locked()

        return None if outcome is MISSING else outcome

    def _open(self, filename: str) -> TileHandle | _Missing:
        try:
            return self._opener.open_tile(filename)
        except InvalidTileError as e:
            logger.warning("Tile %s marked missing: %s", filename, e.reason)
        except TileUnavailableError:
            logger.info("Tile %s not found; marked missing", filename)
        return MISSING

    def _evict_locked(self) -> None:
        if self._max_open is None:
            return
        while self._open_count > self._max_open:
            for name, entry in self._entries.items():
                if entry is not MISSING:
                    break
            else:
                return
            # Not closed: callers already holding the handle keep reading it,
            # and the map is released once the last reference goes away
            del self._entries[name]
            self._open_count -= 1
            logger.debug("Evicted tile %s", name)

    def close(self) -> None:
        """Close every open handle and drop all entries."""
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
            self._open_count = 0
            self._closed = True
        for entry in entries:
            if entry is not MISSING:
                entry.close()

    def __enter__(self) -> "TileCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
