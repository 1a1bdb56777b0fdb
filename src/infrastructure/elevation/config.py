"""Data directory configuration.

One directory per data source. Directories are only described here; existence
is checked when the resolver is built (see factory.build_resolver).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from domain.elevation.errors import ConfigurationError

ENV_PREFIX = "GEO_ELEVATION_"
ENV_DATA_ROOT = f"{ENV_PREFIX}DATA_ROOT"

# Source name -> field name, in priority order
SOURCE_FIELDS: dict[str, str] = {
    "NED1": "ned1",
    "NED2": "ned2",
    "SRTM1": "srtm1",
    "SRTM3": "srtm3",
}


class DataDirectories(BaseModel):
    """Where the tiles of each data source live."""

    ned1: Path
    ned2: Path
    srtm1: Path
    srtm3: Path

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_root(cls, root: Path | str) -> "DataDirectories":
        """Use ``root/NED1``, ``root/NED2``, ``root/SRTM1`` and ``root/SRTM3``."""
        base = Path(root).expanduser()
        return cls(**{field: base / name for name, field in SOURCE_FIELDS.items()})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DataDirectories":
        """Read ``GEO_ELEVATION_<SOURCE>_DIR`` variables.

        Sources without their own variable fall back to a subdirectory of
        ``GEO_ELEVATION_DATA_ROOT``.

        Raises:
            ConfigurationError: If a source has neither its own variable nor
                a data root to fall back on
        """
        env = os.environ if environ is None else environ
        root = env.get(ENV_DATA_ROOT)
        values: dict[str, Path] = {}
        for name, field in SOURCE_FIELDS.items():
            explicit = env.get(f"{ENV_PREFIX}{name}_DIR")
            if explicit:
                values[field] = Path(explicit).expanduser()
            elif root:
                values[field] = Path(root).expanduser() / name
            else:
                raise ConfigurationError(name, f"<unset: {ENV_PREFIX}{name}_DIR>")
        return cls(**values)

    def for_source(self, name: str) -> Path:
        """Return the directory of the named source."""
        return getattr(self, SOURCE_FIELDS[name.upper()])
