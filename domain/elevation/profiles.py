"""Format profiles for the supported elevation data sources.

Pure data. Intervals are in degrees: 1 arc-second = 1/3600.
"""

from __future__ import annotations

from domain.elevation.value_objects import FormatProfile, NamingConvention

NED1 = FormatProfile(
    name="NED1",
    extension="ele",
    naming=NamingConvention.SOUTHWEST_CORNER,
    row_count=3612,
    column_count=3612,
    latitude_interval=-1.0 / 3600.0,  # 1 arc-second
    longitude_interval=1.0 / 3600.0,
    is_big_endian=False,
    signed_samples=False,
    no_elevation_data_value=65535,
    add_to_elevation_result=-1000,
    elevation_result_multiplier=0.1,
)

NED2 = FormatProfile(
    name="NED2",
    extension="ele",
    naming=NamingConvention.NORTHWEST_CORNER,
    row_count=1812,
    column_count=1812,
    latitude_interval=-1.0 / 1800.0,  # 2 arc-seconds
    longitude_interval=1.0 / 1800.0,
    is_big_endian=False,
    signed_samples=False,
    no_elevation_data_value=65535,
    add_to_elevation_result=-1000,
    elevation_result_multiplier=0.1,
)

SRTM1 = FormatProfile(
    name="SRTM1",
    extension="hgt",
    naming=NamingConvention.SOUTHWEST_CORNER,
    row_count=3601,
    column_count=3601,
    latitude_interval=-1.0 / 3600.0,  # 1 arc-second
    longitude_interval=1.0 / 3600.0,
    is_big_endian=True,
    no_elevation_data_value=-32768,
)

SRTM3 = FormatProfile(
    name="SRTM3",
    extension="hgt",
    naming=NamingConvention.SOUTHWEST_CORNER,
    row_count=1201,
    column_count=1201,
    latitude_interval=-1.0 / 1200.0,  # 3 arc-seconds
    longitude_interval=1.0 / 1200.0,
    is_big_endian=True,
    no_elevation_data_value=-32768,
)

# Finer resolution first
PRIORITY: tuple[FormatProfile, ...] = (NED1, NED2, SRTM1, SRTM3)

_BY_NAME = {profile.name: profile for profile in PRIORITY}


def profile_by_name(name: str) -> FormatProfile:
    """Return the built-in profile called ``name`` (case-insensitive)."""
    try:
        return _BY_NAME[name.upper()]
    except KeyError:
        raise KeyError(
            f"Unknown data source {name!r}; expected one of {sorted(_BY_NAME)}"
        ) from None
