"""Elevation Bounded Context.

Responsible for ground elevation from gridded DEM tiles:
- Value Objects: Coordinate, FormatProfile, GridPosition, CornerSamples
- Profiles: NED1, NED2, SRTM1, SRTM3 (priority order)
- Services: tile addressing, sampling, interpolation, ElevationResolver
"""
