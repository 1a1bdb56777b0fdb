"""Geo Elevation Domain Layer.

This package contains the core logic organized by bounded contexts:
- elevation: Tile addressing, sampling, interpolation, source priority
"""

# Imports alphabetized per project style (isort)
from domain import elevation

__all__ = ["elevation"]
