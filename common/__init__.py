"""
Common utilities and infrastructure for the geodesy and tiling packages.

This package provides foundational components used across all modules:
- Geodetic constants and tolerances
- Unit handling for angle and length quantities
- Value types for positions, projected points and tile addresses
- Logging infrastructure
"""

from common.constants import GeodeticConstants
from common.units import ureg, Q_, validate_units
from common.types import (
    GeodeticPosition,
    PlanarPoint2,
    PlanarPoint3,
    TileIndex,
)
from common.logging_config import get_logger

__all__ = [
    "GeodeticConstants",
    "ureg",
    "Q_",
    "validate_units",
    "GeodeticPosition",
    "PlanarPoint2",
    "PlanarPoint3",
    "TileIndex",
    "get_logger",
]
