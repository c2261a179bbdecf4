"""
Geodetic Constants for Coordinate Conversion and Tiling.

This module provides the reference ellipsoid dimensions, angular conversion
factors and numerical tolerances shared by the geospatial and tiling packages.
Ellipsoid constants carry their uncertainty and source so that downstream
code can trace where every number came from.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- EPSG:3857 (Pseudo-Mercator) definition, IOGP Geomatics Guidance Note 7-2
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The SI unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class GeodeticConstants:
    """Registry of constants used by the coordinate and tiling code.

    WGS84 Ellipsoid
    ---------------
    The equatorial and polar radii define the default ellipsoid. The polar
    radius is carried to full double precision so that Cartesian round trips
    stay below a micrometre.

    Numerical Tolerances
    --------------------
    The EPSILON values are the tolerance ladder used for convergence and
    boundary comparisons throughout the package.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    WGS84_EQUATORIAL_RADIUS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    WGS84_POLAR_RADIUS: Final[Constant] = Constant(
        value=6_356_752.3142451793,
        uncertainty=0.0001,
        unit="m",
        source="WGS84, NIMA TR8350.2 (derived)",
        description="Semi-minor axis (polar radius) of WGS84 ellipsoid"
    )

    WGS84_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid: f = (a - b) / a"
    )

    # Squared distance (in units of the scaled ellipsoid) inside which the
    # geodetic surface normal is considered undefined.
    DEFAULT_CENTER_TOLERANCE_SQUARED: Final[float] = 0.1


# =========================================================================
# Angular conversion
# =========================================================================

PI: Final[float] = np.pi
PI_OVER_TWO: Final[float] = np.pi / 2.0
TWO_PI: Final[float] = 2.0 * np.pi
RADIANS_PER_DEGREE: Final[float] = np.pi / 180.0
DEGREES_PER_RADIAN: Final[float] = 180.0 / np.pi

# =========================================================================
# Tolerance ladder
# =========================================================================

EPSILON12: Final[float] = 1e-12
EPSILON14: Final[float] = 1e-14

# =========================================================================
# Iteration and tiling limits
# =========================================================================

# Newton steps allowed when projecting onto the geodetic surface. Physically
# valid ellipsoids converge in fewer than ten.
SURFACE_PROJECTION_MAX_ITERATIONS: Final[int] = 64

# Deepest level-of-detail accepted by the tiling schemes.
MAXIMUM_LEVEL: Final[int] = 30

GEOGRAPHIC_LEVEL_ZERO_TILES_X: Final[int] = 2
GEOGRAPHIC_LEVEL_ZERO_TILES_Y: Final[int] = 1
WEB_MERCATOR_LEVEL_ZERO_TILES_X: Final[int] = 1
WEB_MERCATOR_LEVEL_ZERO_TILES_Y: Final[int] = 1


def sign(value: float) -> float:
    """Return -1.0, 0.0 or 1.0 according to the sign of ``value``."""
    if value > 0.0:
        return 1.0
    if value < 0.0:
        return -1.0
    return 0.0
