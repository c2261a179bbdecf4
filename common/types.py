"""
Value Types for Geodetic Positions, Projected Points and Tile Addresses.

This module defines the immutable dataclasses exchanged between the
geospatial and tiling packages. Units are part of every contract:

- Angles are RADIANS unless a name says otherwise.
- Heights and projected coordinates are METERS.
- Tile indices are non-negative integers, x eastward and y southward.

Design Rationale
----------------
All types are frozen dataclasses with structural equality. Operations return
new values instead of writing into caller-supplied output objects; a caller
that wants to "reuse" a value uses ``dataclasses.replace``. This keeps every
value safe to share between threads.
"""

from dataclasses import dataclass, replace
from numbers import Integral, Real
from typing import Any, ClassVar, Optional, Tuple, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from common.constants import DEGREES_PER_RADIAN, RADIANS_PER_DEGREE
from common.units import AngleLike, LengthLike, as_meters, as_radians, validate_units

if TYPE_CHECKING:
    from geospatial.ellipsoid import Ellipsoid


def require_number(name: str, value: Any) -> float:
    """Validate that ``value`` is a real number and return it as a float.

    Raises
    ------
    TypeError
        If ``value`` is missing, a bool, or not a real number.
    """
    if value is None:
        raise TypeError(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    return float(value)


def require_integer(name: str, value: Any) -> int:
    """Validate that ``value`` is an integer (bools excluded) and return it."""
    if value is None:
        raise TypeError(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return int(value)


def require_cartesian(name: str, value: Any) -> NDArray[np.float64]:
    """Validate a 3D Cartesian point and return it as a float64 array of shape (3,).

    Raises
    ------
    TypeError
        If ``value`` is missing or not numeric.
    ValueError
        If ``value`` does not hold exactly three components.
    """
    if value is None:
        raise TypeError(f"{name} is required")
    try:
        array = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise TypeError(f"{name} must be a numeric 3-vector") from e
    if array.shape != (3,):
        raise ValueError(f"{name} must have shape (3,), got {array.shape}")
    return array


@dataclass(frozen=True)
class GeodeticPosition:
    """A position defined by longitude, latitude and height.

    Attributes
    ----------
    longitude : float
        Longitude in RADIANS. Not normalized; callers wrap it into a
        consistent range before tile lookup.
    latitude : float
        Geodetic latitude in RADIANS.
    height : float
        Height above the ellipsoid in METERS.

    Examples
    --------
    >>> position = GeodeticPosition.from_degrees(-75.59777, 40.03883)
    >>> lon_deg, lat_deg = position.to_degrees()
    """
    longitude: float = 0.0  # radians
    latitude: float = 0.0  # radians
    height: float = 0.0  # meters above ellipsoid

    ZERO: ClassVar["GeodeticPosition"]

    def __post_init__(self):
        """Reject non-numeric fields and store plain floats."""
        for name in ("longitude", "latitude", "height"):
            object.__setattr__(self, name, require_number(name, getattr(self, name)))

    @classmethod
    def from_radians(
        cls,
        longitude: float,
        latitude: float,
        height: float = 0.0
    ) -> 'GeodeticPosition':
        """Create a position from longitude and latitude in radians."""
        return cls(longitude, latitude, height)

    @classmethod
    def from_degrees(
        cls,
        longitude: float,
        latitude: float,
        height: float = 0.0
    ) -> 'GeodeticPosition':
        """Create a position from longitude and latitude in degrees.

        Parameters
        ----------
        longitude : float
            Longitude in degrees.
        latitude : float
            Latitude in degrees.
        height : float, optional
            Height in meters.

        Returns
        -------
        GeodeticPosition
            Position with internally stored radians.
        """
        longitude = require_number("longitude", longitude)
        latitude = require_number("latitude", latitude)
        return cls.from_radians(
            longitude * RADIANS_PER_DEGREE,
            latitude * RADIANS_PER_DEGREE,
            height
        )

    @classmethod
    @validate_units({'longitude': 'radian', 'latitude': 'radian', 'height': 'meter'})
    def from_quantities(
        cls,
        longitude: AngleLike,
        latitude: AngleLike,
        height: LengthLike = 0.0
    ) -> 'GeodeticPosition':
        """Create a position from `pint` quantities.

        Bare numbers are read as radians and meters. Quantities may use any
        angle or length unit, e.g. ``Q_(30, 'degree')`` or ``Q_(2, 'km')``.
        """
        return cls(as_radians(longitude), as_radians(latitude), as_meters(height))

    @classmethod
    def from_cartesian(
        cls,
        cartesian: NDArray[np.float64],
        ellipsoid: Optional['Ellipsoid'] = None
    ) -> Optional['GeodeticPosition']:
        """Convert an ellipsoid-centred Cartesian point to a geodetic position.

        Returns
        -------
        GeodeticPosition or None
            None when the point is too close to the ellipsoid centre for the
            surface normal to be defined.
        """
        from geospatial.coordinate_models import cartesian_to_geodetic
        return cartesian_to_geodetic(cartesian, ellipsoid)

    def to_cartesian(self, ellipsoid: Optional['Ellipsoid'] = None) -> NDArray[np.float64]:
        """Convert this position to an ellipsoid-centred Cartesian point."""
        from geospatial.coordinate_models import geodetic_to_cartesian
        return geodetic_to_cartesian(self, ellipsoid)

    def to_degrees(self) -> Tuple[float, float]:
        """Return ``(longitude_degrees, latitude_degrees)`` for display."""
        return self.longitude * DEGREES_PER_RADIAN, self.latitude * DEGREES_PER_RADIAN

    def clone(self) -> 'GeodeticPosition':
        return replace(self)

    def equals_epsilon(self, other: Optional['GeodeticPosition'], epsilon: float) -> bool:
        """Compare componentwise within ``epsilon`` (inclusive)."""
        epsilon = require_number("epsilon", epsilon)
        if other is self:
            return True
        if other is None:
            return False
        return (
            abs(self.longitude - other.longitude) <= epsilon
            and abs(self.latitude - other.latitude) <= epsilon
            and abs(self.height - other.height) <= epsilon
        )

    def __str__(self) -> str:
        return f"({self.longitude}, {self.latitude}, {self.height})"


GeodeticPosition.ZERO = GeodeticPosition(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class PlanarPoint2:
    """A projected map coordinate in METERS."""
    x: float
    y: float

    def __post_init__(self):
        for name in ("x", "y"):
            object.__setattr__(self, name, require_number(name, getattr(self, name)))


@dataclass(frozen=True)
class PlanarPoint3:
    """A projected map coordinate in METERS with the height carried in ``z``."""
    x: float
    y: float
    z: float = 0.0

    def __post_init__(self):
        for name in ("x", "y", "z"):
            object.__setattr__(self, name, require_number(name, getattr(self, name)))


@dataclass(frozen=True)
class TileIndex:
    """Address of one tile in a quadtree tile pyramid.

    Attributes
    ----------
    x : int
        Column, increasing eastward from the west edge of the scheme.
    y : int
        Row, increasing southward; row 0 is the northernmost row.
    level : int
        Level-of-detail; zero is the least detailed.
    """
    x: int
    y: int
    level: int

    def __post_init__(self):
        for name in ("x", "y", "level"):
            value = require_integer(name, getattr(self, name))
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
            object.__setattr__(self, name, value)

    def parent(self) -> Optional['TileIndex']:
        """The tile one level up that contains this one, or None at level zero."""
        if self.level == 0:
            return None
        return TileIndex(self.x // 2, self.y // 2, self.level - 1)

    def children(self) -> Tuple['TileIndex', 'TileIndex', 'TileIndex', 'TileIndex']:
        """The four tiles one level down, ordered NW, NE, SW, SE."""
        x = self.x * 2
        y = self.y * 2
        level = self.level + 1
        return (
            TileIndex(x, y, level),
            TileIndex(x + 1, y, level),
            TileIndex(x, y + 1, level),
            TileIndex(x + 1, y + 1, level),
        )
