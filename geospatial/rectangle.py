"""
Geodetic and Native Rectangles.

A :class:`GeodeticRectangle` bounds a region in longitude and latitude
(radians). When ``east < west`` the rectangle crosses the antimeridian and
its width wraps through ±π.

A :class:`NativeRectangle` bounds a region in a tiling scheme's native linear
units: degrees for geographic schemes, projected meters for web-mercator.
The two are separate types so that radians and native units cannot be mixed
by accident.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

import numpy as np

from common.constants import (
    DEGREES_PER_RADIAN,
    EPSILON14,
    PI,
    PI_OVER_TWO,
    RADIANS_PER_DEGREE,
    TWO_PI,
)
from common.types import GeodeticPosition, require_number


@dataclass(frozen=True)
class GeodeticRectangle:
    """A longitude/latitude rectangle in RADIANS.

    Attributes
    ----------
    west, south, east, north : float
        Bounds in radians. ``east < west`` denotes a rectangle crossing the
        antimeridian.
    """
    west: float
    south: float
    east: float
    north: float

    MAX_VALUE: ClassVar["GeodeticRectangle"]

    def __post_init__(self):
        for name in ("west", "south", "east", "north"):
            object.__setattr__(self, name, require_number(name, getattr(self, name)))
        if self.south > self.north:
            raise ValueError(
                f"south ({self.south}) must not exceed north ({self.north})"
            )

    @classmethod
    def from_degrees(
        cls,
        west: float,
        south: float,
        east: float,
        north: float
    ) -> 'GeodeticRectangle':
        """Create a rectangle from bounds given in degrees."""
        return cls(
            require_number("west", west) * RADIANS_PER_DEGREE,
            require_number("south", south) * RADIANS_PER_DEGREE,
            require_number("east", east) * RADIANS_PER_DEGREE,
            require_number("north", north) * RADIANS_PER_DEGREE,
        )

    @property
    def is_wrapped(self) -> bool:
        """Whether the rectangle crosses the antimeridian."""
        return self.east < self.west

    @property
    def width(self) -> float:
        """East-west extent in radians, accounting for antimeridian wrap."""
        east = self.east
        if east < self.west:
            east += TWO_PI
        return east - self.west

    @property
    def height(self) -> float:
        return self.north - self.south

    def unwrap_longitude(self, longitude: float) -> float:
        """Shift ``longitude`` into the continuous span starting at ``west``.

        For a wrapped rectangle, longitudes west of the west edge (beyond a
        rounding tolerance) belong to the part east of the antimeridian and
        are moved up by a full turn. Unwrapped rectangles return the input.
        """
        if self.is_wrapped and longitude < self.west - EPSILON14:
            return longitude + TWO_PI
        return longitude

    def contains(self, position: GeodeticPosition) -> bool:
        """Whether ``position`` lies inside or on the boundary."""
        if position is None:
            raise TypeError("position is required")
        longitude = self.unwrap_longitude(position.longitude)
        latitude = position.latitude
        west = self.west
        east = self.east + TWO_PI if self.is_wrapped else self.east

        return (
            (longitude > west or abs(longitude - west) <= EPSILON14)
            and (longitude < east or abs(longitude - east) <= EPSILON14)
            and self.south <= latitude <= self.north
        )

    def southwest(self) -> GeodeticPosition:
        return GeodeticPosition(self.west, self.south, 0.0)

    def northeast(self) -> GeodeticPosition:
        return GeodeticPosition(self.east, self.north, 0.0)

    def northwest(self) -> GeodeticPosition:
        return GeodeticPosition(self.west, self.north, 0.0)

    def southeast(self) -> GeodeticPosition:
        return GeodeticPosition(self.east, self.south, 0.0)

    def center(self) -> GeodeticPosition:
        """Centre point, with longitude wrapped back into [-π, π]."""
        longitude = self.west + self.width * 0.5
        if longitude > PI:
            longitude -= TWO_PI
        return GeodeticPosition(longitude, (self.south + self.north) * 0.5, 0.0)

    def to_degrees(self) -> 'NativeRectangle':
        """Same bounds expressed in degrees."""
        return NativeRectangle(
            self.west * DEGREES_PER_RADIAN,
            self.south * DEGREES_PER_RADIAN,
            self.east * DEGREES_PER_RADIAN,
            self.north * DEGREES_PER_RADIAN,
        )

    def equals_epsilon(self, other: Optional['GeodeticRectangle'], epsilon: float) -> bool:
        """Compare bounds within ``epsilon`` (inclusive)."""
        epsilon = require_number("epsilon", epsilon)
        if other is self:
            return True
        if other is None:
            return False
        return bool(np.all(np.abs(
            np.array([self.west, self.south, self.east, self.north])
            - np.array([other.west, other.south, other.east, other.north])
        ) <= epsilon))


GeodeticRectangle.MAX_VALUE = GeodeticRectangle(-PI, -PI_OVER_TWO, PI, PI_OVER_TWO)


@dataclass(frozen=True)
class NativeRectangle:
    """A rectangle in a tiling scheme's native units (degrees or meters)."""
    west: float
    south: float
    east: float
    north: float

    def __post_init__(self):
        for name in ("west", "south", "east", "north"):
            object.__setattr__(self, name, require_number(name, getattr(self, name)))

    @property
    def width(self) -> float:
        return self.east - self.west

    @property
    def height(self) -> float:
        return self.north - self.south

    def equals_epsilon(self, other: Optional['NativeRectangle'], epsilon: float) -> bool:
        """Compare bounds within ``epsilon`` (inclusive)."""
        epsilon = require_number("epsilon", epsilon)
        if other is self:
            return True
        if other is None:
            return False
        return (
            abs(self.west - other.west) <= epsilon
            and abs(self.south - other.south) <= epsilon
            and abs(self.east - other.east) <= epsilon
            and abs(self.north - other.north) <= epsilon
        )
