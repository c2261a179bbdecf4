"""
Quadtree Tiling Scheme Interface.

A tiling scheme partitions a covered rectangle into a pyramid of tiles. At
level zero there are ``nx0 × ny0`` tiles; each further level doubles the
count along both axes. Tiles are addressed by column ``x`` (eastward from the
west edge) and row ``y`` (southward from the north edge).

Two implementations exist, chosen by the caller at construction time:

- :class:`tiling.geographic.GeographicTilingScheme` (equirectangular)
- :class:`tiling.web_mercator.WebMercatorTilingScheme` (web mercator)

Outcomes
--------
- A position outside the covered rectangle is an expected outcome:
  ``position_to_tile`` returns None.
- Invalid levels or tile coordinates are programmer errors and raise
  ``TypeError``/``ValueError`` immediately.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

import numpy as np

from common.constants import MAXIMUM_LEVEL
from common.types import GeodeticPosition, TileIndex, require_integer
from geospatial.ellipsoid import Ellipsoid
from geospatial.projections import MapProjection
from geospatial.rectangle import GeodeticRectangle, NativeRectangle


def validate_level(level) -> int:
    """Return ``level`` if it is an integer in ``[0, MAXIMUM_LEVEL]``.

    Raises
    ------
    TypeError
        If ``level`` is not an integer.
    ValueError
        If ``level`` is negative or deeper than MAXIMUM_LEVEL.
    """
    level = require_integer("level", level)
    if level < 0:
        raise ValueError(f"level must be non-negative, got {level}")
    if level > MAXIMUM_LEVEL:
        raise ValueError(f"level must not exceed {MAXIMUM_LEVEL}, got {level}")
    return level


def validate_level_zero_count(name: str, count) -> int:
    count = require_integer(name, count)
    if count < 1:
        raise ValueError(f"{name} must be at least 1, got {count}")
    return count


def tile_coordinate(distance: float, tile_size: float, tile_count: int) -> int:
    """Index of the tile containing ``distance`` measured from the first edge.

    The result is clamped into ``[0, tile_count - 1]`` so that a position
    exactly on the far edge resolves to the last tile and one within rounding
    of the near edge resolves to the first.
    """
    index = int(np.floor(distance / tile_size))
    if index >= tile_count:
        return tile_count - 1
    if index < 0:
        return 0
    return index


class TilingScheme(ABC):
    """Abstract base class for quadtree tiling schemes.

    Parameters
    ----------
    ellipsoid : Ellipsoid
        The ellipsoid whose surface is tiled.
    rectangle : GeodeticRectangle
        The rectangle, in radians, covered by the scheme.
    projection : MapProjection
        The projection defining the scheme's native coordinates.
    number_of_level_zero_tiles_x, number_of_level_zero_tiles_y : int
        Root fan-out of the tile tree.
    """

    def __init__(
        self,
        ellipsoid: Ellipsoid,
        rectangle: GeodeticRectangle,
        projection: MapProjection,
        number_of_level_zero_tiles_x: int,
        number_of_level_zero_tiles_y: int
    ):
        if not isinstance(rectangle, GeodeticRectangle):
            raise TypeError(
                f"rectangle must be a GeodeticRectangle, got {type(rectangle).__name__}"
            )
        if not (rectangle.width > 0.0 and rectangle.height > 0.0):
            raise ValueError(
                f"rectangle must have positive width and height, got {rectangle}"
            )
        self._ellipsoid = ellipsoid
        self._rectangle = rectangle
        self._projection = projection
        self._number_of_level_zero_tiles_x = validate_level_zero_count(
            "number_of_level_zero_tiles_x", number_of_level_zero_tiles_x
        )
        self._number_of_level_zero_tiles_y = validate_level_zero_count(
            "number_of_level_zero_tiles_y", number_of_level_zero_tiles_y
        )

    @property
    def ellipsoid(self) -> Ellipsoid:
        """The ellipsoid tiled by this scheme."""
        return self._ellipsoid

    @property
    def rectangle(self) -> GeodeticRectangle:
        """The rectangle, in radians, covered by this scheme."""
        return self._rectangle

    @property
    def projection(self) -> MapProjection:
        """The map projection used by this scheme."""
        return self._projection

    @property
    def number_of_level_zero_tiles_x(self) -> int:
        return self._number_of_level_zero_tiles_x

    @property
    def number_of_level_zero_tiles_y(self) -> int:
        return self._number_of_level_zero_tiles_y

    def tile_count_x(self, level: int) -> int:
        """Number of tiles in the X direction at ``level``."""
        return self._number_of_level_zero_tiles_x << validate_level(level)

    def tile_count_y(self, level: int) -> int:
        """Number of tiles in the Y direction at ``level``."""
        return self._number_of_level_zero_tiles_y << validate_level(level)

    def tiles_at_level(self, level: int) -> Iterator[TileIndex]:
        """Iterate over every tile at ``level``, row by row from the north."""
        x_tiles = self.tile_count_x(level)
        y_tiles = self.tile_count_y(level)
        for y in range(y_tiles):
            for x in range(x_tiles):
                yield TileIndex(x, y, level)

    def _validate_tile(self, x, y, level) -> Tuple[int, int]:
        """Check a tile address and return the tile counts at its level."""
        x_tiles = self.tile_count_x(level)
        y_tiles = self.tile_count_y(level)
        x = require_integer("x", x)
        y = require_integer("y", y)
        if not 0 <= x < x_tiles:
            raise ValueError(f"x must be in [0, {x_tiles}) at level {level}, got {x}")
        if not 0 <= y < y_tiles:
            raise ValueError(f"y must be in [0, {y_tiles}) at level {level}, got {y}")
        return x_tiles, y_tiles

    @abstractmethod
    def rectangle_to_native(self, rectangle: GeodeticRectangle) -> NativeRectangle:
        """Transform a rectangle in radians to the scheme's native units."""
        pass

    @abstractmethod
    def tile_to_native_rectangle(self, x: int, y: int, level: int) -> NativeRectangle:
        """Bounds of a tile in the scheme's native units."""
        pass

    @abstractmethod
    def tile_to_rectangle(self, x: int, y: int, level: int) -> GeodeticRectangle:
        """Bounds of a tile in radians."""
        pass

    @abstractmethod
    def position_to_tile(
        self,
        position: GeodeticPosition,
        level: int
    ) -> Optional[TileIndex]:
        """The tile containing ``position`` at ``level``.

        Returns
        -------
        TileIndex or None
            None when the position lies outside the covered rectangle.
        """
        pass

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(ellipsoid={self._ellipsoid.name!r}, "
            f"level_zero={self._number_of_level_zero_tiles_x}x"
            f"{self._number_of_level_zero_tiles_y})"
        )
