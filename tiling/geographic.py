"""
Geographic (Equirectangular) Tiling Scheme.

Longitude and latitude map linearly to tile columns and rows, so tiles are
subdivided directly in radians. The native unit is degrees.
"""

from typing import Optional

from common.constants import (
    GEOGRAPHIC_LEVEL_ZERO_TILES_X,
    GEOGRAPHIC_LEVEL_ZERO_TILES_Y,
    PI,
    TWO_PI,
)
from common.logging_config import get_logger
from common.types import GeodeticPosition, TileIndex
from geospatial.ellipsoid import WGS84, Ellipsoid
from geospatial.projections import EquirectangularProjection
from geospatial.rectangle import GeodeticRectangle, NativeRectangle
from tiling.base import TilingScheme, tile_coordinate, validate_level

logger = get_logger(__name__)


class GeographicTilingScheme(TilingScheme):
    """Tiling scheme on an :class:`EquirectangularProjection`.

    Parameters
    ----------
    ellipsoid : Ellipsoid, optional
        The ellipsoid whose surface is tiled (default: WGS84).
    rectangle : GeodeticRectangle, optional
        The rectangle, in radians, covered by the scheme (default: the whole
        globe). May cross the antimeridian (``east < west``).
    number_of_level_zero_tiles_x : int
        Tiles in the X direction at level zero (default: 2).
    number_of_level_zero_tiles_y : int
        Tiles in the Y direction at level zero (default: 1).

    Examples
    --------
    >>> scheme = GeographicTilingScheme()
    >>> scheme.position_to_tile(GeodeticPosition(1.0, 0.5), 0)
    TileIndex(x=1, y=0, level=0)
    """

    def __init__(
        self,
        ellipsoid: Optional[Ellipsoid] = None,
        rectangle: Optional[GeodeticRectangle] = None,
        number_of_level_zero_tiles_x: int = GEOGRAPHIC_LEVEL_ZERO_TILES_X,
        number_of_level_zero_tiles_y: int = GEOGRAPHIC_LEVEL_ZERO_TILES_Y
    ):
        ellipsoid = WGS84 if ellipsoid is None else ellipsoid
        rectangle = GeodeticRectangle.MAX_VALUE if rectangle is None else rectangle
        super().__init__(
            ellipsoid,
            rectangle,
            EquirectangularProjection(ellipsoid),
            number_of_level_zero_tiles_x,
            number_of_level_zero_tiles_y
        )
        logger.debug(f"Created {self!r} covering {rectangle}")

    def rectangle_to_native(self, rectangle: GeodeticRectangle) -> NativeRectangle:
        """Express ``rectangle`` in degrees."""
        if not isinstance(rectangle, GeodeticRectangle):
            raise TypeError(
                f"rectangle must be a GeodeticRectangle, got {type(rectangle).__name__}"
            )
        return rectangle.to_degrees()

    def tile_to_native_rectangle(self, x: int, y: int, level: int) -> NativeRectangle:
        """Bounds of a tile in degrees."""
        return self.tile_to_rectangle(x, y, level).to_degrees()

    def tile_to_rectangle(self, x: int, y: int, level: int) -> GeodeticRectangle:
        """Bounds of a tile in radians.

        In a scheme crossing the antimeridian, tile edges beyond π are moved
        back by a full turn, so a tile straddling the antimeridian comes back
        as a wrapped rectangle.
        """
        x_tiles, y_tiles = self._validate_tile(x, y, level)
        rectangle = self._rectangle

        x_tile_width = rectangle.width / x_tiles
        west = x * x_tile_width + rectangle.west
        east = (x + 1) * x_tile_width + rectangle.west

        y_tile_height = rectangle.height / y_tiles
        north = rectangle.north - y * y_tile_height
        south = rectangle.north - (y + 1) * y_tile_height

        if rectangle.is_wrapped:
            if west > PI:
                west -= TWO_PI
            if east > PI:
                east -= TWO_PI

        return GeodeticRectangle(west, south, east, north)

    def position_to_tile(
        self,
        position: GeodeticPosition,
        level: int
    ) -> Optional[TileIndex]:
        """The tile containing ``position`` at ``level``, or None if outside."""
        level = validate_level(level)
        rectangle = self._rectangle
        if not rectangle.contains(position):
            logger.debug(f"Position {position} outside tiling scheme rectangle")
            return None

        x_tiles = self.tile_count_x(level)
        y_tiles = self.tile_count_y(level)

        x_tile_width = rectangle.width / x_tiles
        y_tile_height = rectangle.height / y_tiles

        longitude = rectangle.unwrap_longitude(position.longitude)

        x = tile_coordinate(longitude - rectangle.west, x_tile_width, x_tiles)
        y = tile_coordinate(rectangle.north - position.latitude, y_tile_height, y_tiles)
        return TileIndex(x, y, level)
