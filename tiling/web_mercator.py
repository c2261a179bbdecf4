"""
Web Mercator Tiling Scheme.

The tiling scheme used by most web map services. Tiles are subdivided
linearly in projected meters; geodetic tile bounds are obtained by
unprojecting the corners, so tile rows get narrower in latitude towards the
poles. The native unit is meters.
"""

from typing import Optional, Sequence, Union

from common.constants import (
    PI,
    WEB_MERCATOR_LEVEL_ZERO_TILES_X,
    WEB_MERCATOR_LEVEL_ZERO_TILES_Y,
)
from common.logging_config import get_logger
from common.types import GeodeticPosition, PlanarPoint2, TileIndex
from geospatial.ellipsoid import WGS84, Ellipsoid
from geospatial.projections import WebMercatorProjection
from geospatial.rectangle import GeodeticRectangle, NativeRectangle
from tiling.base import TilingScheme, tile_coordinate, validate_level

logger = get_logger(__name__)

MetersCorner = Union[PlanarPoint2, Sequence[float]]


def as_planar_point(name: str, value: MetersCorner) -> PlanarPoint2:
    """Accept a PlanarPoint2 or an ``(x, y)`` pair of meters."""
    if isinstance(value, PlanarPoint2):
        return value
    if value is None:
        raise TypeError(f"{name} is required")
    try:
        x, y = value
    except (TypeError, ValueError) as e:
        raise TypeError(f"{name} must be a PlanarPoint2 or an (x, y) pair") from e
    return PlanarPoint2(x, y)


class WebMercatorTilingScheme(TilingScheme):
    """Tiling scheme on a :class:`WebMercatorProjection`.

    Parameters
    ----------
    ellipsoid : Ellipsoid, optional
        The ellipsoid whose surface is tiled (default: WGS84).
    number_of_level_zero_tiles_x : int
        Tiles in the X direction at level zero (default: 1).
    number_of_level_zero_tiles_y : int
        Tiles in the Y direction at level zero (default: 1).
    rectangle_southwest_in_meters, rectangle_northeast_in_meters : PlanarPoint2, optional
        Corners of the covered area in projected meters. Give both or
        neither; by default the whole globe is covered in longitude and an
        equal distance in latitude, giving a square map of side 2πR.
    """

    def __init__(
        self,
        ellipsoid: Optional[Ellipsoid] = None,
        number_of_level_zero_tiles_x: int = WEB_MERCATOR_LEVEL_ZERO_TILES_X,
        number_of_level_zero_tiles_y: int = WEB_MERCATOR_LEVEL_ZERO_TILES_Y,
        rectangle_southwest_in_meters: Optional[MetersCorner] = None,
        rectangle_northeast_in_meters: Optional[MetersCorner] = None
    ):
        ellipsoid = WGS84 if ellipsoid is None else ellipsoid
        projection = WebMercatorProjection(ellipsoid)

        if rectangle_southwest_in_meters is not None and rectangle_northeast_in_meters is not None:
            southwest_in_meters = as_planar_point(
                "rectangle_southwest_in_meters", rectangle_southwest_in_meters
            )
            northeast_in_meters = as_planar_point(
                "rectangle_northeast_in_meters", rectangle_northeast_in_meters
            )
            if not (southwest_in_meters.x < northeast_in_meters.x
                    and southwest_in_meters.y < northeast_in_meters.y):
                raise ValueError(
                    "rectangle_southwest_in_meters must lie south-west of "
                    "rectangle_northeast_in_meters"
                )
        elif rectangle_southwest_in_meters is not None or rectangle_northeast_in_meters is not None:
            raise ValueError(
                "rectangle_southwest_in_meters and rectangle_northeast_in_meters "
                "must be given together"
            )
        else:
            semimajor_axis_times_pi = ellipsoid.maximum_radius * PI
            southwest_in_meters = PlanarPoint2(-semimajor_axis_times_pi, -semimajor_axis_times_pi)
            northeast_in_meters = PlanarPoint2(semimajor_axis_times_pi, semimajor_axis_times_pi)

        self._rectangle_southwest_in_meters = southwest_in_meters
        self._rectangle_northeast_in_meters = northeast_in_meters

        southwest = projection.unproject(southwest_in_meters)
        northeast = projection.unproject(northeast_in_meters)
        rectangle = GeodeticRectangle(
            southwest.longitude, southwest.latitude,
            northeast.longitude, northeast.latitude
        )

        super().__init__(
            ellipsoid,
            rectangle,
            projection,
            number_of_level_zero_tiles_x,
            number_of_level_zero_tiles_y
        )
        logger.debug(
            f"Created {self!r} covering {southwest_in_meters} to {northeast_in_meters}"
        )

    @property
    def rectangle_southwest_in_meters(self) -> PlanarPoint2:
        return self._rectangle_southwest_in_meters

    @property
    def rectangle_northeast_in_meters(self) -> PlanarPoint2:
        return self._rectangle_northeast_in_meters

    def rectangle_to_native(self, rectangle: GeodeticRectangle) -> NativeRectangle:
        """Express ``rectangle`` in projected meters via its corners."""
        if not isinstance(rectangle, GeodeticRectangle):
            raise TypeError(
                f"rectangle must be a GeodeticRectangle, got {type(rectangle).__name__}"
            )
        projection = self._projection
        southwest = projection.project(rectangle.southwest())
        northeast = projection.project(rectangle.northeast())
        return NativeRectangle(southwest.x, southwest.y, northeast.x, northeast.y)

    def tile_to_native_rectangle(self, x: int, y: int, level: int) -> NativeRectangle:
        """Bounds of a tile in projected meters."""
        x_tiles, y_tiles = self._validate_tile(x, y, level)
        southwest_in_meters = self._rectangle_southwest_in_meters
        northeast_in_meters = self._rectangle_northeast_in_meters

        x_tile_width = (northeast_in_meters.x - southwest_in_meters.x) / x_tiles
        west = southwest_in_meters.x + x * x_tile_width
        east = southwest_in_meters.x + (x + 1) * x_tile_width

        y_tile_height = (northeast_in_meters.y - southwest_in_meters.y) / y_tiles
        north = northeast_in_meters.y - y * y_tile_height
        south = northeast_in_meters.y - (y + 1) * y_tile_height

        return NativeRectangle(west, south, east, north)

    def tile_to_rectangle(self, x: int, y: int, level: int) -> GeodeticRectangle:
        """Bounds of a tile in radians, unprojected from its native corners."""
        native_rectangle = self.tile_to_native_rectangle(x, y, level)

        projection = self._projection
        southwest = projection.unproject(PlanarPoint2(native_rectangle.west, native_rectangle.south))
        northeast = projection.unproject(PlanarPoint2(native_rectangle.east, native_rectangle.north))

        return GeodeticRectangle(
            southwest.longitude, southwest.latitude,
            northeast.longitude, northeast.latitude
        )

    def position_to_tile(
        self,
        position: GeodeticPosition,
        level: int
    ) -> Optional[TileIndex]:
        """The tile containing ``position`` at ``level``, or None if outside."""
        level = validate_level(level)
        if not self._rectangle.contains(position):
            logger.debug(f"Position {position} outside tiling scheme rectangle")
            return None

        x_tiles = self.tile_count_x(level)
        y_tiles = self.tile_count_y(level)

        southwest_in_meters = self._rectangle_southwest_in_meters
        northeast_in_meters = self._rectangle_northeast_in_meters

        x_tile_width = (northeast_in_meters.x - southwest_in_meters.x) / x_tiles
        y_tile_height = (northeast_in_meters.y - southwest_in_meters.y) / y_tiles

        web_mercator_position = self._projection.project(position)
        distance_from_west = web_mercator_position.x - southwest_in_meters.x
        distance_from_north = northeast_in_meters.y - web_mercator_position.y

        x = tile_coordinate(distance_from_west, x_tile_width, x_tiles)
        y = tile_coordinate(distance_from_north, y_tile_height, y_tiles)
        return TileIndex(x, y, level)
