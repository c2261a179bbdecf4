import math

import pytest

from common.types import GeodeticPosition, PlanarPoint2, TileIndex
from geospatial.ellipsoid import WGS84
from geospatial.projections import MAXIMUM_LATITUDE, WebMercatorProjection
from geospatial.rectangle import GeodeticRectangle, NativeRectangle
from tiling.web_mercator import WebMercatorTilingScheme

HALF_SIDE = math.pi * WGS84.maximum_radius


def test_defaults(web_mercator_scheme) -> None:
    assert web_mercator_scheme.number_of_level_zero_tiles_x == 1
    assert web_mercator_scheme.number_of_level_zero_tiles_y == 1
    assert isinstance(web_mercator_scheme.projection, WebMercatorProjection)
    assert web_mercator_scheme.rectangle_southwest_in_meters == PlanarPoint2(-HALF_SIDE, -HALF_SIDE)
    assert web_mercator_scheme.rectangle_northeast_in_meters == PlanarPoint2(HALF_SIDE, HALF_SIDE)


def test_default_rectangle_is_square_mercator_world(web_mercator_scheme) -> None:
    expected = GeodeticRectangle(-math.pi, -MAXIMUM_LATITUDE, math.pi, MAXIMUM_LATITUDE)

    assert web_mercator_scheme.rectangle.equals_epsilon(expected, 1e-12)


def test_level_zero_tile_is_the_whole_map(web_mercator_scheme) -> None:
    native = web_mercator_scheme.tile_to_native_rectangle(0, 0, 0)

    assert native == NativeRectangle(-HALF_SIDE, -HALF_SIDE, HALF_SIDE, HALF_SIDE)
    assert web_mercator_scheme.position_to_tile(GeodeticPosition.ZERO, 0) == TileIndex(0, 0, 0)


def test_level_one_northwest_tile(web_mercator_scheme) -> None:
    rectangle = web_mercator_scheme.tile_to_rectangle(0, 0, 1)

    assert rectangle.west == pytest.approx(-math.pi)
    assert rectangle.east == pytest.approx(0.0, abs=1e-15)
    assert rectangle.south == pytest.approx(0.0, abs=1e-15)
    assert rectangle.north == pytest.approx(MAXIMUM_LATITUDE)


def test_origin_belongs_to_the_southeast_quadrant(web_mercator_scheme) -> None:
    assert web_mercator_scheme.position_to_tile(GeodeticPosition.ZERO, 1) == TileIndex(1, 1, 1)


def test_native_tiles_partition_the_map(web_mercator_scheme) -> None:
    level = 2
    x_tiles = web_mercator_scheme.tile_count_x(level)
    y_tiles = web_mercator_scheme.tile_count_y(level)

    for y in range(y_tiles):
        for x in range(x_tiles):
            native = web_mercator_scheme.tile_to_native_rectangle(x, y, level)
            assert native.width == pytest.approx(2 * HALF_SIDE / x_tiles)
            if x + 1 < x_tiles:
                assert native.east == web_mercator_scheme.tile_to_native_rectangle(x + 1, y, level).west
            if y + 1 < y_tiles:
                assert native.south == web_mercator_scheme.tile_to_native_rectangle(x, y + 1, level).north


def test_latitude_rows_narrow_towards_the_pole(web_mercator_scheme) -> None:
    level = 3
    heights = [
        web_mercator_scheme.tile_to_rectangle(0, y, level).height
        for y in range(web_mercator_scheme.tile_count_y(level) // 2)
    ]

    assert heights == sorted(heights)


def test_positions_map_to_the_tile_containing_them(web_mercator_scheme) -> None:
    level = 3

    for tile in web_mercator_scheme.tiles_at_level(level):
        center = web_mercator_scheme.tile_to_rectangle(tile.x, tile.y, level).center()
        assert web_mercator_scheme.position_to_tile(center, level) == tile


def test_far_edges_resolve_to_last_tiles(web_mercator_scheme) -> None:
    level = 2
    rectangle = web_mercator_scheme.rectangle
    northeast = rectangle.northeast()
    southwest = rectangle.southwest()

    assert web_mercator_scheme.position_to_tile(northeast, level) == TileIndex(3, 0, level)
    assert web_mercator_scheme.position_to_tile(southwest, level) == TileIndex(0, 3, level)


def test_positions_beyond_the_mercator_band_are_outside(web_mercator_scheme) -> None:
    assert web_mercator_scheme.position_to_tile(GeodeticPosition.from_degrees(0.0, 89.0), 4) is None


def test_rectangle_to_native_projects_corners(web_mercator_scheme) -> None:
    native = web_mercator_scheme.rectangle_to_native(web_mercator_scheme.rectangle)

    assert native.west == pytest.approx(-HALF_SIDE)
    assert native.south == pytest.approx(-HALF_SIDE)
    assert native.east == pytest.approx(HALF_SIDE)
    assert native.north == pytest.approx(HALF_SIDE)
    with pytest.raises(TypeError):
        web_mercator_scheme.rectangle_to_native(None)


def test_custom_meter_corners() -> None:
    scheme = WebMercatorTilingScheme(
        rectangle_southwest_in_meters=(0.0, 0.0),
        rectangle_northeast_in_meters=PlanarPoint2(HALF_SIDE, HALF_SIDE),
    )

    assert scheme.rectangle.equals_epsilon(
        GeodeticRectangle(0.0, 0.0, math.pi, MAXIMUM_LATITUDE), 1e-12
    )
    assert scheme.position_to_tile(GeodeticPosition.from_degrees(45.0, 10.0), 1) == TileIndex(0, 1, 1)
    assert scheme.position_to_tile(GeodeticPosition.from_degrees(45.0, 80.0), 1) == TileIndex(0, 0, 1)
    assert scheme.position_to_tile(GeodeticPosition.from_degrees(-45.0, 10.0), 1) is None


def test_meter_corners_must_come_together() -> None:
    with pytest.raises(ValueError):
        WebMercatorTilingScheme(rectangle_southwest_in_meters=(0.0, 0.0))
    with pytest.raises(ValueError):
        WebMercatorTilingScheme(rectangle_northeast_in_meters=(1.0, 1.0))


def test_meter_corners_must_be_ordered() -> None:
    with pytest.raises(ValueError):
        WebMercatorTilingScheme(
            rectangle_southwest_in_meters=(10.0, 0.0),
            rectangle_northeast_in_meters=(0.0, 10.0),
        )
    with pytest.raises(TypeError):
        WebMercatorTilingScheme(
            rectangle_southwest_in_meters=(0.0, 0.0, 0.0),
            rectangle_northeast_in_meters=(1.0, 1.0),
        )


def test_level_and_tile_guards(web_mercator_scheme) -> None:
    with pytest.raises(ValueError):
        web_mercator_scheme.position_to_tile(GeodeticPosition.ZERO, -1)
    with pytest.raises(ValueError):
        web_mercator_scheme.tile_to_rectangle(0, 2, 1)
    with pytest.raises(TypeError):
        web_mercator_scheme.tile_to_native_rectangle(0, 0, 0.5)
