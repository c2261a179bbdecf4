import math

import numpy as np
import pytest

from common.constants import MAXIMUM_LEVEL
from common.types import GeodeticPosition, TileIndex
from geospatial.ellipsoid import WGS84
from geospatial.projections import EquirectangularProjection
from geospatial.rectangle import GeodeticRectangle, NativeRectangle
from tiling.geographic import GeographicTilingScheme


def test_defaults(geographic_scheme) -> None:
    assert geographic_scheme.ellipsoid is WGS84
    assert geographic_scheme.rectangle == GeodeticRectangle.MAX_VALUE
    assert isinstance(geographic_scheme.projection, EquirectangularProjection)
    assert geographic_scheme.number_of_level_zero_tiles_x == 2
    assert geographic_scheme.number_of_level_zero_tiles_y == 1


@pytest.mark.parametrize(("level", "x_tiles", "y_tiles"), [(0, 2, 1), (1, 4, 2), (5, 64, 32)])
def test_tile_counts_double_per_level(geographic_scheme, level, x_tiles, y_tiles) -> None:
    assert geographic_scheme.tile_count_x(level) == x_tiles
    assert geographic_scheme.tile_count_y(level) == y_tiles


def test_level_zero_lookup(geographic_scheme) -> None:
    assert geographic_scheme.position_to_tile(GeodeticPosition(1.0, 0.5), 0) == TileIndex(1, 0, 0)
    assert geographic_scheme.position_to_tile(GeodeticPosition(-1.0, -0.5), 0) == TileIndex(0, 0, 0)


def test_level_zero_tile_rectangles(geographic_scheme) -> None:
    west_half = geographic_scheme.tile_to_rectangle(0, 0, 0)
    east_half = geographic_scheme.tile_to_rectangle(1, 0, 0)

    assert west_half.equals_epsilon(GeodeticRectangle(-math.pi, -math.pi / 2, 0.0, math.pi / 2), 1e-15)
    assert east_half.equals_epsilon(GeodeticRectangle(0.0, -math.pi / 2, math.pi, math.pi / 2), 1e-15)


def test_row_zero_is_northernmost(geographic_scheme) -> None:
    top = geographic_scheme.tile_to_rectangle(0, 0, 1)
    bottom = geographic_scheme.tile_to_rectangle(0, 1, 1)

    assert top.north == pytest.approx(math.pi / 2)
    assert top.south == pytest.approx(0.0)
    assert bottom.north == pytest.approx(0.0)


def test_tiles_partition_the_scheme_rectangle(geographic_scheme) -> None:
    level = 3
    x_tiles = geographic_scheme.tile_count_x(level)
    y_tiles = geographic_scheme.tile_count_y(level)

    total_area = 0.0
    for y in range(y_tiles):
        for x in range(x_tiles):
            rectangle = geographic_scheme.tile_to_rectangle(x, y, level)
            total_area += rectangle.width * rectangle.height
            if x + 1 < x_tiles:
                neighbour = geographic_scheme.tile_to_rectangle(x + 1, y, level)
                assert rectangle.east == neighbour.west
            if y + 1 < y_tiles:
                below = geographic_scheme.tile_to_rectangle(x, y + 1, level)
                assert rectangle.south == below.north

    scheme_rectangle = geographic_scheme.rectangle
    assert total_area == pytest.approx(scheme_rectangle.width * scheme_rectangle.height)
    assert geographic_scheme.tile_to_rectangle(0, 0, level).west == scheme_rectangle.west
    assert geographic_scheme.tile_to_rectangle(x_tiles - 1, y_tiles - 1, level).east == pytest.approx(
        scheme_rectangle.east
    )


def test_positions_map_to_the_tile_containing_them(geographic_scheme) -> None:
    rng = np.random.default_rng(7)
    level = 4

    for tile in geographic_scheme.tiles_at_level(level):
        rectangle = geographic_scheme.tile_to_rectangle(tile.x, tile.y, level)
        assert geographic_scheme.position_to_tile(rectangle.center(), level) == tile
        fx, fy = rng.uniform(0.01, 0.99, size=2)
        position = GeodeticPosition(
            rectangle.west + fx * rectangle.width,
            rectangle.south + fy * rectangle.height,
        )
        assert geographic_scheme.position_to_tile(position, level) == tile


def test_far_edges_resolve_to_last_tiles(geographic_scheme) -> None:
    level = 2

    northeast = geographic_scheme.position_to_tile(GeodeticPosition(math.pi, math.pi / 2), level)
    southwest = geographic_scheme.position_to_tile(GeodeticPosition(-math.pi, -math.pi / 2), level)

    assert northeast == TileIndex(7, 0, level)
    assert southwest == TileIndex(0, 3, level)


def test_outside_position_returns_none() -> None:
    scheme = GeographicTilingScheme(rectangle=GeodeticRectangle.from_degrees(0.0, 0.0, 90.0, 45.0))

    assert scheme.position_to_tile(GeodeticPosition.from_degrees(-1.0, 10.0), 3) is None
    assert scheme.position_to_tile(GeodeticPosition.from_degrees(10.0, 50.0), 0) is None


def test_custom_rectangle_and_level_zero_counts() -> None:
    scheme = GeographicTilingScheme(
        rectangle=GeodeticRectangle.from_degrees(0.0, 0.0, 90.0, 45.0),
        number_of_level_zero_tiles_x=3,
        number_of_level_zero_tiles_y=1,
    )

    assert scheme.tile_count_x(1) == 6
    native = scheme.tile_to_native_rectangle(1, 0, 0)
    assert native.equals_epsilon(NativeRectangle(30.0, 0.0, 60.0, 45.0), 1e-9)
    assert scheme.position_to_tile(GeodeticPosition.from_degrees(45.0, 20.0), 0) == TileIndex(1, 0, 0)


def test_rectangle_to_native_is_degrees(geographic_scheme) -> None:
    native = geographic_scheme.rectangle_to_native(GeodeticRectangle.MAX_VALUE)

    assert native.equals_epsilon(NativeRectangle(-180.0, -90.0, 180.0, 90.0), 1e-12)
    with pytest.raises(TypeError):
        geographic_scheme.rectangle_to_native((0.0, 0.0, 1.0, 1.0))


@pytest.mark.parametrize("level", [-1, MAXIMUM_LEVEL + 1])
def test_out_of_range_levels_are_rejected(geographic_scheme, level) -> None:
    with pytest.raises(ValueError):
        geographic_scheme.tile_count_x(level)
    with pytest.raises(ValueError):
        geographic_scheme.position_to_tile(GeodeticPosition.ZERO, level)
    with pytest.raises(ValueError):
        geographic_scheme.tile_to_rectangle(0, 0, level)


@pytest.mark.parametrize("level", [None, 1.5, True, "2"])
def test_non_integer_levels_are_rejected(geographic_scheme, level) -> None:
    with pytest.raises(TypeError):
        geographic_scheme.tile_count_y(level)


def test_numpy_integer_levels_are_accepted(geographic_scheme) -> None:
    assert geographic_scheme.tile_count_x(np.int64(3)) == 16


def test_out_of_range_tiles_are_rejected(geographic_scheme) -> None:
    with pytest.raises(ValueError):
        geographic_scheme.tile_to_rectangle(2, 0, 0)
    with pytest.raises(ValueError):
        geographic_scheme.tile_to_rectangle(0, -1, 0)
    with pytest.raises(ValueError):
        geographic_scheme.tile_to_native_rectangle(0, 1, 0)


def test_invalid_construction_is_rejected() -> None:
    with pytest.raises(ValueError):
        GeographicTilingScheme(number_of_level_zero_tiles_x=0)
    with pytest.raises(TypeError):
        GeographicTilingScheme(rectangle=(0.0, 0.0, 1.0, 1.0))


@pytest.mark.parametrize(
    "rectangle",
    [GeodeticRectangle(0.5, 0.2, 0.5, 0.4), GeodeticRectangle(0.1, 0.3, 0.5, 0.3)],
)
def test_degenerate_rectangles_are_rejected(rectangle) -> None:
    with pytest.raises(ValueError):
        GeographicTilingScheme(rectangle=rectangle)


def test_tiles_at_level_is_row_major_from_the_north(geographic_scheme) -> None:
    tiles = list(geographic_scheme.tiles_at_level(1))

    assert len(tiles) == 8
    assert tiles[:5] == [
        TileIndex(0, 0, 1),
        TileIndex(1, 0, 1),
        TileIndex(2, 0, 1),
        TileIndex(3, 0, 1),
        TileIndex(0, 1, 1),
    ]


def test_antimeridian_lookup(antimeridian_scheme) -> None:
    east_of_west_edge = GeodeticPosition.from_degrees(175.0, 0.0)
    across_antimeridian = GeodeticPosition.from_degrees(-175.0, 0.0)

    assert antimeridian_scheme.position_to_tile(east_of_west_edge, 0) == TileIndex(0, 0, 0)
    assert antimeridian_scheme.position_to_tile(across_antimeridian, 0) == TileIndex(1, 0, 0)
    assert antimeridian_scheme.position_to_tile(GeodeticPosition.ZERO, 0) is None


def test_antimeridian_tile_rectangles(antimeridian_scheme) -> None:
    west_tile = antimeridian_scheme.tile_to_rectangle(0, 0, 0)
    east_tile = antimeridian_scheme.tile_to_rectangle(1, 0, 0)

    assert math.degrees(west_tile.west) == pytest.approx(170.0)
    assert abs(math.degrees(west_tile.east)) == pytest.approx(180.0)
    assert math.degrees(east_tile.east) == pytest.approx(-170.0)
    assert east_tile.contains(GeodeticPosition.from_degrees(-175.0, 0.0))
    assert west_tile.contains(GeodeticPosition.from_degrees(175.0, 5.0))


def test_antimeridian_positions_map_to_their_tiles(antimeridian_scheme) -> None:
    level = 2

    for tile in antimeridian_scheme.tiles_at_level(level):
        center = antimeridian_scheme.tile_to_rectangle(tile.x, tile.y, level).center()
        assert antimeridian_scheme.position_to_tile(center, level) == tile
