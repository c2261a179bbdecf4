import math

import pytest

from common.types import GeodeticPosition
from geospatial.rectangle import GeodeticRectangle, NativeRectangle


def test_max_value_spans_the_globe() -> None:
    rectangle = GeodeticRectangle.MAX_VALUE

    assert (rectangle.west, rectangle.south, rectangle.east, rectangle.north) == (
        -math.pi, -math.pi / 2, math.pi, math.pi / 2
    )
    assert rectangle.width == pytest.approx(2 * math.pi)
    assert rectangle.height == pytest.approx(math.pi)
    assert not rectangle.is_wrapped


def test_south_above_north_is_rejected() -> None:
    with pytest.raises(ValueError):
        GeodeticRectangle(0.0, 0.5, 1.0, 0.25)
    with pytest.raises(TypeError):
        GeodeticRectangle(0.0, None, 1.0, 0.25)


def test_wrapped_width_goes_through_the_antimeridian() -> None:
    rectangle = GeodeticRectangle.from_degrees(170.0, -10.0, -170.0, 10.0)

    assert rectangle.is_wrapped
    assert math.degrees(rectangle.width) == pytest.approx(20.0)


def test_contains_boundary_and_interior() -> None:
    rectangle = GeodeticRectangle.from_degrees(-10.0, -5.0, 10.0, 5.0)

    assert rectangle.contains(GeodeticPosition.from_degrees(0.0, 0.0))
    assert rectangle.contains(rectangle.southwest())
    assert rectangle.contains(rectangle.northeast())
    assert rectangle.contains(rectangle.northwest())
    assert rectangle.contains(rectangle.southeast())
    assert not rectangle.contains(GeodeticPosition.from_degrees(10.5, 0.0))
    assert not rectangle.contains(GeodeticPosition.from_degrees(0.0, -5.5))


def test_contains_ignores_height() -> None:
    rectangle = GeodeticRectangle.from_degrees(-10.0, -5.0, 10.0, 5.0)

    assert rectangle.contains(GeodeticPosition.from_degrees(1.0, 1.0, -9999.0))


def test_contains_tolerates_rounding_at_longitude_edges() -> None:
    rectangle = GeodeticRectangle.MAX_VALUE

    assert rectangle.contains(GeodeticPosition(-math.pi - 1e-15, 0.0))
    assert rectangle.contains(GeodeticPosition(math.pi + 1e-15, 0.0))
    assert not rectangle.contains(GeodeticPosition(math.pi + 1e-9, 0.0))


def test_contains_across_the_antimeridian() -> None:
    rectangle = GeodeticRectangle.from_degrees(170.0, -10.0, -170.0, 10.0)

    assert rectangle.contains(GeodeticPosition.from_degrees(175.0, 0.0))
    assert rectangle.contains(GeodeticPosition.from_degrees(-175.0, 0.0))
    assert rectangle.contains(GeodeticPosition.from_degrees(180.0, 0.0))
    assert not rectangle.contains(GeodeticPosition.from_degrees(0.0, 0.0))
    assert not rectangle.contains(GeodeticPosition.from_degrees(-160.0, 0.0))


def test_contains_requires_position() -> None:
    with pytest.raises(TypeError):
        GeodeticRectangle.MAX_VALUE.contains(None)


def test_unwrap_longitude() -> None:
    wrapped = GeodeticRectangle.from_degrees(170.0, -10.0, -170.0, 10.0)

    assert math.degrees(wrapped.unwrap_longitude(math.radians(-175.0))) == pytest.approx(185.0)
    assert wrapped.unwrap_longitude(math.radians(175.0)) == math.radians(175.0)
    assert GeodeticRectangle.MAX_VALUE.unwrap_longitude(-3.0) == -3.0


def test_center_wraps_back_into_range() -> None:
    center = GeodeticRectangle.from_degrees(160.0, -10.0, -140.0, 30.0).center()

    assert math.degrees(center.longitude) == pytest.approx(-170.0)
    assert math.degrees(center.latitude) == pytest.approx(10.0)


def test_to_degrees_gives_native_rectangle() -> None:
    native = GeodeticRectangle.MAX_VALUE.to_degrees()

    assert isinstance(native, NativeRectangle)
    assert native.equals_epsilon(NativeRectangle(-180.0, -90.0, 180.0, 90.0), 1e-12)
    assert native.width == pytest.approx(360.0)
    assert native.height == pytest.approx(180.0)


def test_equals_epsilon() -> None:
    a = GeodeticRectangle(0.0, 0.0, 1.0, 1.0)
    b = GeodeticRectangle(0.0, 0.0, 1.0 + 1e-9, 1.0)

    assert a.equals_epsilon(b, 1e-8)
    assert not a.equals_epsilon(b, 1e-10)
    assert not a.equals_epsilon(None, 1.0)
