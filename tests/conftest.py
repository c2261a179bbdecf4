import pytest

from geospatial.ellipsoid import WGS84
from geospatial.rectangle import GeodeticRectangle
from tiling.geographic import GeographicTilingScheme
from tiling.web_mercator import WebMercatorTilingScheme


@pytest.fixture
def wgs84():
    return WGS84


@pytest.fixture
def geographic_scheme():
    return GeographicTilingScheme()


@pytest.fixture
def web_mercator_scheme():
    return WebMercatorTilingScheme()


@pytest.fixture
def antimeridian_scheme():
    """Two level-zero tiles over 170°E to 170°W."""
    return GeographicTilingScheme(
        rectangle=GeodeticRectangle.from_degrees(170.0, -10.0, -170.0, 10.0)
    )
