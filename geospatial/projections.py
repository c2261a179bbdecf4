"""
Map Projections for Tile Pyramids.

This module provides the two projections a tiling scheme can be built on:

1. Equirectangular (plate carrée, "geographic"): longitude and latitude are
   scaled linearly by the ellipsoid's maximum radius.
2. Web Mercator (EPSG:3857 style): spherical Mercator on the maximum radius,
   clipped at the latitude where the square map ends.

Both map a :class:`GeodeticPosition` to a :class:`PlanarPoint3` in meters and
back, carrying height through unchanged in ``z``. The forward and inverse
formulas are evaluated in closed form; each projection also describes
itself as a `pyproj` CRS for use with PROJ transformers.

References
----------
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
- IOGP Geomatics Guidance Note 7-2, EPSG:1024 "Popular Visualisation Pseudo Mercator".
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pyproj import CRS

from common.constants import PI, PI_OVER_TWO
from common.types import GeodeticPosition, PlanarPoint2, PlanarPoint3
from geospatial.ellipsoid import WGS84, Ellipsoid

PlanarPoint = Union[PlanarPoint2, PlanarPoint3]


def _require_position(position) -> GeodeticPosition:
    if position is None:
        raise TypeError("position is required")
    if not isinstance(position, GeodeticPosition):
        raise TypeError(
            f"position must be a GeodeticPosition, got {type(position).__name__}"
        )
    return position


def _require_planar(point) -> Tuple[float, float, float]:
    if point is None:
        raise TypeError("point is required")
    if isinstance(point, PlanarPoint3):
        return point.x, point.y, point.z
    if isinstance(point, PlanarPoint2):
        return point.x, point.y, 0.0
    raise TypeError(
        f"point must be a PlanarPoint2 or PlanarPoint3, got {type(point).__name__}"
    )


class MapProjection(ABC):
    """Abstract base class for map projections used by tiling schemes.

    Forward and inverse formulas are closed-form numpy rather than pyproj
    transforms so tile edges land exactly on multiples of the semimajor axis;
    the pyproj CRS properties describe the same planes for external use.

    Implementations are immutable after construction and may be shared
    between threads.
    """

    def __init__(self, ellipsoid: Optional[Ellipsoid] = None):
        self._ellipsoid = WGS84 if ellipsoid is None else ellipsoid
        self._semimajor_axis = self._ellipsoid.maximum_radius
        self._one_over_semimajor_axis = 1.0 / self._semimajor_axis

    @property
    def ellipsoid(self) -> Ellipsoid:
        """The ellipsoid whose maximum radius scales the projection."""
        return self._ellipsoid

    @property
    def semimajor_axis(self) -> float:
        return self._semimajor_axis

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the projection."""
        pass

    @property
    @abstractmethod
    def proj4_string(self) -> str:
        """PROJ.4 definition string of the projected plane."""
        pass

    @property
    def crs(self) -> CRS:
        """The projected coordinate reference system."""
        return CRS.from_proj4(self.proj4_string)

    @property
    def geographic_crs(self) -> CRS:
        """Longitude/latitude CRS on the sphere the projection is defined on."""
        return CRS.from_proj4(
            f"+proj=longlat +a={self._semimajor_axis} +b={self._semimajor_axis} +no_defs"
        )

    @abstractmethod
    def project(self, position: GeodeticPosition) -> PlanarPoint3:
        """Project a geodetic position (radians) to map coordinates (meters).

        Parameters
        ----------
        position : GeodeticPosition
            The position to project.

        Returns
        -------
        PlanarPoint3
            Projected x, y in meters; z is the unmodified height.
        """
        pass

    @abstractmethod
    def unproject(self, point: PlanarPoint) -> GeodeticPosition:
        """Unproject map coordinates (meters) to a geodetic position (radians).

        Parameters
        ----------
        point : PlanarPoint2 or PlanarPoint3
            Projected coordinates. A 2D point unprojects with zero height.

        Returns
        -------
        GeodeticPosition
            Longitude and latitude in radians; height is the unmodified z.
        """
        pass

    @abstractmethod
    def project_batch(
        self,
        longitudes_rad: NDArray[np.float64],
        latitudes_rad: NDArray[np.float64],
        heights_m: Optional[NDArray[np.float64]] = None
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """Vectorized :meth:`project` returning ``(x, y, z)`` arrays."""
        pass

    @abstractmethod
    def unproject_batch(
        self,
        x: NDArray[np.float64],
        y: NDArray[np.float64],
        z: Optional[NDArray[np.float64]] = None
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """Vectorized :meth:`unproject` returning ``(lon, lat, height)`` arrays."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(ellipsoid={self._ellipsoid.name!r})"


def _heights_like(reference: NDArray[np.float64], heights) -> NDArray[np.float64]:
    if heights is None:
        return np.zeros_like(reference)
    return np.asarray(heights, dtype=np.float64)


class EquirectangularProjection(MapProjection):
    """Equirectangular projection (geographic, plate carrée, EPSG:4326 style).

    x = λ·R, y = φ·R, z = h, with R the ellipsoid's maximum radius.

    Parameters
    ----------
    ellipsoid : Ellipsoid, optional
        Reference ellipsoid (default: WGS84).
    """

    @property
    def name(self) -> str:
        return "Equirectangular"

    @property
    def proj4_string(self) -> str:
        return (
            f"+proj=eqc +lat_ts=0 +lat_0=0 +lon_0=0 +x_0=0 +y_0=0 "
            f"+a={self._semimajor_axis} +b={self._semimajor_axis} +units=m +no_defs"
        )

    def project(self, position: GeodeticPosition) -> PlanarPoint3:
        position = _require_position(position)
        semimajor_axis = self._semimajor_axis
        return PlanarPoint3(
            position.longitude * semimajor_axis,
            position.latitude * semimajor_axis,
            position.height
        )

    def unproject(self, point: PlanarPoint) -> GeodeticPosition:
        x, y, z = _require_planar(point)
        one_over_semimajor_axis = self._one_over_semimajor_axis
        return GeodeticPosition(
            x * one_over_semimajor_axis,
            y * one_over_semimajor_axis,
            z
        )

    def project_batch(self, longitudes_rad, latitudes_rad, heights_m=None):
        lons = np.asarray(longitudes_rad, dtype=np.float64)
        lats = np.asarray(latitudes_rad, dtype=np.float64)
        return (
            lons * self._semimajor_axis,
            lats * self._semimajor_axis,
            _heights_like(lons, heights_m),
        )

    def unproject_batch(self, x, y, z=None):
        xs = np.asarray(x, dtype=np.float64)
        ys = np.asarray(y, dtype=np.float64)
        return (
            xs * self._one_over_semimajor_axis,
            ys * self._one_over_semimajor_axis,
            _heights_like(xs, z),
        )


def mercator_angle_to_geodetic_latitude(mercator_angle: float) -> float:
    """Convert a Mercator angle (y / R) in the range -π to π to a latitude."""
    return PI_OVER_TWO - 2.0 * np.arctan(np.exp(-mercator_angle))


# Latitude at which the Mercator y coordinate equals π·R, making the full
# map square. Roughly 85.0511287798 degrees.
MAXIMUM_LATITUDE: float = float(mercator_angle_to_geodetic_latitude(PI))


def geodetic_latitude_to_mercator_angle(latitude: float) -> float:
    """Convert a latitude to a Mercator angle, clamping at MAXIMUM_LATITUDE."""
    latitude = np.clip(latitude, -MAXIMUM_LATITUDE, MAXIMUM_LATITUDE)
    sin_latitude = np.sin(latitude)
    return 0.5 * np.log((1.0 + sin_latitude) / (1.0 - sin_latitude))


class WebMercatorProjection(MapProjection):
    """Web Mercator projection (spherical Mercator, EPSG:3857 style).

    x = λ·R, y = R·atanh(sin φ), z = h, with R the ellipsoid's maximum
    radius. Latitudes beyond ±MAXIMUM_LATITUDE are clamped before
    projecting, so round trips are exact only inside that band.

    Parameters
    ----------
    ellipsoid : Ellipsoid, optional
        Reference ellipsoid (default: WGS84).
    """

    MAXIMUM_LATITUDE = MAXIMUM_LATITUDE

    @property
    def name(self) -> str:
        return "Web Mercator"

    @property
    def proj4_string(self) -> str:
        return (
            f"+proj=merc +lat_ts=0 +lon_0=0 +x_0=0 +y_0=0 +k=1 "
            f"+a={self._semimajor_axis} +b={self._semimajor_axis} +units=m +no_defs"
        )

    def project(self, position: GeodeticPosition) -> PlanarPoint3:
        position = _require_position(position)
        semimajor_axis = self._semimajor_axis
        return PlanarPoint3(
            position.longitude * semimajor_axis,
            float(geodetic_latitude_to_mercator_angle(position.latitude)) * semimajor_axis,
            position.height
        )

    def unproject(self, point: PlanarPoint) -> GeodeticPosition:
        x, y, z = _require_planar(point)
        one_over_semimajor_axis = self._one_over_semimajor_axis
        return GeodeticPosition(
            x * one_over_semimajor_axis,
            float(mercator_angle_to_geodetic_latitude(y * one_over_semimajor_axis)),
            z
        )

    def project_batch(self, longitudes_rad, latitudes_rad, heights_m=None):
        lons = np.asarray(longitudes_rad, dtype=np.float64)
        lats = np.asarray(latitudes_rad, dtype=np.float64)
        return (
            lons * self._semimajor_axis,
            geodetic_latitude_to_mercator_angle(lats) * self._semimajor_axis,
            _heights_like(lons, heights_m),
        )

    def unproject_batch(self, x, y, z=None):
        xs = np.asarray(x, dtype=np.float64)
        ys = np.asarray(y, dtype=np.float64)
        return (
            xs * self._one_over_semimajor_axis,
            mercator_angle_to_geodetic_latitude(ys * self._one_over_semimajor_axis),
            _heights_like(xs, z),
        )
