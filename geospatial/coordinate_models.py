"""
Coordinate Models for Ellipsoidal Earth Geometry.

This module converts between geodetic positions (longitude, latitude, height)
and ellipsoid-centred Cartesian coordinates. The Cartesian frame has:

- Origin at the ellipsoid centre
- X-axis through the prime meridian (0° longitude) at the equator
- Y-axis through 90°E at the equator
- Z-axis through the North Pole

Cartesian to geodetic uses the geodetic surface projection rather than a
latitude iteration, so it is valid for any ellipsoid (including spheres and
triaxial bodies) and for points far above or below the surface.

References
----------
- NIMA TR8350.2: WGS84 parameters
- Hofmann-Wellenhof, B. et al. (2008). GNSS: GPS, GLONASS, Galileo.
"""

from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from common.constants import sign
from common.types import GeodeticPosition, require_cartesian
from geospatial.ellipsoid import WGS84, Ellipsoid
from geospatial.surface_projection import (
    scale_to_geodetic_surface,
    scale_to_geodetic_surface_batch,
)


def geodetic_surface_normal_from_position(position: GeodeticPosition) -> NDArray[np.float64]:
    """Outward unit normal of the ellipsoid at a geodetic longitude/latitude.

    Parameters
    ----------
    position : GeodeticPosition
        Longitude and latitude in radians; height is ignored.

    Returns
    -------
    ndarray, shape (3,)
        Unit vector (cos φ cos λ, cos φ sin λ, sin φ).
    """
    cos_lat = np.cos(position.latitude)
    normal = np.array([
        cos_lat * np.cos(position.longitude),
        cos_lat * np.sin(position.longitude),
        np.sin(position.latitude),
    ])
    return normal / np.linalg.norm(normal)


def geodetic_to_cartesian(
    position: GeodeticPosition,
    ellipsoid: Optional[Ellipsoid] = None
) -> NDArray[np.float64]:
    """Convert a geodetic position to ellipsoid-centred Cartesian coordinates.

    Parameters
    ----------
    position : GeodeticPosition
        Position in radians and meters.
    ellipsoid : Ellipsoid, optional
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    ndarray, shape (3,)
        (X, Y, Z) in meters.

    Notes
    -----
    With n the surface normal and k = r² ⊙ n, the surface point is
    k / sqrt(n · k); the height is then added along n.
    """
    if not isinstance(position, GeodeticPosition):
        raise TypeError(
            f"position must be a GeodeticPosition, got {type(position).__name__}"
        )
    ellipsoid = WGS84 if ellipsoid is None else ellipsoid

    normal = geodetic_surface_normal_from_position(position)
    k = ellipsoid.radii_squared * normal
    gamma = np.sqrt(np.dot(normal, k))
    return k / gamma + normal * position.height


def cartesian_to_geodetic(
    cartesian,
    ellipsoid: Optional[Ellipsoid] = None
) -> Optional[GeodeticPosition]:
    """Convert ellipsoid-centred Cartesian coordinates to a geodetic position.

    Parameters
    ----------
    cartesian : array_like, shape (3,)
        (X, Y, Z) in meters.
    ellipsoid : Ellipsoid, optional
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    GeodeticPosition or None
        None when the point lies within the ellipsoid's centre tolerance,
        where the geodetic normal is undefined.

    Notes
    -----
    p is the geodetic surface point below the input and n the unit normal
    there. Longitude and latitude come from n; the height is |input - p|,
    negative when the input lies inside the ellipsoid.
    """
    ellipsoid = WGS84 if ellipsoid is None else ellipsoid
    position = require_cartesian("cartesian", cartesian)

    surface = scale_to_geodetic_surface(
        position,
        ellipsoid.one_over_radii,
        ellipsoid.one_over_radii_squared,
        ellipsoid.center_tolerance_squared
    )
    if surface is None:
        return None

    normal = surface * ellipsoid.one_over_radii_squared
    normal = normal / np.linalg.norm(normal)

    offset = position - surface

    longitude = np.arctan2(normal[1], normal[0])
    latitude = np.arcsin(np.clip(normal[2], -1.0, 1.0))
    height = sign(float(np.dot(offset, position))) * np.linalg.norm(offset)

    return GeodeticPosition(float(longitude), float(latitude), float(height))


# Vectorized versions for batch processing
def geodetic_to_cartesian_batch(
    longitudes_rad: NDArray[np.float64],
    latitudes_rad: NDArray[np.float64],
    heights_m: Optional[NDArray[np.float64]] = None,
    ellipsoid: Optional[Ellipsoid] = None
) -> NDArray[np.float64]:
    """Vectorized geodetic to Cartesian conversion.

    Parameters
    ----------
    longitudes_rad : ndarray
        Array of longitudes in radians.
    latitudes_rad : ndarray
        Array of latitudes in radians.
    heights_m : ndarray, optional
        Array of heights in meters (default: zeros).
    ellipsoid : Ellipsoid, optional
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    ndarray, shape (N, 3)
        Cartesian points in meters.
    """
    ellipsoid = WGS84 if ellipsoid is None else ellipsoid
    lons = np.atleast_1d(np.asarray(longitudes_rad, dtype=np.float64))
    lats = np.atleast_1d(np.asarray(latitudes_rad, dtype=np.float64))
    heights = (
        np.zeros_like(lons) if heights_m is None
        else np.atleast_1d(np.asarray(heights_m, dtype=np.float64))
    )

    cos_lat = np.cos(lats)
    normals = np.stack([cos_lat * np.cos(lons), cos_lat * np.sin(lons), np.sin(lats)], axis=-1)
    normals /= np.linalg.norm(normals, axis=-1, keepdims=True)

    k = normals * ellipsoid.radii_squared
    gamma = np.sqrt(np.sum(normals * k, axis=-1, keepdims=True))
    return k / gamma + normals * heights[:, None]


def cartesian_to_geodetic_batch(
    cartesians: NDArray[np.float64],
    ellipsoid: Optional[Ellipsoid] = None
) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Vectorized Cartesian to geodetic conversion.

    Parameters
    ----------
    cartesians : ndarray, shape (N, 3)
        Cartesian points in meters.
    ellipsoid : Ellipsoid, optional
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    Tuple[ndarray, ndarray, ndarray]
        (longitudes_rad, latitudes_rad, heights_m). Entries for points within
        the centre tolerance are NaN.
    """
    ellipsoid = WGS84 if ellipsoid is None else ellipsoid
    positions = np.asarray(cartesians, dtype=np.float64)

    surfaces = scale_to_geodetic_surface_batch(
        positions,
        ellipsoid.one_over_radii,
        ellipsoid.one_over_radii_squared,
        ellipsoid.center_tolerance_squared
    )

    # Centre rows are NaN and stay NaN
    with np.errstate(invalid='ignore'):
        normals = surfaces * ellipsoid.one_over_radii_squared
        normals /= np.linalg.norm(normals, axis=1, keepdims=True)

        offsets = positions - surfaces
        longitudes = np.arctan2(normals[:, 1], normals[:, 0])
        latitudes = np.arcsin(np.clip(normals[:, 2], -1.0, 1.0))
        heights = np.sign(np.sum(offsets * positions, axis=1)) * np.linalg.norm(offsets, axis=1)

    return longitudes, latitudes, heights
