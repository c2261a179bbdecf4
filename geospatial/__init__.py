"""
Geospatial Module for Geodetic Coordinates and Map Projections.

All Earth-surface calculations used by the tiling schemes originate from
this module.

This module provides:
- Reference ellipsoids
- Projection of Cartesian points onto the geodetic surface
- Cartesian ⇄ geodetic conversions (scalar and vectorized)
- Geodetic and native rectangles
- Equirectangular and web-mercator map projections
"""

from geospatial.ellipsoid import Ellipsoid, WGS84, UNIT_SPHERE

from geospatial.surface_projection import (
    scale_to_geodetic_surface,
    scale_to_geodetic_surface_batch,
    scale_to_geocentric_surface,
    geodetic_surface_normal,
)

from geospatial.coordinate_models import (
    geodetic_to_cartesian,
    cartesian_to_geodetic,
    geodetic_to_cartesian_batch,
    cartesian_to_geodetic_batch,
)

from geospatial.rectangle import GeodeticRectangle, NativeRectangle

from geospatial.projections import (
    MapProjection,
    EquirectangularProjection,
    WebMercatorProjection,
    MAXIMUM_LATITUDE,
    geodetic_latitude_to_mercator_angle,
    mercator_angle_to_geodetic_latitude,
)

__all__ = [
    # Ellipsoids
    "Ellipsoid",
    "WGS84",
    "UNIT_SPHERE",
    # Surface projection
    "scale_to_geodetic_surface",
    "scale_to_geodetic_surface_batch",
    "scale_to_geocentric_surface",
    "geodetic_surface_normal",
    # Coordinate models
    "geodetic_to_cartesian",
    "cartesian_to_geodetic",
    "geodetic_to_cartesian_batch",
    "cartesian_to_geodetic_batch",
    # Rectangles
    "GeodeticRectangle",
    "NativeRectangle",
    # Projections
    "MapProjection",
    "EquirectangularProjection",
    "WebMercatorProjection",
    "MAXIMUM_LATITUDE",
    "geodetic_latitude_to_mercator_angle",
    "mercator_angle_to_geodetic_latitude",
]
