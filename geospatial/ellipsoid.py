"""
Reference Ellipsoids.

A biaxial (or triaxial) ellipsoid centred at the origin, described by its
three radii. The derived reciprocal vectors are precomputed once because the
surface projection consumes them on every call.

References
----------
- NIMA TR8350.2: WGS84 parameters
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from common.constants import GeodeticConstants
from common.types import require_number
from geospatial.surface_projection import geodetic_surface_normal, scale_to_geodetic_surface


def _frozen(values) -> NDArray[np.float64]:
    array = np.array(values, dtype=np.float64)
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class Ellipsoid:
    """An ellipsoid defined by its radii along the x, y and z axes.

    Attributes
    ----------
    x, y, z : float
        Radii in meters. x and y are equatorial, z is polar.
    name : str
        Identifier for the ellipsoid.
    center_tolerance_squared : float
        Points whose radius-scaled squared magnitude falls below this value
        are treated as the centre, where no geodetic normal exists.

    Derived Parameters
    ------------------
    radii, radii_squared, one_over_radii, one_over_radii_squared : ndarray
        Read-only vectors of shape (3,).
    minimum_radius, maximum_radius : float
        Smallest and largest of the three radii.
    """
    x: float
    y: float
    z: float
    name: str = "custom"
    center_tolerance_squared: float = GeodeticConstants.DEFAULT_CENTER_TOLERANCE_SQUARED

    radii: NDArray[np.float64] = field(init=False, repr=False, compare=False)
    radii_squared: NDArray[np.float64] = field(init=False, repr=False, compare=False)
    one_over_radii: NDArray[np.float64] = field(init=False, repr=False, compare=False)
    one_over_radii_squared: NDArray[np.float64] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate the radii and precompute reciprocal vectors."""
        for name in ("x", "y", "z"):
            value = require_number(name, getattr(self, name))
            if not value > 0.0:
                raise ValueError(f"Ellipsoid radius {name} must be positive, got {value}")
            object.__setattr__(self, name, value)
        tolerance = require_number("center_tolerance_squared", self.center_tolerance_squared)
        if tolerance < 0.0:
            raise ValueError("center_tolerance_squared must be non-negative")
        object.__setattr__(self, "center_tolerance_squared", tolerance)

        x, y, z = self.x, self.y, self.z
        object.__setattr__(self, "radii", _frozen((x, y, z)))
        object.__setattr__(self, "radii_squared", _frozen((x * x, y * y, z * z)))
        object.__setattr__(self, "one_over_radii", _frozen((1.0 / x, 1.0 / y, 1.0 / z)))
        object.__setattr__(
            self,
            "one_over_radii_squared",
            _frozen((1.0 / (x * x), 1.0 / (y * y), 1.0 / (z * z)))
        )

    @classmethod
    def from_flattening(cls, a: float, f: float, name: str = "custom") -> 'Ellipsoid':
        """Create a biaxial ellipsoid from semi-major axis and flattening.

        Parameters
        ----------
        a : float
            Semi-major axis (equatorial radius) in meters.
        f : float
            Flattening: f = (a - b) / a
        """
        return cls(a, a, a * (1.0 - f), name=name)

    @property
    def minimum_radius(self) -> float:
        return min(self.x, self.y, self.z)

    @property
    def maximum_radius(self) -> float:
        return max(self.x, self.y, self.z)

    @property
    def is_sphere(self) -> bool:
        return self.x == self.y == self.z

    def scale_to_geodetic_surface(self, cartesian) -> Optional[NDArray[np.float64]]:
        """Project ``cartesian`` onto the surface along the geodetic normal.

        See :func:`geospatial.surface_projection.scale_to_geodetic_surface`.
        """
        return scale_to_geodetic_surface(
            cartesian,
            self.one_over_radii,
            self.one_over_radii_squared,
            self.center_tolerance_squared
        )

    def geodetic_surface_normal(self, cartesian) -> Optional[NDArray[np.float64]]:
        """Unit normal of the surface through ``cartesian``'s level set."""
        return geodetic_surface_normal(cartesian, self.one_over_radii_squared)


WGS84 = Ellipsoid(
    x=GeodeticConstants.WGS84_EQUATORIAL_RADIUS.value,
    y=GeodeticConstants.WGS84_EQUATORIAL_RADIUS.value,
    z=GeodeticConstants.WGS84_POLAR_RADIUS.value,
    name="WGS84"
)

UNIT_SPHERE = Ellipsoid(1.0, 1.0, 1.0, name="unit sphere")
