"""
Projection of Cartesian Points onto an Ellipsoid Surface.

The geodetic surface point of P is the point on the ellipsoid whose surface
normal passes through P. It is not the radial intersection (the point where
the line from the centre to P crosses the surface) except on a sphere.

Method
------
Write the surface point as S = P / (1 + λ/r²) componentwise, so that
P - S is parallel to the gradient at S. Substituting into the ellipsoid
equation gives a scalar function of λ:

    f(λ) = Σ (Pᵢ/rᵢ)² / (1 + λ/rᵢ²)² - 1

f is convex and monotonically decreasing for λ > -min(rᵢ²), so Newton's
method started from the radial intersection converges in a handful of steps.

All temporaries are local to each call; the functions are reentrant and safe
to call from several threads at once.

References
----------
- Eberly, D. (2008). Distance from a Point to an Ellipse, an Ellipsoid,
  or a Hyperellipsoid. Geometric Tools.
"""

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from common.constants import EPSILON12, SURFACE_PROJECTION_MAX_ITERATIONS
from common.logging_config import get_logger
from common.types import require_cartesian, require_number

logger = get_logger(__name__)


def scale_to_geodetic_surface(
    cartesian,
    one_over_radii,
    one_over_radii_squared,
    center_tolerance_squared: float,
    max_iterations: int = SURFACE_PROJECTION_MAX_ITERATIONS
) -> Optional[NDArray[np.float64]]:
    """Scale a point onto the ellipsoid surface along the geodetic normal.

    Parameters
    ----------
    cartesian : array_like, shape (3,)
        The point to project, in meters.
    one_over_radii : array_like, shape (3,)
        Reciprocal radii of the ellipsoid.
    one_over_radii_squared : array_like, shape (3,)
        Reciprocal squared radii of the ellipsoid.
    center_tolerance_squared : float
        Below this radius-scaled squared magnitude the point is treated as
        the ellipsoid centre.
    max_iterations : int
        Newton steps allowed before giving up.

    Returns
    -------
    ndarray or None
        The surface point, or None when the point is at (or too near) the
        centre and the normal is undefined.

    Raises
    ------
    RuntimeError
        If the iteration does not converge. This does not happen for a
        valid ellipsoid and finite input.
    """
    position = require_cartesian("cartesian", cartesian)
    center_tolerance_squared = require_number(
        "center_tolerance_squared", center_tolerance_squared
    )

    position_x, position_y, position_z = (float(v) for v in position)
    one_over_radii_x, one_over_radii_y, one_over_radii_z = (
        float(v) for v in one_over_radii
    )

    x2 = position_x * position_x * one_over_radii_x * one_over_radii_x
    y2 = position_y * position_y * one_over_radii_y * one_over_radii_y
    z2 = position_z * position_z * one_over_radii_z * one_over_radii_z

    squared_norm = x2 + y2 + z2
    if squared_norm < center_tolerance_squared or squared_norm == 0.0:
        logger.debug(
            f"Point {position.tolist()} within centre tolerance "
            f"({squared_norm:.3e} < {center_tolerance_squared:.3e})"
        )
        return None

    ratio = np.sqrt(1.0 / squared_norm)

    # Radial intersection as the starting guess
    intersection = position * ratio

    one_over_radii_squared_x, one_over_radii_squared_y, one_over_radii_squared_z = (
        float(v) for v in one_over_radii_squared
    )
    gradient = np.array([
        intersection[0] * one_over_radii_squared_x * 2.0,
        intersection[1] * one_over_radii_squared_y * 2.0,
        intersection[2] * one_over_radii_squared_z * 2.0,
    ])

    lambda_ = (1.0 - ratio) * np.linalg.norm(position) / (0.5 * np.linalg.norm(gradient))
    correction = 0.0
    func = np.nan

    for _ in range(max_iterations):
        lambda_ -= correction

        x_multiplier = 1.0 / (1.0 + lambda_ * one_over_radii_squared_x)
        y_multiplier = 1.0 / (1.0 + lambda_ * one_over_radii_squared_y)
        z_multiplier = 1.0 / (1.0 + lambda_ * one_over_radii_squared_z)

        x_multiplier2 = x_multiplier * x_multiplier
        y_multiplier2 = y_multiplier * y_multiplier
        z_multiplier2 = z_multiplier * z_multiplier

        func = x2 * x_multiplier2 + y2 * y_multiplier2 + z2 * z_multiplier2 - 1.0
        if abs(func) <= EPSILON12:
            return np.array([
                position_x * x_multiplier,
                position_y * y_multiplier,
                position_z * z_multiplier,
            ])

        x_multiplier3 = x_multiplier2 * x_multiplier
        y_multiplier3 = y_multiplier2 * y_multiplier
        z_multiplier3 = z_multiplier2 * z_multiplier

        denominator = (
            x2 * x_multiplier3 * one_over_radii_squared_x
            + y2 * y_multiplier3 * one_over_radii_squared_y
            + z2 * z_multiplier3 * one_over_radii_squared_z
        )
        derivative = -2.0 * denominator
        correction = func / derivative

    logger.error(
        f"Geodetic surface projection of {position.tolist()} did not converge "
        f"after {max_iterations} iterations (residual {func:.3e})"
    )
    raise RuntimeError(
        f"scale_to_geodetic_surface did not converge in {max_iterations} iterations"
    )


def scale_to_geocentric_surface(
    cartesian,
    one_over_radii_squared
) -> Optional[NDArray[np.float64]]:
    """Scale a point onto the surface along the ray from the centre.

    Returns None for the centre itself, where the ray is undefined.
    """
    position = require_cartesian("cartesian", cartesian)
    scaled = float(np.dot(position * position, np.asarray(one_over_radii_squared)))
    if scaled == 0.0:
        return None
    return position * (1.0 / np.sqrt(scaled))


def geodetic_surface_normal(
    cartesian,
    one_over_radii_squared
) -> Optional[NDArray[np.float64]]:
    """Unit normal to the ellipsoid level set passing through ``cartesian``.

    For a point on the surface this is the outward geodetic surface normal.
    Returns None for the centre.
    """
    position = require_cartesian("cartesian", cartesian)
    normal = position * np.asarray(one_over_radii_squared)
    magnitude = np.linalg.norm(normal)
    if magnitude == 0.0:
        return None
    return normal / magnitude


def scale_to_geodetic_surface_batch(
    cartesians: NDArray[np.float64],
    one_over_radii,
    one_over_radii_squared,
    center_tolerance_squared: float,
    max_iterations: int = SURFACE_PROJECTION_MAX_ITERATIONS
) -> NDArray[np.float64]:
    """Vectorized :func:`scale_to_geodetic_surface`.

    Parameters
    ----------
    cartesians : ndarray, shape (N, 3)
        Points to project, in meters.

    Returns
    -------
    ndarray, shape (N, 3)
        Surface points. Rows for points within the centre tolerance are NaN.
    """
    positions = np.asarray(cartesians, dtype=np.float64)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"cartesians must have shape (N, 3), got {positions.shape}")

    one_over_radii = np.asarray(one_over_radii, dtype=np.float64)
    one_over_radii_squared = np.asarray(one_over_radii_squared, dtype=np.float64)

    scaled2 = (positions * one_over_radii) ** 2
    squared_norm = scaled2.sum(axis=1)
    valid = (squared_norm >= center_tolerance_squared) & (squared_norm > 0.0)

    result = np.full(positions.shape, np.nan)
    if not np.any(valid):
        return result

    p = positions[valid]
    s2 = scaled2[valid]
    ratio = np.sqrt(1.0 / squared_norm[valid])
    gradient = (p * ratio[:, None]) * one_over_radii_squared * 2.0
    lambda_ = (1.0 - ratio) * np.linalg.norm(p, axis=1) / (0.5 * np.linalg.norm(gradient, axis=1))

    active = np.ones(len(p), dtype=bool)
    multipliers = np.empty_like(p)
    for _ in range(max_iterations):
        m = 1.0 / (1.0 + lambda_[:, None] * one_over_radii_squared)
        func = (s2 * m * m).sum(axis=1) - 1.0
        multipliers[active] = m[active]
        active &= np.abs(func) > EPSILON12
        if not np.any(active):
            result[valid] = p * multipliers
            return result
        derivative = -2.0 * (s2 * m ** 3 * one_over_radii_squared).sum(axis=1)
        lambda_ = np.where(active, lambda_ - func / derivative, lambda_)

    logger.error(
        f"Batch geodetic surface projection left {int(active.sum())} points "
        f"unconverged after {max_iterations} iterations"
    )
    raise RuntimeError(
        f"scale_to_geodetic_surface_batch did not converge in {max_iterations} iterations"
    )
