"""
Unit Registry for Angle and Length Quantities.

Internally every angle is a float in radians and every length a float in
meters. This module lets callers hand in `pint` quantities instead (degrees,
arc-minutes, kilometres, feet, ...) and converts them at the boundary, raising
on dimensionally incompatible input rather than silently misreading it.

Example Usage
-------------
>>> from common.units import Q_, as_radians
>>> as_radians(Q_(180, 'degree'))
3.141592653589793
"""

import inspect
from functools import wraps
from typing import Callable, Union

import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity

AngleLike = Union[float, pint.Quantity]
LengthLike = Union[float, pint.Quantity]


def validate_units(expected_units: dict[str, str]):
    """Decorator to validate units of function arguments.

    Arguments that are `pint.Quantity` instances must be convertible to the
    expected unit; bare numbers pass through untouched.

    Parameters
    ----------
    expected_units : dict[str, str]
        Mapping from argument names to expected unit strings.

    Examples
    --------
    >>> @validate_units({'angle': 'radian'})
    ... def half(angle):
    ...     return angle / 2
    """
    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()

            for param_name, expected_unit in expected_units.items():
                if param_name not in bound.arguments:
                    continue
                value = bound.arguments[param_name]
                if isinstance(value, pint.Quantity):
                    try:
                        value.to(expected_unit)
                    except pint.DimensionalityError as e:
                        raise ValueError(
                            f"Parameter '{param_name}' has incompatible units. "
                            f"Expected {expected_unit}, got {value.units}"
                        ) from e

            return func(*args, **kwargs)
        return wrapper
    return decorator


def as_radians(value: AngleLike) -> float:
    """Return an angle in radians.

    Parameters
    ----------
    value : float or pint.Quantity
        A bare number is taken to be radians already.

    Returns
    -------
    float
        The angle in radians.

    Raises
    ------
    ValueError
        If ``value`` is a quantity without angular dimensionality.
    """
    if isinstance(value, pint.Quantity):
        try:
            return float(value.to(ureg.radian).magnitude)
        except pint.DimensionalityError as e:
            raise ValueError(f"Expected an angle, got {value.units}") from e
    return value


def as_meters(value: LengthLike) -> float:
    """Return a length in meters.

    Parameters
    ----------
    value : float or pint.Quantity
        A bare number is taken to be meters already.

    Returns
    -------
    float
        The length in meters.

    Raises
    ------
    ValueError
        If ``value`` is a quantity without length dimensionality.
    """
    if isinstance(value, pint.Quantity):
        try:
            return float(value.to(ureg.meter).magnitude)
        except pint.DimensionalityError as e:
            raise ValueError(f"Expected a length, got {value.units}") from e
    return value

