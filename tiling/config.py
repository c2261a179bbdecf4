"""Constructor-time configuration for tiling schemes."""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

from common.logging_config import get_logger
from common.types import PlanarPoint2
from geospatial.ellipsoid import UNIT_SPHERE, WGS84, Ellipsoid
from geospatial.rectangle import GeodeticRectangle
from tiling.base import TilingScheme, validate_level_zero_count
from tiling.geographic import GeographicTilingScheme
from tiling.web_mercator import WebMercatorTilingScheme, as_planar_point

logger = get_logger(__name__)

KNOWN_ELLIPSOIDS = {
    "wgs84": WGS84,
    "unit_sphere": UNIT_SPHERE,
}

# Option names as used by scene/imagery configuration, mapped to field names
OPTION_ALIASES = {
    "numberOfLevelZeroTilesX": "number_of_level_zero_tiles_x",
    "numberOfLevelZeroTilesY": "number_of_level_zero_tiles_y",
    "rectangleSouthwestInMeters": "rectangle_southwest_in_meters",
    "rectangleNortheastInMeters": "rectangle_northeast_in_meters",
}

SCHEME_KINDS = ("geographic", "web_mercator")


def _as_ellipsoid(value: Union[Ellipsoid, str]) -> Ellipsoid:
    if isinstance(value, Ellipsoid):
        return value
    if isinstance(value, str):
        key = value.strip().lower().replace(" ", "_")
        if key in KNOWN_ELLIPSOIDS:
            return KNOWN_ELLIPSOIDS[key]
        raise ValueError(
            f"Unknown ellipsoid {value!r}; expected one of {sorted(KNOWN_ELLIPSOIDS)}"
        )
    raise TypeError(f"ellipsoid must be an Ellipsoid or a name, got {type(value).__name__}")


def _as_rectangle(value) -> GeodeticRectangle:
    if isinstance(value, GeodeticRectangle):
        return value
    if isinstance(value, Mapping):
        try:
            bounds = [value[name] for name in ("west", "south", "east", "north")]
        except KeyError as e:
            raise TypeError(f"rectangle mapping is missing bound {e.args[0]!r}") from e
        return GeodeticRectangle(*bounds)
    try:
        west, south, east, north = value
    except (TypeError, ValueError) as e:
        raise TypeError(
            "rectangle must be a GeodeticRectangle, a mapping of bounds or "
            "a (west, south, east, north) sequence in radians"
        ) from e
    return GeodeticRectangle(west, south, east, north)


@dataclass(frozen=True)
class TilingSchemeOptions:
    """Options accepted when constructing a tiling scheme.

    Unset fields fall back to the defaults of the chosen scheme. ``rectangle``
    applies to geographic schemes only; the meter corners apply to
    web-mercator schemes only.
    """
    ellipsoid: Optional[Ellipsoid] = None
    rectangle: Optional[GeodeticRectangle] = None
    number_of_level_zero_tiles_x: Optional[int] = None
    number_of_level_zero_tiles_y: Optional[int] = None
    rectangle_southwest_in_meters: Optional[PlanarPoint2] = None
    rectangle_northeast_in_meters: Optional[PlanarPoint2] = None

    def __post_init__(self):
        if self.ellipsoid is not None:
            object.__setattr__(self, "ellipsoid", _as_ellipsoid(self.ellipsoid))
        if self.rectangle is not None:
            object.__setattr__(self, "rectangle", _as_rectangle(self.rectangle))
        for name in ("number_of_level_zero_tiles_x", "number_of_level_zero_tiles_y"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, validate_level_zero_count(name, value))
        for name in ("rectangle_southwest_in_meters", "rectangle_northeast_in_meters"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, as_planar_point(name, value))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'TilingSchemeOptions':
        """Build options from a mapping of snake_case or camelCase keys.

        Raises
        ------
        ValueError
            On unknown or duplicated keys.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in mapping.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown tiling scheme option {key!r}")
            if name in values:
                raise ValueError(f"Tiling scheme option {name!r} given more than once")
            values[name] = value
        return cls(**values)

    def _set_fields(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def create_tiling_scheme(
    kind: str,
    options: Optional[Union[TilingSchemeOptions, Mapping[str, Any]]] = None
) -> TilingScheme:
    """Construct a tiling scheme by kind.

    Parameters
    ----------
    kind : str
        ``"geographic"`` or ``"web_mercator"``.
    options : TilingSchemeOptions or mapping, optional
        Constructor options; unset values take the scheme's defaults.

    Returns
    -------
    TilingScheme
        The configured scheme.
    """
    if not isinstance(kind, str):
        raise TypeError(f"kind must be a string, got {type(kind).__name__}")
    if options is None:
        options = TilingSchemeOptions()
    elif not isinstance(options, TilingSchemeOptions):
        options = TilingSchemeOptions.from_mapping(options)

    kwargs = options._set_fields()
    kind = kind.strip().lower().replace("-", "_")

    if kind == "geographic":
        for name in ("rectangle_southwest_in_meters", "rectangle_northeast_in_meters"):
            if name in kwargs:
                raise ValueError(f"Option {name!r} does not apply to a geographic scheme")
        scheme = GeographicTilingScheme(**kwargs)
    elif kind == "web_mercator":
        if "rectangle" in kwargs:
            raise ValueError(
                "A web_mercator scheme derives its rectangle from "
                "rectangle_southwest_in_meters/rectangle_northeast_in_meters"
            )
        scheme = WebMercatorTilingScheme(**kwargs)
    else:
        raise ValueError(f"Unknown tiling scheme kind {kind!r}; expected one of {SCHEME_KINDS}")

    logger.info(f"Configured {scheme!r}")
    return scheme
