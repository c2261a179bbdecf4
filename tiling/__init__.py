"""
Tiling Module: quadtree tile pyramids over a map projection.

This module provides:
- The TilingScheme interface and shared level arithmetic
- Geographic (equirectangular) and web-mercator tiling schemes
- Constructor-time configuration and a scheme factory
"""

from tiling.base import TilingScheme, validate_level
from tiling.geographic import GeographicTilingScheme
from tiling.web_mercator import WebMercatorTilingScheme
from tiling.config import TilingSchemeOptions, create_tiling_scheme

__all__ = [
    "TilingScheme",
    "validate_level",
    "GeographicTilingScheme",
    "WebMercatorTilingScheme",
    "TilingSchemeOptions",
    "create_tiling_scheme",
]
