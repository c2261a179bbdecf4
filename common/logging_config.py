"""
Logging Configuration.

All modules obtain their logger through :func:`get_logger` so that output
from the geodesy and tiling code shares one format and one stream.
"""

import logging
import sys


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the geodesy and tiling packages.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def set_package_level(level: int) -> None:
    """Set the level of every logger created under the project packages.

    Parameters
    ----------
    level : int
        Logging level, e.g. ``logging.DEBUG`` to trace scheme construction
        and no-result branches.
    """
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not isinstance(logger, logging.Logger):
            continue
        if name.split(".")[0] in ("common", "geospatial", "tiling"):
            logger.setLevel(level)
