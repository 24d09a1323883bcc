"""
Console logging setup for the dllx command line.

The library modules only create loggers; handlers are attached here.
"""

import logging
import sys

import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s | %(levelname)-8s | %(name)s%(reset)s | %(message)s"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """
    Attach a colored console handler to the dllx logger.

    Args:
        level: Level name or number

    Returns:
        The configured "dllx" logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    formatter = colorlog.ColoredFormatter(
        LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger("dllx")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
