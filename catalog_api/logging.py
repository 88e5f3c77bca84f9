from __future__ import annotations

import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single stdout sink at `level`."""
    logger.remove()
    logger.add(sink=sys.stdout, level=level.upper(), format=LOG_FORMAT)


def get_logger(name: Optional[str] = None):
    if name:
        return logger.bind(name=name)
    return logger
