"""Logging setup for the site backend."""

import os
import sys
from typing import Optional

from loguru import logger

from lib.wordpress.config import WordPressConfig

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} | {message}"


def configure_logging(config: WordPressConfig, level: Optional[str] = None) -> int:
    """Replace loguru's default sink. Returns the new handler id.

    DEBUG outside production, INFO in production; LOG_LEVEL overrides both.
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL") or ("INFO" if config.is_production else "DEBUG")

    logger.remove()
    # catch=True: a failing sink never propagates into request handling
    return logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper(), catch=True)
