import logging
import os
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Handler:
    """Route all pointforge logging to stdout; ``POINTFORGE_LOG_LEVEL`` wins over ``level``."""
    override = os.getenv("POINTFORGE_LOG_LEVEL")
    if override:
        level = override
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return handler
