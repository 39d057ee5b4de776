"""Package logger writing to stdout."""
import logging
import sys
from pagedrop.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = logging.DEBUG if settings.environment == "development" else logging.INFO

logger = logging.getLogger("pagedrop")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

# Handled here only, not again by the root logger
logger.propagate = False

__all__ = ["logger"]
