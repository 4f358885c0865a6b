"""
Logging setup for the API process.
"""
import logging
from typing import Optional

from core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the whole process."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
    # httpx logs every request at INFO, which drowns out the request monitor
    logging.getLogger("httpx").setLevel(logging.WARNING)
