"""Logging configuration for the basic diff CLI and API."""

import logging
import os
import sys
from typing import Optional

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None, quiet: bool = False) -> None:
    """Configure application-wide logging once.

    Records go to stderr so JSON written to stdout stays machine readable.
    ``quiet`` raises the threshold to warnings regardless of ``LOG_LEVEL``.
    """
    if logging.getLogger().handlers:
        return

    log_level = "WARNING" if quiet else level or os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT, stream=sys.stderr)
