"""Application-wide settings and environment loading."""

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()
logger.debug("Environment variables loaded from .env if present")


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer setting", extra={"name": name, "value": value})
        return default


@lru_cache(maxsize=1)
def get_default_context_radius() -> int:
    """Context radius used when the caller does not pass one."""
    return max(0, _int_from_env("BASICDIFF_CONTEXT_RADIUS", 20))


@lru_cache(maxsize=1)
def get_git_timeout() -> int:
    """Timeout in seconds applied to each git invocation."""
    return max(1, _int_from_env("BASICDIFF_GIT_TIMEOUT", 60))


@lru_cache(maxsize=1)
def get_git_binary() -> str:
    """Executable used for git invocations."""
    return os.getenv("BASICDIFF_GIT_BINARY", "git")
