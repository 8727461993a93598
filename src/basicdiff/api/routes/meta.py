"""Meta endpoints for Basic Diff API."""

import logging
from typing import Optional

from fastapi import APIRouter

from .. import __version__
from ...config import DiffConfig
from ...errors import BasicDiffError
from ...vcs import GitClient
from ..models import HealthResponse, VersionResponse

router = APIRouter(tags=["meta"])

logger = logging.getLogger(__name__)


def _get_git_version() -> Optional[str]:
    """Return the installed git version if available."""
    try:
        return GitClient(DiffConfig.from_env()).validate_git_version()
    except BasicDiffError as exc:
        logger.debug("git --version check failed", extra={"code": exc.code})
    return None


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    git_version = _get_git_version()
    logger.info(
        "Health check invoked",
        extra={"git_available": git_version is not None, "git_version": git_version},
    )
    return HealthResponse(
        status="healthy",
        version=__version__,
        git_available=git_version is not None,
        git_version=git_version,
    )


@router.get("/version", response_model=VersionResponse)
def version_info() -> VersionResponse:
    """Version information endpoint."""
    git_version = _get_git_version()
    logger.info("Version endpoint invoked", extra={"git_version": git_version})
    return VersionResponse(
        version=__version__,
        api_version="v1",
        git_version=git_version,
    )


@router.get("/", include_in_schema=False)
def root() -> dict:
    """Root endpoint providing basic API metadata."""
    logger.debug("Root endpoint served")
    return {
        "name": "Basic Diff API",
        "version": __version__,
        "description": "Structured, deterministic parsing of unified git diffs",
        "endpoints": {
            "parse": "POST /parse - Parse unified diff text",
            "health": "GET /health - Health check",
            "version": "GET /version - Version information",
            "docs": "GET /docs - API documentation",
        },
    }
