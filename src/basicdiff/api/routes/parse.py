"""Parse routes for Basic Diff API."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from ..models import ParseRequest
from ..services import DiffService

router = APIRouter(tags=["parse"])

logger = logging.getLogger(__name__)

diff_service = DiffService()


@router.post("/parse")
def parse_diff(request: ParseRequest) -> Dict[str, Any]:
    """Parse unified diff text into a structured document."""
    logger.info(
        "Received parse request",
        extra={
            "bytes": len(request.diff_text),
            "strict": request.strict,
            "repo": request.repo_path,
        },
    )

    try:
        result = diff_service.process_parse_request(
            diff_text=request.diff_text,
            file_id_seed=request.file_id_seed,
            strict=request.strict,
            detect_mode_changes=request.detect_mode_changes,
            repo_path=request.repo_path,
            base_ref=request.base_ref,
            head_ref=request.head_ref,
            context_radius=request.context_radius,
        )
        logger.info(
            "Parse request completed",
            extra={
                "ok": result.get("ok"),
                "files": len(result.get("data", {}).get("files", [])),
            },
        )
        return result

    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Parse request failed", extra={"repo": request.repo_path})
        raise HTTPException(
            status_code=500,
            detail={
                "ok": False,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": f"Failed to parse diff: {str(exc)}",
                    "details": {"exception_type": type(exc).__name__},
                },
            },
        ) from exc
