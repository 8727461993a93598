"""Error definitions and handling for the basic diff tool."""

from typing import Any, Dict, List, Optional


class BasicDiffError(Exception):
    """Base exception for basic diff tool errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with code, message, and optional details."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class GitUnavailableError(BasicDiffError):
    """The git executable could not be started."""

    def __init__(self, binary: str, reason: str):
        super().__init__(
            code="GIT_UNAVAILABLE",
            message=f"Unable to run {binary}: {reason}",
            details={"binary": binary, "reason": reason},
        )


class DiffCommandFailedError(BasicDiffError):
    """The diff-producing command exited with a non-zero status."""

    def __init__(self, args: List[str], returncode: int, stderr: str):
        command = " ".join(args)
        super().__init__(
            code="DIFF_COMMAND_FAILED",
            message=stderr.strip() or f"{command} failed with code {returncode}",
            details={"command": command, "returncode": returncode, "stderr": stderr},
        )


class ContentNotFoundError(BasicDiffError):
    """The requested object or revision/path pair does not exist."""

    def __init__(self, spec: str, stderr: str = ""):
        super().__init__(
            code="CONTENT_NOT_FOUND",
            message=f"Content not found: {spec}",
            details={"spec": spec, "stderr": stderr},
        )


class ContentLookupError(BasicDiffError):
    """Content lookup failed for a reason other than a missing object."""

    def __init__(self, spec: str, stderr: str):
        super().__init__(
            code="CONTENT_LOOKUP_FAILED",
            message=stderr.strip() or f"Content lookup failed: {spec}",
            details={"spec": spec, "stderr": stderr},
        )


class GitTimeoutError(BasicDiffError):
    """A git invocation timed out."""

    def __init__(self, operation: str, timeout_seconds: int):
        super().__init__(
            code="GIT_TIMEOUT",
            message=f"Timeout during {operation} after {timeout_seconds}s",
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        )


class DiffParseError(BasicDiffError):
    """Raised by the strict parser on a line it cannot classify."""

    def __init__(self, line_number: int, line: str, reason: str):
        super().__init__(
            code="DIFF_PARSE_ERROR",
            message=f"Line {line_number}: {reason}",
            details={"line_number": line_number, "line": line, "reason": reason},
        )


class EquivalenceMismatchError(BasicDiffError):
    """Structured document does not reproduce the raw diff token stream."""

    def __init__(
        self,
        index: int,
        reason: str,
        tail_document: List[str],
        tail_raw: List[str],
    ):
        super().__init__(
            code="EQUIVALENCE_MISMATCH",
            message=(
                f"Token streams diverge at index {index}: {reason}\n"
                f"document.tail={tail_document}\nraw.tail={tail_raw}"
            ),
            details={
                "index": index,
                "reason": reason,
                "tail_document": tail_document,
                "tail_raw": tail_raw,
            },
        )
        self.index = index
