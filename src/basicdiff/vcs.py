"""Version control system operations for the basic diff tool."""

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional

from .config import DiffConfig
from .errors import (
    ContentLookupError,
    ContentNotFoundError,
    DiffCommandFailedError,
    GitTimeoutError,
    GitUnavailableError,
)
from .scanner import strip_ansi

logger = logging.getLogger(__name__)

_NOT_FOUND_MARKERS = (
    "does not exist",
    "exists on disk, but not in",
    "bad object",
    "invalid object name",
    "not a valid object name",
    "unknown revision",
    "ambiguous argument",
)


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


class GitClient:
    """Git invocations: diff production and content lookup."""

    def __init__(self, config: DiffConfig):
        """Initialize with configuration."""
        self.config = config
        self._git_version: Optional[str] = None

    @property
    def workdir(self) -> Path:
        return Path(self.config.cwd) if self.config.cwd else Path.cwd()

    def _run_git(
        self,
        args: List[str],
        timeout: Optional[int] = None,
    ) -> subprocess.CompletedProcess:
        """Run git command with proper environment and error handling."""
        # Enforce deterministic git behavior across platforms
        cmd = [
            self.config.git_binary,
            "-c",
            "core.autocrlf=false",
            "-c",
            "core.quotepath=true",
        ] + args
        timeout = timeout or self.config.git_timeout
        logger.debug("Running git", extra={"args": args, "cwd": str(self.workdir)})
        try:
            return subprocess.run(
                cmd,
                cwd=self.workdir,
                env=self.config.git_env,
                timeout=timeout,
                check=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.TimeoutExpired as e:
            raise GitTimeoutError(f"git {args[0]}", timeout) from e
        except OSError as e:
            raise GitUnavailableError(self.config.git_binary, str(e)) from e

    def validate_git_version(self) -> str:
        """Return the installed git version string."""
        if self._git_version:
            return self._git_version

        result = self._run_git(["--version"], timeout=10)
        match = re.search(r"git version (\d+\.\d+(?:\.\d+)?)", result.stdout)
        if result.returncode != 0 or not match:
            raise GitUnavailableError(self.config.git_binary, result.stderr or "unknown version")

        self._git_version = match.group(1)
        return self._git_version

    def run_diff(self) -> str:
        """Run ``git diff`` with the configured arguments and return its output."""
        args = self.config.build_git_args()
        result = self._run_git(args)
        if result.returncode != 0:
            logger.warning(
                "git diff failed",
                extra={"args": args, "returncode": result.returncode},
            )
            raise DiffCommandFailedError(["git"] + args, result.returncode, result.stderr)

        logger.info(
            "Collected diff text",
            extra={"args": args, "bytes": len(result.stdout)},
        )
        return strip_ansi(result.stdout)

    def _show(self, spec: str) -> str:
        result = self._run_git(["show", "--end-of-options", spec])
        if result.returncode == 0:
            return _normalize_newlines(result.stdout)

        stderr = result.stderr or ""
        lowered = stderr.lower()
        if any(marker in lowered for marker in _NOT_FOUND_MARKERS):
            raise ContentNotFoundError(spec, stderr)
        raise ContentLookupError(spec, stderr)

    def read_object(self, oid: str) -> str:
        """Full text of a content object by id."""
        return self._show(oid)

    def read_at_revision(self, revision: str, path: str) -> str:
        """Full text of ``path`` as of ``revision``."""
        return self._show(f"{revision}:{path}")

    def read_working_tree(self, path: str) -> str:
        """Current working copy of ``path`` relative to the work directory."""
        root = self.workdir.resolve()
        candidate = (root / path).resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            logger.warning("Refusing path outside work directory", extra={"path": path})
            raise ContentNotFoundError(path, "path is outside the work directory") from None
        data = candidate.read_bytes()
        return _normalize_newlines(data.decode("utf-8"))
