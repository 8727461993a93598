"""Configuration management for the basic diff tool."""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .settings import get_default_context_radius, get_git_binary, get_git_timeout

COLOR_MODES = ("auto", "always", "never")


@dataclass(frozen=True)
class DiffConfig:
    """Configuration for diff generation, parsing and enrichment."""

    # Diff selection
    refs: Tuple[str, ...] = ()
    commits_range: Optional[str] = None
    staged: bool = False
    unified_context: Optional[int] = None
    color_mode: str = "never"
    word_diff: bool = False
    name_only: bool = False
    stat: bool = False

    # Parsing
    file_id_seed: str = ""
    strict: bool = False
    detect_mode_changes: bool = False

    # Context enrichment
    context_radius: int = 20
    no_context: bool = False
    max_workers: int = 4

    # Input / output
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    cwd: Optional[str] = None

    # Git environment
    git_binary: str = "git"
    git_timeout: int = 60

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if len(self.refs) > 2:
            raise ValueError("at most two refs may be given")
        if self.unified_context is not None and self.unified_context < 0:
            raise ValueError("unified_context cannot be negative")
        if self.color_mode not in COLOR_MODES:
            raise ValueError(f"color_mode must be one of {', '.join(COLOR_MODES)}")
        if self.context_radius < 0:
            raise ValueError("context_radius cannot be negative")
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        if self.git_timeout <= 0:
            raise ValueError("git_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> "DiffConfig":
        """Build a config whose defaults come from the environment settings."""
        values: Dict[str, Any] = {
            "context_radius": get_default_context_radius(),
            "git_binary": get_git_binary(),
            "git_timeout": get_git_timeout(),
        }
        values.update(overrides)
        return cls(**values)

    @property
    def base_ref(self) -> Optional[str]:
        return self.refs[0] if self.refs else None

    @property
    def head_ref(self) -> Optional[str]:
        return self.refs[1] if len(self.refs) > 1 else None

    @property
    def effective_radius(self) -> int:
        """Radius actually applied; 0 disables context enrichment."""
        return 0 if self.no_context else self.context_radius

    @property
    def git_env(self) -> Dict[str, str]:
        """Get Git environment variables for deterministic output."""
        env = os.environ.copy()
        env.update(
            {
                "LC_ALL": "C",
                "GIT_TERMINAL_PROMPT": "0",
                "GIT_PAGER": "cat",
                "GIT_ASKPASS": "echo",
                "SSH_ASKPASS": "echo",
                "GCM_INTERACTIVE": "never",
            }
        )
        return env

    def build_git_args(self) -> List[str]:
        """Arguments passed to git for producing the diff text."""
        args = ["diff"]

        if self.color_mode == "always":
            args.append("--color=always")
        elif self.color_mode == "never":
            args.append("--no-color")
        else:
            args.append("--color")

        if self.word_diff:
            args.append("--word-diff")
        if self.stat:
            args.append("--stat")
        if self.name_only:
            args.append("--name-only")
        if self.unified_context is not None:
            args.append(f"-U{self.unified_context}")

        range_arg = (self.commits_range or "").strip()
        if range_arg:
            args.append(range_arg)
        elif self.base_ref and self.head_ref:
            args.append(f"{self.base_ref}..{self.head_ref}")
        elif self.base_ref:
            args.append(self.base_ref)
        elif self.staged:
            args.append("--cached")
        return args

    def to_meta_dict(self) -> Dict[str, Any]:
        """Convert config to the document ``meta.git`` section."""
        return {
            "base_ref": self.base_ref,
            "head_ref": self.head_ref,
            "range_arg": self.commits_range,
            "staged": self.staged,
            "args": self.build_git_args(),
            "color_mode": self.color_mode,
            "word_diff": self.word_diff,
            "name_only": self.name_only,
            "stat": self.stat,
            "unified_context": self.unified_context,
            "context_radius": self.effective_radius,
        }
