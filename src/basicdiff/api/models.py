"""Pydantic models for Basic Diff API requests and responses."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ParseRequest(BaseModel):
    """Request model for the parse endpoint."""

    diff_text: str = Field(
        ...,
        description="Unified diff text as emitted by git diff",
        examples=["diff --git a/x.txt b/x.txt\n--- a/x.txt\n+++ b/x.txt\n@@ -1 +1 @@\n-a\n+b\n"],
    )
    file_id_seed: str = Field(
        "",
        description="Extra seed mixed into every file id",
    )
    strict: bool = Field(
        False,
        description="Reject unexpected lines inside hunks instead of keeping them as context",
    )
    detect_mode_changes: bool = Field(
        False,
        description="Report mode-only and file-type changes as modeChanged/typeChanged",
    )
    repo_path: Optional[str] = Field(
        None,
        description="Local repository used to attach surrounding code context",
        examples=["/srv/checkouts/project"],
    )
    base_ref: Optional[str] = Field(
        None,
        description="Revision holding the before side of the diff",
        examples=["main"],
    )
    head_ref: Optional[str] = Field(
        None,
        description="Revision holding the after side of the diff",
        examples=["feature/new-feature"],
    )
    context_radius: Optional[int] = Field(
        None,
        description="Context lines attached around each hunk; 0 disables context",
        ge=0,
        le=10000,
    )

    @field_validator("repo_path")
    @classmethod
    def repo_path_must_be_absolute(cls, v):
        """Only absolute local paths are accepted."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("repo_path cannot be empty")
        if not (v.startswith("/") or (len(v) > 2 and v[1] == ":")):
            raise ValueError("repo_path must be an absolute path")
        return v

    @field_validator("base_ref", "head_ref")
    @classmethod
    def ref_must_be_valid(cls, v):
        """Refs must be non-empty and must not look like command line options."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("ref cannot be empty")
        if v.startswith("-"):
            raise ValueError("ref cannot start with '-'")
        return v


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., examples=["healthy"])
    version: str = Field(..., examples=["1.0.0"])
    git_available: bool = Field(..., examples=[True])
    git_version: Optional[str] = Field(None, examples=["2.43.0"])


class VersionResponse(BaseModel):
    """Response model for version endpoint."""

    version: str = Field(..., examples=["1.0.0"])
    api_version: str = Field(..., examples=["v1"])
    git_version: Optional[str] = Field(None, examples=["2.43.0"])
    supported_features: list = Field(
        default_factory=lambda: [
            "deterministic_output",
            "stable_ids",
            "rename_detection",
            "binary_detection",
            "context_enrichment",
        ]
    )
