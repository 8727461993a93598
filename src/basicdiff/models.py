"""Immutable data model for parsed unified diffs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple


class FileStatus(str, Enum):
    """Change status of one file block."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    MODE_CHANGED = "modeChanged"
    TYPE_CHANGED = "typeChanged"
    # Reserved: never produced by the classifier.
    UNMERGED = "unmerged"
    UNKNOWN = "unknown"


class LineOp(str, Enum):
    """Operation of a single hunk line."""

    CONTEXT = "context"
    ADD = "add"
    DEL = "del"


@dataclass(frozen=True)
class HunkLine:
    """One line of hunk content."""

    id: str
    op: LineOp
    text: str
    old_number: Optional[int] = None
    new_number: Optional[int] = None
    no_newline_at_eof: bool = False


@dataclass(frozen=True)
class HunkContext:
    """Surrounding source lines attached by the context enricher."""

    radius: int
    before: Optional[Tuple[str, ...]] = None
    after: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class Hunk:
    """One contiguous changed region within a file."""

    id: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: Tuple[HunkLine, ...]
    raw_header: str
    content_hash: str
    section_heading: Optional[str] = None
    context: Optional[HunkContext] = None


@dataclass(frozen=True)
class FileStats:
    """Per-file line and hunk counts."""

    additions: int = 0
    deletions: int = 0
    hunks: int = 0


@dataclass(frozen=True)
class BlobRef:
    """Reference to a content object recorded on the ``index`` line."""

    oid: str


@dataclass(frozen=True)
class FileBlobs:
    """Before/after content object references of a file block."""

    before: Optional[BlobRef] = None
    after: Optional[BlobRef] = None


@dataclass(frozen=True)
class FileDiff:
    """One file's change block."""

    id: str
    path_old: Optional[str]
    path_new: Optional[str]
    status: FileStatus
    is_binary: bool
    stats: FileStats
    hunks: Tuple[Hunk, ...]
    raw_patch: str
    language: Optional[str] = None
    similarity_index: Optional[int] = None
    mode_before: Optional[str] = None
    mode_after: Optional[str] = None
    blobs: Optional[FileBlobs] = None

    @property
    def display_path(self) -> str:
        return self.path_new or self.path_old or ""


@dataclass(frozen=True)
class DiffTotals:
    """Document-level sums over all file blocks."""

    files_changed: int = 0
    additions: int = 0
    deletions: int = 0
    hunks: int = 0
    binary_files_changed: int = 0


@dataclass(frozen=True)
class DiffDocument:
    """Top-level container handed to serialization."""

    files: Tuple[FileDiff, ...]
    totals: DiffTotals
    warnings: Tuple[str, ...] = ()
    meta: Mapping[str, Any] = field(default_factory=dict)
