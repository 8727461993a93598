"""Basic diff.

Parses unified git diffs into a deterministic JSON document with stable,
content-derived ids for every file, hunk and line.
"""

from .models import DiffDocument, FileDiff, FileStatus, Hunk, HunkLine, LineOp
from .parser import UnifiedDiffParser, parse_unified_diff

__version__ = "1.0.0"

__all__ = [
    "DiffDocument",
    "FileDiff",
    "FileStatus",
    "Hunk",
    "HunkLine",
    "LineOp",
    "UnifiedDiffParser",
    "parse_unified_diff",
]
