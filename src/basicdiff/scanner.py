"""Line classification for unified diff text."""

import codecs
import os
import re
from enum import Enum
from typing import Optional, Tuple

NULL_DEVICE = "/dev/null"
NO_NEWLINE_MARKER = "\\ No newline at end of file"

_ANSI_PATTERN = re.compile(r"\x1B\[[0-9;]*m")
_GIT_HEADER_PATTERN = re.compile(r'^diff --git ("(?:[^"\\]|\\.)*"|\S+) ("(?:[^"\\]|\\.)*"|\S+)$')


class LineKind(Enum):
    """Kind of a physical diff line."""

    FILE_BOUNDARY = "file_boundary"
    INDEX = "index"
    OLD_MODE = "old_mode"
    NEW_MODE = "new_mode"
    NEW_FILE_MODE = "new_file_mode"
    DELETED_FILE_MODE = "deleted_file_mode"
    SIMILARITY = "similarity"
    DISSIMILARITY = "dissimilarity"
    RENAME_FROM = "rename_from"
    RENAME_TO = "rename_to"
    COPY_FROM = "copy_from"
    COPY_TO = "copy_to"
    OLD_PATH = "old_path"
    NEW_PATH = "new_path"
    BINARY_NOTICE = "binary_notice"
    BINARY_PATCH = "binary_patch"
    HUNK_HEADER = "hunk_header"
    NO_NEWLINE = "no_newline"
    CONTEXT = "context"
    ADD = "add"
    DEL = "del"
    OTHER = "other"


# Order matters: "--- " and "+++ " must be tried before the bare content prefixes.
_PREFIXES: Tuple[Tuple[str, LineKind], ...] = (
    ("diff --git ", LineKind.FILE_BOUNDARY),
    ("index ", LineKind.INDEX),
    ("old mode ", LineKind.OLD_MODE),
    ("new mode ", LineKind.NEW_MODE),
    ("new file mode ", LineKind.NEW_FILE_MODE),
    ("deleted file mode ", LineKind.DELETED_FILE_MODE),
    ("similarity index ", LineKind.SIMILARITY),
    ("dissimilarity index ", LineKind.DISSIMILARITY),
    ("rename from ", LineKind.RENAME_FROM),
    ("rename to ", LineKind.RENAME_TO),
    ("copy from ", LineKind.COPY_FROM),
    ("copy to ", LineKind.COPY_TO),
    ("--- ", LineKind.OLD_PATH),
    ("+++ ", LineKind.NEW_PATH),
    ("Binary files ", LineKind.BINARY_NOTICE),
    ("GIT binary patch", LineKind.BINARY_PATCH),
    ("@@ ", LineKind.HUNK_HEADER),
)


def classify_line(line: str) -> LineKind:
    """Classify a physical line by literal prefix."""
    if line == NO_NEWLINE_MARKER:
        return LineKind.NO_NEWLINE
    for prefix, kind in _PREFIXES:
        if line.startswith(prefix):
            return kind
    return classify_content(line)


def classify_content(line: str) -> LineKind:
    """Classify a line by its leading character only."""
    if line.startswith(" "):
        return LineKind.CONTEXT
    if line.startswith("+"):
        return LineKind.ADD
    if line.startswith("-"):
        return LineKind.DEL
    return LineKind.OTHER


def strip_ansi(text: str) -> str:
    """Remove color escape sequences from diff text."""
    return _ANSI_PATTERN.sub("", text)


def _unquote(token: str) -> str:
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        raw = codecs.escape_decode(token[1:-1].encode("utf-8"))[0]
        return raw.decode("utf-8", errors="replace")
    return token


def strip_side_prefix(path: str) -> str:
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    return path


def decode_path(value: str, strip_prefix: bool = True) -> Optional[str]:
    """Decode a path token from a ``---``/``+++`` or rename/copy line.

    Returns ``None`` for the null device.
    """
    token = value.split("\t", 1)[0].strip()
    token = _unquote(token)
    if not token or token == NULL_DEVICE:
        return None
    return strip_side_prefix(token) if strip_prefix else token


def is_null_device(value: str) -> bool:
    return _unquote(value.split("\t", 1)[0].strip()) == NULL_DEVICE


def parse_git_header_paths(line: str) -> Tuple[Optional[str], Optional[str]]:
    """Best-effort old/new paths from a ``diff --git a/x b/y`` line."""
    match = _GIT_HEADER_PATTERN.match(line)
    if match:
        return decode_path(match.group(1)), decode_path(match.group(2))

    # Unquoted paths containing spaces: split where both halves name the same file.
    rest = line[len("diff --git "):]
    if rest.startswith("a/"):
        half = (len(rest) - 1) // 2
        old, new = rest[:half], rest[half + 1:]
        if new.startswith("b/") and old[2:] == new[2:]:
            return old[2:], new[2:]
    return None, None


def language_from_path(path: Optional[str]) -> Optional[str]:
    """Best-effort language hint: the lower-cased extension without dot."""
    if not path:
        return None
    ext = os.path.splitext(path)[1]
    if not ext:
        return None
    return ext[1:].lower()
