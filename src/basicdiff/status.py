"""Change status inference from file block boundary markers."""

from dataclasses import dataclass
from typing import Optional

from .models import FileStatus

_FILE_TYPE_MASK = 0o170000


@dataclass(frozen=True)
class StatusMarkers:
    """Markers collected while scanning one file block."""

    saw_rename: bool = False
    saw_copy: bool = False
    old_is_null: bool = False
    new_is_null: bool = False
    mode_before: Optional[str] = None
    mode_after: Optional[str] = None
    has_hunks: bool = False
    is_binary: bool = False


def _file_type(mode: str) -> Optional[int]:
    try:
        return int(mode, 8) & _FILE_TYPE_MASK
    except ValueError:
        return None


def classify_status(markers: StatusMarkers, detect_mode_changes: bool = False) -> FileStatus:
    """Infer the status of a file block.

    Precedence: rename, copy, added (old side is the null device), deleted
    (new side is the null device), modified. With ``detect_mode_changes`` a
    block that would be ``modified`` but only changes its mode becomes
    ``modeChanged``, or ``typeChanged`` when the file type bits differ.
    """
    if markers.saw_rename:
        return FileStatus.RENAMED
    if markers.saw_copy:
        return FileStatus.COPIED
    if markers.old_is_null:
        return FileStatus.ADDED
    if markers.new_is_null:
        return FileStatus.DELETED

    if detect_mode_changes and markers.mode_before and markers.mode_after:
        if markers.mode_before != markers.mode_after:
            before_type = _file_type(markers.mode_before)
            after_type = _file_type(markers.mode_after)
            if before_type is not None and after_type is not None and before_type != after_type:
                return FileStatus.TYPE_CHANGED
            if not markers.has_hunks and not markers.is_binary:
                return FileStatus.MODE_CHANGED

    return FileStatus.MODIFIED
