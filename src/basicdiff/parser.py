"""Unified diff parsing into the structured document model."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .aggregate import compute_totals
from .errors import DiffParseError
from .hunks import HunkBuilder, parse_hunk_header
from .ids import content_hash, file_id, hunk_id
from .models import (
    BlobRef,
    DiffDocument,
    FileBlobs,
    FileDiff,
    FileStats,
    Hunk,
)
from .scanner import (
    LineKind,
    classify_line,
    decode_path,
    is_null_device,
    language_from_path,
    parse_git_header_paths,
)
from .status import StatusMarkers, classify_status

logger = logging.getLogger(__name__)

_INDEX_PATTERN = re.compile(r"^index\s+([0-9a-fA-F]+)\.\.([0-9a-fA-F]+)(?:\s+([0-7]{6}))?")
_TRAILING_MODE_PATTERN = re.compile(r"\s([0-7]{6})$")
_SIMILARITY_PATTERN = re.compile(r"similarity index\s+(\d+)%")


@dataclass
class FileBlock:
    """In-progress state for one file block, owned by a single parse call."""

    raw_lines: List[str]
    header_path_old: Optional[str] = None
    header_path_new: Optional[str] = None
    path_old: Optional[str] = None
    path_new: Optional[str] = None
    old_path_seen: bool = False
    new_path_seen: bool = False
    old_is_null: bool = False
    new_is_null: bool = False
    mode_before: Optional[str] = None
    mode_after: Optional[str] = None
    similarity_index: Optional[int] = None
    old_oid: Optional[str] = None
    new_oid: Optional[str] = None
    is_binary: bool = False
    saw_rename: bool = False
    saw_copy: bool = False
    hunks: List[HunkBuilder] = field(default_factory=list)

    def set_old_path(self, value: str, strip_prefix: bool = True) -> None:
        self.old_path_seen = True
        if is_null_device(value):
            self.old_is_null = True
            self.path_old = None
        else:
            self.path_old = decode_path(value, strip_prefix)

    def set_new_path(self, value: str, strip_prefix: bool = True) -> None:
        self.new_path_seen = True
        if is_null_device(value):
            self.new_is_null = True
            self.path_new = None
        else:
            self.path_new = decode_path(value, strip_prefix)

    @property
    def effective_path_old(self) -> Optional[str]:
        if self.old_path_seen or self.old_is_null:
            return self.path_old
        return self.header_path_old

    @property
    def effective_path_new(self) -> Optional[str]:
        if self.new_path_seen or self.new_is_null:
            return self.path_new
        return self.header_path_new


def _is_zero_oid(oid: str) -> bool:
    return set(oid) == {"0"}


class UnifiedDiffParser:
    """Parses unified diff text in a single forward pass.

    The parser keeps no state between calls; every ``parse`` owns its own
    in-progress file block, so one instance may be shared across threads.
    """

    def __init__(
        self,
        file_id_seed: str = "",
        strict: bool = False,
        detect_mode_changes: bool = False,
    ):
        """Initialize parser options."""
        self.file_id_seed = file_id_seed
        self.strict = strict
        self.detect_mode_changes = detect_mode_changes

    def parse(self, diff_text: str, meta: Optional[Mapping[str, Any]] = None) -> DiffDocument:
        """Parse diff text into an immutable document."""
        lines = diff_text.replace("\r\n", "\n").split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        files: List[FileDiff] = []
        warnings: List[str] = []
        block: Optional[FileBlock] = None
        builder: Optional[HunkBuilder] = None

        for number, line in enumerate(lines, start=1):
            if builder is not None:
                if builder.accepts(line):
                    block.raw_lines.append(line)
                    if classify_line(line) is LineKind.NO_NEWLINE:
                        builder.mark_no_newline()
                    else:
                        builder.add_line(line, number)
                    continue
                builder = None

            kind = classify_line(line)

            if kind is LineKind.FILE_BOUNDARY:
                if block is not None:
                    files.append(self._finalize(block, warnings))
                block = FileBlock(raw_lines=[line])
                block.header_path_old, block.header_path_new = parse_git_header_paths(line)
                continue

            if block is None:
                # Prelude before the first file block (e.g. commit headers).
                continue

            block.raw_lines.append(line)

            if kind is LineKind.HUNK_HEADER:
                header = parse_hunk_header(line)
                if header is None:
                    self._unrecognized(number, line, warnings, "malformed hunk header")
                    continue
                builder = HunkBuilder(header, line, strict=self.strict)
                block.hunks.append(builder)
            elif kind is LineKind.INDEX:
                self._apply_index(block, line)
            elif kind is LineKind.OLD_MODE:
                block.mode_before = line[len("old mode "):].strip()
            elif kind is LineKind.NEW_MODE:
                block.mode_after = line[len("new mode "):].strip()
            elif kind is LineKind.NEW_FILE_MODE:
                block.mode_after = line[len("new file mode "):].strip()
                block.old_is_null = True
            elif kind is LineKind.DELETED_FILE_MODE:
                block.mode_before = line[len("deleted file mode "):].strip()
                block.new_is_null = True
            elif kind is LineKind.SIMILARITY:
                match = _SIMILARITY_PATTERN.match(line)
                if match:
                    block.similarity_index = int(match.group(1))
            elif kind is LineKind.RENAME_FROM:
                block.saw_rename = True
                block.set_old_path(line[len("rename from "):], strip_prefix=False)
            elif kind is LineKind.RENAME_TO:
                block.set_new_path(line[len("rename to "):], strip_prefix=False)
            elif kind is LineKind.COPY_FROM:
                block.saw_copy = True
                block.set_old_path(line[len("copy from "):], strip_prefix=False)
            elif kind is LineKind.COPY_TO:
                block.set_new_path(line[len("copy to "):], strip_prefix=False)
            elif kind is LineKind.OLD_PATH:
                block.set_old_path(line[4:])
            elif kind is LineKind.NEW_PATH:
                block.set_new_path(line[4:])
            elif kind in (LineKind.BINARY_NOTICE, LineKind.BINARY_PATCH):
                block.is_binary = True

        if block is not None:
            files.append(self._finalize(block, warnings))

        totals = compute_totals(files)
        logger.debug(
            "Parsed unified diff",
            extra={
                "files": totals.files_changed,
                "hunks": totals.hunks,
                "additions": totals.additions,
                "deletions": totals.deletions,
                "warnings": len(warnings),
            },
        )
        return DiffDocument(
            files=tuple(files),
            totals=totals,
            warnings=tuple(warnings),
            meta=dict(meta or {}),
        )

    def _unrecognized(self, number: int, line: str, warnings: List[str], reason: str) -> None:
        if self.strict:
            raise DiffParseError(number, line, reason)
        warnings.append(f"line {number}: {reason}")

    def _apply_index(self, block: FileBlock, line: str) -> None:
        match = _INDEX_PATTERN.match(line)
        if match:
            old_oid, new_oid, mode = match.groups()
            if not _is_zero_oid(old_oid):
                block.old_oid = old_oid
            if not _is_zero_oid(new_oid):
                block.new_oid = new_oid
        else:
            mode_match = _TRAILING_MODE_PATTERN.search(line)
            mode = mode_match.group(1) if mode_match else None
        if mode:
            # A mode on the index line means both sides share it.
            block.mode_before = block.mode_before or mode
            block.mode_after = block.mode_after or mode

    def _finalize(self, block: FileBlock, warnings: List[str]) -> FileDiff:
        path_old = block.effective_path_old
        path_new = block.effective_path_new
        status = classify_status(
            StatusMarkers(
                saw_rename=block.saw_rename,
                saw_copy=block.saw_copy,
                old_is_null=block.old_is_null,
                new_is_null=block.new_is_null,
                mode_before=block.mode_before,
                mode_after=block.mode_after,
                has_hunks=bool(block.hunks),
                is_binary=block.is_binary,
            ),
            detect_mode_changes=self.detect_mode_changes,
        )

        hunks = []
        additions = deletions = 0
        for index, builder in enumerate(block.hunks):
            header = builder.header
            if not builder.exhausted:
                warnings.append(
                    f"{path_new or path_old}: hunk {builder.raw_header!r} "
                    f"ended before all announced lines were seen"
                )
            lines = tuple(builder.lines)
            hunks.append(
                Hunk(
                    id=hunk_id(
                        path_old,
                        path_new,
                        index,
                        header.old_start,
                        header.old_lines,
                        header.new_start,
                        header.new_lines,
                        header.section_heading,
                    ),
                    old_start=header.old_start,
                    old_lines=header.old_lines,
                    new_start=header.new_start,
                    new_lines=header.new_lines,
                    section_heading=header.section_heading,
                    lines=lines,
                    raw_header=builder.raw_header,
                    content_hash=content_hash(
                        header.old_start,
                        header.old_lines,
                        header.new_start,
                        header.new_lines,
                        lines,
                    ),
                )
            )
            additions += builder.additions
            deletions += builder.deletions

        blobs = None
        if block.old_oid or block.new_oid:
            blobs = FileBlobs(
                before=BlobRef(block.old_oid) if block.old_oid else None,
                after=BlobRef(block.new_oid) if block.new_oid else None,
            )

        file = FileDiff(
            id=file_id(
                self.file_id_seed,
                path_old,
                path_new,
                status.value,
                block.mode_before,
                block.mode_after,
            ),
            path_old=path_old,
            path_new=path_new,
            status=status,
            is_binary=block.is_binary,
            language=language_from_path(path_new or path_old),
            similarity_index=block.similarity_index,
            mode_before=block.mode_before,
            mode_after=block.mode_after,
            stats=FileStats(additions=additions, deletions=deletions, hunks=len(hunks)),
            hunks=tuple(hunks),
            raw_patch="\n".join(block.raw_lines),
            blobs=blobs,
        )
        logger.debug(
            "Finalized file block",
            extra={
                "path": file.display_path,
                "status": status.value,
                "hunks": len(hunks),
                "binary": file.is_binary,
            },
        )
        return file


def parse_unified_diff(diff_text: str, **options: Any) -> DiffDocument:
    """Parse diff text with a throwaway :class:`UnifiedDiffParser`."""
    return UnifiedDiffParser(**options).parse(diff_text)
