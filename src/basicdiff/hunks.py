"""Hunk header parsing and hunk line accumulation."""

import logging
import re
from dataclasses import dataclass, replace
from typing import List, Optional

from .errors import DiffParseError
from .models import HunkLine, LineOp
from .scanner import LineKind, classify_content, classify_line

logger = logging.getLogger(__name__)

HUNK_HEADER_PATTERN = re.compile(
    r"^@@\s+-([0-9]+)(?:,([0-9]+))?\s+\+([0-9]+)(?:,([0-9]+))?\s+@@(.*)$"
)

_CONTENT_OPS = {
    LineKind.CONTEXT: LineOp.CONTEXT,
    LineKind.ADD: LineOp.ADD,
    LineKind.DEL: LineOp.DEL,
}


@dataclass(frozen=True)
class HunkHeader:
    """Parsed ``@@ -a,b +c,d @@ heading`` values."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    section_heading: Optional[str]


def parse_hunk_header(line: str) -> Optional[HunkHeader]:
    """Parse a hunk header; omitted counts default to 1."""
    match = HUNK_HEADER_PATTERN.match(line)
    if not match:
        return None
    heading = match.group(5).strip() or None
    return HunkHeader(
        old_start=int(match.group(1)),
        old_lines=int(match.group(2) or "1"),
        new_start=int(match.group(3)),
        new_lines=int(match.group(4) or "1"),
        section_heading=heading,
    )


class HunkBuilder:
    """Consumes the lines of one hunk with running old/new counters."""

    def __init__(self, header: HunkHeader, raw_header: str, strict: bool = False):
        self.header = header
        self.raw_header = raw_header
        self.strict = strict
        self.lines: List[HunkLine] = []
        self.additions = 0
        self.deletions = 0
        self._old_number = header.old_start
        self._new_number = header.new_start
        self._old_remaining = header.old_lines
        self._new_remaining = header.new_lines

    @property
    def exhausted(self) -> bool:
        """True once every line announced by the header has been seen."""
        return self._old_remaining <= 0 and self._new_remaining <= 0

    def accepts(self, line: str) -> bool:
        """Whether ``line`` still belongs to this hunk."""
        kind = classify_line(line)
        if kind in (LineKind.FILE_BOUNDARY, LineKind.HUNK_HEADER):
            return False
        if kind in (LineKind.OLD_PATH, LineKind.NEW_PATH):
            # "--- x" is also a deleted line reading "-- x".
            return not self.exhausted
        if kind is LineKind.NO_NEWLINE:
            return True
        if kind in _CONTENT_OPS:
            return True
        if kind is LineKind.OTHER:
            return not self.exhausted
        return False

    def add_line(self, line: str, line_number: int = 0) -> HunkLine:
        """Append one content line and advance the counters."""
        op = _CONTENT_OPS.get(classify_content(line))
        text = line[1:]
        if op is None:
            if self.strict:
                raise DiffParseError(line_number, line, "unexpected line prefix inside hunk")
            logger.debug(
                "Treating unexpected hunk line as context",
                extra={"line_number": line_number, "line": line[:80]},
            )
            op = LineOp.CONTEXT
            text = line

        old_number: Optional[int] = None
        new_number: Optional[int] = None
        if op is LineOp.CONTEXT:
            old_number, new_number = self._old_number, self._new_number
            self._old_number += 1
            self._new_number += 1
            self._old_remaining -= 1
            self._new_remaining -= 1
        elif op is LineOp.ADD:
            new_number = self._new_number
            self._new_number += 1
            self._new_remaining -= 1
            self.additions += 1
        else:
            old_number = self._old_number
            self._old_number += 1
            self._old_remaining -= 1
            self.deletions += 1

        entry = HunkLine(
            id=str(len(self.lines) + 1),
            op=op,
            text=text,
            old_number=old_number,
            new_number=new_number,
        )
        self.lines.append(entry)
        return entry

    def mark_no_newline(self) -> None:
        """Flag the most recent line; a marker with no preceding line is ignored."""
        if self.lines:
            self.lines[-1] = replace(self.lines[-1], no_newline_at_eof=True)
