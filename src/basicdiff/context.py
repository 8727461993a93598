"""Attach surrounding source lines to parsed hunks.

Content for each file is resolved best-effort: recorded blob ids first,
then explicit revisions, then (after side only) the working copy. Failures
degrade to "no attachment" and never abort enrichment.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Protocol, Tuple

from .errors import BasicDiffError
from .models import DiffDocument, FileDiff, HunkContext

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 20

_FETCH_ERRORS = (BasicDiffError, OSError, ValueError)


class ContentSource(Protocol):
    """Content lookup capability used by :class:`ContextEnricher`."""

    def read_object(self, oid: str) -> str: ...

    def read_at_revision(self, revision: str, path: str) -> str: ...

    def read_working_tree(self, path: str) -> str: ...


def slice_context(
    content: Optional[str], start: int, count: int, radius: int
) -> Optional[Tuple[str, ...]]:
    """Lines ``[start-1-radius, start-1+count+radius)`` clamped to the content."""
    if content is None:
        return None
    all_lines = content.split("\n")
    start_idx = max(0, (start - 1) - radius)
    end_idx = min(len(all_lines), max(0, (start - 1) + count + radius))
    return tuple(all_lines[start_idx:end_idx])


class ContextEnricher:
    """Attaches a ``HunkContext`` to every hunk whose file content resolves."""

    def __init__(
        self,
        source: ContentSource,
        radius: int = DEFAULT_RADIUS,
        base_ref: Optional[str] = None,
        head_ref: Optional[str] = None,
        max_workers: int = 4,
    ):
        """Initialize with a content source and lookup options."""
        if radius < 0:
            raise ValueError("radius cannot be negative")
        self.source = source
        self.radius = radius
        self.base_ref = base_ref
        self.head_ref = head_ref
        self.max_workers = max_workers

    def enrich(self, document: DiffDocument) -> DiffDocument:
        """Return a copy of ``document`` with context attached; ids and hashes are kept."""
        if self.radius == 0 or not document.files:
            return document

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            files = list(pool.map(self.enrich_file, document.files))

        attached = sum(1 for file in files for hunk in file.hunks if hunk.context is not None)
        logger.info(
            "Context enrichment complete",
            extra={"radius": self.radius, "files": len(files), "hunks_with_context": attached},
        )
        return replace(document, files=tuple(files))

    def enrich_file(self, file: FileDiff) -> FileDiff:
        if file.is_binary or not file.hunks:
            return file

        before, after = self._resolve_contents(file)
        if before is None and after is None:
            return file

        hunks = []
        for hunk in file.hunks:
            before_lines = slice_context(before, hunk.old_start, hunk.old_lines, self.radius)
            after_lines = slice_context(after, hunk.new_start, hunk.new_lines, self.radius)
            if before_lines is None and after_lines is None:
                hunks.append(hunk)
                continue
            context = HunkContext(radius=self.radius, before=before_lines, after=after_lines)
            hunks.append(replace(hunk, context=context))
        return replace(file, hunks=tuple(hunks))

    def _resolve_contents(self, file: FileDiff) -> Tuple[Optional[str], Optional[str]]:
        before_steps: List[Tuple[str, Callable[[], str]]] = []
        after_steps: List[Tuple[str, Callable[[], str]]] = []

        blobs = file.blobs
        if blobs and blobs.before:
            before_steps.append(("object", lambda: self.source.read_object(blobs.before.oid)))
        if blobs and blobs.after:
            after_steps.append(("object", lambda: self.source.read_object(blobs.after.oid)))
        if self.base_ref and file.path_old:
            before_steps.append(
                ("revision", lambda: self.source.read_at_revision(self.base_ref, file.path_old))
            )
        if self.head_ref and file.path_new:
            after_steps.append(
                ("revision", lambda: self.source.read_at_revision(self.head_ref, file.path_new))
            )
        if file.path_new:
            after_steps.append(("working_tree", lambda: self.source.read_working_tree(file.path_new)))

        return (
            self._first_resolved(file, "before", before_steps),
            self._first_resolved(file, "after", after_steps),
        )

    def _first_resolved(
        self, file: FileDiff, side: str, steps: List[Tuple[str, Callable[[], str]]]
    ) -> Optional[str]:
        for origin, fetch in steps:
            try:
                return fetch()
            except _FETCH_ERRORS as exc:
                logger.debug(
                    "Context lookup failed",
                    extra={
                        "path": file.display_path,
                        "side": side,
                        "origin": origin,
                        "error": str(exc),
                    },
                )
        return None
