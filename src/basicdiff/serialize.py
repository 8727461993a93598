"""Deterministic serialization for the basic diff tool."""

import hashlib
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import (
    BlobRef,
    DiffDocument,
    DiffTotals,
    FileBlobs,
    FileDiff,
    FileStats,
    FileStatus,
    Hunk,
    HunkContext,
    HunkLine,
    LineOp,
)

logger = logging.getLogger(__name__)

# Meta keys that vary between otherwise identical runs.
_VOLATILE_META_KEYS = ("checksum", "created_at", "cwd")


class DeterministicSerializer:
    """Handles deterministic JSON serialization with stable key ordering.

    Files, hunks and lines keep their input order; only mapping keys are
    sorted when rendering JSON.
    """

    def serialize_document(self, document: DiffDocument) -> Dict[str, Any]:
        """Serialize the complete document to a plain dictionary."""
        logger.debug(
            "Serializing document",
            extra={"files": len(document.files), "warnings": len(document.warnings)},
        )

        payload: Dict[str, Any] = {
            "meta": dict(document.meta),
            "totals": self._serialize_totals(document.totals),
            "files": [self._serialize_file(file) for file in document.files],
        }
        if document.warnings:
            payload["warnings"] = list(document.warnings)

        checksum = self._compute_checksum(payload)
        payload["meta"]["checksum"] = checksum

        logger.debug("Serialization finished", extra={"checksum": checksum})
        return payload

    def _serialize_totals(self, totals: DiffTotals) -> Dict[str, Any]:
        return {
            "files_changed": totals.files_changed,
            "additions": totals.additions,
            "deletions": totals.deletions,
            "hunks": totals.hunks,
            "binary_files_changed": totals.binary_files_changed,
        }

    def _serialize_file(self, file: FileDiff) -> Dict[str, Any]:
        """Serialize a single file to dictionary."""
        file_data: Dict[str, Any] = {
            "id": file.id,
            "status": file.status.value,
            "path_old": file.path_old,
            "path_new": file.path_new,
            "is_binary": file.is_binary,
            "stats": {
                "additions": file.stats.additions,
                "deletions": file.stats.deletions,
                "hunks": file.stats.hunks,
            },
            "hunks": [self._serialize_hunk(hunk) for hunk in file.hunks],
            "raw_patch": file.raw_patch,
        }

        if file.language is not None:
            file_data["language"] = file.language

        if file.similarity_index is not None:
            file_data["similarity_index"] = file.similarity_index

        if file.mode_before is not None:
            file_data["mode_before"] = file.mode_before

        if file.mode_after is not None:
            file_data["mode_after"] = file.mode_after

        if file.blobs:
            blobs: Dict[str, Any] = {}
            if file.blobs.before:
                blobs["before"] = {"oid": file.blobs.before.oid}
            if file.blobs.after:
                blobs["after"] = {"oid": file.blobs.after.oid}
            file_data["attachments"] = {"blobs": blobs}

        return file_data

    def _serialize_hunk(self, hunk: Hunk) -> Dict[str, Any]:
        hunk_data: Dict[str, Any] = {
            "id": hunk.id,
            "old_start": hunk.old_start,
            "old_lines": hunk.old_lines,
            "new_start": hunk.new_start,
            "new_lines": hunk.new_lines,
            "raw_header": hunk.raw_header,
            "content_hash": hunk.content_hash,
            "lines": [self._serialize_line(line) for line in hunk.lines],
        }

        if hunk.section_heading is not None:
            hunk_data["section_heading"] = hunk.section_heading

        if hunk.context is not None:
            context: Dict[str, Any] = {"radius": hunk.context.radius}
            if hunk.context.before is not None:
                context["before"] = list(hunk.context.before)
            if hunk.context.after is not None:
                context["after"] = list(hunk.context.after)
            hunk_data["attachments"] = {"context": context}

        return hunk_data

    def _serialize_line(self, line: HunkLine) -> Dict[str, Any]:
        line_data: Dict[str, Any] = {
            "id": line.id,
            "op": line.op.value,
            "text": line.text,
            "old_number": line.old_number,
            "new_number": line.new_number,
        }
        if line.no_newline_at_eof:
            line_data["no_newline_at_eof"] = True
        return line_data

    def _compute_checksum(self, payload: Dict[str, Any]) -> str:
        """Compute SHA-256 checksum of the payload without volatile meta keys."""
        stable = dict(payload)
        stable["meta"] = {
            key: value
            for key, value in payload.get("meta", {}).items()
            if key not in _VOLATILE_META_KEYS
        }
        checksum = hashlib.sha256(self._to_deterministic_json_bytes(stable)).hexdigest()
        logger.debug("Computed payload checksum", extra={"checksum": checksum})
        return checksum

    def _to_deterministic_json_bytes(self, obj: Any) -> bytes:
        """Convert object to deterministic JSON bytes."""
        json_str = json.dumps(
            obj,
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":"),
            indent=None,
        )
        return json_str.encode("utf-8", errors="replace")

    def to_json_string(self, payload: Dict[str, Any]) -> str:
        """Convert payload to pretty-printed JSON string."""
        logger.debug("Rendering payload to JSON string")
        return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2)

    def create_success_envelope(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create success envelope around payload."""
        logger.debug("Creating success envelope")
        return {"ok": True, "data": payload}

    def create_error_envelope(
        self, error_code: str, error_message: str, details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Create error envelope."""
        logger.debug("Creating error envelope", extra={"code": error_code})
        error_data = {
            "code": error_code,
            "message": error_message,
        }
        if details:
            error_data["details"] = details

        return {"ok": False, "error": error_data}


def _optional_lines(values: Optional[List[str]]) -> Optional[tuple]:
    return tuple(values) if values is not None else None


def _load_line(data: Mapping[str, Any]) -> HunkLine:
    return HunkLine(
        id=data["id"],
        op=LineOp(data["op"]),
        text=data["text"],
        old_number=data.get("old_number"),
        new_number=data.get("new_number"),
        no_newline_at_eof=bool(data.get("no_newline_at_eof", False)),
    )


def _load_hunk(data: Mapping[str, Any]) -> Hunk:
    context = None
    context_data = data.get("attachments", {}).get("context")
    if context_data is not None:
        context = HunkContext(
            radius=context_data["radius"],
            before=_optional_lines(context_data.get("before")),
            after=_optional_lines(context_data.get("after")),
        )
    return Hunk(
        id=data["id"],
        old_start=data["old_start"],
        old_lines=data["old_lines"],
        new_start=data["new_start"],
        new_lines=data["new_lines"],
        section_heading=data.get("section_heading"),
        lines=tuple(_load_line(line) for line in data.get("lines", [])),
        raw_header=data["raw_header"],
        content_hash=data["content_hash"],
        context=context,
    )


def _load_file(data: Mapping[str, Any]) -> FileDiff:
    blobs = None
    blobs_data = data.get("attachments", {}).get("blobs")
    if blobs_data is not None:
        before = blobs_data.get("before")
        after = blobs_data.get("after")
        blobs = FileBlobs(
            before=BlobRef(before["oid"]) if before else None,
            after=BlobRef(after["oid"]) if after else None,
        )
    stats = data["stats"]
    return FileDiff(
        id=data["id"],
        path_old=data.get("path_old"),
        path_new=data.get("path_new"),
        status=FileStatus(data["status"]),
        is_binary=data["is_binary"],
        language=data.get("language"),
        similarity_index=data.get("similarity_index"),
        mode_before=data.get("mode_before"),
        mode_after=data.get("mode_after"),
        stats=FileStats(
            additions=stats["additions"],
            deletions=stats["deletions"],
            hunks=stats["hunks"],
        ),
        hunks=tuple(_load_hunk(hunk) for hunk in data.get("hunks", [])),
        raw_patch=data["raw_patch"],
        blobs=blobs,
    )


def load_document(payload: Mapping[str, Any]) -> DiffDocument:
    """Rebuild a :class:`DiffDocument` from :meth:`DeterministicSerializer.serialize_document` output."""
    totals = payload["totals"]
    meta = {key: value for key, value in payload.get("meta", {}).items() if key != "checksum"}
    return DiffDocument(
        files=tuple(_load_file(file) for file in payload.get("files", [])),
        totals=DiffTotals(
            files_changed=totals["files_changed"],
            additions=totals["additions"],
            deletions=totals["deletions"],
            hunks=totals["hunks"],
            binary_files_changed=totals["binary_files_changed"],
        ),
        warnings=tuple(payload.get("warnings", [])),
        meta=meta,
    )
