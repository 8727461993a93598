"""Stable identifiers and content hashes for files and hunks.

Identity and content fingerprints use separate constructions: ids are a
truncated base64url SHA-1 of pipe-joined identifying fields, content hashes
are a full SHA-256 hex digest of a JSON normalization of the hunk body.
"""

import base64
import hashlib
import json
from typing import Iterable, Optional, Sequence, Union

from .models import HunkLine

ID_LENGTH = 12

Part = Union[str, int, None]


def stable_hash(parts: Iterable[Part], length: int = ID_LENGTH) -> str:
    """URL-safe short hash of the pipe-joined parts (``None`` joins as empty)."""
    joined = "|".join("" if part is None else str(part) for part in parts)
    digest = hashlib.sha1(joined.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")[:length]


def file_id(
    seed: str,
    path_old: Optional[str],
    path_new: Optional[str],
    status: str,
    mode_before: Optional[str],
    mode_after: Optional[str],
) -> str:
    return stable_hash([seed, path_old, path_new, status, mode_before, mode_after])


def hunk_id(
    path_old: Optional[str],
    path_new: Optional[str],
    index: int,
    old_start: int,
    old_lines: int,
    new_start: int,
    new_lines: int,
    section_heading: Optional[str],
) -> str:
    file_seed = "|".join([path_old or "", path_new or "", str(index)])
    return stable_hash(
        [file_seed, old_start, old_lines, new_start, new_lines, section_heading, index]
    )


def content_hash(
    old_start: int,
    old_lines: int,
    new_start: int,
    new_lines: int,
    lines: Sequence[HunkLine],
) -> str:
    """SHA-256 of the hunk ranges plus its ordered (op, text) pairs."""
    normalized = {
        "ranges": [old_start, old_lines, new_start, new_lines],
        "lines": [[line.op.value, line.text] for line in lines],
    }
    payload = json.dumps(normalized, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
