"""Round-trip equivalence check between raw diff text and a parsed document.

Both sides are reduced to a flat stream of header and line tokens. The raw
side is tokenized directly from the text, independently of the parser; the
document side is re-emitted from its hunks. The streams must match token
for token.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from .errors import EquivalenceMismatchError
from .models import DiffDocument
from .scanner import NO_NEWLINE_MARKER
from .serialize import DeterministicSerializer

TAIL_WINDOW = 5


@dataclass(frozen=True)
class HunkToken:
    """A hunk header or a single hunk line."""

    kind: str  # "header" | "line"
    header: Optional[str] = None
    op: Optional[str] = None
    text: Optional[str] = None
    no_newline: bool = False

    def describe(self) -> str:
        if self.kind == "header":
            return f"H:{self.header}"
        return f"L:{self.op}:{len(self.text or '')}"


_OPS = {" ": "context", "+": "add", "-": "del"}


def tokenize_raw_diff(raw: str) -> List[HunkToken]:
    """Tokenize raw diff text, skipping path announcements and metadata."""
    tokens: List[HunkToken] = []
    lines = raw.replace("\r\n", "\n").split("\n")
    in_hunk = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("@@ "):
            tokens.append(HunkToken(kind="header", header=line))
            in_hunk = True
        elif line and line[0] in _OPS:
            if not in_hunk and (line.startswith("--- ") or line.startswith("+++ ")):
                i += 1
                continue
            no_newline = i + 1 < len(lines) and lines[i + 1] == NO_NEWLINE_MARKER
            tokens.append(
                HunkToken(kind="line", op=_OPS[line[0]], text=line[1:], no_newline=no_newline)
            )
            if no_newline:
                i += 1
        elif line != NO_NEWLINE_MARKER:
            # Any other non-content line (file boundary, index, ...) leaves the hunk.
            in_hunk = False
        i += 1
    return tokens


def _range(start: int, count: int) -> str:
    # git omits the count only when it is exactly 1.
    return f"{start}" if count == 1 else f"{start},{count}"


def _reconstruct_header(hunk: Mapping[str, Any]) -> str:
    old_seg = _range(hunk["old_start"], hunk["old_lines"])
    new_seg = _range(hunk["new_start"], hunk["new_lines"])
    header = f"@@ -{old_seg} +{new_seg} @@"
    if hunk.get("section_heading"):
        header += f" {hunk['section_heading']}"
    return header


def tokenize_document(document: Union[DiffDocument, Mapping[str, Any]]) -> List[HunkToken]:
    """Tokenize a parsed document or its serialized mapping."""
    if isinstance(document, DiffDocument):
        document = DeterministicSerializer().serialize_document(document)

    tokens: List[HunkToken] = []
    for file in document.get("files", []):
        for hunk in file.get("hunks", []):
            header = hunk.get("raw_header") or _reconstruct_header(hunk)
            tokens.append(HunkToken(kind="header", header=header))
            for line in hunk.get("lines", []):
                tokens.append(
                    HunkToken(
                        kind="line",
                        op=line["op"],
                        text=line["text"],
                        no_newline=bool(line.get("no_newline_at_eof", False)),
                    )
                )
    return tokens


def _drop_trailing_empty_context(tokens: List[HunkToken]) -> List[HunkToken]:
    trimmed = list(tokens)
    while trimmed:
        last = trimmed[-1]
        if last.kind == "line" and last.op == "context" and not last.text:
            trimmed.pop()
            continue
        break
    return trimmed


def _mismatch_reason(doc: HunkToken, raw: HunkToken) -> Optional[str]:
    if doc.kind != raw.kind:
        return f"type mismatch: {doc.kind} vs {raw.kind}"
    if doc.kind == "header":
        if doc.header != raw.header:
            return f"header mismatch: {doc.header!r} vs {raw.header!r}"
        return None
    if doc.op != raw.op or doc.text != raw.text:
        return f"line mismatch: {doc.op} {doc.text!r} vs {raw.op} {raw.text!r}"
    if doc.no_newline != raw.no_newline:
        return f"no-newline flag mismatch: {doc.no_newline} vs {raw.no_newline}"
    return None


def verify_equivalence(
    raw: str, document: Union[DiffDocument, Mapping[str, Any]]
) -> int:
    """Assert that ``document`` reproduces the token stream of ``raw``.

    Returns the number of compared tokens; raises
    :class:`EquivalenceMismatchError` at the first divergence.
    """
    doc_tokens = _drop_trailing_empty_context(tokenize_document(document))
    raw_tokens = tokenize_raw_diff(raw)

    def tails() -> tuple:
        return (
            [token.describe() for token in doc_tokens[-TAIL_WINDOW:]],
            [token.describe() for token in raw_tokens[-TAIL_WINDOW:]],
        )

    for index, (doc_token, raw_token) in enumerate(zip(doc_tokens, raw_tokens)):
        reason = _mismatch_reason(doc_token, raw_token)
        if reason:
            raise EquivalenceMismatchError(index, reason, *tails())

    if len(doc_tokens) != len(raw_tokens):
        index = min(len(doc_tokens), len(raw_tokens))
        raise EquivalenceMismatchError(
            index,
            f"token count mismatch: document={len(doc_tokens)} raw={len(raw_tokens)}",
            *tails(),
        )
    return len(raw_tokens)
