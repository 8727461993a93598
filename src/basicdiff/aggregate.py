"""Document-level totals."""

from typing import Iterable

from .models import DiffTotals, FileDiff


def compute_totals(files: Iterable[FileDiff]) -> DiffTotals:
    """Sum per-file stats into document totals."""
    files_changed = additions = deletions = hunks = binaries = 0
    for file in files:
        files_changed += 1
        additions += file.stats.additions
        deletions += file.stats.deletions
        hunks += file.stats.hunks
        if file.is_binary:
            binaries += 1
    return DiffTotals(
        files_changed=files_changed,
        additions=additions,
        deletions=deletions,
        hunks=hunks,
        binary_files_changed=binaries,
    )
