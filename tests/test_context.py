"""Tests for context enrichment."""

import pytest

from basicdiff import parse_unified_diff
from basicdiff.context import ContextEnricher, slice_context
from basicdiff.errors import ContentLookupError, ContentNotFoundError

from diff_samples import ADDED_DIFF, BINARY_DIFF, MODIFIED_DIFF

FILE_TEXT = "\n".join(f"line {n}" for n in range(1, 31))


class FakeSource:
    """In-memory content source recording every lookup."""

    def __init__(self, objects=None, revisions=None, working=None):
        self.objects = objects or {}
        self.revisions = revisions or {}
        self.working = working or {}
        self.calls = []

    def read_object(self, oid):
        self.calls.append(("object", oid))
        if oid not in self.objects:
            raise ContentNotFoundError(oid)
        return self.objects[oid]

    def read_at_revision(self, revision, path):
        self.calls.append(("revision", f"{revision}:{path}"))
        key = (revision, path)
        if key not in self.revisions:
            raise ContentLookupError(f"{revision}:{path}", "fatal: boom")
        return self.revisions[key]

    def read_working_tree(self, path):
        self.calls.append(("working_tree", path))
        if path not in self.working:
            raise FileNotFoundError(path)
        return self.working[path]


class TestSliceContext:
    """Test the clamped window."""

    def test_window(self):
        content = "\n".join(str(n) for n in range(1, 11))
        assert slice_context(content, 5, 2, 1) == ("4", "5", "6", "7")

    def test_clamped_at_start(self):
        content = "a\nb\nc"
        assert slice_context(content, 1, 1, 5) == ("a", "b", "c")

    def test_zero_start(self):
        assert slice_context("a\nb", 0, 0, 1) == ()

    def test_missing_content(self):
        assert slice_context(None, 1, 1, 3) is None


class TestContextEnricher:
    """Test resolution order and degradation."""

    def test_blob_ids_are_used_first(self):
        source = FakeSource(
            objects={"83db48f": FILE_TEXT, "bf269f4": FILE_TEXT},
            working={"src/app.py": "ignored"},
        )
        document = parse_unified_diff(MODIFIED_DIFF)
        enriched = ContextEnricher(source, radius=2).enrich(document)

        context = enriched.files[0].hunks[0].context
        assert context.radius == 2
        assert context.before == tuple(f"line {n}" for n in range(8, 15))
        assert context.after == tuple(f"line {n}" for n in range(8, 16))
        assert ("working_tree", "src/app.py") not in source.calls

    def test_revisions_then_working_tree(self):
        source = FakeSource(
            revisions={("main", "src/app.py"): FILE_TEXT},
            working={"src/app.py": FILE_TEXT},
        )
        document = parse_unified_diff(MODIFIED_DIFF)
        enriched = ContextEnricher(source, radius=1, base_ref="main", head_ref="topic").enrich(
            document
        )

        context = enriched.files[0].hunks[0].context
        assert context.before is not None
        assert context.after is not None
        assert source.calls == [
            ("object", "83db48f"),
            ("revision", "main:src/app.py"),
            ("object", "bf269f4"),
            ("revision", "topic:src/app.py"),
            ("working_tree", "src/app.py"),
        ]

    def test_failures_degrade_to_no_context(self):
        document = parse_unified_diff(MODIFIED_DIFF)
        enriched = ContextEnricher(FakeSource(), radius=3).enrich(document)

        assert enriched.files[0].hunks[0].context is None
        assert enriched == document

    def test_one_side_only(self):
        source = FakeSource(working={"docs/notes.md": "# Notes\nfirst entry"})
        enriched = ContextEnricher(source, radius=5).enrich(parse_unified_diff(ADDED_DIFF))

        context = enriched.files[0].hunks[0].context
        assert context.before is None
        assert context.after == ("# Notes", "first entry")

    def test_ids_and_hashes_preserved(self):
        source = FakeSource(objects={"83db48f": FILE_TEXT, "bf269f4": FILE_TEXT})
        document = parse_unified_diff(MODIFIED_DIFF)
        enriched = ContextEnricher(source, radius=4).enrich(document)

        original, attached = document.files[0], enriched.files[0]
        assert original.id == attached.id
        assert original.hunks[0].id == attached.hunks[0].id
        assert original.hunks[0].content_hash == attached.hunks[0].content_hash
        assert original.hunks[0].context is None

    def test_binary_files_skipped(self):
        source = FakeSource(objects={"3333333": "x", "4444444": "y"})
        document = parse_unified_diff(BINARY_DIFF)
        assert ContextEnricher(source).enrich(document) == document
        assert source.calls == []

    def test_radius_zero_disables(self):
        source = FakeSource(objects={"83db48f": FILE_TEXT})
        document = parse_unified_diff(MODIFIED_DIFF)
        assert ContextEnricher(source, radius=0).enrich(document) is document
        assert source.calls == []

    def test_unexpected_lookup_error_degrades(self):
        """A path the source cannot handle leaves the hunk without context."""

        class BrokenSource(FakeSource):
            def read_working_tree(self, path):
                raise ValueError("embedded null byte")

        source = BrokenSource(objects={"83db48f": FILE_TEXT})
        document = parse_unified_diff(MODIFIED_DIFF)
        enriched = ContextEnricher(source, radius=2).enrich(document)

        context = enriched.files[0].hunks[0].context
        assert context.before is not None
        assert context.after is None

    def test_negative_radius_rejected(self):
        with pytest.raises(ValueError):
            ContextEnricher(FakeSource(), radius=-1)
