"""Tests for change status inference."""

from basicdiff.models import FileStatus
from basicdiff.status import StatusMarkers, classify_status


class TestClassifyStatus:
    """Test status precedence."""

    def test_default_is_modified(self):
        assert classify_status(StatusMarkers(has_hunks=True)) is FileStatus.MODIFIED

    def test_rename_wins_over_everything(self):
        markers = StatusMarkers(saw_rename=True, saw_copy=True, old_is_null=True, new_is_null=True)
        assert classify_status(markers) is FileStatus.RENAMED

    def test_copy_wins_over_added(self):
        markers = StatusMarkers(saw_copy=True, old_is_null=True)
        assert classify_status(markers) is FileStatus.COPIED

    def test_added_wins_over_deleted(self):
        markers = StatusMarkers(old_is_null=True, new_is_null=True)
        assert classify_status(markers) is FileStatus.ADDED

    def test_deleted(self):
        assert classify_status(StatusMarkers(new_is_null=True)) is FileStatus.DELETED


class TestModeChanges:
    """Test the optional mode/type detection."""

    def test_mode_change_ignored_by_default(self):
        markers = StatusMarkers(mode_before="100644", mode_after="100755")
        assert classify_status(markers) is FileStatus.MODIFIED

    def test_mode_only_change(self):
        markers = StatusMarkers(mode_before="100644", mode_after="100755")
        assert classify_status(markers, detect_mode_changes=True) is FileStatus.MODE_CHANGED

    def test_mode_change_with_content_stays_modified(self):
        markers = StatusMarkers(mode_before="100644", mode_after="100755", has_hunks=True)
        assert classify_status(markers, detect_mode_changes=True) is FileStatus.MODIFIED

    def test_type_change(self):
        markers = StatusMarkers(mode_before="100644", mode_after="120000", has_hunks=True)
        assert classify_status(markers, detect_mode_changes=True) is FileStatus.TYPE_CHANGED

    def test_added_not_affected_by_detection(self):
        markers = StatusMarkers(old_is_null=True, mode_after="100644")
        assert classify_status(markers, detect_mode_changes=True) is FileStatus.ADDED
