"""Tests for human-readable history summaries."""

from amarnote.core.modules.content.models import Content
from amarnote.core.modules.history.models import NoteHistory
from amarnote.core.modules.history.summary import time_ago, version_summary

MINUTE_MS = 60 * 1000
DAY_MS = 24 * 60 * MINUTE_MS


class TestTimeAgo:
    """Tests for relative time labels."""

    def test_labels(self):
        """Test each range of relative labels."""
        now = 100 * DAY_MS

        assert time_ago(now - 10_000, now) == "just now"
        assert time_ago(now - MINUTE_MS, now) == "1 minute ago"
        assert time_ago(now - 5 * MINUTE_MS, now) == "5 minutes ago"
        assert time_ago(now - 3 * 60 * MINUTE_MS, now) == "3 hours ago"
        assert time_ago(now - 2 * DAY_MS, now) == "2 days ago"

    def test_old_entries_show_date(self):
        """Test that entries older than a month show their date."""
        assert time_ago(0, 40 * DAY_MS) == "1970-01-01"


class TestVersionSummary:
    """Tests for version summaries."""

    def test_summary(self):
        """Test the summary line format."""
        history = [NoteHistory(content=Content(), updated_at=0, version="v3", message="auto-saved version")]

        assert version_summary(history, 0, 5 * MINUTE_MS) == "v3 • 5 minutes ago • auto-saved version"

    def test_out_of_range_is_empty(self):
        """Test that an invalid index gives an empty summary."""
        assert version_summary([], 0, 0) == ""
