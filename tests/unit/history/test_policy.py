"""Tests for the snapshot policy."""

from datetime import timedelta

import pytest

from amarnote.config import Config
from amarnote.core.modules.content.models import Content
from amarnote.core.modules.history.models import NoteHistory
from amarnote.core.modules.history.policy import SnapshotPolicy, next_version

HOUR_MS = 60 * 60 * 1000


def paragraphs(*texts):
    return Content.model_validate({"blocks": [{"type": "paragraph", "data": {"text": text}} for text in texts]})


@pytest.fixture
def policy():
    return SnapshotPolicy(min_interval=timedelta(hours=24), change_threshold=3, history_limit=3)


class TestShouldSnapshot:
    """Tests for the snapshot decision."""

    def test_unchanged_content_never_snapshots(self, policy):
        """Test that identical content is not snapshotted even after a long time."""
        assert not policy.should_snapshot(paragraphs("a"), paragraphs("a"), [], created_at=0, now=100 * 24 * HOUR_MS)

    def test_small_change_within_interval(self, policy):
        """Test that a small change soon after creation is not snapshotted."""
        assert not policy.should_snapshot(paragraphs("a"), paragraphs("b"), [], created_at=0, now=HOUR_MS)

    def test_change_after_interval(self, policy):
        """Test that a change after the interval since creation is snapshotted."""
        assert policy.should_snapshot(paragraphs("a"), paragraphs("b"), [], created_at=0, now=24 * HOUR_MS)

    def test_interval_counts_from_last_snapshot(self, policy):
        """Test that the interval is measured from the newest history entry."""
        history = [NoteHistory(content=paragraphs("a"), updated_at=30 * HOUR_MS, version="v1")]

        assert not policy.should_snapshot(paragraphs("b"), paragraphs("c"), history, created_at=0, now=31 * HOUR_MS)

    def test_many_block_changes_force_snapshot(self, policy):
        """Test that more than the threshold of block diffs snapshots early."""
        assert policy.should_snapshot(paragraphs("a"), paragraphs("a", "b", "c", "d", "e"), [], created_at=0, now=1)

    def test_threshold_is_exclusive(self, policy):
        """Test that exactly the threshold of diffs is not enough."""
        assert not policy.should_snapshot(paragraphs("a"), paragraphs("a", "b", "c", "d"), [], created_at=0, now=1)

    def test_threshold_disabled(self):
        """Test that a disabled threshold leaves only the time rule."""
        policy = SnapshotPolicy(change_threshold=None)

        assert not policy.should_snapshot(paragraphs(), paragraphs(*"abcdefgh"), [], created_at=0, now=1)


class TestTrim:
    """Tests for bounding history."""

    def test_drops_oldest(self, policy):
        """Test that trimming keeps only the newest entries."""
        history = [NoteHistory(content=paragraphs(str(i)), version=f"v{i}") for i in range(1, 6)]

        assert [entry.version for entry in policy.trim(history)] == ["v3", "v4", "v5"]


class TestFromConfig:
    """Tests for building the policy from configuration."""

    def test_values(self):
        """Test that configuration values are carried over."""
        config = Config(_env_file=None, history_limit=5, snapshot_interval_seconds=60, snapshot_change_threshold=None)
        policy = SnapshotPolicy.from_config(config)

        assert policy == SnapshotPolicy(min_interval=timedelta(seconds=60), change_threshold=None, history_limit=5)


class TestNextVersion:
    """Tests for version labels."""

    def test_increments(self):
        """Test that labels count up."""
        assert next_version("v1", 0) == "v2"
        assert next_version("v19", 3) == "v20"

    def test_unparseable_label_uses_history_length(self):
        """Test the fallback for labels outside the vN scheme."""
        assert next_version("draft", 4) == "v5"
