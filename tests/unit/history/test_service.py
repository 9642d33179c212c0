"""Tests for version history operations."""

import pytest

from amarnote.config import Config
from amarnote.core.modules.content.models import Content
from amarnote.core.modules.history.models import DiffType
from amarnote.core.modules.note.models import NoteUpdate
from amarnote.errors import NotFoundError, OutOfRangeError


@pytest.fixture
def config():
    """Snapshot on every content change, keep at most five versions."""
    return Config(_env_file=None, snapshot_interval_seconds=0, history_limit=5)


def paragraphs(*texts):
    return Content.model_validate({"blocks": [{"type": "paragraph", "data": {"text": text}} for text in texts]})


async def write(services, note_id, *texts):
    return await services.note.update_note(note_id, NoteUpdate(content=paragraphs(*texts)))


class TestAutomaticSnapshots:
    """Tests for snapshots taken by updates."""

    async def test_update_snapshots_previous_content(self, services):
        """Test that the content being replaced goes into history."""
        note = await services.note.create_note()
        updated = await write(services, note.id, "first")

        assert len(updated.history) == 1
        assert updated.history[0].content.same_blocks(note.content)
        assert updated.history[0].version == "v1"
        assert updated.history[0].message == "auto-saved version"
        assert updated.version == "v2"

    async def test_title_change_does_not_snapshot(self, services):
        """Test that updates without content leave history alone."""
        note = await services.note.create_note()
        updated = await services.note.update_note(note.id, NoteUpdate(title="Renamed"))

        assert updated.history == []
        assert updated.version == "v1"

    async def test_history_is_bounded(self, services):
        """Test that history never grows past the configured limit."""
        note = await services.note.create_note()
        for i in range(12):
            note = await write(services, note.id, f"edit {i}")
            assert len(note.history) <= 5

        assert len(note.history) == 5
        assert note.history[-1].content.same_blocks(paragraphs("edit 10"))
        assert note.version == "v13"


class TestQuietPolicy:
    """Tests with the default once-a-day policy."""

    @pytest.fixture
    def config(self):
        return Config(_env_file=None)

    async def test_small_edits_are_not_snapshotted(self, services):
        """Test that frequent small edits do not flood history."""
        note = await services.note.create_note()
        for text in ("a", "ab", "abc"):
            note = await write(services, note.id, text)

        assert note.history == []


class TestManualVersion:
    """Tests for create_version."""

    async def test_manual_snapshot(self, services):
        """Test that a manual snapshot records the current content and message."""
        note = await services.note.create_note()
        await write(services, note.id, "draft")

        versioned = await services.history.create_version(note.id, "before rewrite")

        assert versioned.history[-1].message == "before rewrite"
        assert versioned.history[-1].content.same_blocks(paragraphs("draft"))
        assert versioned.version == "v3"


class TestRestore:
    """Tests for restore_version."""

    async def test_restore_replaces_content(self, services):
        """Test that restoring brings back snapshot content and records the replaced one."""
        note = await services.note.create_note()
        await write(services, note.id, "one")
        note = await write(services, note.id, "two")

        restored = await services.history.restore_version(note.id, 1)

        assert restored.content.same_blocks(paragraphs("one"))
        assert restored.history[-1].content.same_blocks(paragraphs("two"))
        assert restored.history[-1].message == "restored to v2"
        assert restored.version == "v4"

    async def test_restore_is_undoable(self, services):
        """Test that restoring the snapshot made by a restore gives back the original content."""
        note = await services.note.create_note()
        await write(services, note.id, "one")
        before = await write(services, note.id, "two", "three")

        first = await services.history.restore_version(note.id, 0)
        second = await services.history.restore_version(note.id, len(first.history) - 1)

        assert second.content.same_blocks(before.content)

    async def test_restored_content_is_a_copy(self, services):
        """Test that editing restored content does not alter the snapshot."""
        note = await services.note.create_note()
        await write(services, note.id, "one")
        await write(services, note.id, "two")
        restored = await services.history.restore_version(note.id, 1)

        edited = await write(services, note.id, "changed")

        assert edited.history[1].content.same_blocks(paragraphs("one"))
        assert restored.content.same_blocks(paragraphs("one"))

    @pytest.mark.parametrize("index", [-1, 1, 99])
    async def test_out_of_range(self, services, index):
        """Test that invalid indexes raise OutOfRangeError."""
        note = await services.note.create_note()
        await write(services, note.id, "one")

        with pytest.raises(OutOfRangeError):
            await services.history.restore_version(note.id, index)

    async def test_missing_note(self, services):
        """Test that restoring a missing note raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await services.history.restore_version("missing", 0)


class TestBranch:
    """Tests for branch_note."""

    async def test_branch_copies_note(self, services):
        """Test that a branch is a new note with copied history and a parent version."""
        note = await services.note.create_note()
        await services.note.update_note(note.id, NoteUpdate(title="Plan"))
        source = await write(services, note.id, "idea")

        branch = await services.history.branch_note(note.id, "alt")

        assert branch.id != source.id
        assert branch.title == "Plan (alt)"
        assert branch.parent_version == source.version
        assert branch.history == source.history
        assert branch.content.same_blocks(source.content)
        assert branch.created_at >= source.created_at
        assert (await services.note.get_note(branch.id)).title == "Plan (alt)"


class TestDiffAndExport:
    """Tests for diff_versions and export_history."""

    async def test_diff_against_current(self, services):
        """Test diffing a snapshot with the live content."""
        note = await services.note.create_note()
        await write(services, note.id, "a")
        await write(services, note.id, "a", "b")

        diffs = await services.history.diff_versions(note.id, 1)

        assert [(d.type, d.block_index) for d in diffs] == [(DiffType.ADDED, 1)]

    async def test_diff_between_snapshots(self, services):
        """Test diffing two snapshots."""
        note = await services.note.create_note()
        await write(services, note.id, "a")
        await write(services, note.id, "b")

        diffs = await services.history.diff_versions(note.id, 1, 0)

        assert [(d.type, d.old_content, d.new_content) for d in diffs] == [(DiffType.MODIFIED, "a", "")]

    async def test_export(self, services):
        """Test that the export carries the note's history and version."""
        note = await services.note.create_note()
        note = await write(services, note.id, "a")

        export = await services.history.export_history(note.id)

        assert export.note_id == note.id
        assert export.current_version == "v2"
        assert export.history == note.history
        assert "currentVersion" in export.to_store()
