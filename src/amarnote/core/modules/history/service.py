import structlog

from amarnote.core.core import Service
from amarnote.core.modules.content.models import Content
from amarnote.core.modules.history.diff import compare_versions
from amarnote.core.modules.history.models import AUTO_SAVE_MESSAGE, HistoryExport, NoteHistory, VersionDiff
from amarnote.core.modules.history.policy import SnapshotPolicy, next_version
from amarnote.core.modules.note.models import Note
from amarnote.errors import OutOfRangeError
from amarnote.utils import now_ms

logger = structlog.get_logger(__name__)


class HistoryService(Service):
    """Snapshots, diffs, restores and branches note versions."""

    _policy: SnapshotPolicy | None = None

    @property
    def policy(self) -> SnapshotPolicy:
        if self._policy is None:
            self._policy = SnapshotPolicy.from_config(self.core.config)
        return self._policy

    def apply_snapshot_policy(self, note: Note, new_content: Content, now: int) -> Note:
        """Return the note with its current content snapshotted if the policy asks for it.

        Called by the store before new content replaces the old one.
        """
        if not self.policy.should_snapshot(note.content, new_content, note.history, note.created_at, now):
            return note
        logger.debug("auto_snapshot", note_id=note.id, version=note.version)
        return self._with_snapshot(note, AUTO_SAVE_MESSAGE, now)

    async def get_history(self, note_id: str) -> list[NoteHistory]:
        note = await self.core.services.note.get_note(note_id)
        return note.history

    async def create_version(self, note_id: str, message: str | None = None) -> Note:
        """Snapshot the current content on demand."""
        async with self.core.services.note.lock(note_id):
            note = await self.core.services.note.get_note(note_id)
            now = now_ms()
            updated = self._with_snapshot(note, message or "manual version", now).model_copy(update={"updated_at": now})
            return await self.core.services.note.save_note(updated)

    async def restore_version(self, note_id: str, version_index: int) -> Note:
        """Replace the live content with a history entry, keeping the current content as a new snapshot."""
        async with self.core.services.note.lock(note_id):
            note = await self.core.services.note.get_note(note_id)
            target = self._history_entry(note, version_index)

            now = now_ms()
            restored = self._with_snapshot(note, f"restored to {target.version}", now).model_copy(
                update={"content": target.content.model_copy(deep=True), "updated_at": now}
            )
            logger.info("version_restored", note_id=note_id, restored_from=target.version, version=restored.version)
            return await self.core.services.note.save_note(restored)

    async def branch_note(self, note_id: str, branch_name: str) -> Note:
        """Clone a note under a new id, remembering the version it was branched from."""
        source = await self.core.services.note.get_note(note_id)
        now = now_ms()
        branch = source.model_copy(
            deep=True,
            update={
                "id": self.core.services.note.new_note_id(anonymous=source.is_anonymous),
                "title": f"{source.title} ({branch_name})",
                "parent_version": source.version,
                "created_at": now,
                "updated_at": now,
            },
        )
        logger.info("note_branched", note_id=note_id, branch_id=branch.id, parent_version=source.version)
        return await self.core.services.note.insert_note(branch)

    async def diff_versions(self, note_id: str, version_index: int, other_index: int | None = None) -> list[VersionDiff]:
        """Diff a history entry against another entry, or against the current content."""
        note = await self.core.services.note.get_note(note_id)
        old = self._history_entry(note, version_index).content
        new = self._history_entry(note, other_index).content if other_index is not None else note.content
        return compare_versions(old, new)

    async def export_history(self, note_id: str) -> HistoryExport:
        note = await self.core.services.note.get_note(note_id)
        return HistoryExport(note_id=note.id, title=note.title, current_version=note.version, history=note.history)

    def _with_snapshot(self, note: Note, message: str, now: int) -> Note:
        snapshot = NoteHistory(content=note.content.model_copy(deep=True), updated_at=now, version=note.version, message=message)
        return note.model_copy(
            update={
                "history": self.policy.trim([*note.history, snapshot]),
                "version": next_version(note.version, len(note.history)),
            }
        )

    @staticmethod
    def _history_entry(note: Note, index: int) -> NoteHistory:
        if not 0 <= index < len(note.history):
            raise OutOfRangeError(f"Version index {index} out of range for note {note.id} ({len(note.history)} versions)")
        return note.history[index]
