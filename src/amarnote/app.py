from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from amarnote.config import Config
from amarnote.core.core import Core
from amarnote.core.modules.content.models import Content
from amarnote.core.modules.export.models import ExportFile, ExportFormat
from amarnote.core.modules.history.models import HistoryExport, NoteHistory, VersionDiff
from amarnote.core.modules.history.summary import version_summary
from amarnote.core.modules.note.models import FileAttachment, ImportResult, Note, NoteLists, NoteUpdate
from amarnote.core.modules.privacy.anonymity import anonymous_stats, privacy_summary, sanitize_for_privacy
from amarnote.core.modules.privacy.models import AnonymousStats, CleanupResult, PrivacySettings, PrivacySummary
from amarnote.core.modules.task.models import Task, TaskOverview, TaskUpdate
from amarnote.core.modules.template.models import CustomTemplate
from amarnote.core.storage import KeyValueStore
from amarnote.errors import NotFoundError
from amarnote.utils import now_ms


class App:
    """Facade for all application operations, delegating to Core services."""

    def __init__(self, config: Config, store: KeyValueStore | None = None) -> None:
        self._core = Core(config, store)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # Notes

    async def create_note(self) -> Note:
        return await self._core.services.note.create_note()

    async def get_note(self, note_id: str) -> Note:
        return await self._core.services.note.get_note(note_id)

    async def list_notes(self) -> NoteLists:
        return await self._core.services.note.list_notes()

    async def search_notes(self, query: str) -> list[Note]:
        return await self._core.services.note.search_notes(query)

    async def update_note(self, note_id: str, update: NoteUpdate) -> Note:
        return await self._core.services.note.update_note(note_id, update)

    async def archive_note(self, note_id: str) -> Note:
        return await self._core.services.note.archive_note(note_id)

    async def unarchive_note(self, note_id: str) -> Note:
        return await self._core.services.note.unarchive_note(note_id)

    async def trash_note(self, note_id: str) -> Note:
        return await self._core.services.note.trash_note(note_id)

    async def restore_note(self, note_id: str) -> Note:
        return await self._core.services.note.restore_note(note_id)

    async def pin_note(self, note_id: str) -> Note:
        return await self._core.services.note.pin_note(note_id)

    async def unpin_note(self, note_id: str) -> Note:
        return await self._core.services.note.unpin_note(note_id)

    async def delete_note_permanently(self, note_id: str) -> None:
        await self._core.services.note.delete_note_permanently(note_id)

    async def empty_trash(self) -> int:
        return await self._core.services.note.empty_trash()

    async def restore_all_trashed(self) -> int:
        return await self._core.services.note.restore_all_trashed()

    async def clear_all_notes(self) -> int:
        return await self._core.services.note.clear_all_notes()

    async def import_notes(self, raw_entries: list[Any]) -> ImportResult:
        return await self._core.services.note.import_notes(raw_entries)

    async def add_attachment(self, note_id: str, name: str, mime_type: str, data: bytes) -> Note:
        return await self._core.services.note.add_attachment(note_id, name, mime_type, data)

    async def remove_attachment(self, note_id: str, attachment_id: str) -> Note:
        return await self._core.services.note.remove_attachment(note_id, attachment_id)

    async def get_attachment(self, note_id: str, attachment_id: str) -> FileAttachment:
        note = await self._core.services.note.get_note(note_id)
        for attachment in note.attachments:
            if attachment.id == attachment_id:
                return attachment
        raise NotFoundError(f"Attachment not found: {attachment_id}")

    # History

    async def get_history(self, note_id: str) -> list[NoteHistory]:
        return await self._core.services.history.get_history(note_id)

    async def get_version_summaries(self, note_id: str) -> list[str]:
        """Human-readable one-liners for every history entry, oldest first."""
        history = await self._core.services.history.get_history(note_id)
        now = now_ms()
        return [version_summary(history, index, now) for index in range(len(history))]

    async def create_version(self, note_id: str, message: str | None = None) -> Note:
        return await self._core.services.history.create_version(note_id, message)

    async def restore_version(self, note_id: str, version_index: int) -> Note:
        return await self._core.services.history.restore_version(note_id, version_index)

    async def branch_note(self, note_id: str, branch_name: str) -> Note:
        return await self._core.services.history.branch_note(note_id, branch_name)

    async def diff_versions(self, note_id: str, version_index: int, other_index: int | None = None) -> list[VersionDiff]:
        return await self._core.services.history.diff_versions(note_id, version_index, other_index)

    async def export_history(self, note_id: str) -> HistoryExport:
        return await self._core.services.history.export_history(note_id)

    # Tasks

    async def get_task_overview(self, note_id: str | None = None, days: int = 7) -> TaskOverview:
        return await self._core.services.task.overview(note_id, days)

    async def sync_tasks(self, note_id: str) -> Note:
        return await self._core.services.task.sync_tasks(note_id)

    async def update_task(self, note_id: str, task_id: str, update: TaskUpdate) -> Task:
        return await self._core.services.task.update_task(note_id, task_id, update)

    async def create_task_note(self) -> Note:
        return await self._core.services.task.create_task_note()

    # Privacy

    async def create_anonymous_note(
        self, title: str = "", content: Content | None = None, settings: PrivacySettings | None = None
    ) -> Note:
        return await self._core.services.privacy.create_anonymous_note(title, content, settings)

    async def make_anonymous(self, note_id: str) -> Note:
        return await self._core.services.privacy.make_anonymous(note_id)

    async def remove_anonymity(self, note_id: str) -> Note:
        return await self._core.services.privacy.remove_anonymity(note_id)

    async def reveal_note(self, note_id: str) -> Note:
        return await self._core.services.privacy.reveal_note(note_id)

    async def get_sanitized_note(self, note_id: str) -> Note:
        return sanitize_for_privacy(await self._core.services.note.get_note(note_id))

    async def get_privacy_summary(self, note_id: str) -> PrivacySummary:
        return privacy_summary(await self._core.services.note.get_note(note_id))

    async def get_anonymous_stats(self) -> AnonymousStats:
        return anonymous_stats(await self._core.services.note.get_all_notes())

    async def purge_expired(self) -> CleanupResult:
        return await self._core.services.privacy.purge_expired()

    # Export and import

    async def export_notes(self, note_ids: list[str] | None, export_format: ExportFormat) -> ExportFile:
        return await self._core.services.export.export_notes(note_ids, export_format)

    async def import_file(self, filename: str, text: str) -> ImportResult:
        return await self._core.services.export.import_file(filename, text)

    # Templates

    async def list_templates(self) -> list[CustomTemplate]:
        return await self._core.services.template.list_templates()

    async def create_template_from_note(self, note_id: str) -> CustomTemplate:
        return await self._core.services.template.create_template_from_note(note_id)

    async def delete_template(self, template_id: str) -> None:
        await self._core.services.template.delete_template(template_id)

    async def create_note_from_template(self, template_id: str) -> Note:
        return await self._core.services.template.create_note_from_template(template_id)
