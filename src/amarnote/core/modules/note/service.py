import asyncio
from collections import defaultdict
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from amarnote.core.core import Service
from amarnote.core.modules.content.markdown import from_markdown
from amarnote.core.modules.content.text import count_chars, extract_plain_text
from amarnote.core.modules.note.attachments import create_attachment
from amarnote.core.modules.note.models import (
    ANONYMOUS_ID_PREFIX,
    DEFAULT_TITLE,
    NOTE_KEY_PREFIX,
    ImportFailure,
    ImportResult,
    Note,
    NoteLists,
    NotePartition,
    NoteUpdate,
    note_key,
)
from amarnote.core.storage import KeyValueStore
from amarnote.errors import NotFoundError, StorageError, ValidationError
from amarnote.utils import generate_id, now_ms

logger = structlog.get_logger(__name__)

# Import entries whose falsy values fall back to defaults, in both wire and attribute spelling
_DEFAULTED_IMPORT_KEYS = ("title", "createdAt", "created_at", "updatedAt", "updated_at")
_DERIVED_IMPORT_KEYS = ("charCount", "char_count")


class NoteService(Service):
    """Owns note records: CRUD, lifecycle partitions, import, search and attachments.

    Mutations of one note are serialised with a per-id lock; the store itself
    only guarantees atomic single-key writes.
    """

    def __init__(self, store: KeyValueStore) -> None:
        super().__init__(store)
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock(self, note_id: str) -> asyncio.Lock:
        """Lock guarding read-modify-write cycles on one note."""
        return self._locks[note_id]

    @staticmethod
    def new_note_id(anonymous: bool = False) -> str:
        return generate_id(ANONYMOUS_ID_PREFIX if anonymous else "")

    async def find_note(self, note_id: str) -> Note | None:
        value = await self.store.get(note_key(note_id))
        return Note.from_store(value) if value is not None else None

    async def get_note(self, note_id: str) -> Note:
        note = await self.find_note(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}")
        return note

    async def get_all_notes(self) -> list[Note]:
        """All notes regardless of partition, most recently updated first."""
        keys = await self.store.list_keys(NOTE_KEY_PREFIX)
        if not keys:
            return []
        notes = Note.from_store_many(await self.store.get_many(keys))
        return sorted(notes, key=lambda note: note.updated_at, reverse=True)

    async def list_notes(self) -> NoteLists:
        lists = NoteLists()
        for note in await self.get_all_notes():
            getattr(lists, note.partition.value).append(note)
        return lists

    async def save_note(self, note: Note) -> Note:
        """Persist a note as-is, recomputing derived fields. Callers hold the note's lock."""
        validated = Note.from_store(note.model_copy(update={"char_count": count_chars(note.content)}).to_store())
        await self.store.set(note_key(validated.id), validated.to_store())
        return validated

    async def insert_note(self, note: Note) -> Note:
        """Persist a fully built note under a new id."""
        async with self.lock(note.id):
            if await self.store.get(note_key(note.id)) is not None:
                raise ValidationError(f"Note already exists: {note.id}")
            saved = await self.save_note(note)
        logger.info("note_created", note_id=saved.id, anonymous=saved.is_anonymous)
        return saved

    async def create_note(self) -> Note:
        """Create an empty active note with a single blank paragraph."""
        return await self.insert_note(Note(id=self.new_note_id()))

    async def update_note(self, note_id: str, update: NoteUpdate) -> Note:
        """Apply a partial update.

        New content goes through the snapshot policy against the stored content
        first. The update timestamp is always refreshed.
        """
        changes = {name: getattr(update, name) for name in update.model_fields_set if getattr(update, name) is not None}

        async with self.lock(note_id):
            note = await self.get_note(note_id)
            if changes.get("is_pinned") and note.partition != NotePartition.ACTIVE:
                raise ValidationError(f"Only active notes can be pinned: {note_id}")

            now = now_ms()
            if "content" in changes:
                note = self.core.services.history.apply_snapshot_policy(note, changes["content"], now)

            saved = await self.save_note(note.model_copy(update={**changes, "updated_at": now}))

        logger.debug("note_updated", note_id=note_id, fields=sorted(changes))
        return saved

    async def archive_note(self, note_id: str) -> Note:
        return await self._set_flags(note_id, is_archived=True, is_pinned=False)

    async def unarchive_note(self, note_id: str) -> Note:
        return await self._set_flags(note_id, is_archived=False)

    async def trash_note(self, note_id: str) -> Note:
        return await self._set_flags(note_id, is_trashed=True, is_pinned=False)

    async def restore_note(self, note_id: str) -> Note:
        """Take a note out of the trash, back into the partition it left."""
        return await self._set_flags(note_id, is_trashed=False)

    async def pin_note(self, note_id: str) -> Note:
        return await self.update_note(note_id, NoteUpdate(is_pinned=True))

    async def unpin_note(self, note_id: str) -> Note:
        return await self.update_note(note_id, NoteUpdate(is_pinned=False))

    async def move_note(self, note_id: str, new_id: str, transform: Callable[[Note], Note] | None = None) -> Note:
        """Re-key a note, optionally transforming it on the way. The old id stops existing."""
        async with self.lock(note_id):
            note = await self.get_note(note_id)
            if transform is not None:
                note = transform(note)
            saved = await self.insert_note(note.model_copy(update={"id": new_id, "updated_at": now_ms()}))
            await self.store.delete(note_key(note_id))
        self._locks.pop(note_id, None)
        logger.info("note_moved", note_id=note_id, new_id=new_id)
        return saved

    async def delete_note_permanently(self, note_id: str) -> None:
        async with self.lock(note_id):
            await self.get_note(note_id)
            await self.store.delete(note_key(note_id))
        self._locks.pop(note_id, None)
        logger.info("note_deleted", note_id=note_id)

    async def empty_trash(self) -> int:
        """Permanently delete every trashed note and return how many were removed."""
        lists = await self.list_notes()
        for note in lists.trashed:
            await self.delete_note_permanently(note.id)
        return len(lists.trashed)

    async def restore_all_trashed(self) -> int:
        lists = await self.list_notes()
        for note in lists.trashed:
            await self.restore_note(note.id)
        return len(lists.trashed)

    async def clear_all_notes(self) -> int:
        keys = await self.store.list_keys(NOTE_KEY_PREFIX)
        for key in keys:
            await self.store.delete(key)
        self._locks.clear()
        logger.info("notes_cleared", count=len(keys))
        return len(keys)

    async def search_notes(self, query: str) -> list[Note]:
        """Case-insensitive search over title, tags and text of non-trashed notes."""
        needle = query.strip().casefold()
        notes = [note for note in await self.get_all_notes() if not note.is_trashed]
        if not needle:
            return notes
        return [
            note
            for note in notes
            if needle in note.title.casefold()
            or any(needle in tag.casefold() for tag in note.tags)
            or needle in extract_plain_text(note.content).casefold()
        ]

    async def import_notes(self, raw_entries: list[Any]) -> ImportResult:
        """Import note-shaped entries.

        Invalid entries are reported as failures, ids that already exist are
        skipped without being overwritten; the rest of the batch still goes in.
        """
        result = ImportResult()
        candidates: list[tuple[int, Note]] = []
        for index, entry in enumerate(raw_entries):
            try:
                candidates.append((index, self._note_from_import(entry)))
            except ValidationError as e:
                entry_id = entry.get("id") if isinstance(entry, dict) else None
                result.failures.append(ImportFailure(index=index, id=str(entry_id) if entry_id else None, reason=str(e)))

        existing = set(await self.store.list_keys(NOTE_KEY_PREFIX))
        accepted: list[tuple[int, Note]] = []
        for index, note in candidates:
            key = note_key(note.id)
            if key in existing:
                result.skipped.append(note.id)
                continue
            existing.add(key)
            accepted.append((index, note))

        try:
            await self.store.set_many([(note_key(note.id), note.to_store()) for _, note in accepted])
            result.imported = [note for _, note in accepted]
        except StorageError:
            # Fall back to one write per note so a single oversized note does not sink the batch
            for index, note in accepted:
                try:
                    await self.store.set(note_key(note.id), note.to_store())
                    result.imported.append(note)
                except StorageError as e:
                    result.failures.append(ImportFailure(index=index, id=note.id, reason=str(e)))

        logger.info(
            "notes_imported",
            imported=len(result.imported),
            skipped=len(result.skipped),
            failed=len(result.failures),
        )
        return result

    async def add_attachment(self, note_id: str, name: str, mime_type: str, data: bytes) -> Note:
        attachment = create_attachment(name, mime_type, data, self.core.config.max_attachment_size)
        async with self.lock(note_id):
            note = await self.get_note(note_id)
            updated = note.model_copy(update={"attachments": [*note.attachments, attachment], "updated_at": now_ms()})
            return await self.save_note(updated)

    async def remove_attachment(self, note_id: str, attachment_id: str) -> Note:
        async with self.lock(note_id):
            note = await self.get_note(note_id)
            remaining = [a for a in note.attachments if a.id != attachment_id]
            if len(remaining) == len(note.attachments):
                raise NotFoundError(f"Attachment not found: {attachment_id}")
            return await self.save_note(note.model_copy(update={"attachments": remaining, "updated_at": now_ms()}))

    async def _set_flags(self, note_id: str, **flags: bool) -> Note:
        async with self.lock(note_id):
            note = await self.get_note(note_id)
            saved = await self.save_note(note.model_copy(update={**flags, "updated_at": now_ms()}))
        logger.debug("note_lifecycle_changed", note_id=note_id, partition=saved.partition.value)
        return saved

    def _note_from_import(self, entry: Any) -> Note:
        if not isinstance(entry, dict):
            raise ValidationError("Entry is not an object")

        note_id = entry.get("id")
        if not note_id or not isinstance(note_id, str | int):
            raise ValidationError("Entry has no id")
        content = entry.get("content")
        if not content:
            raise ValidationError(f"Note {note_id} has no content")

        data = {key: value for key, value in entry.items() if key not in _DERIVED_IMPORT_KEYS}
        for key in _DEFAULTED_IMPORT_KEYS:
            if key in data and not data[key]:
                del data[key]
        data["id"] = str(note_id)
        data.setdefault("title", DEFAULT_TITLE)
        if isinstance(content, str):
            data["content"] = from_markdown(content)
        if not data.get("icon") and entry.get("emoji"):
            data["icon"] = entry["emoji"]

        try:
            note = Note.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Note {note_id} is malformed: {e.error_count()} invalid field(s)") from None
        history = self.core.services.history.policy.trim(note.history)
        return note.model_copy(update={"char_count": count_chars(note.content), "history": history})
