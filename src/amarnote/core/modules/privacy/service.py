import structlog

from amarnote.core.core import Service
from amarnote.core.modules.content.models import Content, empty_content
from amarnote.core.modules.note.models import Note
from amarnote.core.modules.privacy.anonymity import cleanup_expired
from amarnote.core.modules.privacy.codec import decode_content, encode_content, is_encoded
from amarnote.core.modules.privacy.models import (
    ANONYMOUS_TAGS,
    ANONYMOUS_TITLE,
    CleanupFailure,
    CleanupResult,
    PrivacySettings,
)
from amarnote.errors import NotFoundError, StorageError
from amarnote.utils import now_ms

logger = structlog.get_logger(__name__)


class PrivacyService(Service):
    """Anonymous notes: creation, obfuscation and expiry.

    Obfuscated content only hides text from casual viewing; see the codec.
    """

    async def create_anonymous_note(
        self, title: str = "", content: Content | None = None, settings: PrivacySettings | None = None
    ) -> Note:
        settings = settings or PrivacySettings()
        content = content or empty_content()
        created_at = now_ms()

        note = Note(
            id=self.core.services.note.new_note_id(anonymous=True),
            title=title or ANONYMOUS_TITLE,
            content=encode_content(content) if settings.encrypt_content else content,
            created_at=created_at,
            updated_at=created_at,
            tags=list(ANONYMOUS_TAGS),
            is_anonymous=True,
            auto_delete_at=created_at + settings.auto_delete_after if settings.auto_delete_after else None,
        )
        return await self.core.services.note.insert_note(note)

    async def make_anonymous(self, note_id: str) -> Note:
        """Move a regular note under an anonymous id."""

        def transform(note: Note) -> Note:
            return note.model_copy(
                update={"title": note.title or ANONYMOUS_TITLE, "tags": [*note.tags, *ANONYMOUS_TAGS], "is_anonymous": True}
            )

        notes = self.core.services.note
        return await notes.move_note(note_id, notes.new_note_id(anonymous=True), transform)

    async def remove_anonymity(self, note_id: str) -> Note:
        """Move an anonymous note back under a regular id, dropping its privacy tags and expiry."""

        def transform(note: Note) -> Note:
            return note.model_copy(
                update={
                    "tags": [tag for tag in note.tags if tag not in ANONYMOUS_TAGS],
                    "is_anonymous": False,
                    "auto_delete_at": None,
                }
            )

        notes = self.core.services.note
        return await notes.move_note(note_id, notes.new_note_id(), transform)

    async def reveal_note(self, note_id: str) -> Note:
        """The note with its content decoded. Nothing is persisted."""
        note = await self.core.services.note.get_note(note_id)
        if not is_encoded(note.content):
            return note
        return note.model_copy(update={"content": decode_content(note.content)})

    async def purge_expired(self) -> CleanupResult:
        """Delete anonymous notes whose auto-delete time has passed."""
        notes = await self.core.services.note.get_all_notes()
        kept = {note.id for note in cleanup_expired(notes)}
        result = CleanupResult()
        for note in notes:
            if note.id in kept:
                continue
            try:
                await self.core.services.note.delete_note_permanently(note.id)
                result.deleted.append(note.id)
            except (NotFoundError, StorageError) as e:
                result.failures.append(CleanupFailure(id=note.id, reason=str(e)))
        if result.deleted or result.failures:
            logger.info("expired_notes_purged", deleted=len(result.deleted), failed=len(result.failures))
        return result
