"""Pure helpers over anonymous notes. None of them touch the store."""

from datetime import datetime

from amarnote.core.modules.note.models import ANONYMOUS_ID_PREFIX, Note
from amarnote.core.modules.privacy.codec import is_encoded
from amarnote.core.modules.privacy.models import (
    INCOGNITO_LIFETIMES_MS,
    AnonymousStats,
    IncognitoDuration,
    PrivacySettings,
    PrivacySummary,
)
from amarnote.utils import HOUR_MS, now, to_ms


def is_anonymous(note: Note) -> bool:
    return note.is_anonymous or note.id.startswith(ANONYMOUS_ID_PREFIX)


def is_expired(note: Note, current_ms: int) -> bool:
    return is_anonymous(note) and note.auto_delete_at is not None and note.auto_delete_at < current_ms


def cleanup_expired(notes: list[Note], current: datetime | None = None) -> list[Note]:
    """Notes that survive expiry. The caller deletes the difference."""
    current_ms = to_ms(current or now())
    return [note for note in notes if not is_expired(note, current_ms)]


def incognito_settings(duration: IncognitoDuration = IncognitoDuration.SESSION) -> PrivacySettings:
    return PrivacySettings(
        anonymous_mode=True,
        hide_from_history=True,
        auto_delete_after=INCOGNITO_LIFETIMES_MS[duration],
        encrypt_content=True,
    )


def sanitize_for_privacy(note: Note) -> Note:
    """Copy of the note with timestamps rounded down to the hour and no history."""
    return note.model_copy(
        update={
            "created_at": note.created_at // HOUR_MS * HOUR_MS,
            "updated_at": note.updated_at // HOUR_MS * HOUR_MS,
            "history": [],
        }
    )


def privacy_summary(note: Note) -> PrivacySummary:
    return PrivacySummary(
        is_anonymous=is_anonymous(note),
        is_obfuscated=is_encoded(note.content),
        will_auto_delete=note.auto_delete_at is not None,
        auto_delete_at=note.auto_delete_at,
    )


def anonymous_stats(notes: list[Note], current: datetime | None = None) -> AnonymousStats:
    next_hour = to_ms(current or now()) + HOUR_MS
    anonymous = [note for note in notes if is_anonymous(note)]
    return AnonymousStats(
        total_anonymous=len(anonymous),
        total_obfuscated=sum(1 for note in notes if is_encoded(note.content)),
        expiring_soon=sum(1 for note in anonymous if note.auto_delete_at is not None and note.auto_delete_at <= next_hour),
        total_regular=len(notes) - len(anonymous),
    )
