from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

from amarnote.core.db import StoredModel
from amarnote.core.modules.content.models import Content, empty_content
from amarnote.core.modules.history.models import NoteHistory
from amarnote.core.modules.privacy.codec import is_encoded
from amarnote.core.modules.task.models import Task
from amarnote.utils import now_ms

NOTE_KEY_PREFIX = "note_"
DEFAULT_TITLE = "untitled"
INITIAL_VERSION = "v1"
ANONYMOUS_ID_PREFIX = "anon_"


def note_key(note_id: str) -> str:
    return f"{NOTE_KEY_PREFIX}{note_id}"


class NotePartition(StrEnum):
    """Mutually exclusive lifecycle states."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    TRASHED = "trashed"


class ContentProtection(StrEnum):
    NONE = "none"
    # Reversible base64 wrapper that hides content from casual viewing. Not encryption.
    OBFUSCATED = "obfuscated"


class FileAttachment(StoredModel):
    id: str
    name: str
    size: int  # bytes, before base64 encoding
    type: str  # MIME type
    data: str  # base64
    created_at: int = Field(default_factory=now_ms)


class Note(StoredModel):
    """A persisted document."""

    id: str
    title: str = DEFAULT_TITLE
    content: Content = Field(default_factory=empty_content)
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
    char_count: int = 0  # Derived from content by the store
    tags: list[str] = Field(default_factory=list)
    history: list[NoteHistory] = Field(default_factory=list)  # Oldest first
    is_pinned: bool = False
    is_locked: bool = False
    is_archived: bool = False
    is_trashed: bool = False
    icon: str = ""
    tasks: list[Task] = Field(default_factory=list)
    attachments: list[FileAttachment] = Field(default_factory=list)
    is_anonymous: bool = False
    protection: ContentProtection = ContentProtection.NONE
    version: str = INITIAL_VERSION
    parent_version: str | None = None  # Source version when the note was branched
    auto_delete_at: int | None = None  # ms epoch after which an anonymous note may be purged

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: list[str]) -> list[str]:
        return list(dict.fromkeys(tag for tag in tags if tag))

    @model_validator(mode="after")
    def unpin_outside_active(self) -> Self:
        if self.is_pinned and (self.is_archived or self.is_trashed):
            self.is_pinned = False
        return self

    @model_validator(mode="after")
    def derive_protection(self) -> Self:
        """Protection follows the content: writing plain content over an obfuscated note clears it."""
        self.protection = ContentProtection.OBFUSCATED if is_encoded(self.content) else ContentProtection.NONE
        return self

    @property
    def partition(self) -> NotePartition:
        if self.is_trashed:
            return NotePartition.TRASHED
        if self.is_archived:
            return NotePartition.ARCHIVED
        return NotePartition.ACTIVE


class NoteUpdate(StoredModel):
    """Partial update: only fields that were explicitly set are applied.

    Lifecycle flags, history, version and derived counters are not editable here.
    """

    title: str | None = None
    content: Content | None = None
    tags: list[str] | None = None
    is_pinned: bool | None = None
    is_locked: bool | None = None
    icon: str | None = None
    tasks: list[Task] | None = None
    attachments: list[FileAttachment] | None = None


class NoteLists(BaseModel):
    """Notes split by partition, each sorted by last update, newest first."""

    active: list[Note] = Field(default_factory=list)
    archived: list[Note] = Field(default_factory=list)
    trashed: list[Note] = Field(default_factory=list)


class ImportFailure(BaseModel):
    index: int = Field(..., description="Position of the entry in the imported batch")
    id: str | None = None
    reason: str


class ImportResult(BaseModel):
    imported: list[Note] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list, description="Ids that already existed and were left untouched")
    failures: list[ImportFailure] = Field(default_factory=list)
