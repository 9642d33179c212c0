from enum import StrEnum

from pydantic import ConfigDict, Field

from amarnote.core.db import StoredModel
from amarnote.core.modules.content.models import Content
from amarnote.utils import now_ms

AUTO_SAVE_MESSAGE = "auto-saved version"


class NoteHistory(StoredModel):
    """Immutable snapshot of a prior content state."""

    model_config = ConfigDict(frozen=True)

    content: Content
    updated_at: int = Field(default_factory=now_ms)
    version: str
    message: str = AUTO_SAVE_MESSAGE


class DiffType(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class VersionDiff(StoredModel):
    """One block-level difference between two content trees."""

    type: DiffType
    block_index: int
    old_content: str | None = None
    new_content: str | None = None


class HistoryExport(StoredModel):
    note_id: str
    title: str
    current_version: str
    history: list[NoteHistory]
    exported_at: int = Field(default_factory=now_ms)
