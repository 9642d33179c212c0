from enum import StrEnum

from pydantic import BaseModel, Field

from amarnote.utils import DAY_MS, HOUR_MS

ANONYMOUS_TAGS = ("গোপনীয়", "anonymous")
ANONYMOUS_TITLE = "গোপন নোট"


class IncognitoDuration(StrEnum):
    SESSION = "session"
    HOUR = "1hour"
    DAY = "1day"
    WEEK = "1week"


INCOGNITO_LIFETIMES_MS: dict[IncognitoDuration, int | None] = {
    IncognitoDuration.SESSION: None,  # No timer
    IncognitoDuration.HOUR: HOUR_MS,
    IncognitoDuration.DAY: DAY_MS,
    IncognitoDuration.WEEK: 7 * DAY_MS,
}


class PrivacySettings(BaseModel):
    anonymous_mode: bool = True
    hide_from_history: bool = True
    auto_delete_after: int | None = Field(None, gt=0, description="Lifetime in milliseconds")
    encrypt_content: bool = Field(False, description="Obfuscate the content (reversible, not encryption)")


class PrivacySummary(BaseModel):
    is_anonymous: bool
    is_obfuscated: bool
    will_auto_delete: bool
    auto_delete_at: int | None = None


class AnonymousStats(BaseModel):
    total_anonymous: int
    total_obfuscated: int
    expiring_soon: int  # within the next hour
    total_regular: int


class CleanupFailure(BaseModel):
    id: str
    reason: str


class CleanupResult(BaseModel):
    deleted: list[str] = Field(default_factory=list)
    failures: list[CleanupFailure] = Field(default_factory=list)
