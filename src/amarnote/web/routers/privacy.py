from fastapi import APIRouter
from pydantic import BaseModel, Field

from amarnote.core.modules.content.models import Content
from amarnote.core.modules.note.models import Note
from amarnote.core.modules.privacy.anonymity import incognito_settings
from amarnote.core.modules.privacy.models import (
    AnonymousStats,
    CleanupResult,
    IncognitoDuration,
    PrivacySettings,
    PrivacySummary,
)
from amarnote.web.deps import AppDep
from amarnote.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["privacy"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Note not found"}}


class CreateAnonymousNoteRequest(BaseModel):
    """Request to create an anonymous note.

    `duration` is a shortcut for incognito settings (obfuscated, auto-deleted
    after the duration) and wins over `settings`.
    """

    title: str = ""
    content: Content | None = None
    settings: PrivacySettings | None = None
    duration: IncognitoDuration | None = Field(None, description="Incognito lifetime")


@router.post(
    "/anonymous-notes",
    summary="Create anonymous note",
    description=(
        "Create a note under an anonymous id. With `encrypt_content` the content is hidden behind a "
        "reversible base64 wrapper; this keeps it from casual view and is not encryption."
    ),
    operation_id="createAnonymousNote",
    status_code=201,
)
async def create_anonymous_note(request: CreateAnonymousNoteRequest, app: AppDep) -> Note:
    settings = incognito_settings(request.duration) if request.duration else request.settings
    return await app.create_anonymous_note(request.title, request.content, settings)


@router.post(
    "/notes/{note_id}/anonymize",
    summary="Make note anonymous",
    description="Moves the note under a new anonymous id.",
    operation_id="makeAnonymous",
    responses=NOT_FOUND,
)
async def make_anonymous(note_id: str, app: AppDep) -> Note:
    return await app.make_anonymous(note_id)


@router.post(
    "/notes/{note_id}/deanonymize",
    summary="Remove anonymity",
    description="Moves the note under a new regular id and drops its privacy tags and expiry.",
    operation_id="removeAnonymity",
    responses=NOT_FOUND,
)
async def remove_anonymity(note_id: str, app: AppDep) -> Note:
    return await app.remove_anonymity(note_id)


@router.get(
    "/notes/{note_id}/reveal",
    summary="Reveal note",
    description="The note with obfuscated content decoded. The stored note is not changed.",
    operation_id="revealNote",
    responses=NOT_FOUND,
)
async def reveal_note(note_id: str, app: AppDep) -> Note:
    return await app.reveal_note(note_id)


@router.get(
    "/notes/{note_id}/sanitized",
    summary="Sanitized note",
    description="The note without history and with timestamps rounded down to the hour.",
    operation_id="getSanitizedNote",
    responses=NOT_FOUND,
)
async def get_sanitized_note(note_id: str, app: AppDep) -> Note:
    return await app.get_sanitized_note(note_id)


@router.get("/notes/{note_id}/privacy", summary="Privacy summary", operation_id="getPrivacySummary", responses=NOT_FOUND)
async def get_privacy_summary(note_id: str, app: AppDep) -> PrivacySummary:
    return await app.get_privacy_summary(note_id)


@router.get("/privacy/stats", summary="Anonymous note statistics", operation_id="getAnonymousStats")
async def get_anonymous_stats(app: AppDep) -> AnonymousStats:
    return await app.get_anonymous_stats()


@router.post(
    "/privacy/purge",
    summary="Purge expired notes",
    description="Permanently delete anonymous notes whose auto-delete time has passed.",
    operation_id="purgeExpired",
)
async def purge_expired(app: AppDep) -> CleanupResult:
    return await app.purge_expired()
