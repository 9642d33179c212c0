from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from amarnote.core.modules.history.models import HistoryExport, NoteHistory, VersionDiff
from amarnote.core.modules.note.models import Note
from amarnote.web.deps import AppDep
from amarnote.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["history"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Note not found"}}
OUT_OF_RANGE = {422: {"model": ErrorResponse, "description": "Version index out of range"}}


class CreateVersionRequest(BaseModel):
    message: str | None = Field(None, description="Snapshot message; defaults to 'manual version'")


class BranchNoteRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Branch name, appended to the title in parentheses")


@router.get(
    "/notes/{note_id}/history",
    summary="Get note history",
    description="Snapshots of earlier content, oldest first.",
    operation_id="getHistory",
    responses=NOT_FOUND,
)
async def get_history(note_id: str, app: AppDep) -> list[NoteHistory]:
    return await app.get_history(note_id)


@router.get(
    "/notes/{note_id}/history/summaries",
    summary="Get history summaries",
    description="One line per snapshot, e.g. `v3 • 5 minutes ago • auto-saved version`.",
    operation_id="getHistorySummaries",
    responses=NOT_FOUND,
)
async def get_history_summaries(note_id: str, app: AppDep) -> list[str]:
    return await app.get_version_summaries(note_id)


@router.get("/notes/{note_id}/history/export", summary="Export history", operation_id="exportHistory", responses=NOT_FOUND)
async def export_history(note_id: str, app: AppDep) -> HistoryExport:
    return await app.export_history(note_id)


@router.post(
    "/notes/{note_id}/history",
    summary="Create version",
    description="Snapshot the current content now, regardless of the snapshot policy.",
    operation_id="createVersion",
    status_code=201,
    responses=NOT_FOUND,
)
async def create_version(note_id: str, request: CreateVersionRequest, app: AppDep) -> Note:
    return await app.create_version(note_id, request.message)


@router.post(
    "/notes/{note_id}/history/{version_index}/restore",
    summary="Restore version",
    description="Replace the content with a snapshot. The content being replaced becomes the newest snapshot.",
    operation_id="restoreVersion",
    responses={**NOT_FOUND, **OUT_OF_RANGE},
)
async def restore_version(note_id: str, version_index: int, app: AppDep) -> Note:
    return await app.restore_version(note_id, version_index)


@router.get(
    "/notes/{note_id}/history/{version_index}/diff",
    summary="Diff version",
    description="Block-level diff from a snapshot to the current content, or to another snapshot.",
    operation_id="diffVersions",
    responses={**NOT_FOUND, **OUT_OF_RANGE},
)
async def diff_versions(
    note_id: str,
    version_index: int,
    app: AppDep,
    other: Annotated[int | None, Query(description="Index of the snapshot to compare against")] = None,
) -> list[VersionDiff]:
    return await app.diff_versions(note_id, version_index, other)


@router.post(
    "/notes/{note_id}/branch",
    summary="Branch note",
    description="Copy the note, with its history, under a new id.",
    operation_id="branchNote",
    status_code=201,
    responses=NOT_FOUND,
)
async def branch_note(note_id: str, request: BranchNoteRequest, app: AppDep) -> Note:
    return await app.branch_note(note_id, request.name)
