from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Query, UploadFile
from fastapi.responses import Response

from amarnote.core.modules.note.attachments import attachment_bytes
from amarnote.core.modules.note.models import Note, NoteLists, NoteUpdate
from amarnote.web.deps import AppDep
from amarnote.web.openapi import CountResponse, ErrorResponse

router: APIRouter = APIRouter(tags=["notes"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Note not found"}}


@router.get(
    "/notes",
    summary="List notes",
    description="All notes split into active, archived and trashed lists, each most recently updated first.",
    operation_id="listNotes",
)
async def list_notes(app: AppDep) -> NoteLists:
    return await app.list_notes()


@router.get(
    "/notes/search",
    summary="Search notes",
    description="Case-insensitive match on title, tags and text. Trashed notes are not searched.",
    operation_id="searchNotes",
)
async def search_notes(app: AppDep, q: Annotated[str, Query(description="Text to look for")] = "") -> list[Note]:
    return await app.search_notes(q)


@router.post(
    "/notes",
    summary="Create note",
    description="Create an empty active note with a single blank paragraph.",
    operation_id="createNote",
    status_code=201,
)
async def create_note(app: AppDep) -> Note:
    return await app.create_note()


@router.get("/notes/{note_id}", summary="Get note", operation_id="getNote", responses=NOT_FOUND)
async def get_note(note_id: str, app: AppDep) -> Note:
    return await app.get_note(note_id)


@router.patch(
    "/notes/{note_id}",
    summary="Update note",
    description=(
        "Partially update a note. Only the fields provided are changed. New content may be "
        "snapshotted into history first, depending on the snapshot policy."
    ),
    operation_id="updateNote",
    responses={
        **NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Pinning a note that is archived or trashed"},
        507: {"model": ErrorResponse, "description": "Storage quota exceeded"},
    },
)
async def update_note(note_id: str, update: NoteUpdate, app: AppDep) -> Note:
    return await app.update_note(note_id, update)


@router.delete(
    "/notes/{note_id}",
    summary="Delete note permanently",
    operation_id="deleteNote",
    status_code=204,
    responses=NOT_FOUND,
)
async def delete_note(note_id: str, app: AppDep) -> None:
    await app.delete_note_permanently(note_id)


@router.delete(
    "/notes",
    summary="Delete all notes",
    description="Permanently delete every note in every partition.",
    operation_id="clearAllNotes",
)
async def clear_all_notes(app: AppDep) -> CountResponse:
    return CountResponse(count=await app.clear_all_notes())


@router.post("/notes/{note_id}/archive", summary="Archive note", operation_id="archiveNote", responses=NOT_FOUND)
async def archive_note(note_id: str, app: AppDep) -> Note:
    return await app.archive_note(note_id)


@router.post("/notes/{note_id}/unarchive", summary="Unarchive note", operation_id="unarchiveNote", responses=NOT_FOUND)
async def unarchive_note(note_id: str, app: AppDep) -> Note:
    return await app.unarchive_note(note_id)


@router.post("/notes/{note_id}/trash", summary="Move note to trash", operation_id="trashNote", responses=NOT_FOUND)
async def trash_note(note_id: str, app: AppDep) -> Note:
    return await app.trash_note(note_id)


@router.post(
    "/notes/{note_id}/restore",
    summary="Restore note from trash",
    description="The note goes back to the archive if it was archived before being trashed.",
    operation_id="restoreNote",
    responses=NOT_FOUND,
)
async def restore_note(note_id: str, app: AppDep) -> Note:
    return await app.restore_note(note_id)


@router.post("/notes/{note_id}/pin", summary="Pin note", operation_id="pinNote", responses=NOT_FOUND)
async def pin_note(note_id: str, app: AppDep) -> Note:
    return await app.pin_note(note_id)


@router.post("/notes/{note_id}/unpin", summary="Unpin note", operation_id="unpinNote", responses=NOT_FOUND)
async def unpin_note(note_id: str, app: AppDep) -> Note:
    return await app.unpin_note(note_id)


@router.post("/trash/empty", summary="Empty trash", operation_id="emptyTrash")
async def empty_trash(app: AppDep) -> CountResponse:
    return CountResponse(count=await app.empty_trash())


@router.post("/trash/restore", summary="Restore all trashed notes", operation_id="restoreAllTrashed")
async def restore_all_trashed(app: AppDep) -> CountResponse:
    return CountResponse(count=await app.restore_all_trashed())


@router.post(
    "/notes/{note_id}/attachments",
    summary="Upload attachment",
    description="Attach an image, document or audio file (10 MiB at most by default) to a note.",
    operation_id="uploadAttachment",
    status_code=201,
    responses={**NOT_FOUND, 400: {"model": ErrorResponse, "description": "File too large or unsupported type"}},
)
async def upload_attachment(note_id: str, file: UploadFile, app: AppDep) -> Note:
    data = await file.read()
    filename = file.filename or "unnamed"
    mime_type = file.content_type or "application/octet-stream"
    return await app.add_attachment(note_id, filename, mime_type, data)


@router.get(
    "/notes/{note_id}/attachments/{attachment_id}",
    summary="Download attachment",
    operation_id="downloadAttachment",
    responses={200: {"description": "Attachment file", "content": {"application/octet-stream": {}}}, **NOT_FOUND},
)
async def download_attachment(note_id: str, attachment_id: str, app: AppDep) -> Response:
    attachment = await app.get_attachment(note_id, attachment_id)
    return Response(
        content=attachment_bytes(attachment),
        media_type=attachment.type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(attachment.name)}"},
    )


@router.delete(
    "/notes/{note_id}/attachments/{attachment_id}",
    summary="Remove attachment",
    operation_id="removeAttachment",
    responses=NOT_FOUND,
)
async def remove_attachment(note_id: str, attachment_id: str, app: AppDep) -> Note:
    return await app.remove_attachment(note_id, attachment_id)
