"""Export/import API endpoints."""

from typing import Annotated, Any
from urllib.parse import quote

from fastapi import APIRouter, Body, Query
from fastapi.responses import Response

from amarnote.core.modules.export.models import ExportFormat
from amarnote.core.modules.note.models import ImportResult
from amarnote.web.deps import AppDep, TextUploadDep
from amarnote.web.openapi import ErrorResponse

router = APIRouter(tags=["export"])


@router.get(
    "/export",
    summary="Export notes",
    description=(
        "Download notes as Markdown, JSON or plain text. Without `ids`, every note that is not in "
        "the trash is exported. Several notes are separated by a horizontal rule."
    ),
    operation_id="exportNotes",
    responses={
        200: {"description": "Exported file", "content": {"text/markdown": {}, "application/json": {}, "text/plain": {}}},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def export_notes(
    app: AppDep,
    format: Annotated[ExportFormat, Query(description="Export format")] = ExportFormat.MARKDOWN,
    ids: Annotated[list[str] | None, Query(description="Notes to export")] = None,
) -> Response:
    export = await app.export_notes(ids, format)
    return Response(
        content=export.content,
        media_type=f"{export.media_type}; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(export.filename)}"},
    )


@router.post(
    "/import",
    summary="Import file",
    description=(
        "Import a `.json` file (an array of notes, `{\"notes\": [...]}` or a single note) or a `.md` file. "
        "Notes whose id already exists are skipped; invalid entries are reported, not fatal."
    ),
    operation_id="importFile",
    responses={400: {"model": ErrorResponse, "description": "Unsupported or unreadable file"}},
)
async def import_file(upload: TextUploadDep, app: AppDep) -> ImportResult:
    return await app.import_file(upload.filename, upload.text)


@router.post(
    "/import/notes",
    summary="Import notes",
    description="Import note-shaped JSON objects directly.",
    operation_id="importNotes",
)
async def import_notes(app: AppDep, entries: Annotated[list[Any], Body(description="Note-shaped objects")]) -> ImportResult:
    return await app.import_notes(entries)
