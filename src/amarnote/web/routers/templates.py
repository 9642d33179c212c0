from fastapi import APIRouter

from amarnote.core.modules.note.models import Note
from amarnote.core.modules.template.models import CustomTemplate
from amarnote.web.deps import AppDep
from amarnote.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["templates"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Note or template not found"}}


@router.get("/templates", summary="List templates", description="Newest first.", operation_id="listTemplates")
async def list_templates(app: AppDep) -> list[CustomTemplate]:
    return await app.list_templates()


@router.post(
    "/notes/{note_id}/template",
    summary="Save note as template",
    operation_id="createTemplateFromNote",
    status_code=201,
    responses=NOT_FOUND,
)
async def create_template_from_note(note_id: str, app: AppDep) -> CustomTemplate:
    return await app.create_template_from_note(note_id)


@router.delete(
    "/templates/{template_id}",
    summary="Delete template",
    operation_id="deleteTemplate",
    status_code=204,
    responses=NOT_FOUND,
)
async def delete_template(template_id: str, app: AppDep) -> None:
    await app.delete_template(template_id)


@router.post(
    "/templates/{template_id}/notes",
    summary="Create note from template",
    operation_id="createNoteFromTemplate",
    status_code=201,
    responses=NOT_FOUND,
)
async def create_note_from_template(template_id: str, app: AppDep) -> Note:
    return await app.create_note_from_template(template_id)
