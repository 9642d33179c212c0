from typing import Annotated

from fastapi import APIRouter, Query

from amarnote.core.modules.note.models import Note
from amarnote.core.modules.task.models import Task, TaskOverview, TaskUpdate
from amarnote.web.deps import AppDep
from amarnote.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["tasks"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Note or task not found"}}
UpcomingDays = Annotated[int, Query(ge=1, le=365, description="Window for upcoming tasks, in days")]


@router.get(
    "/tasks",
    summary="Task overview",
    description="Tasks of all active notes with completion, status and priority views.",
    operation_id="getTaskOverview",
)
async def get_task_overview(app: AppDep, days: UpcomingDays = 7) -> TaskOverview:
    return await app.get_task_overview(days=days)


@router.post(
    "/tasks/note",
    summary="Create task note",
    description="Create a note listing every task of the active notes as a checklist.",
    operation_id="createTaskNote",
    status_code=201,
)
async def create_task_note(app: AppDep) -> Note:
    return await app.create_task_note()


@router.get("/notes/{note_id}/tasks", summary="Note task overview", operation_id="getNoteTasks", responses=NOT_FOUND)
async def get_note_tasks(note_id: str, app: AppDep, days: UpcomingDays = 7) -> TaskOverview:
    return await app.get_task_overview(note_id, days)


@router.post(
    "/notes/{note_id}/tasks/sync",
    summary="Sync note tasks",
    description="Store the tasks found in the note's content alongside its persisted tasks.",
    operation_id="syncTasks",
    responses=NOT_FOUND,
)
async def sync_tasks(note_id: str, app: AppDep) -> Note:
    return await app.sync_tasks(note_id)


@router.patch("/notes/{note_id}/tasks/{task_id}", summary="Update task", operation_id="updateTask", responses=NOT_FOUND)
async def update_task(note_id: str, task_id: str, update: TaskUpdate, app: AppDep) -> Task:
    return await app.update_task(note_id, task_id, update)
