import structlog

from amarnote.core.core import Service
from amarnote.core.modules.content.models import Content, ParagraphBlock
from amarnote.core.modules.note.models import Note
from amarnote.core.modules.task.extraction import extract_tasks, merge_tasks, tasks_to_checklist_block
from amarnote.core.modules.task.models import Task, TaskOverview, TaskUpdate
from amarnote.core.modules.task.views import DEFAULT_UPCOMING_DAYS, task_overview
from amarnote.errors import NotFoundError
from amarnote.utils import now, now_ms

logger = structlog.get_logger(__name__)

TASK_NOTE_TITLE = "Tasks"


class TaskService(Service):
    """Keeps persisted note tasks in step with the tasks written in note content."""

    async def sync_tasks(self, note_id: str) -> Note:
        """Extract tasks from the note's content and merge them into its persisted list.

        Does not go through the snapshot policy: tasks are not versioned content.
        """
        notes = self.core.services.note
        async with notes.lock(note_id):
            note = await notes.get_note(note_id)
            tasks = merge_tasks(note.tasks, extract_tasks(note))
            saved = await notes.save_note(note.model_copy(update={"tasks": tasks}))
        logger.debug("tasks_synced", note_id=note_id, count=len(tasks))
        return saved

    async def get_note_tasks(self, note_id: str) -> list[Task]:
        note = await self.core.services.note.get_note(note_id)
        return merge_tasks(note.tasks, extract_tasks(note))

    async def get_all_tasks(self) -> list[Task]:
        """Tasks of every active note, persisted and extracted."""
        lists = await self.core.services.note.list_notes()
        current = now()
        tasks: list[Task] = []
        for note in lists.active:
            tasks.extend(merge_tasks(note.tasks, extract_tasks(note, current)))
        return tasks

    async def overview(self, note_id: str | None = None, days: int = DEFAULT_UPCOMING_DAYS) -> TaskOverview:
        tasks = await self.get_note_tasks(note_id) if note_id else await self.get_all_tasks()
        return task_overview(tasks, days)

    async def update_task(self, note_id: str, task_id: str, update: TaskUpdate) -> Task:
        notes = self.core.services.note
        # due_date may be cleared with an explicit null; other fields cannot be unset
        changes = {
            name: getattr(update, name)
            for name in update.model_fields_set
            if getattr(update, name) is not None or name == "due_date"
        }
        async with notes.lock(note_id):
            note = await notes.get_note(note_id)
            tasks = merge_tasks(note.tasks, extract_tasks(note))
            for i, task in enumerate(tasks):
                if task.id == task_id:
                    tasks[i] = task.model_copy(update=changes)
                    break
            else:
                raise NotFoundError(f"Task not found: {task_id}")
            await notes.save_note(note.model_copy(update={"tasks": tasks, "updated_at": now_ms()}))
        return tasks[i]

    async def create_task_note(self, tasks: list[Task] | None = None, title: str = TASK_NOTE_TITLE) -> Note:
        """Create a note holding the given tasks (all active tasks by default) as a checklist."""
        tasks = tasks if tasks is not None else await self.get_all_tasks()
        block = tasks_to_checklist_block(tasks)
        blocks = [block] if block else [ParagraphBlock()]
        notes = self.core.services.note
        note = Note(id=notes.new_note_id(), title=title, content=Content(time=now_ms(), blocks=blocks))
        logger.info("task_note_created", task_count=len(tasks))
        return await notes.insert_note(note)
