from enum import StrEnum

from pydantic import BaseModel, Field

from amarnote.core.db import StoredModel
from amarnote.utils import now_ms


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(StoredModel):
    """Actionable item, either extracted from note content or persisted directly."""

    id: str
    title: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.LOW
    due_date: int | None = None  # ms epoch
    created_at: int = Field(default_factory=now_ms)
    source_key: str | None = None  # "<note id>/<block id or index>/<item index | para>" for extracted tasks


class TaskStatusGroups(BaseModel):
    pending: list[Task] = Field(default_factory=list)
    completed: list[Task] = Field(default_factory=list)
    overdue: list[Task] = Field(default_factory=list)


class TaskPriorityGroups(BaseModel):
    high: list[Task] = Field(default_factory=list)
    medium: list[Task] = Field(default_factory=list)
    low: list[Task] = Field(default_factory=list)


class TaskOverview(BaseModel):
    """Derived views over a task list."""

    tasks: list[Task]
    completion_percentage: int
    by_status: TaskStatusGroups
    by_priority: TaskPriorityGroups
    upcoming: list[Task]


class TaskUpdate(StoredModel):
    """Editable task fields; only fields that were explicitly set are applied."""

    title: str | None = None
    completed: bool | None = None
    priority: TaskPriority | None = None
    due_date: int | None = None
