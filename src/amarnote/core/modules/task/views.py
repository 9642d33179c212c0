"""Derived read-side views over task lists."""

from datetime import datetime, timedelta

from amarnote.core.modules.task.models import Task, TaskOverview, TaskPriority, TaskPriorityGroups, TaskStatusGroups
from amarnote.utils import now, start_of_day_ms

DEFAULT_UPCOMING_DAYS = 7


def completion_percentage(tasks: list[Task]) -> int:
    """Share of completed tasks in percent, halves rounded up."""
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if task.completed)
    return (completed * 200 + len(tasks)) // (len(tasks) * 2)


def group_by_status(tasks: list[Task], current: datetime | None = None) -> TaskStatusGroups:
    """Pending, completed and overdue (incomplete, due before the start of today)."""
    today = start_of_day_ms(current or now())
    groups = TaskStatusGroups()
    for task in tasks:
        if task.completed:
            groups.completed.append(task)
        elif task.due_date is not None and task.due_date < today:
            groups.overdue.append(task)
        else:
            groups.pending.append(task)
    return groups


def group_by_priority(tasks: list[Task]) -> TaskPriorityGroups:
    return TaskPriorityGroups(
        high=[task for task in tasks if task.priority == TaskPriority.HIGH],
        medium=[task for task in tasks if task.priority == TaskPriority.MEDIUM],
        low=[task for task in tasks if task.priority == TaskPriority.LOW],
    )


def upcoming_tasks(tasks: list[Task], days: int = DEFAULT_UPCOMING_DAYS, current: datetime | None = None) -> list[Task]:
    """Incomplete tasks due between the start of today and `days` days later, soonest first."""
    start = start_of_day_ms(current or now())
    end = start + int(timedelta(days=days).total_seconds() * 1000)
    due = [task for task in tasks if not task.completed and task.due_date is not None and start <= task.due_date <= end]
    return sorted(due, key=lambda task: task.due_date or 0)


def task_overview(tasks: list[Task], days: int = DEFAULT_UPCOMING_DAYS, current: datetime | None = None) -> TaskOverview:
    return TaskOverview(
        tasks=tasks,
        completion_percentage=completion_percentage(tasks),
        by_status=group_by_status(tasks, current),
        by_priority=group_by_priority(tasks),
        upcoming=upcoming_tasks(tasks, days, current),
    )
