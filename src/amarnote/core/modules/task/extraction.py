"""Turn note content into tasks and reconcile them with persisted tasks."""

import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from amarnote.core.modules.content.models import ChecklistBlock, ChecklistData, ChecklistItem, ParagraphBlock
from amarnote.core.modules.content.text import strip_html
from amarnote.core.modules.note.models import Note
from amarnote.core.modules.task.models import Task, TaskPriority
from amarnote.utils import now, to_ms

HIGH_PRIORITY_KEYWORDS = ("জরুরি", "গুরুত্বপূর্ণ", "urgent", "important", "high", "critical")
MEDIUM_PRIORITY_KEYWORDS = ("মাঝারি", "medium", "normal")
UNTITLED_TASK = "untitled task"

TASK_MARKER_RE = re.compile(r"^[\[(]?\s*(?:todo|কাজ|task)\s*[\])]?(?::|\s)\s*(.+)$", re.IGNORECASE | re.DOTALL)

_TODAY_RE = re.compile(r"today|আজ", re.IGNORECASE)
_TOMORROW_RE = re.compile(r"tomorrow|আগামীকাল", re.IGNORECASE)
_DATE_RE = re.compile(r"(\d{1,2})([/-])(\d{1,2})\2(\d{4})")
_DAYS_LATER_RE = re.compile(r"(\d+)\s*(?:দিন|days?)\s*(?:পর|later)", re.IGNORECASE)


def infer_priority(text: str) -> TaskPriority:
    lowered = text.lower()
    if any(keyword in lowered for keyword in HIGH_PRIORITY_KEYWORDS):
        return TaskPriority.HIGH
    if any(keyword in lowered for keyword in MEDIUM_PRIORITY_KEYWORDS):
        return TaskPriority.MEDIUM
    return TaskPriority.LOW


def infer_due_date(text: str, current: datetime | None = None) -> int | None:
    """Due date (ms epoch) mentioned in the text; the first matching rule wins."""
    current = current or now()

    if _TODAY_RE.search(text):
        return to_ms(current)
    if _TOMORROW_RE.search(text):
        return to_ms(current + timedelta(days=1))

    for match in _DATE_RE.finditer(text):
        day, month, year = int(match.group(1)), int(match.group(3)), int(match.group(4))
        try:
            return to_ms(datetime(year, month, day, tzinfo=UTC))
        except ValueError:
            continue

    days_later = _DAYS_LATER_RE.search(text)
    if days_later:
        return to_ms(current + timedelta(days=int(days_later.group(1))))

    return None


def extract_tasks(note: Note, current: datetime | None = None) -> list[Task]:
    """Tasks found in checklist items and in paragraphs starting with a task marker."""
    current = current or now()
    created_at = to_ms(current)
    tasks: list[Task] = []

    for index, block in enumerate(note.content.blocks):
        block_ref = block.id or str(index)
        if isinstance(block, ChecklistBlock):
            for item_index, item in enumerate(block.data.items):
                title = strip_html(item.text).strip() or UNTITLED_TASK
                tasks.append(
                    Task(
                        id=f"{note.id}_{index}_{item_index}",
                        title=title,
                        completed=item.checked,
                        priority=infer_priority(title),
                        due_date=infer_due_date(title, current),
                        created_at=created_at,
                        source_key=f"{note.id}/{block_ref}/{item_index}",
                    )
                )
        elif isinstance(block, ParagraphBlock):
            match = TASK_MARKER_RE.match(strip_html(block.data.text).strip())
            title = match.group(1).strip() if match else ""
            if title:
                tasks.append(
                    Task(
                        id=f"{note.id}_para_{index}",
                        title=title,
                        priority=infer_priority(title),
                        due_date=infer_due_date(title, current),
                        created_at=created_at,
                        source_key=f"{note.id}/{block_ref}/para",
                    )
                )

    return tasks


def _same_key(old: Task, new: Task) -> bool:
    return new.source_key is not None and old.source_key == new.source_key


# Tried in order. Positional keys shift when blocks are inserted above, so title comes before a bare key
_MATCH_RULES: tuple[Callable[[Task, Task], bool], ...] = (
    lambda old, new: _same_key(old, new) and old.title == new.title,
    lambda old, new: old.title == new.title,
    _same_key,
)


def merge_tasks(existing: list[Task], extracted: list[Task]) -> list[Task]:
    """Reconcile persisted tasks with freshly extracted ones.

    Each persisted task matches at most one extracted task, so duplicate
    titles stay separate. Matching tries key and title together, then title
    alone, then key alone (an item edited in place). A match keeps the
    persisted task's own fields but takes title, completion state and key
    from the content. Unmatched persisted tasks are kept, unmatched
    extracted ones appended.
    """
    merged = list(existing)
    free = list(range(len(merged)))
    matches: dict[int, int] = {}

    for rule in _MATCH_RULES:
        for j, task in enumerate(extracted):
            if j in matches:
                continue
            index = next((i for i in free if rule(merged[i], task)), None)
            if index is not None:
                free.remove(index)
                matches[j] = index

    for j, task in enumerate(extracted):
        index = matches.get(j)
        if index is None:
            merged.append(task)
            continue
        merged[index] = merged[index].model_copy(
            update={
                "title": task.title,
                "completed": task.completed,
                "source_key": task.source_key or merged[index].source_key,
            }
        )

    return merged


PRIORITY_MARKERS = {TaskPriority.HIGH: "🔴", TaskPriority.MEDIUM: "🟡"}


def format_task_text(task: Task, current: datetime | None = None) -> str:
    """Checklist text for a task, with a priority marker and a relative due label."""
    text = task.title
    marker = PRIORITY_MARKERS.get(task.priority)
    if marker:
        text = f"{marker} {text}"

    if task.due_date is not None:
        today = (current or now()).date()
        days = (datetime.fromtimestamp(task.due_date / 1000, UTC).date() - today).days
        if days == 0:
            text += " (today)"
        elif days == 1:
            text += " (tomorrow)"
        elif days > 1:
            text += f" (in {days} days)"
        else:
            text += " (overdue)"
    return text


def tasks_to_checklist_block(tasks: list[Task], current: datetime | None = None) -> ChecklistBlock | None:
    if not tasks:
        return None
    items = [ChecklistItem(text=format_task_text(task, current), checked=task.completed) for task in tasks]
    return ChecklistBlock(data=ChecklistData(items=items))
