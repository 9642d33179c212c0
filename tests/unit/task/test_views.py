"""Tests for derived task views."""

from datetime import UTC, datetime, timedelta

import pytest

from amarnote.core.modules.task.models import Task, TaskPriority
from amarnote.core.modules.task.views import (
    completion_percentage,
    group_by_priority,
    group_by_status,
    task_overview,
    upcoming_tasks,
)
from amarnote.utils import to_ms

NOW = datetime(2025, 3, 10, 15, 0, tzinfo=UTC)
START_OF_DAY = datetime(2025, 3, 10, tzinfo=UTC)


def task(task_id, **kwargs):
    return Task(id=task_id, title=task_id, **kwargs)


class TestCompletion:
    """Tests for completion_percentage."""

    def test_rounded(self):
        """Test that one of three completed tasks gives 33."""
        tasks = [task("a", completed=True), task("b"), task("c")]

        assert completion_percentage(tasks) == 33

    def test_two_thirds(self):
        """Test that two of three completed tasks gives 67."""
        assert completion_percentage([task("a", completed=True), task("b", completed=True), task("c")]) == 67

    @pytest.mark.parametrize(("done", "expected"), [(1, 13), (3, 38), (5, 63)])
    def test_halves_round_up(self, done, expected):
        """Test that an exact half percent rounds up, not to the nearest even number."""
        tasks = [task(str(i), completed=i < done) for i in range(8)]

        assert completion_percentage(tasks) == expected

    def test_empty(self):
        """Test that no tasks count as zero percent."""
        assert completion_percentage([]) == 0


class TestGroupByStatus:
    """Tests for group_by_status."""

    def test_groups(self):
        """Test pending, completed and overdue groups relative to the start of today."""
        tasks = [
            task("done", completed=True, due_date=to_ms(NOW - timedelta(days=5))),
            task("late", due_date=to_ms(START_OF_DAY - timedelta(minutes=1))),
            task("earlier_today", due_date=to_ms(START_OF_DAY + timedelta(hours=1))),
            task("undated"),
        ]

        groups = group_by_status(tasks, NOW)

        assert [t.id for t in groups.completed] == ["done"]
        assert [t.id for t in groups.overdue] == ["late"]
        assert [t.id for t in groups.pending] == ["earlier_today", "undated"]


class TestGroupByPriority:
    """Tests for group_by_priority."""

    def test_groups(self):
        """Test that tasks land in their priority group."""
        groups = group_by_priority(
            [task("h", priority=TaskPriority.HIGH), task("l"), task("m", priority=TaskPriority.MEDIUM)]
        )

        assert [t.id for t in groups.high] == ["h"]
        assert [t.id for t in groups.medium] == ["m"]
        assert [t.id for t in groups.low] == ["l"]


class TestUpcoming:
    """Tests for upcoming_tasks."""

    def test_window_and_order(self):
        """Test that only incomplete tasks due within the window are returned, soonest first."""
        tasks = [
            task("in_five", due_date=to_ms(NOW + timedelta(days=5))),
            task("in_one", due_date=to_ms(NOW + timedelta(days=1))),
            task("too_far", due_date=to_ms(NOW + timedelta(days=9))),
            task("finished", completed=True, due_date=to_ms(NOW + timedelta(days=2))),
            task("yesterday", due_date=to_ms(NOW - timedelta(days=1))),
            task("undated"),
        ]

        assert [t.id for t in upcoming_tasks(tasks, 7, NOW)] == ["in_one", "in_five"]

    def test_custom_window(self):
        """Test a wider window."""
        tasks = [task("too_far", due_date=to_ms(NOW + timedelta(days=9)))]

        assert [t.id for t in upcoming_tasks(tasks, 10, NOW)] == ["too_far"]


class TestOverview:
    """Tests for task_overview."""

    def test_overview_combines_views(self):
        """Test that the overview carries every view."""
        tasks = [task("a", completed=True), task("b", priority=TaskPriority.HIGH, due_date=to_ms(NOW))]

        overview = task_overview(tasks, current=NOW)

        assert overview.completion_percentage == 50
        assert [t.id for t in overview.by_priority.high] == ["b"]
        assert [t.id for t in overview.upcoming] == ["b"]
        assert len(overview.tasks) == 2
