"""
Name: Task Listing Use Case Tests

Responsibilities:
  - Paged listing: role scoping, filters, page info, parameter validation
  - Pages past the end come back empty without a storage fetch
  - Calendar view: month bounds and due-date ordering
  - Stats counters (including overdue)
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from app.application.usecases import (
    GetTaskStatsUseCase,
    ListCalendarTasksUseCase,
    ListTasksUseCase,
    TaskErrorCode,
)
from app.domain.entities import TaskPriority, TaskStatus

from tests.factories import actor_of, make_task

pytestmark = pytest.mark.unit

BASE = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _seed_for(task_repo, assignee, creator, count, **kwargs):
    return [
        task_repo.insert_task(
            make_task(
                assigned_to=assignee.id,
                created_by=creator.id,
                title=f"{assignee.name} task {i}",
                created_at=BASE + timedelta(minutes=i),
                **kwargs,
            )
        )
        for i in range(count)
    ]


class TestListTasks:
    def test_second_page_of_fifteen(self, task_repo, user_repo, admin, alice):
        _seed_for(task_repo, alice, admin, 15)
        use_case = ListTasksUseCase(task_repo, user_repo)

        result = use_case.execute(actor_of(admin), page=2, limit=10)

        assert result.error is None
        assert len(result.tasks) == 5
        info = result.page_info
        assert info.current_page == 2
        assert info.total_pages == 2
        assert info.total_items == 15
        assert info.has_next is False
        assert info.has_prev is True

    def test_newest_first_with_resolved_refs(self, task_repo, user_repo, admin, alice):
        _seed_for(task_repo, alice, admin, 3)

        result = ListTasksUseCase(task_repo, user_repo).execute(actor_of(admin))

        assert [d.task.title for d in result.tasks] == [
            "Alice task 2",
            "Alice task 1",
            "Alice task 0",
        ]
        assert result.tasks[0].assignee.email == "alice@example.com"
        assert result.tasks[0].creator.name == "Admin User"

    def test_user_sees_only_own_assignments(
        self, task_repo, user_repo, admin, alice, bob
    ):
        _seed_for(task_repo, alice, admin, 2)
        _seed_for(task_repo, bob, admin, 3)
        # Created by alice but assigned to bob: not in alice's listing.
        _seed_for(task_repo, bob, alice, 1)

        result = ListTasksUseCase(task_repo, user_repo).execute(actor_of(alice))

        assert result.page_info.total_items == 2
        assert all(d.task.assigned_to == alice.id for d in result.tasks)

    def test_manager_sees_everything(self, task_repo, user_repo, admin, manager, alice, bob):
        _seed_for(task_repo, alice, admin, 2)
        _seed_for(task_repo, bob, admin, 3)

        result = ListTasksUseCase(task_repo, user_repo).execute(actor_of(manager))

        assert result.page_info.total_items == 5

    def test_filters_are_combined(self, task_repo, user_repo, admin, alice):
        _seed_for(task_repo, alice, admin, 2, priority=TaskPriority.HIGH)
        _seed_for(
            task_repo,
            alice,
            admin,
            1,
            priority=TaskPriority.HIGH,
            status=TaskStatus.IN_PROGRESS,
        )
        _seed_for(task_repo, alice, admin, 4, priority=TaskPriority.LOW)

        result = ListTasksUseCase(task_repo, user_repo).execute(
            actor_of(admin), status="pending", priority="HIGH"
        )

        assert result.page_info.total_items == 2

    def test_search_is_case_insensitive(self, task_repo, user_repo, admin, alice):
        task_repo.insert_task(
            make_task(assigned_to=alice.id, created_by=admin.id, title="Deploy API")
        )
        task_repo.insert_task(
            make_task(assigned_to=alice.id, created_by=admin.id, title="Write docs")
        )

        result = ListTasksUseCase(task_repo, user_repo).execute(
            actor_of(admin), search="  deploy "
        )

        assert [d.task.title for d in result.tasks] == ["Deploy API"]

    def test_empty_listing(self, task_repo, user_repo, alice):
        result = ListTasksUseCase(task_repo, user_repo).execute(actor_of(alice))

        assert result.tasks == []
        assert result.page_info.total_pages == 0
        assert result.page_info.has_next is False

    def test_page_past_the_end_is_empty_without_fetching(
        self, task_repo, user_repo, admin, alice
    ):
        _seed_for(task_repo, alice, admin, 3)
        repo = MagicMock(wraps=task_repo)

        result = ListTasksUseCase(repo, user_repo).execute(
            actor_of(admin), page=10**19, limit=100
        )

        assert result.error is None
        assert result.tasks == []
        assert result.page_info.total_items == 3
        assert result.page_info.has_next is False
        repo.find_tasks.assert_not_called()

    def test_invalid_parameters_accumulate(self, task_repo, user_repo, admin):
        result = ListTasksUseCase(task_repo, user_repo).execute(
            actor_of(admin), page=0, limit=500, status="archived", priority="meh"
        )

        assert result.error.code == TaskErrorCode.VALIDATION_ERROR
        assert [e.field for e in result.error.errors] == [
            "page",
            "limit",
            "status",
            "priority",
        ]

    def test_custom_page_sizes(self, task_repo, user_repo, admin, alice):
        _seed_for(task_repo, alice, admin, 7)
        use_case = ListTasksUseCase(task_repo, user_repo, default_limit=3, max_limit=5)

        assert len(use_case.execute(actor_of(admin)).tasks) == 3
        assert use_case.execute(actor_of(admin), limit=6).error is not None


class TestListCalendarTasks:
    def test_month_window_sorted_by_due_date(self, task_repo, user_repo, admin, alice):
        for due in (date(2025, 2, 28), date(2025, 2, 1), date(2025, 3, 1), date(2025, 1, 31)):
            task_repo.insert_task(
                make_task(assigned_to=alice.id, created_by=admin.id, due_date=due)
            )

        result = ListCalendarTasksUseCase(task_repo, user_repo).execute(
            actor_of(admin), year=2025, month=2
        )

        assert [d.task.due_date for d in result.tasks] == [
            date(2025, 2, 1),
            date(2025, 2, 28),
        ]
        assert result.page_info is None

    def test_user_calendar_is_scoped(self, task_repo, user_repo, admin, alice, bob):
        for who in (alice, bob):
            task_repo.insert_task(
                make_task(
                    assigned_to=who.id, created_by=admin.id, due_date=date(2025, 5, 5)
                )
            )

        result = ListCalendarTasksUseCase(task_repo, user_repo).execute(
            actor_of(bob), year=2025, month=5
        )

        assert [d.task.assigned_to for d in result.tasks] == [bob.id]

    def test_invalid_month(self, task_repo, user_repo, admin):
        result = ListCalendarTasksUseCase(task_repo, user_repo).execute(
            actor_of(admin), year=2025, month=13
        )

        assert result.error.code == TaskErrorCode.VALIDATION_ERROR
        assert result.error.errors[0].field == "month"


class TestTaskStats:
    def test_counts_and_overdue(self, task_repo, admin, alice):
        today = date(2025, 6, 15)
        past = today - timedelta(days=3)
        specs = [
            (TaskStatus.PENDING, TaskPriority.URGENT, past),
            (TaskStatus.IN_PROGRESS, TaskPriority.HIGH, past),
            (TaskStatus.COMPLETED, TaskPriority.HIGH, past),
            (TaskStatus.CANCELLED, TaskPriority.LOW, past),
            (TaskStatus.PENDING, TaskPriority.MEDIUM, today),
        ]
        for status, priority, due in specs:
            task_repo.insert_task(
                make_task(
                    assigned_to=alice.id,
                    created_by=admin.id,
                    status=status,
                    priority=priority,
                    due_date=due,
                )
            )

        result = GetTaskStatsUseCase(task_repo, today=lambda: today).execute(
            actor_of(admin)
        )

        stats = result.stats
        assert stats.total == 5
        assert stats.pending == 2
        assert stats.in_progress == 1
        assert stats.completed == 1
        assert stats.cancelled == 1
        assert stats.urgent == 1
        assert stats.high == 2
        assert stats.overdue == 2

    def test_user_stats_are_scoped(self, task_repo, admin, alice, bob):
        task_repo.insert_task(make_task(assigned_to=alice.id, created_by=admin.id))
        task_repo.insert_task(make_task(assigned_to=bob.id, created_by=admin.id))

        result = GetTaskStatsUseCase(task_repo).execute(actor_of(bob))

        assert result.stats.total == 1
