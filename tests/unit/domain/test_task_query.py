"""
Name: Task Query Filter Tests

Responsibilities:
  - Role-based scoping of listings
  - Filter semantics (AND composition, case-insensitive search)
  - Calendar month bounds and ordering
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from app.domain.entities import TaskPriority, TaskStatus
from app.domain.task_policy import TaskActor
from app.domain.task_query import (
    TaskQuery,
    TaskSort,
    month_range,
    normalize_search,
    scope_query,
    sort_tasks,
)
from app.identity.users import UserRole

from tests.factories import make_task

pytestmark = pytest.mark.unit


class TestScopeQuery:
    def test_user_is_forced_to_own_assignments(self):
        actor = TaskActor(user_id=uuid4(), role=UserRole.USER)

        scoped = scope_query(actor, TaskQuery(assigned_to=uuid4()))

        assert scoped.assigned_to == actor.user_id

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.MANAGER])
    def test_admin_and_manager_are_unrestricted(self, role):
        query = TaskQuery(status=TaskStatus.PENDING)

        assert scope_query(TaskActor(user_id=uuid4(), role=role), query) == query


class TestMatches:
    def test_search_matches_title_or_description_case_insensitively(self):
        task = make_task(
            assigned_to=uuid4(),
            created_by=uuid4(),
            title="Fix Login",
            description="JWT expiry",
        )

        assert TaskQuery(search="login").matches(task)
        assert TaskQuery(search="jwt").matches(task)
        assert not TaskQuery(search="database").matches(task)

    def test_search_lowercases_without_unicode_folding(self):
        task = make_task(
            assigned_to=uuid4(), created_by=uuid4(), title="Straße repair"
        )

        assert TaskQuery(search="STRAßE").matches(task)
        assert not TaskQuery(search="STRASSE").matches(task)

    def test_filters_compose_with_and(self):
        task = make_task(
            assigned_to=uuid4(),
            created_by=uuid4(),
            status=TaskStatus.PENDING,
            priority=TaskPriority.HIGH,
        )

        assert TaskQuery(status=TaskStatus.PENDING, priority=TaskPriority.HIGH).matches(
            task
        )
        assert not TaskQuery(
            status=TaskStatus.PENDING, priority=TaskPriority.LOW
        ).matches(task)

    def test_due_window_is_inclusive(self):
        task = make_task(
            assigned_to=uuid4(), created_by=uuid4(), due_date=date(2025, 2, 28)
        )

        assert TaskQuery(due_from=date(2025, 2, 1), due_to=date(2025, 2, 28)).matches(
            task
        )
        assert not TaskQuery(due_from=date(2025, 3, 1)).matches(task)


def test_normalize_search_blank_is_none():
    assert normalize_search("   ") is None
    assert normalize_search(" report ") == "report"


class TestMonthRange:
    def test_leap_february(self):
        assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_december(self):
        assert month_range(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            month_range(2025, 13)


class TestSortTasks:
    def test_created_desc_newest_first(self):
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        old = make_task(assigned_to=uuid4(), created_by=uuid4(), created_at=base)
        new = make_task(
            assigned_to=uuid4(),
            created_by=uuid4(),
            created_at=base + timedelta(hours=1),
        )

        assert sort_tasks([old, new], TaskSort.CREATED_DESC) == [new, old]

    def test_due_asc(self):
        late = make_task(
            assigned_to=uuid4(), created_by=uuid4(), due_date=date(2025, 1, 20)
        )
        early = make_task(
            assigned_to=uuid4(), created_by=uuid4(), due_date=date(2025, 1, 5)
        )

        assert sort_tasks([late, early], TaskSort.DUE_ASC) == [early, late]
