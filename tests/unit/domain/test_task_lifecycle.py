"""
Name: Task Lifecycle Tests

Responsibilities:
  - completedAt transitions driven by status writes
  - Patch -> column changes (only supplied fields, createdBy untouched)
  - New task records always start pending
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from app.domain.entities import TaskPriority, TaskStatus
from app.domain.task_lifecycle import (
    NewTask,
    TaskPatch,
    create_task_record,
    next_completed_at,
    patch_changes,
)

from tests.factories import make_task

pytestmark = pytest.mark.unit

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
EARLIER = NOW - timedelta(days=2)


class TestNextCompletedAt:
    def test_entering_completed_sets_now(self):
        assert (
            next_completed_at(TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, None, NOW)
            == NOW
        )

    def test_leaving_completed_clears(self):
        assert (
            next_completed_at(TaskStatus.COMPLETED, TaskStatus.PENDING, EARLIER, NOW)
            is None
        )

    def test_completed_to_completed_keeps_original(self):
        assert (
            next_completed_at(TaskStatus.COMPLETED, TaskStatus.COMPLETED, EARLIER, NOW)
            == EARLIER
        )

    def test_non_completed_transition_keeps_value(self):
        assert (
            next_completed_at(TaskStatus.PENDING, TaskStatus.CANCELLED, None, NOW)
            is None
        )


def test_create_task_record_forces_pending():
    creator = uuid4()
    data = NewTask(
        title="Ship it",
        description="Release v1",
        assigned_to=uuid4(),
        due_date=date(2025, 4, 1),
        priority=TaskPriority.HIGH,
        tags=("release",),
    )

    task = create_task_record(data, task_id=uuid4(), created_by=creator, now=NOW)

    assert task.status == TaskStatus.PENDING
    assert task.completed_at is None
    assert task.created_by == creator
    assert task.tags == ["release"]
    assert task.created_at == task.updated_at == NOW


class TestPatchChanges:
    def test_status_to_completed_stamps_completed_at(self):
        task = make_task(assigned_to=uuid4(), created_by=uuid4())

        changes = patch_changes(task, TaskPatch(status=TaskStatus.COMPLETED), now=NOW)

        assert changes == {
            "status": TaskStatus.COMPLETED,
            "completed_at": NOW,
            "updated_at": NOW,
        }

    def test_reopening_clears_completed_at(self):
        task = make_task(
            assigned_to=uuid4(),
            created_by=uuid4(),
            status=TaskStatus.COMPLETED,
            completed_at=EARLIER,
        )

        changes = patch_changes(task, TaskPatch(status=TaskStatus.PENDING), now=NOW)

        assert changes["completed_at"] is None

    def test_only_supplied_fields_are_written(self):
        task = make_task(assigned_to=uuid4(), created_by=uuid4())

        changes = patch_changes(task, TaskPatch(title="New title"), now=NOW)

        assert changes == {"title": "New title", "updated_at": NOW}

    def test_tags_are_replaced_not_merged(self):
        task = make_task(assigned_to=uuid4(), created_by=uuid4(), tags=["a", "b"])

        changes = patch_changes(task, TaskPatch(tags=("c",)), now=NOW)

        assert changes["tags"] == ["c"]

    def test_empty_tags_clear_the_list(self):
        task = make_task(assigned_to=uuid4(), created_by=uuid4(), tags=["a"])

        changes = patch_changes(task, TaskPatch(tags=()), now=NOW)

        assert changes["tags"] == []

    def test_created_by_is_never_written(self):
        task = make_task(assigned_to=uuid4(), created_by=uuid4())
        new_assignee = uuid4()

        changes = patch_changes(
            task, TaskPatch(title="New title", assigned_to=new_assignee), now=NOW
        )

        assert "created_by" not in changes
        assert "created_at" not in changes
        assert changes["assigned_to"] == new_assignee

    def test_empty_patch_writes_nothing(self):
        task = make_task(assigned_to=uuid4(), created_by=uuid4())

        assert patch_changes(task, TaskPatch(), now=NOW) == {}

    def test_original_task_is_not_mutated(self):
        task = make_task(assigned_to=uuid4(), created_by=uuid4(), title="Before")

        patch_changes(task, TaskPatch(title="After"), now=NOW)

        assert task.title == "Before"
