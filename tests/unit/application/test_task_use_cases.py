"""
Name: Task Use Case Tests

Responsibilities:
  - Validate task use cases and access policy wiring
  - Cover listing scopes, optimistic concurrency and patch semantics

Notes:
  - Storage is the in-memory adapter (same contract as Postgres)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from task_manager.application.usecases.tasks import (
    ArchiveTaskUseCase,
    CreateTaskInput,
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetTaskUseCase,
    ListMyAssignedTasksUseCase,
    ListMyCreatedTasksUseCase,
    ListTasksUseCase,
    TaskErrorCode,
    TaskStatsUseCase,
    UpdateTaskInput,
    UpdateTaskUseCase,
)
from task_manager.domain.entities import Task
from task_manager.domain.task_policy import TaskActor
from task_manager.domain.value_objects import (
    TaskCategory,
    TaskPriority,
    TaskSort,
    TaskStatus,
)
from task_manager.identity.users import UserRole
from task_manager.infrastructure.repositories.in_memory import InMemoryTaskRepository

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _actor(role: UserRole = UserRole.USER, user_id: UUID | None = None) -> TaskActor:
    return TaskActor(user_id=user_id or uuid4(), role=role)


def _seed(
    repo: InMemoryTaskRepository,
    *,
    created_by: UUID,
    assigned_to: UUID | None = None,
    title: str = "Task",
    minutes: int = 0,
    **kwargs,
) -> Task:
    return repo.create_task(
        Task.create(
            title=title,
            created_by=created_by,
            assigned_to=assigned_to,
            now=NOW + timedelta(minutes=minutes),
            **kwargs,
        )
    )


class RacingTaskRepository(InMemoryTaskRepository):
    """Simula otro writer que incrementa la versión entre lectura y escritura."""

    def update_task(self, task: Task, *, expected_version: int) -> Task | None:
        current = self.get_task(task.id)
        if current is not None:
            super().update_task(current, expected_version=current.version)
        return super().update_task(task, expected_version=expected_version)


# =============================================================================
# Create / Get
# =============================================================================


def test_create_defaults_to_creator_and_medium_priority():
    repo = InMemoryTaskRepository()
    actor = _actor()

    result = CreateTaskUseCase(repo).execute(CreateTaskInput(title="Plan"), actor)

    assert result.error is None
    task = result.task
    assert task.status == TaskStatus.TODO
    assert task.priority == TaskPriority.MEDIUM
    assert task.assigned_to == actor.user_id
    assert task.created_by == actor.user_id
    assert task.created_at is not None and task.updated_at is not None


def test_create_then_get_round_trip():
    repo = InMemoryTaskRepository()
    actor = _actor()
    assignee = uuid4()
    due = NOW + timedelta(days=3)

    created = CreateTaskUseCase(repo).execute(
        CreateTaskInput(
            title="Round trip",
            description="desc",
            priority=TaskPriority.HIGH,
            category=TaskCategory.DEVELOPMENT,
            due_date=due,
            assigned_to=assignee,
            estimated_hours=5,
        ),
        actor,
    ).task

    fetched = GetTaskUseCase(repo).execute(created.id, actor).task

    assert fetched.id == created.id
    assert fetched.title == "Round trip"
    assert fetched.description == "desc"
    assert fetched.priority == TaskPriority.HIGH
    assert fetched.category == TaskCategory.DEVELOPMENT
    assert fetched.due_date == due
    assert fetched.assigned_to == assignee
    assert fetched.estimated_hours == 5
    assert fetched.version == 0


def test_create_blank_title_is_validation_error():
    result = CreateTaskUseCase(InMemoryTaskRepository()).execute(
        CreateTaskInput(title="   "), _actor()
    )
    assert result.error.code == TaskErrorCode.VALIDATION_ERROR
    assert result.error.field == "title"


def test_create_without_actor_is_forbidden():
    result = CreateTaskUseCase(InMemoryTaskRepository()).execute(
        CreateTaskInput(title="x"), None
    )
    assert result.error.code == TaskErrorCode.FORBIDDEN


def test_get_missing_task_is_not_found():
    result = GetTaskUseCase(InMemoryTaskRepository()).execute(uuid4(), _actor())
    assert result.error.code == TaskErrorCode.NOT_FOUND


# =============================================================================
# Policy wiring
# =============================================================================


def test_stranger_gets_not_found_everywhere():
    repo = InMemoryTaskRepository()
    task = _seed(repo, created_by=uuid4())
    stranger = _actor()

    assert GetTaskUseCase(repo).execute(task.id, stranger).error.code == (
        TaskErrorCode.NOT_FOUND
    )
    assert UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(title="hijack"), stranger
    ).error.code == TaskErrorCode.NOT_FOUND
    assert DeleteTaskUseCase(repo).execute(task.id, stranger).error.code == (
        TaskErrorCode.NOT_FOUND
    )
    assert repo.get_task(task.id).title == "Task"


def test_assignee_can_view_but_not_modify():
    repo = InMemoryTaskRepository()
    assignee = _actor()
    task = _seed(repo, created_by=uuid4(), assigned_to=assignee.user_id)

    assert GetTaskUseCase(repo).execute(task.id, assignee).task.id == task.id
    assert UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(status=TaskStatus.IN_PROGRESS), assignee
    ).error.code == TaskErrorCode.NOT_FOUND
    assert DeleteTaskUseCase(repo).execute(task.id, assignee).error.code == (
        TaskErrorCode.NOT_FOUND
    )


def test_admin_can_view_update_and_delete_any_task():
    repo = InMemoryTaskRepository()
    admin = _actor(UserRole.ADMIN)
    task = _seed(repo, created_by=uuid4())

    assert GetTaskUseCase(repo).execute(task.id, admin).error is None
    updated = UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(priority=TaskPriority.URGENT), admin
    )
    assert updated.task.priority == TaskPriority.URGENT
    assert DeleteTaskUseCase(repo).execute(task.id, admin).deleted is True
    assert repo.get_task(task.id) is None


# =============================================================================
# Listings
# =============================================================================


def test_listing_scopes_for_assigned_created_and_visible():
    repo = InMemoryTaskRepository()
    u1, u2 = uuid4(), uuid4()
    a = _seed(repo, created_by=u1, assigned_to=u1, title="A", minutes=1)
    b = _seed(repo, created_by=u2, assigned_to=u1, title="B", minutes=2)
    c = _seed(repo, created_by=u1, assigned_to=u2, title="C", minutes=3)
    _seed(repo, created_by=u2, assigned_to=u2, title="D", minutes=4)
    actor = _actor(user_id=u1)

    assigned = ListMyAssignedTasksUseCase(repo).execute(actor)
    created = ListMyCreatedTasksUseCase(repo).execute(actor)
    visible = ListTasksUseCase(repo).execute(actor)

    assert {t.id for t in assigned.tasks} == {a.id, b.id}
    assert {t.id for t in created.tasks} == {a.id, c.id}
    assert {t.id for t in visible.tasks} == {a.id, b.id, c.id}
    assert visible.total == 3


def test_admin_lists_all_non_archived():
    repo = InMemoryTaskRepository()
    first = _seed(repo, created_by=uuid4(), minutes=1)
    archived = _seed(repo, created_by=uuid4(), minutes=2)
    archived.archive()
    repo.update_task(archived, expected_version=0)

    result = ListTasksUseCase(repo).execute(_actor(UserRole.ADMIN))

    assert [t.id for t in result.tasks] == [first.id]


def test_list_by_status_keeps_visibility_rule():
    repo = InMemoryTaskRepository()
    me = _actor()
    mine = _seed(repo, created_by=me.user_id)
    done = _seed(repo, created_by=me.user_id, minutes=1)
    done.complete()
    repo.update_task(done, expected_version=0)
    foreign = _seed(repo, created_by=uuid4(), minutes=2)
    foreign.complete()
    repo.update_task(foreign, expected_version=0)

    result = ListTasksUseCase(repo).execute(me, status=TaskStatus.COMPLETED)

    assert [t.id for t in result.tasks] == [done.id]
    assert mine.id not in {t.id for t in result.tasks}


def test_list_sort_and_window():
    repo = InMemoryTaskRepository()
    me = _actor()
    for i, title in enumerate(["banana", "Apple", "cherry"]):
        _seed(repo, created_by=me.user_id, title=title, minutes=i)

    by_title = ListTasksUseCase(repo).execute(me, sort=TaskSort.TITLE_ASC)
    newest = ListTasksUseCase(repo).execute(me, limit=2, offset=0)
    rest = ListTasksUseCase(repo).execute(me, limit=2, offset=2)

    assert [t.title for t in by_title.tasks] == ["Apple", "banana", "cherry"]
    assert [t.title for t in newest.tasks] == ["cherry", "Apple"]
    assert [t.title for t in rest.tasks] == ["banana"]
    assert newest.total == 3


def test_list_limit_is_clamped():
    repo = InMemoryTaskRepository()
    result = ListTasksUseCase(repo).execute(_actor(), limit=10_000)
    assert result.limit == 100

    result = ListTasksUseCase(repo).execute(_actor(), limit=0)
    assert result.limit == 20


def test_list_limit_follows_configured_bounds():
    repo = InMemoryTaskRepository()
    use_case = ListTasksUseCase(repo, default_limit=30, max_limit=150)

    assert use_case.execute(_actor(), limit=150).limit == 150
    assert use_case.execute(_actor(), limit=500).limit == 150
    assert use_case.execute(_actor()).limit == 30


def test_container_passes_page_size_settings(monkeypatch):
    from task_manager.container import (
        get_list_my_created_tasks_use_case,
        get_list_tasks_use_case,
    )
    from task_manager.crosscutting.config import get_settings

    monkeypatch.setenv("MAX_PAGE_SIZE", "150")
    get_settings.cache_clear()
    try:
        me = _actor()
        assert get_list_tasks_use_case().execute(me, limit=150).limit == 150
        assert get_list_my_created_tasks_use_case().execute(me, limit=150).limit == 150
    finally:
        get_settings.cache_clear()


def test_my_assigned_sorts_by_due_date_nulls_last():
    repo = InMemoryTaskRepository()
    me = _actor()
    later = _seed(repo, created_by=me.user_id, due_date=NOW + timedelta(days=5))
    no_due = _seed(repo, created_by=me.user_id, minutes=1)
    sooner = _seed(repo, created_by=me.user_id, due_date=NOW + timedelta(days=1))

    result = ListMyAssignedTasksUseCase(repo).execute(me)

    assert [t.id for t in result.tasks] == [sooner.id, later.id, no_due.id]


def test_list_without_actor_is_forbidden():
    result = ListTasksUseCase(InMemoryTaskRepository()).execute(None)
    assert result.error.code == TaskErrorCode.FORBIDDEN


# =============================================================================
# Update
# =============================================================================


def test_update_applies_only_present_fields_and_bumps_version():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id, description="keep", priority=TaskPriority.LOW)

    result = UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(title="Renamed", expected_version=0), me
    )

    assert result.error is None
    assert result.task.title == "Renamed"
    assert result.task.description == "keep"
    assert result.task.priority == TaskPriority.LOW
    assert result.task.version == 1


def test_update_title_and_description_together():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id, description="old")

    result = UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(title="New", description="fresh"), me
    )

    assert (result.task.title, result.task.description) == ("New", "fresh")


def test_update_description_only_keeps_title():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id, title="Stay")

    result = UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(description="added"), me
    )

    assert result.task.title == "Stay"
    assert result.task.description == "added"


def test_update_clear_fields():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(
        repo,
        created_by=me.user_id,
        description="gone",
        category=TaskCategory.WORK,
        due_date=NOW,
    )

    result = UpdateTaskUseCase(repo).execute(
        task.id,
        UpdateTaskInput(clear_fields=frozenset({"description", "category", "due_date"})),
        me,
    )

    assert result.task.description is None
    assert result.task.category is None
    assert result.task.due_date is None


def test_update_status_to_completed_and_back():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)
    use_case = UpdateTaskUseCase(repo)

    done = use_case.execute(task.id, UpdateTaskInput(status=TaskStatus.COMPLETED), me)
    assert done.task.completed_at is not None

    reopened = use_case.execute(task.id, UpdateTaskInput(status=TaskStatus.TODO), me)
    assert reopened.task.completed_at is None
    assert reopened.task.version == 2


def test_update_reassign_keeps_creator():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)
    new_assignee = uuid4()

    result = UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(assigned_to=new_assignee), me
    )

    assert result.task.assigned_to == new_assignee
    assert result.task.created_by == me.user_id


def test_update_with_stale_version_is_conflict():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)
    use_case = UpdateTaskUseCase(repo)
    use_case.execute(task.id, UpdateTaskInput(title="v1"), me)

    result = use_case.execute(
        task.id, UpdateTaskInput(title="stale", expected_version=0), me
    )

    assert result.error.code == TaskErrorCode.CONFLICT
    assert repo.get_task(task.id).title == "v1"


def test_concurrent_writer_is_conflict():
    repo = RacingTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)

    result = UpdateTaskUseCase(repo).execute(task.id, UpdateTaskInput(title="late"), me)

    assert result.error.code == TaskErrorCode.CONFLICT


def test_update_without_changes_is_validation_error():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)

    result = UpdateTaskUseCase(repo).execute(task.id, UpdateTaskInput(), me)

    assert result.error.code == TaskErrorCode.VALIDATION_ERROR


def test_update_invalid_title_is_validation_error():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)

    result = UpdateTaskUseCase(repo).execute(
        task.id, UpdateTaskInput(title="x" * 201), me
    )

    assert result.error.code == TaskErrorCode.VALIDATION_ERROR
    assert repo.get_task(task.id).version == 0


# =============================================================================
# Delete / Archive / Stats
# =============================================================================


def test_delete_by_creator_removes_task():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)

    result = DeleteTaskUseCase(repo).execute(task.id, me)

    assert result.deleted is True
    assert GetTaskUseCase(repo).execute(task.id, me).error.code == (
        TaskErrorCode.NOT_FOUND
    )


def test_archive_hides_task_from_listings_and_unarchive_restores():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)
    use_case = ArchiveTaskUseCase(repo)

    archived = use_case.execute(task.id, me)
    assert archived.task.is_archived
    assert ListTasksUseCase(repo).execute(me).tasks == []
    assert ListMyCreatedTasksUseCase(repo).execute(me, include_archived=True).total == 1

    restored = use_case.execute(task.id, me, archived=False)
    assert not restored.task.is_archived
    assert ListTasksUseCase(repo).execute(me).total == 1


def test_archive_twice_is_idempotent():
    repo = InMemoryTaskRepository()
    me = _actor()
    task = _seed(repo, created_by=me.user_id)
    use_case = ArchiveTaskUseCase(repo)

    first = use_case.execute(task.id, me)
    second = use_case.execute(task.id, me)

    assert second.error is None
    assert second.task.version == first.task.version


def test_stats_counts_every_status_over_visible_tasks():
    repo = InMemoryTaskRepository()
    me = _actor()
    _seed(repo, created_by=me.user_id)
    done = _seed(repo, created_by=me.user_id, minutes=1)
    done.complete()
    repo.update_task(done, expected_version=0)
    _seed(repo, created_by=uuid4(), minutes=2)

    result = TaskStatsUseCase(repo).execute(me)

    assert result.counts[TaskStatus.TODO] == 1
    assert result.counts[TaskStatus.COMPLETED] == 1
    assert result.counts[TaskStatus.IN_PROGRESS] == 0
    assert result.counts[TaskStatus.CANCELLED] == 0
    assert result.total == 2

    admin_stats = TaskStatsUseCase(repo).execute(_actor(UserRole.ADMIN))
    assert admin_stats.total == 3
