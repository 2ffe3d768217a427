"""
Name: In-Memory Repository Contract Tests

Responsibilities:
  - Filters, ordering and windowing of InMemoryTaskRepository
  - Version-checked writes and defensive copies
  - Uniqueness rules of InMemoryUserRepository
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from task_manager.domain.entities import Task
from task_manager.domain.value_objects import TaskFilter, TaskSort, TaskStatus
from task_manager.identity.users import User
from task_manager.infrastructure.repositories.in_memory import (
    InMemoryTaskRepository,
    InMemoryUserRepository,
)

pytestmark = pytest.mark.unit

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _task(repo, *, created_by=None, assigned_to=None, title="t", minutes=0, **kwargs):
    return repo.create_task(
        Task.create(
            title=title,
            created_by=created_by or uuid4(),
            assigned_to=assigned_to,
            now=T0 + timedelta(minutes=minutes),
            **kwargs,
        )
    )


def _user(username="user_one", email="one@example.com"):
    return User(
        id=uuid4(),
        username=username,
        email=email,
        password_hash="h",
        first_name="F",
        last_name="L",
    )


class TestTaskRepository:
    def test_get_returns_copy(self):
        repo = InMemoryTaskRepository()
        task = _task(repo)

        loaded = repo.get_task(task.id)
        loaded.title = "mutated"

        assert repo.get_task(task.id).title == "t"

    def test_create_duplicate_id_raises(self):
        repo = InMemoryTaskRepository()
        task = _task(repo)

        with pytest.raises(ValueError):
            repo.create_task(task)

    def test_update_checks_version(self):
        repo = InMemoryTaskRepository()
        task = _task(repo)
        task.title = "v1"

        assert repo.update_task(task, expected_version=5) is None
        updated = repo.update_task(task, expected_version=0)

        assert updated.version == 1
        assert repo.update_task(task, expected_version=0) is None

    def test_update_missing_returns_none(self):
        repo = InMemoryTaskRepository()
        orphan = Task.create(title="x", created_by=uuid4())

        assert repo.update_task(orphan, expected_version=0) is None

    def test_update_keeps_created_by(self):
        repo = InMemoryTaskRepository()
        creator = uuid4()
        task = _task(repo, created_by=creator)
        task.created_by = uuid4()

        assert repo.update_task(task, expected_version=0).created_by == creator

    def test_delete(self):
        repo = InMemoryTaskRepository()
        task = _task(repo)

        assert repo.delete_task(task.id) is True
        assert repo.delete_task(task.id) is False

    def test_filters_combine_with_and(self):
        repo = InMemoryTaskRepository()
        me = uuid4()
        mine_todo = _task(repo, created_by=me)
        mine_done = _task(repo, created_by=me, minutes=1)
        mine_done.complete()
        repo.update_task(mine_done, expected_version=0)
        _task(repo, assigned_to=uuid4(), minutes=2)

        todo = repo.list_tasks(TaskFilter(accessible_by=me, status=TaskStatus.TODO))

        assert [t.id for t in todo] == [mine_todo.id]
        assert repo.count_tasks(TaskFilter(accessible_by=me)) == 2
        assert repo.count_tasks(TaskFilter()) == 3

    def test_archived_excluded_unless_requested(self):
        repo = InMemoryTaskRepository()
        task = _task(repo)
        task.archive()
        repo.update_task(task, expected_version=0)

        assert repo.list_tasks(TaskFilter()) == []
        assert len(repo.list_tasks(TaskFilter(include_archived=True))) == 1

    def test_sort_created_at_desc_ties_break_by_id(self):
        repo = InMemoryTaskRepository()
        tasks = [_task(repo) for _ in range(4)]

        listed = repo.list_tasks(TaskFilter(), sort=TaskSort.CREATED_AT_DESC)

        assert [t.id for t in listed] == sorted((t.id for t in tasks), key=str)

    def test_sort_created_at_asc(self):
        repo = InMemoryTaskRepository()
        late = _task(repo, minutes=5)
        early = _task(repo, minutes=1)

        listed = repo.list_tasks(TaskFilter(), sort=TaskSort.CREATED_AT_ASC)

        assert [t.id for t in listed] == [early.id, late.id]

    def test_window(self):
        repo = InMemoryTaskRepository()
        for i in range(5):
            _task(repo, minutes=i)

        assert len(repo.list_tasks(TaskFilter(), limit=2, offset=4)) == 1
        assert repo.list_tasks(TaskFilter(), limit=2, offset=10) == []

    def test_count_by_status_only_lists_present_statuses(self):
        repo = InMemoryTaskRepository()
        _task(repo)
        _task(repo, minutes=1)

        assert repo.count_tasks_by_status(TaskFilter()) == {TaskStatus.TODO: 2}


class TestUserRepository:
    def test_email_lookup_is_case_insensitive(self):
        repo = InMemoryUserRepository()
        user = repo.create_user(_user())

        assert repo.get_user_by_email("ONE@Example.com").id == user.id
        assert repo.get_user_by_username("user_one").id == user.id

    def test_create_sets_timestamps(self):
        repo = InMemoryUserRepository()
        user = repo.create_user(_user())

        assert user.created_at is not None
        assert user.updated_at is not None

    @pytest.mark.parametrize(
        "username, email",
        [("other", "ONE@example.com"), ("user_one", "two@example.com")],
    )
    def test_uniqueness(self, username, email):
        repo = InMemoryUserRepository()
        repo.create_user(_user())

        with pytest.raises(ValueError):
            repo.create_user(_user(username=username, email=email))

    def test_update_user_checks_version(self):
        repo = InMemoryUserRepository()
        user = repo.create_user(_user())
        user.deactivate()

        assert repo.update_user(user, expected_version=3) is None
        assert repo.update_user(user, expected_version=0).version == 1
