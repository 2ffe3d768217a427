"""
Name: Task Policy Tests

Responsibilities:
  - Cover the VIEW / UPDATE / DELETE decision matrix
  - Admin override and unresolved actors
"""

from uuid import uuid4

import pytest

from task_manager.domain.entities import Task
from task_manager.domain.task_policy import (
    TaskActor,
    TaskOperation,
    can_delete_task,
    can_update_task,
    can_view_task,
    is_allowed,
)
from task_manager.identity.users import UserRole

pytestmark = pytest.mark.unit

CREATOR = uuid4()
ASSIGNEE = uuid4()
STRANGER = uuid4()


def _task() -> Task:
    return Task.create(title="Policy", created_by=CREATOR, assigned_to=ASSIGNEE)


@pytest.mark.parametrize(
    ("user_id", "role", "view", "update", "delete"),
    [
        (CREATOR, UserRole.USER, True, True, True),
        (ASSIGNEE, UserRole.USER, True, False, False),
        (STRANGER, UserRole.USER, False, False, False),
        (STRANGER, UserRole.MANAGER, False, False, False),
        (STRANGER, UserRole.ADMIN, True, True, True),
    ],
)
def test_decision_matrix(user_id, role, view, update, delete):
    task = _task()
    actor = TaskActor(user_id=user_id, role=role)

    assert can_view_task(task, actor) is view
    assert can_update_task(task, actor) is update
    assert can_delete_task(task, actor) is delete
    assert is_allowed(task, actor, TaskOperation.VIEW) is view
    assert is_allowed(task, actor, TaskOperation.UPDATE) is update
    assert is_allowed(task, actor, TaskOperation.DELETE) is delete


@pytest.mark.parametrize(
    "actor",
    [
        None,
        TaskActor(user_id=None, role=UserRole.ADMIN),
        TaskActor(user_id=CREATOR, role=None),
    ],
)
def test_unresolved_actor_is_denied(actor):
    task = _task()
    for operation in TaskOperation:
        assert is_allowed(task, actor, operation) is False


def test_admin_flag():
    assert TaskActor(user_id=uuid4(), role=UserRole.ADMIN).is_admin
    assert not TaskActor(user_id=uuid4(), role=UserRole.MANAGER).is_admin
