"""
===============================================================================
TASK ACCESS HELPERS (shared by task use cases)
===============================================================================

Responsibilities:
    - Cargar una tarea y aplicar la policy de la operación pedida.
    - Ocultar la existencia de tareas inaccesibles: tanto "no existe" como
      "no tenés permiso" salen como NOT_FOUND.
    - Construir errores consistentes para los use cases.

Collaborators:
    - domain.repositories.TaskRepository
    - domain.task_policy (is_allowed, TaskActor, TaskOperation)
===============================================================================
"""

from __future__ import annotations

from typing import Final
from uuid import UUID

from ....domain.entities import Task
from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor, TaskOperation, is_allowed
from .task_results import TaskError, TaskErrorCode

_MSG_NOT_FOUND: Final[str] = "Task not found."
_MSG_ACTOR_REQUIRED: Final[str] = "An authenticated actor is required."
_MSG_STALE_VERSION: Final[str] = (
    "Task was modified by another request. Reload and retry."
)


def not_found_error() -> TaskError:
    return TaskError(code=TaskErrorCode.NOT_FOUND, message=_MSG_NOT_FOUND)


def forbidden_error() -> TaskError:
    return TaskError(code=TaskErrorCode.FORBIDDEN, message=_MSG_ACTOR_REQUIRED)


def conflict_error() -> TaskError:
    return TaskError(code=TaskErrorCode.CONFLICT, message=_MSG_STALE_VERSION)


def validation_error(message: str, *, field: str | None = None) -> TaskError:
    return TaskError(
        code=TaskErrorCode.VALIDATION_ERROR, message=message, field=field
    )


def is_actor_resolved(actor: TaskActor | None) -> bool:
    return actor is not None and actor.user_id is not None and actor.role is not None


def load_task_for(
    repository: TaskRepository,
    task_id: UUID,
    actor: TaskActor | None,
    operation: TaskOperation,
) -> tuple[Task | None, TaskError | None]:
    """
    Devuelve (task, None) si existe y la policy permite la operación.

    Una denegación de policy se reporta como NOT_FOUND, igual que una tarea
    inexistente.
    """
    if not is_actor_resolved(actor):
        return None, forbidden_error()

    task = repository.get_task(task_id)
    if task is None or not is_allowed(task, actor, operation):
        return None, not_found_error()
    return task, None


def resolve_write_failure(repository: TaskRepository, task_id: UUID) -> TaskError:
    """
    Traduce un update rechazado por el repositorio.

    Si la fila ya no existe es NOT_FOUND; si existe, la versión cambió.
    """
    if repository.get_task(task_id) is None:
        return not_found_error()
    return conflict_error()
