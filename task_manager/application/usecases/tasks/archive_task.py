"""
===============================================================================
USE CASES: Archive / Unarchive Task (soft delete)
===============================================================================

Business Goal:
    Sacar una tarea de los listados sin borrarla, y poder restaurarla.

Rules:
    - Misma policy que actualizar (creador o admin).
    - Operación idempotente: archivar algo archivado no falla.
    - Persistencia con control de versión (CONFLICT si hubo otra escritura).
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor, TaskOperation
from .task_access import load_task_for, resolve_write_failure
from .task_results import TaskResult


class ArchiveTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._tasks = repository

    def execute(
        self, task_id: UUID, actor: TaskActor | None, *, archived: bool = True
    ) -> TaskResult:
        task, error = load_task_for(self._tasks, task_id, actor, TaskOperation.UPDATE)
        if error is not None:
            return TaskResult(error=error)

        if task.is_archived == archived:
            return TaskResult(task=task)

        loaded_version = task.version
        if archived:
            task.archive()
        else:
            task.unarchive()

        updated = self._tasks.update_task(task, expected_version=loaded_version)
        if updated is None:
            return TaskResult(error=resolve_write_failure(self._tasks, task_id))
        return TaskResult(task=updated)
