"""
===============================================================================
USE CASE: Delete Task (physical removal)
===============================================================================

Business Goal:
    Eliminar definitivamente una tarea. Solo el creador o un admin; para el
    resto la tarea "no existe". El archivado es la alternativa reversible.
===============================================================================
"""

from __future__ import annotations

import logging
from uuid import UUID

from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor, TaskOperation
from .task_access import load_task_for, not_found_error
from .task_results import TaskDeleteResult

logger = logging.getLogger(__name__)


class DeleteTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._tasks = repository

    def execute(self, task_id: UUID, actor: TaskActor | None) -> TaskDeleteResult:
        task, error = load_task_for(self._tasks, task_id, actor, TaskOperation.DELETE)
        if error is not None:
            return TaskDeleteResult(error=error)

        # Otro request pudo borrarla entre la lectura y el delete.
        if not self._tasks.delete_task(task.id):
            return TaskDeleteResult(error=not_found_error())

        logger.info("task deleted", extra={"task_id": str(task.id)})
        return TaskDeleteResult(deleted=True)
