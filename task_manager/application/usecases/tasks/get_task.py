"""
===============================================================================
USE CASE: Get Task
===============================================================================

Business Goal:
    Obtener una tarea por id si el actor puede verla (admin, creador o
    asignado). Sin permiso, la respuesta es idéntica a "no existe".
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor, TaskOperation
from .task_access import load_task_for
from .task_results import TaskResult


class GetTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._tasks = repository

    def execute(self, task_id: UUID, actor: TaskActor | None) -> TaskResult:
        task, error = load_task_for(self._tasks, task_id, actor, TaskOperation.VIEW)
        if error is not None:
            return TaskResult(error=error)
        return TaskResult(task=task)
