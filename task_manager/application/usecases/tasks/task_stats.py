"""
===============================================================================
USE CASE: Task Stats (count per status)
===============================================================================

Business Goal:
    Resumen para dashboards: cuántas tareas visibles y no archivadas tiene el
    actor en cada estado. Usa el mismo filtro de visibilidad que el listado.
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor
from ....domain.value_objects import TaskStatus
from .list_tasks import visible_tasks_filter
from .task_access import forbidden_error, is_actor_resolved
from .task_results import TaskStatsResult


class TaskStatsUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._tasks = repository

    def execute(self, actor: TaskActor | None) -> TaskStatsResult:
        if not is_actor_resolved(actor):
            return TaskStatsResult(error=forbidden_error())

        raw = self._tasks.count_tasks_by_status(visible_tasks_filter(actor))
        counts = {status: raw.get(status, 0) for status in TaskStatus}
        return TaskStatsResult(counts=counts, total=sum(counts.values()))
