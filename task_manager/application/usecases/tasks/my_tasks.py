"""
===============================================================================
USE CASES: My Assigned Tasks / My Created Tasks
===============================================================================

Business Goal:
    Listados de conveniencia acotados al propio actor, sin importar su rol
    (un admin también ve solo lo suyo acá).

Notas:
    - "Asignadas" ordena por vencimiento por defecto (sin fecha al final).
    - include_archived permite revisar tareas archivadas propias.
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor
from ....domain.value_objects import TaskFilter, TaskSort
from .list_tasks import DEFAULT_LIMIT, MAX_LIMIT, fetch_page
from .task_access import forbidden_error, is_actor_resolved
from .task_results import TaskPageResult


class ListMyAssignedTasksUseCase:
    def __init__(
        self,
        repository: TaskRepository,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> None:
        self._tasks = repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    def execute(
        self,
        actor: TaskActor | None,
        *,
        sort: TaskSort = TaskSort.DUE_DATE_ASC,
        limit: int | None = None,
        offset: int = 0,
        include_archived: bool = False,
    ) -> TaskPageResult:
        if not is_actor_resolved(actor):
            return TaskPageResult(error=forbidden_error())
        return fetch_page(
            self._tasks,
            TaskFilter(assigned_to=actor.user_id, include_archived=include_archived),
            sort=sort,
            limit=limit,
            offset=offset,
            default_limit=self._default_limit,
            max_limit=self._max_limit,
        )


class ListMyCreatedTasksUseCase:
    def __init__(
        self,
        repository: TaskRepository,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> None:
        self._tasks = repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    def execute(
        self,
        actor: TaskActor | None,
        *,
        sort: TaskSort = TaskSort.CREATED_AT_DESC,
        limit: int | None = None,
        offset: int = 0,
        include_archived: bool = False,
    ) -> TaskPageResult:
        if not is_actor_resolved(actor):
            return TaskPageResult(error=forbidden_error())
        return fetch_page(
            self._tasks,
            TaskFilter(created_by=actor.user_id, include_archived=include_archived),
            sort=sort,
            limit=limit,
            offset=offset,
            default_limit=self._default_limit,
            max_limit=self._max_limit,
        )
