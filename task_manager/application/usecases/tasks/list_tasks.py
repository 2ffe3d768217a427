"""
===============================================================================
USE CASE: List Tasks (visible tasks, optional status filter)
===============================================================================

Business Goal:
    Listar las tareas no archivadas que el actor puede ver:
      - ADMIN: todas.
      - Resto: aquellas donde es creador O asignado.
    Con status, el mismo criterio se restringe a ese estado.

Why (Context / Intención):
    - El filtro de visibilidad se resuelve en la query (TaskFilter) y no
      filtrando en memoria: el total y la paginación quedan consistentes.
    - limit se acota para proteger la base de listados gigantes.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ListTasksUseCase

Responsibilities:
    - Armar TaskFilter según rol del actor.
    - Sanitizar limit/offset.
    - Consultar página + total al repositorio.

Collaborators:
    - TaskRepository.list_tasks / count_tasks
===============================================================================
"""

from __future__ import annotations

from typing import Final

from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor
from ....domain.value_objects import TaskFilter, TaskSort, TaskStatus
from .task_access import forbidden_error, is_actor_resolved
from .task_results import TaskPageResult

DEFAULT_LIMIT: Final[int] = 20
MAX_LIMIT: Final[int] = 100


def sanitize_limit(
    limit: int | None,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> int:
    """None o limit <= 0 usa el default; por encima del máximo se recorta."""
    if limit is None or limit <= 0:
        return default_limit
    return min(limit, max_limit)


def fetch_page(
    repository: TaskRepository,
    filters: TaskFilter,
    *,
    sort: TaskSort,
    limit: int | None,
    offset: int,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> TaskPageResult:
    safe_limit = sanitize_limit(
        limit, default_limit=default_limit, max_limit=max_limit
    )
    safe_offset = max(0, offset)
    tasks = repository.list_tasks(
        filters, sort=sort, limit=safe_limit, offset=safe_offset
    )
    return TaskPageResult(
        tasks=tasks,
        total=repository.count_tasks(filters),
        limit=safe_limit,
        offset=safe_offset,
    )


def visible_tasks_filter(
    actor: TaskActor, *, status: TaskStatus | None = None
) -> TaskFilter:
    """Filtro de visibilidad: admin ve todo, el resto solo lo propio."""
    if actor.is_admin:
        return TaskFilter(status=status)
    return TaskFilter(accessible_by=actor.user_id, status=status)


class ListTasksUseCase:
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
        status: TaskStatus | None = None,
        sort: TaskSort = TaskSort.CREATED_AT_DESC,
        limit: int | None = None,
        offset: int = 0,
    ) -> TaskPageResult:
        if not is_actor_resolved(actor):
            return TaskPageResult(error=forbidden_error())

        return fetch_page(
            self._tasks,
            visible_tasks_filter(actor, status=status),
            sort=sort,
            limit=limit,
            offset=offset,
            default_limit=self._default_limit,
            max_limit=self._max_limit,
        )
