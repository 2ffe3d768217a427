"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/task.py
============================================================
Class: InMemoryTaskRepository

Responsibilities:
  - Almacenar tareas en memoria (tests / desarrollo sin Postgres).
  - Implementar el contrato TaskRepository con la misma semántica que
    Postgres: filtros, orden con desempate por id, control de versión.

Collaborators:
  - domain.entities.Task
  - domain.value_objects.TaskFilter, TaskSort, TaskStatus
  - domain.repositories.TaskRepository

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Copias defensivas: los callers nunca reciben la instancia almacenada,
    así una mutación sin update_task no "se persiste" sola.
============================================================
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict, List, Optional
from uuid import UUID

from ....domain.entities import Task
from ....domain.repositories import TaskRepository
from ....domain.value_objects import TaskFilter, TaskSort, TaskStatus

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

# Claves de orden alineadas con _ORDER_BY del repositorio Postgres.
_SORT_KEYS: Dict[TaskSort, Callable[[Task], tuple]] = {
    TaskSort.CREATED_AT_DESC: lambda t: (-t.created_at.timestamp(), str(t.id)),
    TaskSort.CREATED_AT_ASC: lambda t: (t.created_at, str(t.id)),
    TaskSort.DUE_DATE_ASC: lambda t: (
        t.due_date is None,  # NULLS LAST
        t.due_date or _EPOCH,
        str(t.id),
    ),
    TaskSort.TITLE_ASC: lambda t: (t.title.lower(), str(t.id)),
}


def _matches(task: Task, filters: TaskFilter) -> bool:
    if not filters.include_archived and task.is_archived:
        return False
    if filters.assigned_to is not None and task.assigned_to != filters.assigned_to:
        return False
    if filters.created_by is not None and task.created_by != filters.created_by:
        return False
    if filters.accessible_by is not None and not (
        task.is_assigned_to(filters.accessible_by)
        or task.is_created_by(filters.accessible_by)
    ):
        return False
    if filters.status is not None and task.status != filters.status:
        return False
    return True


class InMemoryTaskRepository(TaskRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._tasks: Dict[UUID, Task] = {}

    @staticmethod
    def _copy(task: Task) -> Task:
        return replace(task)

    def create_task(self, task: Task) -> Task:
        with self._lock:
            if task.id in self._tasks:
                raise ValueError(f"Task {task.id} already exists")
            stored = self._copy(task)
            self._tasks[task.id] = stored
            return self._copy(stored)

    def get_task(self, task_id: UUID) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            return self._copy(task) if task is not None else None

    def update_task(self, task: Task, *, expected_version: int) -> Optional[Task]:
        with self._lock:
            current = self._tasks.get(task.id)
            if current is None or current.version != expected_version:
                return None
            # created_by y created_at son inmutables luego del alta.
            stored = replace(
                task,
                created_by=current.created_by,
                created_at=current.created_at,
                version=expected_version + 1,
            )
            self._tasks[task.id] = stored
            return self._copy(stored)

    def delete_task(self, task_id: UUID) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None

    def list_tasks(
        self,
        filters: TaskFilter,
        *,
        sort: TaskSort = TaskSort.CREATED_AT_DESC,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Task]:
        with self._lock:
            selected = [t for t in self._tasks.values() if _matches(t, filters)]
            selected.sort(key=_SORT_KEYS[sort])
            window = selected[max(0, offset) : max(0, offset) + max(0, limit)]
            return [self._copy(t) for t in window]

    def count_tasks(self, filters: TaskFilter) -> int:
        with self._lock:
            return sum(1 for t in self._tasks.values() if _matches(t, filters))

    def count_tasks_by_status(self, filters: TaskFilter) -> Dict[TaskStatus, int]:
        with self._lock:
            return dict(
                Counter(t.status for t in self._tasks.values() if _matches(t, filters))
            )

    def ping(self) -> bool:
        return True
