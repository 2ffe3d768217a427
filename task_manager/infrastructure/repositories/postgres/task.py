"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/task.py
============================================================
Class: PostgresTaskRepository

Responsibilities:
- Implementar TaskRepository sobre PostgreSQL con SQL crudo.
- Traducir TaskFilter a un WHERE parametrizado.
- Escrituras con optimistic concurrency:
    UPDATE ... WHERE id = %s AND version = %s  (version = version + 1)
- Mapear filas -> Task vía Task.rehydrate (repara completed_at).

Collaborators:
- domain.entities.Task
- domain.value_objects.TaskFilter, TaskSort, TaskStatus, ...
- PostgresRepositoryBase (pool + errores)
- Tabla: tasks (alembic 001_initial)

Constraints / Notes:
- Sin lógica de negocio: la policy de acceso vive en application/domain.
- Queries siempre parametrizadas; los fragmentos interpolados (ORDER BY,
  WHERE) son constantes del código.
- Orden determinístico: todo orden desempata por id ASC.
============================================================
"""

from __future__ import annotations

from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import Task
from ....domain.repositories import TaskRepository
from ....domain.value_objects import (
    TaskCategory,
    TaskFilter,
    TaskPriority,
    TaskSort,
    TaskStatus,
)
from .base import PostgresRepositoryBase


class PostgresTaskRepository(PostgresRepositoryBase, TaskRepository):
    """R: Implementación PostgreSQL del repositorio de tareas."""

    _SELECT_COLUMNS = """
        id, title, description, status, priority, category,
        assigned_to, created_by, due_date, completed_at,
        estimated_hours, actual_hours, is_archived,
        created_at, updated_at, version
    """

    _ORDER_BY: Dict[TaskSort, str] = {
        TaskSort.CREATED_AT_DESC: "ORDER BY created_at DESC, id ASC",
        TaskSort.CREATED_AT_ASC: "ORDER BY created_at ASC, id ASC",
        TaskSort.DUE_DATE_ASC: "ORDER BY due_date ASC NULLS LAST, id ASC",
        TaskSort.TITLE_ASC: "ORDER BY lower(title) ASC, id ASC",
    }

    # =========================================================
    # Mapping
    # =========================================================
    @staticmethod
    def _row_to_task(row: tuple) -> Task:
        (
            task_id,
            title,
            description,
            status,
            priority,
            category,
            assigned_to,
            created_by,
            due_date,
            completed_at,
            estimated_hours,
            actual_hours,
            is_archived,
            created_at,
            updated_at,
            version,
        ) = row

        return Task.rehydrate(
            id=task_id,
            title=title,
            description=description,
            status=TaskStatus(status),
            priority=TaskPriority(priority),
            category=TaskCategory(category) if category else None,
            assigned_to=assigned_to,
            created_by=created_by,
            due_date=due_date,
            completed_at=completed_at,
            estimated_hours=estimated_hours,
            actual_hours=actual_hours,
            is_archived=is_archived,
            created_at=created_at,
            updated_at=updated_at,
            version=version,
        )

    @staticmethod
    def _where(filters: TaskFilter) -> tuple[str, list[object]]:
        clauses: list[str] = []
        params: list[object] = []

        if not filters.include_archived:
            clauses.append("is_archived = FALSE")
        if filters.assigned_to is not None:
            clauses.append("assigned_to = %s")
            params.append(filters.assigned_to)
        if filters.created_by is not None:
            clauses.append("created_by = %s")
            params.append(filters.created_by)
        if filters.accessible_by is not None:
            clauses.append("(assigned_to = %s OR created_by = %s)")
            params.extend([filters.accessible_by, filters.accessible_by])
        if filters.status is not None:
            clauses.append("status = %s")
            params.append(filters.status.value)

        where_sql = " AND ".join(clauses) if clauses else "TRUE"
        return where_sql, params

    # =========================================================
    # CRUD
    # =========================================================
    def create_task(self, task: Task) -> Task:
        row = self._fetchone(
            query=f"""
                INSERT INTO tasks (
                    id, title, description, status, priority, category,
                    assigned_to, created_by, due_date, completed_at,
                    estimated_hours, actual_hours, is_archived,
                    created_at, updated_at, version
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {self._SELECT_COLUMNS}
            """,
            params=(
                task.id,
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                task.category.value if task.category else None,
                task.assigned_to,
                task.created_by,
                task.due_date,
                task.completed_at,
                task.estimated_hours,
                task.actual_hours,
                task.is_archived,
                task.created_at,
                task.updated_at,
                task.version,
            ),
            context_msg="PostgresTaskRepository: create_task failed",
            extra={"task_id": str(task.id)},
        )
        return self._row_to_task(row)

    def get_task(self, task_id: UUID) -> Optional[Task]:
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} FROM tasks WHERE id = %s",
            params=(task_id,),
            context_msg="PostgresTaskRepository: get_task failed",
            extra={"task_id": str(task_id)},
        )
        return self._row_to_task(row) if row else None

    def update_task(self, task: Task, *, expected_version: int) -> Optional[Task]:
        row = self._fetchone(
            query=f"""
                UPDATE tasks
                SET title = %s,
                    description = %s,
                    status = %s,
                    priority = %s,
                    category = %s,
                    assigned_to = %s,
                    due_date = %s,
                    completed_at = %s,
                    estimated_hours = %s,
                    actual_hours = %s,
                    is_archived = %s,
                    updated_at = %s,
                    version = version + 1
                WHERE id = %s AND version = %s
                RETURNING {self._SELECT_COLUMNS}
            """,
            params=(
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                task.category.value if task.category else None,
                task.assigned_to,
                task.due_date,
                task.completed_at,
                task.estimated_hours,
                task.actual_hours,
                task.is_archived,
                task.updated_at,
                task.id,
                expected_version,
            ),
            context_msg="PostgresTaskRepository: update_task failed",
            extra={"task_id": str(task.id), "expected_version": expected_version},
        )
        return self._row_to_task(row) if row else None

    def delete_task(self, task_id: UUID) -> bool:
        deleted = self._execute(
            query="DELETE FROM tasks WHERE id = %s",
            params=(task_id,),
            context_msg="PostgresTaskRepository: delete_task failed",
            extra={"task_id": str(task_id)},
        )
        return deleted > 0

    # =========================================================
    # Listados y conteos
    # =========================================================
    def list_tasks(
        self,
        filters: TaskFilter,
        *,
        sort: TaskSort = TaskSort.CREATED_AT_DESC,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Task]:
        where_sql, params = self._where(filters)
        rows = self._fetchall(
            query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM tasks
                WHERE {where_sql}
                {self._ORDER_BY[sort]}
                LIMIT %s OFFSET %s
            """,
            params=[*params, max(0, limit), max(0, offset)],
            context_msg="PostgresTaskRepository: list_tasks failed",
            extra={"sort": sort.value, "limit": limit, "offset": offset},
        )
        return [self._row_to_task(r) for r in rows]

    def count_tasks(self, filters: TaskFilter) -> int:
        where_sql, params = self._where(filters)
        row = self._fetchone(
            query=f"SELECT count(*) FROM tasks WHERE {where_sql}",
            params=params,
            context_msg="PostgresTaskRepository: count_tasks failed",
            extra={},
        )
        return int(row[0]) if row else 0

    def count_tasks_by_status(self, filters: TaskFilter) -> Dict[TaskStatus, int]:
        where_sql, params = self._where(filters)
        rows = self._fetchall(
            query=f"""
                SELECT status, count(*)
                FROM tasks
                WHERE {where_sql}
                GROUP BY status
            """,
            params=params,
            context_msg="PostgresTaskRepository: count_tasks_by_status failed",
            extra={},
        )
        return {TaskStatus(status): int(total) for status, total in rows}
