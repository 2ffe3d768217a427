"""
===============================================================================
USE CASE: Update Task (partial update with optimistic concurrency)
===============================================================================

Business Goal:
    Aplicar cambios parciales a una tarea: solo los campos presentes se
    modifican, cada uno a través de su método de negocio.

Why (Context / Intención):
    - Título y descripción se resuelven juntos y se aplican con UNA llamada a
      update_details usando los valores finales: evita pisar un campo con el
      valor viejo del otro.
    - La escritura es condicional a la versión leída; si otro request escribió
      en el medio, el resultado es CONFLICT y el cliente debe recargar.
    - Si el cliente manda expected_version y no coincide con lo almacenado,
      se rechaza antes de tocar nada.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateTaskUseCase

Responsibilities:
    - Cargar la tarea aplicando policy UPDATE (denegado -> NOT_FOUND).
    - Validar expected_version.
    - Aplicar mutaciones presentes vía métodos de negocio.
    - Persistir con control de versión.

Collaborators:
    - TaskRepository.get_task / update_task
    - domain.task_policy (solo creador o admin)

Error Mapping:
    - NOT_FOUND: inexistente o sin permiso
    - CONFLICT: versión desactualizada
    - VALIDATION_ERROR: sin campos / título inválido / texto excedido
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from ....domain.entities import Task, TaskValidationError
from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor, TaskOperation
from ....domain.value_objects import TaskCategory, TaskPriority, TaskStatus
from .task_access import (
    conflict_error,
    load_task_for,
    resolve_write_failure,
    validation_error,
)
from .task_results import TaskResult

logger = logging.getLogger(__name__)

# Campos opcionales que el cliente puede limpiar enviando null explícito.
CLEARABLE_FIELDS = frozenset({"description", "category", "due_date"})


@dataclass(frozen=True)
class UpdateTaskInput:
    """
    Patch de una tarea.

    None significa "no viene". Para limpiar description, category o due_date
    se incluye el nombre del campo en clear_fields.
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    assigned_to: UUID | None = None
    due_date: datetime | None = None
    estimated_hours: int | None = None
    actual_hours: int | None = None
    expected_version: int | None = None
    clear_fields: frozenset[str] = field(default_factory=frozenset)

    def has_changes(self) -> bool:
        values = (
            self.title,
            self.description,
            self.status,
            self.priority,
            self.category,
            self.assigned_to,
            self.due_date,
            self.estimated_hours,
            self.actual_hours,
        )
        return any(v is not None for v in values) or bool(
            self.clear_fields & CLEARABLE_FIELDS
        )


class UpdateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._tasks = repository

    def execute(
        self, task_id: UUID, input_data: UpdateTaskInput, actor: TaskActor | None
    ) -> TaskResult:
        task, error = load_task_for(self._tasks, task_id, actor, TaskOperation.UPDATE)
        if error is not None:
            return TaskResult(error=error)

        if (
            input_data.expected_version is not None
            and input_data.expected_version != task.version
        ):
            return TaskResult(error=conflict_error())

        if not input_data.has_changes():
            return TaskResult(error=validation_error("No fields provided to update."))

        loaded_version = task.version
        try:
            self._apply(task, input_data)
        except TaskValidationError as exc:
            return TaskResult(error=validation_error(str(exc), field=exc.field))

        updated = self._tasks.update_task(task, expected_version=loaded_version)
        if updated is None:
            logger.warning(
                "task update rejected",
                extra={"task_id": str(task_id), "expected_version": loaded_version},
            )
            return TaskResult(error=resolve_write_failure(self._tasks, task_id))

        return TaskResult(task=updated)

    @staticmethod
    def _apply(task: Task, patch: UpdateTaskInput) -> None:
        """Aplica cada campo presente con su método de negocio."""
        clear = patch.clear_fields

        if patch.title is not None or patch.description is not None or (
            "description" in clear
        ):
            final_title = patch.title if patch.title is not None else task.title
            if "description" in clear:
                final_description = None
            elif patch.description is not None:
                final_description = patch.description
            else:
                final_description = task.description
            task.update_details(final_title, final_description)

        if patch.status is not None:
            task.update_status(patch.status)
        if patch.priority is not None:
            task.update_priority(patch.priority)
        if patch.assigned_to is not None:
            task.assign_to(patch.assigned_to)
        if patch.category is not None or "category" in clear:
            task.categorize(None if "category" in clear else patch.category)
        if patch.due_date is not None or "due_date" in clear:
            task.set_due_date(None if "due_date" in clear else patch.due_date)
        if patch.estimated_hours is not None or patch.actual_hours is not None:
            task.update_time_estimate(patch.estimated_hours, patch.actual_hours)
