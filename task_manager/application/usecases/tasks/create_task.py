"""
===============================================================================
USE CASE: Create Task
===============================================================================

Business Goal:
    Dar de alta una tarea nueva a nombre del actor autenticado.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateTaskUseCase

Responsibilities:
    - Exigir actor resuelto.
    - Construir la entidad vía Task.create (status TODO, priority MEDIUM por
      defecto, asignada al creador si no se indica otro usuario).
    - Persistir y devolver TaskResult.

Collaborators:
    - TaskRepository.create_task
    - domain.entities.Task / TaskValidationError

Error Mapping:
    - FORBIDDEN: actor ausente
    - VALIDATION_ERROR: título vacío/largo, descripción larga, horas negativas
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from ....domain.entities import Task, TaskValidationError
from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskActor
from ....domain.value_objects import TaskCategory, TaskPriority
from .task_access import forbidden_error, is_actor_resolved, validation_error
from .task_results import TaskResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateTaskInput:
    title: str
    description: str | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    due_date: datetime | None = None
    assigned_to: UUID | None = None
    estimated_hours: int | None = None


class CreateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._tasks = repository

    def execute(self, input_data: CreateTaskInput, actor: TaskActor | None) -> TaskResult:
        if not is_actor_resolved(actor):
            return TaskResult(error=forbidden_error())

        try:
            task = Task.create(
                title=input_data.title,
                description=input_data.description,
                created_by=actor.user_id,
                assigned_to=input_data.assigned_to,
                priority=input_data.priority,
                category=input_data.category,
                due_date=input_data.due_date,
                estimated_hours=input_data.estimated_hours,
            )
        except TaskValidationError as exc:
            return TaskResult(error=validation_error(str(exc), field=exc.field))

        created = self._tasks.create_task(task)
        logger.info(
            "task created",
            extra={
                "task_id": str(created.id),
                "assigned_to": str(created.assigned_to),
            },
        )
        return TaskResult(task=created)
