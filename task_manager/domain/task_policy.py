"""
===============================================================================
TARJETA CRC — domain/task_policy.py
===============================================================================

Módulo:
    Política de Acceso a Tareas (ver / actualizar / eliminar)

Responsabilidades:
    - Definir reglas puras de acceso a tareas (sin DB, sin FastAPI).
    - Separar "policy" de "repos": los repos traen datos, la policy decide.
    - Ser 100% testeable: funciones puras, inputs explícitos.

Colaboradores:
    - domain.entities.Task
    - identity.users.UserRole
    - application/usecases/tasks: una denegación se informa como NOT_FOUND.

Reglas:
    - Admin puede todo.
    - Ver: creador o asignado.
    - Actualizar / eliminar: solo el creador.
    - Cualquier otra operación o actor incompleto: denegado.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from ..identity.users import UserRole
from .entities import Task


@dataclass(frozen=True, slots=True)
class TaskActor:
    """Actor autenticado para decisiones de acceso a tareas."""

    user_id: UUID | None
    role: UserRole | None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class TaskOperation(str, Enum):
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"


def _is_resolved(actor: TaskActor | None) -> bool:
    return actor is not None and actor.user_id is not None and actor.role is not None


def can_view_task(task: Task, actor: TaskActor | None) -> bool:
    if not _is_resolved(actor):
        return False
    if actor.is_admin:
        return True
    return task.is_created_by(actor.user_id) or task.is_assigned_to(actor.user_id)


def can_update_task(task: Task, actor: TaskActor | None) -> bool:
    if not _is_resolved(actor):
        return False
    if actor.is_admin:
        return True
    return task.is_created_by(actor.user_id)


def can_delete_task(task: Task, actor: TaskActor | None) -> bool:
    """Mismo criterio que actualizar: solo creador o admin."""
    return can_update_task(task, actor)


_RULES = {
    TaskOperation.VIEW: can_view_task,
    TaskOperation.UPDATE: can_update_task,
    TaskOperation.DELETE: can_delete_task,
}


def is_allowed(task: Task, actor: TaskActor | None, operation: TaskOperation) -> bool:
    """Punto único de decisión; operaciones desconocidas se deniegan."""
    rule = _RULES.get(operation)
    if rule is None:
        return False
    return rule(task, actor)
