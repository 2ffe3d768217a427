"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el "surface area" del dominio.

Colaboradores:
    - domain.entities: Task
    - domain.repositories: Puertos de persistencia
    - domain.task_policy: Reglas de acceso
    - domain.value_objects: Estados, prioridades, categorías, filtros

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import Task, TaskValidationError
from .repositories import TaskRepository, UserRepository
from .task_policy import TaskActor, TaskOperation, is_allowed
from .value_objects import (
    TaskCategory,
    TaskFilter,
    TaskPriority,
    TaskSort,
    TaskStatus,
)

__all__ = [
    # Entities
    "Task",
    "TaskValidationError",
    # Repositories
    "TaskRepository",
    "UserRepository",
    # Policy
    "TaskActor",
    "TaskOperation",
    "is_allowed",
    # Value objects
    "TaskCategory",
    "TaskFilter",
    "TaskPriority",
    "TaskSort",
    "TaskStatus",
]
