"""
===============================================================================
DOMAIN: Value Objects (vocabularios y filtros de tareas)
===============================================================================

Qué es:
    Enumeraciones y objetos de valor inmutables que describen tareas sin
    tener identidad propia.

Contenido:
    - TaskStatus / TaskPriority / TaskCategory: vocabularios fijos
    - TaskSort: órdenes soportados por los listados
    - TaskFilter: predicado de consulta consumido por los repositorios

Principios:
    - Inmutabilidad (frozen dataclasses, Enums)
    - Sin side effects
    - Equality por valor
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final
from uuid import UUID

MAX_TITLE_CHARS: Final[int] = 200
MAX_DESCRIPTION_CHARS: Final[int] = 5000


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


DEFAULT_PRIORITY: Final[TaskPriority] = TaskPriority.MEDIUM
HIGH_PRIORITIES: Final[frozenset[TaskPriority]] = frozenset(
    {TaskPriority.HIGH, TaskPriority.URGENT}
)


class TaskCategory(str, Enum):
    """Etiqueta de clasificación (sin comportamiento asociado)."""

    DEVELOPMENT = "DEVELOPMENT"
    TESTING = "TESTING"
    DOCUMENTATION = "DOCUMENTATION"
    WORK = "WORK"
    PERSONAL = "PERSONAL"
    RESEARCH = "RESEARCH"
    OTHER = "OTHER"


class TaskSort(str, Enum):
    """
    Órdenes de listado.

    Todos desempatan por id ascendente para que la paginación por offset sea
    estable entre páginas.
    """

    CREATED_AT_DESC = "created_at_desc"
    CREATED_AT_ASC = "created_at_asc"
    DUE_DATE_ASC = "due_date_asc"
    TITLE_ASC = "title_asc"


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """
    Predicado de consulta para listados y conteos.

    Todos los criterios presentes se combinan con AND:
      - assigned_to: la tarea está asignada a ese usuario
      - created_by: la tarea fue creada por ese usuario
      - accessible_by: el usuario es asignado O creador
      - status: estado exacto
      - include_archived: False excluye tareas archivadas
    """

    assigned_to: UUID | None = None
    created_by: UUID | None = None
    accessible_by: UUID | None = None
    status: TaskStatus | None = None
    include_archived: bool = False
