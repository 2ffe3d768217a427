"""
===============================================================================
TASK USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Task Use Case Results

Business Goal:
    Tipos consistentes de resultados y errores para los casos de uso de
    tareas (alta, lectura, listados, actualización, borrado, archivado).

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de propagar
      excepciones de negocio.
    - La capa HTTP mapea TaskErrorCode -> status code en un único lugar.
    - Los tests verifican flujos por resultado, sin HTTP de por medio.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    task_results models (module)

Responsibilities:
    - TaskErrorCode: categorías estables de error.
    - TaskError: contrato mínimo de error (code, message, field).
    - DTOs de resultado por familia de caso de uso.

Collaborators:
    - domain.entities.Task
    - domain.value_objects.TaskStatus
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Final, List

from ....domain.entities import Task
from ....domain.value_objects import TaskStatus

RESOURCE_TASK: Final[str] = "Task"


class TaskErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: input inválido (título vacío, texto excedido, ...).
      - NOT_FOUND: tarea inexistente o sin permiso (se ocultan a propósito).
      - CONFLICT: versión desactualizada (optimistic concurrency).
      - FORBIDDEN: actor no resuelto.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"


@dataclass(frozen=True)
class TaskError:
    code: TaskErrorCode
    message: str
    resource: str = RESOURCE_TASK
    field: str | None = None


@dataclass
class TaskResult:
    """
    Resultado de operaciones sobre una sola tarea.

    Contrato:
      - Éxito: task != None y error == None
      - Falla: task == None y error != None
    """

    task: Task | None = None
    error: TaskError | None = None


@dataclass
class TaskPageResult:
    """Página de tareas más el total que cumple el filtro."""

    tasks: List[Task] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0
    error: TaskError | None = None


@dataclass
class TaskDeleteResult:
    deleted: bool = False
    error: TaskError | None = None


@dataclass
class TaskStatsResult:
    """Conteo por estado; todos los estados aparecen (0 si no hay tareas)."""

    counts: Dict[TaskStatus, int] = field(default_factory=dict)
    total: int = 0
    error: TaskError | None = None
