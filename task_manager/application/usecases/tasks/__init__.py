"""
===============================================================================
TASK USE CASES PACKAGE (Public API / Exports)
===============================================================================

Catálogo de capacidades del subdominio Task: alta, lectura, listados,
actualización, borrado, archivado y estadísticas, con sus resultados y
errores tipados.
===============================================================================
"""

from __future__ import annotations

from .archive_task import ArchiveTaskUseCase
from .create_task import CreateTaskInput, CreateTaskUseCase
from .delete_task import DeleteTaskUseCase
from .get_task import GetTaskUseCase
from .list_tasks import ListTasksUseCase
from .my_tasks import ListMyAssignedTasksUseCase, ListMyCreatedTasksUseCase
from .task_results import (
    TaskDeleteResult,
    TaskError,
    TaskErrorCode,
    TaskPageResult,
    TaskResult,
    TaskStatsResult,
)
from .task_stats import TaskStatsUseCase
from .update_task import CLEARABLE_FIELDS, UpdateTaskInput, UpdateTaskUseCase

__all__ = [
    # Use cases
    "ArchiveTaskUseCase",
    "CreateTaskUseCase",
    "DeleteTaskUseCase",
    "GetTaskUseCase",
    "ListMyAssignedTasksUseCase",
    "ListMyCreatedTasksUseCase",
    "ListTasksUseCase",
    "TaskStatsUseCase",
    "UpdateTaskUseCase",
    # Inputs
    "CreateTaskInput",
    "UpdateTaskInput",
    "CLEARABLE_FIELDS",
    # Results
    "TaskDeleteResult",
    "TaskError",
    "TaskErrorCode",
    "TaskPageResult",
    "TaskResult",
    "TaskStatsResult",
]
