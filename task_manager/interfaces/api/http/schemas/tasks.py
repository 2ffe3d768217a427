"""
===============================================================================
TARJETA CRC — schemas/tasks.py
===============================================================================

Módulo:
    Schemas HTTP para Tareas (alta, patch, detalle, listados, stats)

Responsabilidades:
    - DTOs de request/response para endpoints de tareas.
    - Validar límites (título, descripción, horas) desde settings.
    - Serializar timestamps siempre con offset UTC explícito.

Colaboradores:
    - crosscutting.config.get_settings (límites)
    - crosscutting.pagination.Page (listados)
    - domain.value_objects (enums por valor)

Reglas:
    - Un datetime naive recibido se interpreta como UTC.
    - La proyección resumida omite descripción, horas, completed_at,
      version, is_archived y los flags de vencimiento.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Dict, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field, PlainSerializer, field_validator

from .....crosscutting.config import get_settings
from .....crosscutting.pagination import Page
from .....domain.entities import as_utc
from .....domain.value_objects import TaskCategory, TaskPriority, TaskStatus

_settings = get_settings()


def _to_utc_iso(value: datetime) -> str:
    return as_utc(value).isoformat()


UtcDatetime = Annotated[
    datetime,
    AfterValidator(as_utc),
    PlainSerializer(_to_utc_iso, return_type=str),
]


def _strip_title(v: object) -> object:
    # Corre antes de min_length/max_length: el largo se mide ya recortado.
    return v.strip() if isinstance(v, str) else v


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateTaskReq(BaseModel):
    """Alta de tarea. Si no viene assigned_to, se asigna al creador."""

    title: Annotated[
        str,
        Field(..., min_length=1, max_length=_settings.max_title_chars),
    ]
    description: str | None = Field(
        default=None, max_length=_settings.max_description_chars
    )
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    due_date: Optional[UtcDatetime] = None
    assigned_to: UUID | None = None
    estimated_hours: int | None = Field(
        default=None, ge=1, le=_settings.max_estimated_hours
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        return _strip_title(v)


class UpdateTaskReq(BaseModel):
    """
    Patch de tarea.

    - Campo ausente: no se toca.
    - description/category/due_date en null explícito: se limpian.
    - expected_version: si viene y no coincide con lo almacenado -> 409.
    """

    title: str | None = Field(
        default=None, min_length=1, max_length=_settings.max_title_chars
    )
    description: str | None = Field(
        default=None, max_length=_settings.max_description_chars
    )
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    assigned_to: UUID | None = None
    due_date: Optional[UtcDatetime] = None
    estimated_hours: int | None = Field(
        default=None, ge=1, le=_settings.max_estimated_hours
    )
    actual_hours: int | None = Field(
        default=None, ge=0, le=_settings.max_actual_hours
    )
    expected_version: int | None = Field(default=None, ge=0)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        return _strip_title(v)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class TaskSummaryRes(BaseModel):
    """Proyección resumida (listados)."""

    id: UUID
    title: str
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory | None = None
    due_date: Optional[UtcDatetime] = None
    assigned_to: UUID
    created_by: UUID
    created_at: UtcDatetime
    updated_at: UtcDatetime


class TaskRes(TaskSummaryRes):
    """Proyección completa (detalle / escrituras)."""

    description: str | None = None
    estimated_hours: int | None = None
    actual_hours: int | None = None
    is_archived: bool = False
    completed_at: Optional[UtcDatetime] = None
    version: int
    is_overdue: bool = False
    is_due_soon: bool = Field(
        default=False, description="Vence dentro de DUE_SOON_HOURS"
    )


class TaskPageRes(Page[TaskSummaryRes]):
    pass


class TaskStatsRes(BaseModel):
    counts: Dict[TaskStatus, int] = Field(
        description="Cantidad de tareas visibles por estado"
    )
    total: int
