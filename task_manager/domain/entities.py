"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidad del Dominio Task (aggregate root)

Responsabilidades:
    - Mantener el estado de una tarea y sus invariantes.
    - Exponer métodos de negocio con intención explícita (estado, asignación,
      prioridad, detalles, estimaciones, archivado).
    - Separar construcción nueva (create, valida) de rehidratación desde
      storage (rehydrate, repara invariantes sin validar reglas de alta).

Colaboradores:
    - domain.repositories: persisten/recuperan Task.
    - domain.task_policy: decide acceso sobre Task.
    - application/usecases/tasks: orquestan mutaciones vía métodos de negocio.

Invariantes:
    - id, title, assigned_to y created_by nunca son None.
    - completed_at se setea al entrar a COMPLETED y se limpia al salir.
    - updated_at se refresca en cada método mutante.
    - Igualdad e identidad (hash) por id.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID, uuid4

from .value_objects import (
    DEFAULT_PRIORITY,
    HIGH_PRIORITIES,
    MAX_DESCRIPTION_CHARS,
    MAX_TITLE_CHARS,
    TaskCategory,
    TaskPriority,
    TaskStatus,
)


def _utcnow() -> datetime:
    """Fecha/hora UTC (helper interno)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Normaliza a UTC; un datetime naive se interpreta como UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TaskValidationError(ValueError):
    """Argumento inválido para construir o mutar una Task."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


def _clean_title(title: str | None) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise TaskValidationError("title es obligatorio", field="title")
    if len(cleaned) > MAX_TITLE_CHARS:
        raise TaskValidationError(
            f"title excede {MAX_TITLE_CHARS} caracteres", field="title"
        )
    return cleaned


def _clean_description(description: str | None) -> str | None:
    cleaned = (description or "").strip()
    if not cleaned:
        return None
    if len(cleaned) > MAX_DESCRIPTION_CHARS:
        raise TaskValidationError(
            f"description excede {MAX_DESCRIPTION_CHARS} caracteres",
            field="description",
        )
    return cleaned


def _check_hours(value: int | None, field: str) -> int | None:
    if value is not None and value < 0:
        raise TaskValidationError(f"{field} no puede ser negativo", field=field)
    return value


@dataclass(eq=False)
class Task:
    """
    Tarea asignable a un usuario.

    No se instancia directamente desde fuera del dominio: usar
    Task.create() para altas y Task.rehydrate() desde repositorios.
    """

    id: UUID
    title: str
    assigned_to: UUID
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = DEFAULT_PRIORITY
    category: Optional[TaskCategory] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    estimated_hours: Optional[int] = None
    actual_hours: Optional[int] = None
    is_archived: bool = False
    version: int = 0

    # -----------------------------------------------------------------------
    # Construcción
    # -----------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        *,
        title: str,
        created_by: UUID,
        assigned_to: UUID | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
        category: TaskCategory | None = None,
        due_date: datetime | None = None,
        estimated_hours: int | None = None,
        task_id: UUID | None = None,
        now: datetime | None = None,
    ) -> "Task":
        """
        Alta de una tarea nueva.

        Reglas:
          - status arranca en TODO y version en 0.
          - priority por defecto MEDIUM.
          - assigned_to por defecto es el creador.
        """
        if created_by is None:
            raise TaskValidationError("created_by es obligatorio", field="created_by")

        stamp = as_utc(now) or _utcnow()
        return cls(
            id=task_id or uuid4(),
            title=_clean_title(title),
            description=_clean_description(description),
            assigned_to=assigned_to or created_by,
            created_by=created_by,
            priority=priority or DEFAULT_PRIORITY,
            category=category,
            due_date=as_utc(due_date),
            estimated_hours=_check_hours(estimated_hours, "estimated_hours"),
            created_at=stamp,
            updated_at=stamp,
        )

    @classmethod
    def rehydrate(
        cls,
        *,
        id: UUID,
        title: str,
        assigned_to: UUID,
        created_by: UUID,
        status: TaskStatus,
        priority: TaskPriority,
        created_at: datetime,
        updated_at: datetime,
        version: int,
        description: str | None = None,
        category: TaskCategory | None = None,
        due_date: datetime | None = None,
        completed_at: datetime | None = None,
        estimated_hours: int | None = None,
        actual_hours: int | None = None,
        is_archived: bool = False,
    ) -> "Task":
        """
        Reconstruye una tarea persistida.

        No aplica validaciones de alta (datos históricos pueden no cumplirlas),
        pero repara completed_at: solo existe si status es COMPLETED.
        """
        return cls(
            id=id,
            title=title,
            description=description,
            assigned_to=assigned_to,
            created_by=created_by,
            status=status,
            priority=priority,
            category=category,
            due_date=as_utc(due_date),
            completed_at=(
                as_utc(completed_at) if status == TaskStatus.COMPLETED else None
            ),
            estimated_hours=estimated_hours,
            actual_hours=actual_hours,
            is_archived=is_archived,
            created_at=as_utc(created_at),
            updated_at=as_utc(updated_at),
            version=version,
        )

    # -----------------------------------------------------------------------
    # Identidad
    # -----------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    # -----------------------------------------------------------------------
    # Métodos de negocio
    # -----------------------------------------------------------------------
    def _touch(self, now: datetime | None) -> datetime:
        stamp = as_utc(now) or _utcnow()
        self.updated_at = stamp
        return stamp

    def update_status(self, new_status: TaskStatus, *, now: datetime | None = None) -> None:
        """
        Cambia el estado.

        Entrar a COMPLETED sella completed_at; salir de COMPLETED lo limpia.
        Un cambio al mismo estado solo refresca updated_at.
        """
        if new_status is None:
            raise TaskValidationError("status es obligatorio", field="status")

        previous = self.status
        stamp = self._touch(now)
        self.status = new_status

        if new_status == TaskStatus.COMPLETED and previous != TaskStatus.COMPLETED:
            self.completed_at = stamp
        elif previous == TaskStatus.COMPLETED and new_status != TaskStatus.COMPLETED:
            self.completed_at = None

    def complete(self, *, now: datetime | None = None) -> None:
        self.update_status(TaskStatus.COMPLETED, now=now)

    def assign_to(self, user_id: UUID, *, now: datetime | None = None) -> None:
        if user_id is None:
            raise TaskValidationError("assigned_to es obligatorio", field="assigned_to")
        self.assigned_to = user_id
        self._touch(now)

    def update_priority(
        self, priority: TaskPriority, *, now: datetime | None = None
    ) -> None:
        if priority is None:
            raise TaskValidationError("priority es obligatorio", field="priority")
        self.priority = priority
        self._touch(now)

    def update_details(
        self,
        title: str | None,
        description: str | None,
        *,
        now: datetime | None = None,
    ) -> None:
        """
        Reemplaza título y descripción.

        - title: solo se reemplaza si viene y no está en blanco.
        - description: siempre se reemplaza (None o blanco la limpia).

        Idempotente: repetir la llamada con los mismos valores deja el mismo
        estado.
        """
        if title is not None and title.strip():
            self.title = _clean_title(title)
        self.description = _clean_description(description)
        self._touch(now)

    def update_time_estimate(
        self,
        estimated_hours: int | None,
        actual_hours: int | None,
        *,
        now: datetime | None = None,
    ) -> None:
        """Cada valor se reemplaza solo si viene y es no negativo."""
        if estimated_hours is not None and estimated_hours >= 0:
            self.estimated_hours = estimated_hours
        if actual_hours is not None and actual_hours >= 0:
            self.actual_hours = actual_hours
        self._touch(now)

    def set_due_date(
        self, due_date: datetime | None, *, now: datetime | None = None
    ) -> None:
        self.due_date = as_utc(due_date)
        self._touch(now)

    def categorize(
        self, category: TaskCategory | None, *, now: datetime | None = None
    ) -> None:
        self.category = category
        self._touch(now)

    def archive(self, *, now: datetime | None = None) -> None:
        """Archiva la tarea (soft delete)."""
        self.is_archived = True
        self._touch(now)

    def unarchive(self, *, now: datetime | None = None) -> None:
        self.is_archived = False
        self._touch(now)

    # -----------------------------------------------------------------------
    # Predicados (sin side effects)
    # -----------------------------------------------------------------------
    def is_overdue(self, *, now: datetime | None = None) -> bool:
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        return (as_utc(now) or _utcnow()) > self.due_date

    def is_due_soon(self, hours_threshold: int, *, now: datetime | None = None) -> bool:
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        reference = as_utc(now) or _utcnow()
        return reference + timedelta(hours=hours_threshold) > self.due_date

    def is_assigned_to(self, user_id: UUID | None) -> bool:
        return user_id is not None and self.assigned_to == user_id

    def is_created_by(self, user_id: UUID | None) -> bool:
        return user_id is not None and self.created_by == user_id

    @property
    def is_high_priority(self) -> bool:
        return self.priority in HIGH_PRIORITIES

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_in_progress(self) -> bool:
        return self.status == TaskStatus.IN_PROGRESS
