"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener application libre de HTTP.

Colaboradores:
  - application.usecases.tasks (TaskError, TaskErrorCode)
  - application.usecases.users (UserError, UserErrorCode)
  - crosscutting.error_responses (validation_error, not_found, ...)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn
from uuid import UUID

from ....application.usecases.tasks import TaskError, TaskErrorCode
from ....application.usecases.users import UserError, UserErrorCode
from ....crosscutting.error_responses import (
    conflict,
    forbidden,
    not_found,
    validation_error,
)


def _field_errors(field: str | None) -> list[dict[str, str]] | None:
    return [{"field": field}] if field else None


def raise_task_error(error: TaskError, *, task_id: UUID | None = None) -> NoReturn:
    """
    Traduce TaskError -> HTTP.

    NOT_FOUND cubre también "sin permiso": no se revela la existencia.
    """
    if error.code == TaskErrorCode.NOT_FOUND:
        raise not_found(error.resource, str(task_id or "unknown"))
    if error.code == TaskErrorCode.CONFLICT:
        raise conflict(error.message)
    if error.code == TaskErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    # VALIDATION_ERROR y cualquier código nuevo -> 422
    raise validation_error(error.message, _field_errors(error.field))


def raise_user_error(error: UserError, *, user_id: UUID | None = None) -> NoReturn:
    if error.code == UserErrorCode.NOT_FOUND:
        raise not_found(error.resource, str(user_id or "unknown"))
    if error.code == UserErrorCode.CONFLICT:
        raise conflict(error.message)
    raise validation_error(error.message, _field_errors(error.field))
