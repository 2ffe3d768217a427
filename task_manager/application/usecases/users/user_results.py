"""
===============================================================================
USER USE CASE RESULTS
===============================================================================

Resultados y errores tipados para la gestión de cuentas (alta, activación,
listado). Mismo contrato que los resultados de tareas: valor o error.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....identity.users import User


class UserErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str
    resource: str = "User"
    field: str | None = None


@dataclass
class UserResult:
    user: User | None = None
    error: UserError | None = None


@dataclass
class UserPageResult:
    users: List[User] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0
