"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelo de Usuario (aggregate root de cuentas)

Responsabilidades:
    - Definir el enum de roles (USER, MANAGER, ADMIN).
    - Definir el aggregate User con sus métodos de estado de cuenta.
    - Normalizar y validar username, email y nombres.

Colaboradores:
    - identity/auth_users.py: usa User y UserRole para emitir/validar JWT.
    - domain/task_policy.py: usa UserRole para decidir acceso.
    - application/usecases/users: alta y activación de cuentas.
    - infrastructure/repositories/*/user.py: mapean filas -> User.

Notas:
    - password_hash guarda SIEMPRE el hash argon2, nunca la contraseña.
    - email se guarda en minúsculas (unicidad case-insensitive).
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Final
from uuid import UUID

USERNAME_MIN_CHARS: Final[int] = 3
USERNAME_MAX_CHARS: Final[int] = 50
PERSON_NAME_MAX_CHARS: Final[int] = 100

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserRole(str, Enum):
    """Roles soportados; ADMIN ve y modifica todas las tareas."""

    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class UserValidationError(ValueError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_username(username: str | None) -> str:
    value = (username or "").strip()
    if not USERNAME_MIN_CHARS <= len(value) <= USERNAME_MAX_CHARS:
        raise UserValidationError(
            f"username debe tener entre {USERNAME_MIN_CHARS} y "
            f"{USERNAME_MAX_CHARS} caracteres",
            field="username",
        )
    if not _USERNAME_RE.match(value):
        raise UserValidationError(
            "username solo admite letras, números y guion bajo", field="username"
        )
    return value


def normalize_email(email: str | None) -> str:
    value = (email or "").strip().lower()
    if not _EMAIL_RE.match(value):
        raise UserValidationError("email inválido", field="email")
    return value


def normalize_person_name(value: str | None, *, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise UserValidationError(f"{field} es obligatorio", field=field)
    if len(cleaned) > PERSON_NAME_MAX_CHARS:
        raise UserValidationError(
            f"{field} excede {PERSON_NAME_MAX_CHARS} caracteres", field=field
        )
    return cleaned


@dataclass
class User:
    """Cuenta de usuario."""

    id: UUID
    username: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    avatar_url: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    def activate(self, *, now: datetime | None = None) -> None:
        self.is_active = True
        self.updated_at = now or _utcnow()

    def deactivate(self, *, now: datetime | None = None) -> None:
        self.is_active = False
        self.updated_at = now or _utcnow()

    def record_login(self, *, now: datetime | None = None) -> None:
        stamp = now or _utcnow()
        self.last_login_at = stamp
        self.updated_at = stamp

    def change_password(
        self, password_hash: str, *, now: datetime | None = None
    ) -> None:
        if not (password_hash or "").strip():
            raise UserValidationError(
                "password_hash no puede estar vacío", field="password"
            )
        self.password_hash = password_hash
        self.updated_at = now or _utcnow()

    def update_profile(
        self,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        avatar_url: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Solo reemplaza los campos presentes."""
        if first_name is not None:
            self.first_name = normalize_person_name(first_name, field="first_name")
        if last_name is not None:
            self.last_name = normalize_person_name(last_name, field="last_name")
        if avatar_url is not None:
            self.avatar_url = avatar_url.strip() or None
        self.updated_at = now or _utcnow()
