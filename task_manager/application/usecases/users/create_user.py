"""
===============================================================================
USE CASE: Create User
===============================================================================

Business Goal:
    Registrar una cuenta nueva (alta administrativa).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateUserUseCase

Responsibilities:
    - Normalizar y validar username, email y nombres.
    - Rechazar email o username duplicados (CONFLICT).
    - Hashear la contraseña con el hasher inyectado.
    - Rol por defecto USER.

Collaborators:
    - UserRepository.get_user_by_email / get_user_by_username / create_user
    - password_hasher: Callable[[str], str] (argon2 en runtime)
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Final
from uuid import uuid4

from ....domain.repositories import UserRepository
from ....identity.users import (
    User,
    UserRole,
    UserValidationError,
    normalize_email,
    normalize_person_name,
    normalize_username,
)
from .user_results import UserError, UserErrorCode, UserResult

logger = logging.getLogger(__name__)

MIN_PASSWORD_CHARS: Final[int] = 8


@dataclass(frozen=True)
class CreateUserInput:
    username: str
    email: str
    password: str
    first_name: str
    last_name: str
    role: UserRole | None = None
    avatar_url: str | None = None


class CreateUserUseCase:
    def __init__(
        self,
        repository: UserRepository,
        password_hasher: Callable[[str], str],
    ) -> None:
        self._users = repository
        self._hash = password_hasher

    def execute(self, input_data: CreateUserInput) -> UserResult:
        try:
            username = normalize_username(input_data.username)
            email = normalize_email(input_data.email)
            first_name = normalize_person_name(input_data.first_name, field="first_name")
            last_name = normalize_person_name(input_data.last_name, field="last_name")
        except UserValidationError as exc:
            return self._validation_error(str(exc), field=exc.field)

        if len(input_data.password or "") < MIN_PASSWORD_CHARS:
            return self._validation_error(
                f"password debe tener al menos {MIN_PASSWORD_CHARS} caracteres",
                field="password",
            )

        if self._users.get_user_by_email(email) is not None:
            return self._conflict("Email already registered.", field="email")
        if self._users.get_user_by_username(username) is not None:
            return self._conflict("Username already taken.", field="username")

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid4(),
            username=username,
            email=email,
            password_hash=self._hash(input_data.password),
            first_name=first_name,
            last_name=last_name,
            role=input_data.role or UserRole.USER,
            avatar_url=(input_data.avatar_url or "").strip() or None,
            created_at=now,
            updated_at=now,
        )

        try:
            created = self._users.create_user(user)
        except ValueError as exc:
            # Carrera: otro request registró el mismo email/username.
            return self._conflict(str(exc))

        logger.info(
            "user created",
            extra={"user_id": str(created.id), "role": created.role.value},
        )
        return UserResult(user=created)

    @staticmethod
    def _validation_error(message: str, *, field: str | None = None) -> UserResult:
        return UserResult(
            error=UserError(
                code=UserErrorCode.VALIDATION_ERROR, message=message, field=field
            )
        )

    @staticmethod
    def _conflict(message: str, *, field: str | None = None) -> UserResult:
        return UserResult(
            error=UserError(code=UserErrorCode.CONFLICT, message=message, field=field)
        )
