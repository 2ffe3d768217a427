"""
===============================================================================
USE CASES: Activate / Deactivate / List / Record Login
===============================================================================

Business Goal:
    Operaciones administrativas sobre cuentas existentes y el registro del
    último login. Las escrituras usan control de versión igual que las
    tareas.
===============================================================================
"""

from __future__ import annotations

from typing import Final
from uuid import UUID

from ....domain.repositories import UserRepository
from ....identity.users import User
from .user_results import UserError, UserErrorCode, UserPageResult, UserResult

_DEFAULT_LIMIT: Final[int] = 20
_MAX_LIMIT: Final[int] = 100


def _not_found() -> UserResult:
    return UserResult(
        error=UserError(code=UserErrorCode.NOT_FOUND, message="User not found.")
    )


def _conflict() -> UserResult:
    return UserResult(
        error=UserError(
            code=UserErrorCode.CONFLICT,
            message="User was modified by another request. Reload and retry.",
        )
    )


def _save(repository: UserRepository, user: User, loaded_version: int) -> UserResult:
    updated = repository.update_user(user, expected_version=loaded_version)
    if updated is not None:
        return UserResult(user=updated)
    if repository.get_user(user.id) is None:
        return _not_found()
    return _conflict()


class SetUserActiveUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, user_id: UUID, *, active: bool) -> UserResult:
        user = self._users.get_user(user_id)
        if user is None:
            return _not_found()
        if user.is_active == active:
            return UserResult(user=user)

        loaded_version = user.version
        if active:
            user.activate()
        else:
            user.deactivate()
        return _save(self._users, user, loaded_version)


class RecordLoginUseCase:
    """Sella last_login_at luego de un login exitoso."""

    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, user: User) -> UserResult:
        loaded_version = user.version
        user.record_login()
        return _save(self._users, user, loaded_version)


class ListUsersUseCase:
    def __init__(
        self,
        repository: UserRepository,
        *,
        default_limit: int = _DEFAULT_LIMIT,
        max_limit: int = _MAX_LIMIT,
    ) -> None:
        self._users = repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    def execute(self, *, limit: int | None = None, offset: int = 0) -> UserPageResult:
        if limit is None or limit <= 0:
            safe_limit = self._default_limit
        else:
            safe_limit = min(limit, self._max_limit)
        safe_offset = max(0, offset)
        return UserPageResult(
            users=self._users.list_users(limit=safe_limit, offset=safe_offset),
            total=self._users.count_users(),
            limit=safe_limit,
            offset=safe_offset,
        )
