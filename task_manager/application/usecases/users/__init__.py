"""User account use cases (public exports)."""

from __future__ import annotations

from .create_user import CreateUserInput, CreateUserUseCase
from .manage_users import ListUsersUseCase, RecordLoginUseCase, SetUserActiveUseCase
from .user_results import UserError, UserErrorCode, UserPageResult, UserResult

__all__ = [
    "CreateUserInput",
    "CreateUserUseCase",
    "ListUsersUseCase",
    "RecordLoginUseCase",
    "SetUserActiveUseCase",
    "UserError",
    "UserErrorCode",
    "UserPageResult",
    "UserResult",
]
