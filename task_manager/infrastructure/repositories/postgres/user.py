"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios para autenticación (por email / por id / por username).
  - Crear usuarios y actualizar el estado de la cuenta con control de versión.
  - Mapear filas -> User validando UserRole.

Collaborators:
  - PostgresRepositoryBase (pool + errores)
  - identity.users.User / UserRole
  - Tabla: users (alembic 001_initial)

Constraints / Notes:
  - Retorna None cuando no existe el recurso.
  - Un role persistido que no corresponde a UserRole -> DatabaseError.
  - Violación de unicidad (email/username) -> ValueError para que el caso de
    uso responda CONFLICT.
  - Orden estable en listados: created_at ASC, id ASC.
============================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from psycopg import errors as pg_errors

from ....crosscutting.exceptions import DatabaseError
from ....domain.repositories import UserRepository
from ....identity.users import User, UserRole
from .base import PostgresRepositoryBase

_USER_COLUMNS = """
    id, username, email, password_hash, first_name, last_name, role,
    is_active, avatar_url, last_login_at, created_at, updated_at, version
"""
_USER_ORDER_BY = "ORDER BY created_at ASC, id ASC"


def _row_to_user(row: tuple) -> User:
    (
        user_id,
        username,
        email,
        password_hash,
        first_name,
        last_name,
        role,
        is_active,
        avatar_url,
        last_login_at,
        created_at,
        updated_at,
        version,
    ) = row

    try:
        parsed_role = UserRole(role)
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {role}") from exc

    return User(
        id=user_id,
        username=username,
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        role=parsed_role,
        is_active=is_active,
        avatar_url=avatar_url,
        last_login_at=last_login_at,
        created_at=created_at,
        updated_at=updated_at,
        version=version,
    )


class PostgresUserRepository(PostgresRepositoryBase, UserRepository):
    def _get_one(self, where_sql: str, value: object, context: str) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE {where_sql}",
            params=(value,),
            context_msg=f"PostgresUserRepository: {context} failed",
            extra={},
        )
        return _row_to_user(row) if row else None

    def get_user(self, user_id: UUID) -> Optional[User]:
        return self._get_one("id = %s", user_id, "get_user")

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._get_one(
            "email = %s", (email or "").strip().lower(), "get_user_by_email"
        )

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._get_one(
            "username = %s", (username or "").strip(), "get_user_by_username"
        )

    def create_user(self, user: User) -> User:
        def insert(conn):
            try:
                return conn.execute(
                    f"""
                    INSERT INTO users (
                        id, username, email, password_hash, first_name, last_name,
                        role, is_active, avatar_url, created_at, updated_at, version
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s,
                            COALESCE(%s, now()), COALESCE(%s, now()), %s)
                    RETURNING {_USER_COLUMNS}
                    """,
                    (
                        user.id,
                        user.username,
                        user.email.lower(),
                        user.password_hash,
                        user.first_name,
                        user.last_name,
                        user.role.value,
                        user.is_active,
                        user.avatar_url,
                        user.created_at,
                        user.updated_at,
                        user.version,
                    ),
                ).fetchone()
            except pg_errors.UniqueViolation:
                conn.rollback()
                return None

        row = self._run(
            insert,
            context_msg="PostgresUserRepository: create_user failed",
            extra={"user_id": str(user.id)},
        )
        if row is None:
            raise ValueError("Email or username already registered.")
        return _row_to_user(row)

    def update_user(self, user: User, *, expected_version: int) -> Optional[User]:
        row = self._fetchone(
            query=f"""
                UPDATE users
                SET password_hash = %s,
                    first_name = %s,
                    last_name = %s,
                    role = %s,
                    is_active = %s,
                    avatar_url = %s,
                    last_login_at = %s,
                    updated_at = now(),
                    version = version + 1
                WHERE id = %s AND version = %s
                RETURNING {_USER_COLUMNS}
            """,
            params=(
                user.password_hash,
                user.first_name,
                user.last_name,
                user.role.value,
                user.is_active,
                user.avatar_url,
                user.last_login_at,
                user.id,
                expected_version,
            ),
            context_msg="PostgresUserRepository: update_user failed",
            extra={"user_id": str(user.id), "expected_version": expected_version},
        )
        return _row_to_user(row) if row else None

    def list_users(self, *, limit: int = 20, offset: int = 0) -> List[User]:
        if limit <= 0:
            return []
        rows = self._fetchall(
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                {_USER_ORDER_BY}
                LIMIT %s OFFSET %s
            """,
            params=(limit, max(0, offset)),
            context_msg="PostgresUserRepository: list_users failed",
            extra={"limit": limit, "offset": offset},
        )
        return [_row_to_user(r) for r in rows]

    def count_users(self) -> int:
        row = self._fetchone(
            query="SELECT count(*) FROM users",
            params=(),
            context_msg="PostgresUserRepository: count_users failed",
            extra={},
        )
        return int(row[0]) if row else 0
