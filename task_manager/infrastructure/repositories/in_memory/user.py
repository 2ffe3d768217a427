"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar cuentas en memoria (tests / desarrollo sin Postgres).
  - Unicidad de email (case-insensitive) y username.
  - Control de versión en update_user.

Constraints / Notes:
  - Thread-safe (Lock) y copias defensivas.
  - Orden de listado: created_at ASC, id ASC (igual que Postgres).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.repositories import UserRepository
from ....identity.users import User

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    def _find(self, predicate) -> Optional[User]:
        for user in self._users.values():
            if predicate(user):
                return replace(user)
        return None

    def get_user(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user is not None else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").strip().lower()
        with self._lock:
            return self._find(lambda u: u.email.lower() == wanted)

    def get_user_by_username(self, username: str) -> Optional[User]:
        wanted = (username or "").strip()
        with self._lock:
            return self._find(lambda u: u.username == wanted)

    def create_user(self, user: User) -> User:
        with self._lock:
            for existing in self._users.values():
                if existing.email.lower() == user.email.lower():
                    raise ValueError("Email already registered.")
                if existing.username == user.username:
                    raise ValueError("Username already taken.")
            now = datetime.now(timezone.utc)
            stored = replace(
                user,
                created_at=user.created_at or now,
                updated_at=user.updated_at or now,
            )
            self._users[user.id] = stored
            return replace(stored)

    def update_user(self, user: User, *, expected_version: int) -> Optional[User]:
        with self._lock:
            current = self._users.get(user.id)
            if current is None or current.version != expected_version:
                return None
            stored = replace(
                user, created_at=current.created_at, version=expected_version + 1
            )
            self._users[user.id] = stored
            return replace(stored)

    def list_users(self, *, limit: int = 20, offset: int = 0) -> List[User]:
        with self._lock:
            ordered = sorted(
                self._users.values(),
                key=lambda u: (u.created_at or _EPOCH, str(u.id)),
            )
            return [replace(u) for u in ordered[offset : offset + limit]]

    def count_users(self) -> int:
        with self._lock:
            return len(self._users)
