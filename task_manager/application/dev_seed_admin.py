# =============================================================================
# FILE: application/dev_seed_admin.py
# =============================================================================
"""
===============================================================================
TASK: Dev Seed Admin (local-only)
===============================================================================

Qué es:
    Asegura que exista un usuario admin para desarrollo cuando está
    configurado (DEV_SEED_ADMIN=true).

Seguridad:
    - Guard estricto: solo corre con app_env local/development.
    - Settings además rechaza DEV_SEED_ADMIN en production.

CRC:
    Component: ensure_dev_admin
    Responsibilities:
      - Validar guard de ambiente
      - Crear el admin si falta
      - Resetear password/rol/estado si force_reset
    Collaborators:
      - UserRepository
      - password_hasher
      - Settings
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Final
from uuid import uuid4

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.repositories import UserRepository
from ..identity.users import User, UserRole, normalize_email, normalize_username

_ALLOWED_ENVIRONMENTS: Final[frozenset[str]] = frozenset({"local", "development"})


def _assert_allowed_environment(settings: Settings) -> None:
    env = (settings.app_env or "").strip().lower()
    if env not in _ALLOWED_ENVIRONMENTS:
        raise RuntimeError(
            f"FATAL: DEV_SEED_ADMIN is enabled but ENV is '{env}' "
            "(must be 'local' or 'development'). "
            "Safety guard prevents accidental overrides."
        )


def ensure_dev_admin(
    settings: Settings,
    *,
    user_repo: UserRepository,
    password_hasher: Callable[[str], str],
) -> User | None:
    """
    Ensure a development admin user exists if configured.

    Behavior:
      - If disabled: no-op (returns None)
      - If enabled:
          - Create user if missing
          - If force_reset: update password, promote to ADMIN and activate
          - Otherwise: leave the existing user untouched
    """
    if not settings.dev_seed_admin:
        return None

    _assert_allowed_environment(settings)

    if not settings.dev_seed_admin_email or not settings.dev_seed_admin_password:
        raise ValueError("Dev seed admin is enabled but email/password are empty")

    email = normalize_email(settings.dev_seed_admin_email)
    logger.info(
        "Dev seed admin: ensuring admin user",
        extra={"email": email, "force_reset": settings.dev_seed_admin_force_reset},
    )

    existing = user_repo.get_user_by_email(email)
    if existing is None:
        now = datetime.now(timezone.utc)
        created = user_repo.create_user(
            User(
                id=uuid4(),
                username=normalize_username(settings.dev_seed_admin_username),
                email=email,
                password_hash=password_hasher(settings.dev_seed_admin_password),
                first_name="Dev",
                last_name="Admin",
                role=UserRole.ADMIN,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Dev seed admin: user created", extra={"email": email})
        return created

    if settings.dev_seed_admin_force_reset:
        loaded_version = existing.version
        existing.change_password(password_hasher(settings.dev_seed_admin_password))
        existing.role = UserRole.ADMIN
        existing.activate()
        updated = user_repo.update_user(existing, expected_version=loaded_version)
        if updated is None:
            raise RuntimeError("Dev seed admin: concurrent update while resetting admin")
        logger.info("Dev seed admin: user reset applied", extra={"email": email})
        return updated

    logger.info("Dev seed admin: user exists; skipping", extra={"email": email})
    return existing
