"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Autenticación de Usuarios (JWT) y resolución del actor

Responsabilidades:
    - Hashear/verificar passwords (Argon2).
    - Emitir y validar JWT de acceso (HS256, exp, claims mínimos).
    - Resolver usuario actual (token -> user_id -> repositorio).
    - Exponer dependencias FastAPI (require_user, require_roles).
    - Traducir User -> TaskActor para la policy de tareas.

Colaboradores:
    - crosscutting.config.get_settings: secreto, TTL, cookie.
    - crosscutting.error_responses: unauthorized/forbidden estándar.
    - container.get_user_repository: lookup de usuarios.
    - identity.users: User / UserRole.
    - domain.task_policy.TaskActor.

Decisiones de diseño:
    - La criptografía vive en el borde de identidad, NO en dominio.
    - 401: falta token / token inválido / usuario inexistente.
    - 403: usuario inactivo o rol fuera del conjunto permitido.
    - No loguear secretos ni tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Header, Request

from ..context import set_actor_context
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from ..domain.task_policy import TaskActor
from .users import User, UserRole

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_USERNAME: str = "username"
CLAIM_ROLE: str = "role"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_ACCESS: str = "access"

ALL_ROLES: tuple[UserRole, ...] = tuple(UserRole)

_password_hasher = PasswordHasher()


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Settings de auth (snapshot)."""

    jwt_secret: str
    jwt_access_ttl_minutes: int
    jwt_cookie_name: str
    jwt_cookie_secure: bool


@dataclass(frozen=True, slots=True)
class TokenPayload:
    user_id: str
    username: str
    role: UserRole


def get_auth_settings() -> AuthSettings:
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
        jwt_cookie_name=s.jwt_cookie_name,
        jwt_cookie_secure=s.jwt_cookie_secure,
    )


# ---------------------------------------------------------------------------
# Lookup de usuarios (puntos de patch en tests)
# ---------------------------------------------------------------------------


def get_user_by_email(email: str) -> User | None:
    from ..container import get_user_repository

    return get_user_repository().get_user_by_email(email)


def get_user_by_id(user_id: UUID) -> User | None:
    from ..container import get_user_repository

    return get_user_repository().get_user(user_id)


# ---------------------------------------------------------------------------
# Passwords (Argon2)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def authenticate_user(email: str, password: str) -> User | None:
    """
    Valida credenciales y retorna el usuario o None.

    - No distingue "usuario no existe" de "password incorrecto".
    - Usuario existente pero inactivo -> 403 explícito.
    """
    normalized_email = (email or "").strip().lower()
    if not normalized_email:
        return None

    user = get_user_by_email(normalized_email)
    if not user:
        return None

    if not user.is_active:
        logger.warning("Auth falló: usuario inactivo", extra={"user_id": str(user.id)})
        raise forbidden("El usuario está inactivo.")

    if not verify_password(password, user.password_hash):
        return None

    return user


# ---------------------------------------------------------------------------
# Tokens JWT
# ---------------------------------------------------------------------------


def create_access_token(
    user: User, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Retorna (token, expires_in_seconds)."""
    auth_settings = settings or get_auth_settings()

    now = datetime.now(timezone.utc)
    expires_in = int(auth_settings.jwt_access_ttl_minutes * 60)

    payload: dict[str, object] = {
        CLAIM_SUB: str(user.id),
        CLAIM_USERNAME: user.username,
        CLAIM_ROLE: user.role.value,
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(seconds=expires_in)).timestamp()),
        CLAIM_TYP: TOKEN_TYPE_ACCESS,
    }

    token = jwt.encode(payload, auth_settings.jwt_secret, algorithm=JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(
    token: str, settings: AuthSettings | None = None
) -> TokenPayload:
    """401 si expiró, la firma es inválida o faltan claims."""
    auth_settings = settings or get_auth_settings()

    try:
        payload = jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_USERNAME, CLAIM_ROLE, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expirado.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Token inválido.") from exc

    if payload.get(CLAIM_TYP, TOKEN_TYPE_ACCESS) != TOKEN_TYPE_ACCESS:
        raise unauthorized("Tipo de token inválido.")

    try:
        role = UserRole(str(payload[CLAIM_ROLE]))
    except ValueError as exc:
        raise unauthorized("Token inválido.") from exc

    return TokenPayload(
        user_id=str(payload[CLAIM_SUB]),
        username=str(payload[CLAIM_USERNAME]),
        role=role,
    )


def get_current_user(token: str) -> User:
    """
    Resuelve el usuario del token.

    El rol se toma del registro actual (no del token) para que un cambio de
    rol o una desactivación aplique sin esperar la expiración.
    """
    payload = decode_access_token(token)

    try:
        user_id = UUID(payload.user_id)
    except ValueError as exc:
        raise unauthorized("Token inválido.") from exc

    user = get_user_by_id(user_id)
    if not user:
        raise unauthorized("Token inválido.")
    if not user.is_active:
        raise forbidden("El usuario está inactivo.")
    return user


# ---------------------------------------------------------------------------
# Extracción de token (header/cookie)
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def extract_access_token(request: Request, authorization: str | None) -> str | None:
    """Authorization: Bearer tiene prioridad sobre la cookie."""
    token = _extract_bearer_token(authorization)
    if token:
        return token

    return request.cookies.get(get_auth_settings().jwt_cookie_name)


def to_task_actor(user: User) -> TaskActor:
    return TaskActor(user_id=user.id, role=user.role)


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def _resolve_request_user(request: Request, authorization: str | None) -> User:
    token = extract_access_token(request, authorization)
    if not token:
        raise unauthorized("Falta token Bearer.")

    user = get_current_user(token)
    request.state.user = user
    # El log de acceso corre en otro contexto: lee el actor desde request.state.
    request.state.actor_id = str(user.id)
    request.state.actor_role = user.role.value
    set_actor_context(actor_id=str(user.id), role=user.role.value)
    return user


def require_user() -> Callable:
    """Dependency FastAPI: requiere usuario autenticado y activo."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> User:
        return _resolve_request_user(request, authorization)

    return dependency


def require_roles(*roles: UserRole | str) -> Callable:
    """Dependency FastAPI: requiere que el rol del usuario esté en roles."""
    allowed = frozenset(UserRole(r) for r in roles)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> User:
        user = _resolve_request_user(request, authorization)
        if user.role not in allowed:
            logger.warning(
                "Acceso denegado por rol",
                extra={"user_id": str(user.id), "role": user.role.value},
            )
            raise forbidden("Rol insuficiente.")
        return user

    return dependency


def require_actor(*roles: UserRole | str) -> Callable:
    """Dependency FastAPI: como require_roles pero devuelve el TaskActor."""
    user_dependency = require_roles(*(roles or ALL_ROLES))

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> TaskActor:
        user = await user_dependency(request, authorization)
        return to_task_actor(user)

    return dependency
