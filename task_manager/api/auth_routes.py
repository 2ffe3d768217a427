"""
===============================================================================
TARJETA CRC — task_manager/api/auth_routes.py (Autenticación y Administración de Usuarios)
===============================================================================

Responsabilidades:
  - Exponer endpoints de autenticación de usuario (login/logout/me) con JWT.
  - Gestionar cookie httpOnly de forma consistente.
  - Exponer endpoints administrativos para gestión de usuarios
    (crear/listar/activar/desactivar).

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> caso de uso.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - identity.auth_users: authenticate_user, create_access_token, require_user
  - application.usecases.users: alta, activación, listado, último login
  - container: factories de casos de uso
===============================================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field, field_validator

from ..application.usecases.users import (
    CreateUserInput,
    CreateUserUseCase,
    ListUsersUseCase,
    RecordLoginUseCase,
    SetUserActiveUseCase,
)
from ..container import (
    get_create_user_use_case,
    get_list_users_use_case,
    get_record_login_use_case,
    get_set_user_active_use_case,
)
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, unauthorized
from ..crosscutting.logger import logger
from ..identity.auth_users import (
    authenticate_user,
    create_access_token,
    get_auth_settings,
    require_roles,
    require_user,
)
from ..identity.users import User, UserRole
from ..interfaces.api.http.error_mapping import raise_user_error
from ..interfaces.api.http.schemas.tasks import UtcDatetime

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(BaseModel):
    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    avatar_url: str | None = None
    last_login_at: Optional[UtcDatetime] = None
    created_at: Optional[UtcDatetime] = None


class UsersPageResponse(BaseModel):
    items: list[UserResponse]
    total: int
    limit: int
    offset: int


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class CreateUserRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=8, max_length=512)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = Field(default=UserRole.USER)
    avatar_url: str | None = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        is_active=user.is_active,
        avatar_url=user.avatar_url,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )


def _set_auth_cookie(response: Response, token: str, expires_in: int) -> None:
    settings = get_auth_settings()
    response.set_cookie(
        key=settings.jwt_cookie_name,
        value=token,
        httponly=True,
        secure=settings.jwt_cookie_secure,
        samesite="lax",
        max_age=expires_in,
        path="/",
    )


def _clear_auth_cookie(response: Response) -> None:
    settings = get_auth_settings()
    response.delete_cookie(
        key=settings.jwt_cookie_name,
        path="/",
        samesite="lax",
        secure=settings.jwt_cookie_secure,
    )


# -----------------------------------------------------------------------------
# Endpoints públicos (login/logout/me)
# -----------------------------------------------------------------------------


@router.post("/auth/login", response_model=LoginResponse, tags=["auth"])
def login(
    req: LoginRequest,
    response: Response,
    record_login: RecordLoginUseCase = Depends(get_record_login_use_case),
):
    """
    Inicia sesión y devuelve JWT.

    También setea la cookie httpOnly y sella last_login_at.
    """
    user = authenticate_user(req.email, req.password)
    if not user:
        raise unauthorized("Credenciales inválidas.")

    recorded = record_login.execute(user)
    if recorded.user is not None:
        user = recorded.user
    else:
        # El login es válido aunque el sellado pierda una carrera de versión.
        logger.warning(
            "No se pudo registrar last_login_at",
            extra={"user_id": str(user.id), "code": recorded.error.code.value},
        )

    token, expires_in = create_access_token(user)
    _set_auth_cookie(response, token, expires_in)

    logger.info("Login exitoso", extra={"user_id": str(user.id)})
    return LoginResponse(
        access_token=token,
        expires_in=expires_in,
        user=_to_user_response(user),
    )


@router.post("/auth/logout", tags=["auth"])
def logout(response: Response):
    """
    Cierra sesión.

    - Siempre borra la cookie (si estaba presente).
    - No requiere autenticación: es idempotente.
    """
    _clear_auth_cookie(response)
    return {"ok": True}


@router.get("/auth/me", response_model=UserResponse, tags=["auth"])
def me(user: User = Depends(require_user())):
    """Devuelve el usuario autenticado (JWT o cookie)."""
    return _to_user_response(user)


# -----------------------------------------------------------------------------
# Endpoints administrativos (usuarios)
# -----------------------------------------------------------------------------

_require_admin = require_roles(UserRole.ADMIN)


@router.get("/auth/users", response_model=UsersPageResponse, tags=["auth"])
def list_users_admin(
    limit: int = Query(
        get_settings().default_page_size, ge=1, le=get_settings().max_page_size
    ),
    offset: int = Query(0, ge=0),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
    _admin: User = Depends(_require_admin),
):
    """Lista usuarios (admin)."""
    result = use_case.execute(limit=limit, offset=offset)
    return UsersPageResponse(
        items=[_to_user_response(u) for u in result.users],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
    )


@router.post("/auth/users", response_model=UserResponse, status_code=201, tags=["auth"])
def create_user_admin(
    req: CreateUserRequest,
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
    _admin: User = Depends(_require_admin),
):
    """Crea un usuario (admin)."""
    result = use_case.execute(
        CreateUserInput(
            username=req.username,
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
            role=req.role,
            avatar_url=req.avatar_url,
        )
    )
    if result.error is not None:
        raise_user_error(result.error)
    return _to_user_response(result.user)


def _set_active(
    user_id: UUID, *, active: bool, use_case: SetUserActiveUseCase
) -> UserResponse:
    result = use_case.execute(user_id, active=active)
    if result.error is not None:
        raise_user_error(result.error, user_id=user_id)
    return _to_user_response(result.user)


@router.post(
    "/auth/users/{user_id}/activate", response_model=UserResponse, tags=["auth"]
)
def activate_user_admin(
    user_id: UUID,
    use_case: SetUserActiveUseCase = Depends(get_set_user_active_use_case),
    _admin: User = Depends(_require_admin),
):
    return _set_active(user_id, active=True, use_case=use_case)


@router.post(
    "/auth/users/{user_id}/deactivate", response_model=UserResponse, tags=["auth"]
)
def deactivate_user_admin(
    user_id: UUID,
    use_case: SetUserActiveUseCase = Depends(get_set_user_active_use_case),
    _admin: User = Depends(_require_admin),
):
    return _set_active(user_id, active=False, use_case=use_case)


__all__ = ["router"]
