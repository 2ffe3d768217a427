"""
Name: User Authentication Tests

Responsibilities:
  - Validate login success/failure
  - Ensure /auth/me requires a token
  - Verify role-based dependency behavior
  - Admin-only user management endpoints
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import patch
from uuid import uuid4

import jwt
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from task_manager.api.auth_routes import router as auth_router
from task_manager.api.exception_handlers import register_exception_handlers
from task_manager.api.main import create_app
from task_manager.container import get_user_repository
from task_manager.crosscutting.error_responses import AppHTTPException
from task_manager.identity.auth_users import (
    JWT_ALGORITHM,
    create_access_token,
    decode_access_token,
    hash_password,
    require_roles,
)
from task_manager.identity.users import User, UserRole

pytestmark = pytest.mark.unit

TEST_SECRET = "auth-test-secret-0123456789abcdef0123"


def _auth_settings():
    return SimpleNamespace(
        jwt_secret=TEST_SECRET,
        jwt_access_ttl_minutes=30,
        jwt_cookie_name="access_token",
        jwt_cookie_secure=False,
    )


def _build_auth_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(auth_router)
    return app


def _build_role_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/admin")
    def admin_only(_: User = Depends(require_roles(UserRole.ADMIN))):
        return {"ok": True}

    return app


def _user(
    *,
    role: UserRole,
    username: str = "user_one",
    email: str = "user@example.com",
    password: str = "secret-pass",
    is_active: bool = True,
) -> User:
    return User(
        id=uuid4(),
        username=username,
        email=email,
        password_hash=hash_password(password),
        first_name="Test",
        last_name="User",
        role=role,
        is_active=is_active,
        created_at=datetime.now(timezone.utc),
    )


def test_login_ok():
    user = _user(role=UserRole.USER)
    app = _build_auth_app()

    with patch(
        "task_manager.identity.auth_users.get_auth_settings",
        return_value=_auth_settings(),
    ):
        with patch(
            "task_manager.identity.auth_users.get_user_by_email", return_value=user
        ):
            client = TestClient(app)
            response = client.post(
                "/auth/login",
                json={"email": "USER@example.com", "password": "secret-pass"},
            )

    assert response.status_code == 200
    body = response.json()
    assert body["access_token"]
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 30 * 60
    assert body["user"]["email"] == user.email
    assert body["user"]["role"] == user.role.value
    assert "password_hash" not in body["user"]
    assert "access_token" in response.cookies


def test_login_stamps_last_login():
    user = get_user_repository().create_user(_user(role=UserRole.USER))
    client = TestClient(_build_auth_app())

    response = client.post(
        "/auth/login", json={"email": "user@example.com", "password": "secret-pass"}
    )

    assert response.status_code == 200
    assert response.json()["user"]["last_login_at"].endswith("+00:00")
    assert get_user_repository().get_user(user.id).last_login_at is not None


def test_login_fail_wrong_password():
    user = _user(role=UserRole.USER)
    app = _build_auth_app()

    with patch(
        "task_manager.identity.auth_users.get_auth_settings",
        return_value=_auth_settings(),
    ):
        with patch(
            "task_manager.identity.auth_users.get_user_by_email", return_value=user
        ):
            client = TestClient(app)
            response = client.post(
                "/auth/login",
                json={"email": "user@example.com", "password": "wrong"},
            )

    assert response.status_code == 401
    assert "Credenciales" in response.json()["detail"]


def test_login_unknown_email_is_401():
    client = TestClient(_build_auth_app())

    response = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "whatever"}
    )

    assert response.status_code == 401


def test_login_inactive_user_is_403():
    user = _user(role=UserRole.USER, is_active=False)

    with patch("task_manager.identity.auth_users.get_user_by_email", return_value=user):
        response = TestClient(_build_auth_app()).post(
            "/auth/login", json={"email": "user@example.com", "password": "secret-pass"}
        )

    assert response.status_code == 403


def test_me_requires_token():
    app = _build_auth_app()
    client = TestClient(app)
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert "token" in response.json()["detail"].lower()


def test_me_returns_current_user():
    user = _user(role=UserRole.MANAGER)
    settings = _auth_settings()
    token, _ = create_access_token(user, settings=settings)

    with patch("task_manager.identity.auth_users.get_auth_settings", return_value=settings):
        with patch("task_manager.identity.auth_users.get_user_by_id", return_value=user):
            response = TestClient(_build_auth_app()).get(
                "/auth/me", headers={"Authorization": f"Bearer {token}"}
            )

    assert response.status_code == 200
    assert response.json()["id"] == str(user.id)
    assert response.json()["role"] == "manager"


def test_logout_clears_cookie():
    response = TestClient(_build_auth_app()).post("/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert "access_token=" in response.headers["set-cookie"]


def test_require_role_checks():
    admin_user = _user(role=UserRole.ADMIN, email="admin@example.com")
    plain_user = _user(role=UserRole.USER, email="plain@example.com")
    settings = _auth_settings()

    admin_token, _ = create_access_token(admin_user, settings=settings)
    plain_token, _ = create_access_token(plain_user, settings=settings)

    app = _build_role_app()
    client = TestClient(app)

    with patch("task_manager.identity.auth_users.get_auth_settings", return_value=settings):
        with patch(
            "task_manager.identity.auth_users.get_user_by_id", return_value=admin_user
        ):
            response = client.get(
                "/admin", headers={"Authorization": f"Bearer {admin_token}"}
            )
            assert response.status_code == 200
            assert response.json() == {"ok": True}

    with patch("task_manager.identity.auth_users.get_auth_settings", return_value=settings):
        with patch(
            "task_manager.identity.auth_users.get_user_by_id", return_value=plain_user
        ):
            response = client.get(
                "/admin", headers={"Authorization": f"Bearer {plain_token}"}
            )
            assert response.status_code == 403


def test_role_is_read_from_current_record():
    user = _user(role=UserRole.ADMIN)
    settings = _auth_settings()
    token, _ = create_access_token(user, settings=settings)
    demoted = _user(role=UserRole.USER)
    demoted.id = user.id

    with patch("task_manager.identity.auth_users.get_auth_settings", return_value=settings):
        with patch(
            "task_manager.identity.auth_users.get_user_by_id", return_value=demoted
        ):
            response = TestClient(_build_role_app()).get(
                "/admin", headers={"Authorization": f"Bearer {token}"}
            )

    assert response.status_code == 403


# =============================================================================
# Tokens
# =============================================================================


def test_token_claims():
    user = _user(role=UserRole.MANAGER, username="mgr_one")
    token, expires_in = create_access_token(user, settings=_auth_settings())

    claims = jwt.decode(token, TEST_SECRET, algorithms=[JWT_ALGORITHM])

    assert claims["sub"] == str(user.id)
    assert claims["username"] == "mgr_one"
    assert claims["role"] == "manager"
    assert claims["exp"] - claims["iat"] == expires_in


def test_expired_token_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": str(uuid4()),
            "username": "late",
            "role": "user",
            "iat": int((now - timedelta(hours=2)).timestamp()),
            "exp": int((now - timedelta(hours=1)).timestamp()),
        },
        TEST_SECRET,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AppHTTPException) as exc_info:
        decode_access_token(token, settings=_auth_settings())

    assert exc_info.value.status_code == 401
    assert "expirado" in exc_info.value.detail.lower()


def test_token_signed_with_other_secret_is_rejected():
    user = _user(role=UserRole.USER)
    token, _ = create_access_token(user, settings=_auth_settings())
    other = SimpleNamespace(**{**vars(_auth_settings()), "jwt_secret": "x" * 40})

    with pytest.raises(AppHTTPException) as exc_info:
        decode_access_token(token, settings=other)

    assert exc_info.value.status_code == 401


# =============================================================================
# Admin: user management
# =============================================================================


def _seed(role: UserRole, username: str) -> User:
    return get_user_repository().create_user(
        _user(role=role, username=username, email=f"{username}@example.com")
    )


def _bearer(user: User) -> dict[str, str]:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


def test_admin_creates_and_lists_users():
    admin = _seed(UserRole.ADMIN, "boss")
    client = TestClient(create_app())

    created = client.post(
        "/auth/users",
        json={
            "username": "new_hire",
            "email": "New.Hire@Example.com",
            "password": "long-enough",
            "first_name": "New",
            "last_name": "Hire",
        },
        headers=_bearer(admin),
    )
    listed = client.get("/auth/users", headers=_bearer(admin))

    assert created.status_code == 201
    assert created.json()["email"] == "new.hire@example.com"
    assert created.json()["role"] == "user"
    assert listed.json()["total"] == 2


def test_admin_create_duplicate_email_is_409():
    admin = _seed(UserRole.ADMIN, "boss")
    client = TestClient(create_app())

    response = client.post(
        "/auth/users",
        json={
            "username": "someone_else",
            "email": "boss@example.com",
            "password": "long-enough",
            "first_name": "A",
            "last_name": "B",
        },
        headers=_bearer(admin),
    )

    assert response.status_code == 409


def test_user_management_requires_admin():
    plain = _seed(UserRole.MANAGER, "middle")
    client = TestClient(create_app())

    assert client.get("/auth/users", headers=_bearer(plain)).status_code == 403


def test_deactivated_user_loses_access():
    admin = _seed(UserRole.ADMIN, "boss")
    worker = _seed(UserRole.USER, "worker")
    client = TestClient(create_app())

    response = client.post(
        f"/auth/users/{worker.id}/deactivate", headers=_bearer(admin)
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert client.get("/auth/me", headers=_bearer(worker)).status_code == 403

    reactivated = client.post(
        f"/auth/users/{worker.id}/activate", headers=_bearer(admin)
    )
    assert reactivated.json()["is_active"] is True


def test_activate_unknown_user_is_404():
    admin = _seed(UserRole.ADMIN, "boss")

    response = TestClient(create_app()).post(
        f"/auth/users/{uuid4()}/activate", headers=_bearer(admin)
    )

    assert response.status_code == 404
