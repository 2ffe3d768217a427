"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for task limits, pagination and auth

Collaborators:
  - api/main.py: reads settings for CORS, body limits and startup
  - container.py: selects repository adapters from app_env
  - identity/auth_users.py: JWT secret, TTL and cookie options
  - interfaces/api/http/schemas: text and hour limits

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Singleton via lru_cache
  - Production guard rejects weak JWT secrets and insecure cookies
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TEST_ENVIRONMENTS = frozenset({"test", "testing", "ci"})
_INSECURE_SECRETS = frozenset({"dev-secret", "changeme", "change-me", "password"})


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: development | test | production
        allowed_origins: Comma-separated CORS origins
        max_title_chars: Maximum task title length (default: 200)
        max_description_chars: Maximum task description length (default: 5000)
        max_estimated_hours: Upper bound for estimated hours (default: 1000)
        max_actual_hours: Upper bound for actual hours (default: 2000)
        default_page_size: Page size when the client sends none (default: 20)
        max_page_size: Hard cap for page size (default: 100)
        due_soon_hours: Threshold for the "due soon" flag (default: 24)
        max_body_bytes: Max request body size (default: 1MB)
        jwt_secret: Secret for signing JWT access tokens
        jwt_access_ttl_minutes: Access token TTL in minutes
        jwt_cookie_name: Cookie name for access token
        jwt_cookie_secure: Set Secure on auth cookies
        log_level: Root level for the application logger
        log_json: Emit structured JSON logs
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Task limits
    max_title_chars: int = 200
    max_description_chars: int = 5000
    max_estimated_hours: int = 1000
    max_actual_hours: int = 2000
    due_soon_hours: int = 24

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Security - Hardening
    max_body_bytes: int = 1024 * 1024  # 1MB

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 30
    jwt_cookie_name: str = "access_token"
    jwt_cookie_secure: bool = False

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Dev Tools (Backend Safe)
    dev_seed_admin: bool = False
    dev_seed_admin_email: str = "admin@example.com"
    dev_seed_admin_username: str = "admin"
    dev_seed_admin_password: str = "admin"
    dev_seed_admin_force_reset: bool = False

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def page_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("page sizes must be greater than 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_valid(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be a standard logging level name")
        return level

    def validate_page_params(self) -> None:
        """
        Cross-field validation: default page size cannot exceed the cap.
        Called explicitly after instantiation.
        """
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) must not exceed "
                f"max_page_size ({self.max_page_size})"
            )

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in _INSECURE_SECRETS:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        if not self.jwt_cookie_secure:
            raise ValueError("JWT_COOKIE_SECURE must be true in production")
        if self.dev_seed_admin:
            raise ValueError("DEV_SEED_ADMIN must be disabled in production")

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test_env(self) -> bool:
        return self.app_env.strip().lower() in _TEST_ENVIRONMENTS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    settings = Settings()
    settings.validate_page_params()
    return settings
