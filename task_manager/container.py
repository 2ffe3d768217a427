"""
===============================================================================
TARJETA CRC — task_manager/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios + casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons de repositorios con lru_cache.
  - Elegir adaptadores según Settings (in-memory en test, Postgres en runtime).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories (puertos)
  - infrastructure.repositories (implementaciones)
  - application.usecases (casos de uso)

Notas:
  - Sin lógica de negocio.
  - Sin dependencia de FastAPI (solo factories).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.tasks import (
    ArchiveTaskUseCase,
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetTaskUseCase,
    ListMyAssignedTasksUseCase,
    ListMyCreatedTasksUseCase,
    ListTasksUseCase,
    TaskStatsUseCase,
    UpdateTaskUseCase,
)
from .application.usecases.users import (
    CreateUserUseCase,
    ListUsersUseCase,
    RecordLoginUseCase,
    SetUserActiveUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import TaskRepository, UserRepository
from .infrastructure.repositories.in_memory import (
    InMemoryTaskRepository,
    InMemoryUserRepository,
)
from .infrastructure.repositories.postgres import (
    PostgresTaskRepository,
    PostgresUserRepository,
)

# =============================================================================
# Helpers internos
# =============================================================================


def uses_in_memory_storage() -> bool:
    """app_env ∈ {"test", "testing", "ci"} => adaptadores in-memory."""
    return get_settings().is_test_env()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_task_repository() -> TaskRepository:
    if uses_in_memory_storage():
        return InMemoryTaskRepository()
    return PostgresTaskRepository()


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    if uses_in_memory_storage():
        return InMemoryUserRepository()
    return PostgresUserRepository()


# =============================================================================
# Casos de uso: tareas
# =============================================================================


def get_create_task_use_case() -> CreateTaskUseCase:
    return CreateTaskUseCase(get_task_repository())


def get_get_task_use_case() -> GetTaskUseCase:
    return GetTaskUseCase(get_task_repository())


def _page_limits() -> dict[str, int]:
    settings = get_settings()
    return {
        "default_limit": settings.default_page_size,
        "max_limit": settings.max_page_size,
    }


def get_list_tasks_use_case() -> ListTasksUseCase:
    return ListTasksUseCase(get_task_repository(), **_page_limits())


def get_update_task_use_case() -> UpdateTaskUseCase:
    return UpdateTaskUseCase(get_task_repository())


def get_delete_task_use_case() -> DeleteTaskUseCase:
    return DeleteTaskUseCase(get_task_repository())


def get_archive_task_use_case() -> ArchiveTaskUseCase:
    return ArchiveTaskUseCase(get_task_repository())


def get_list_my_assigned_tasks_use_case() -> ListMyAssignedTasksUseCase:
    return ListMyAssignedTasksUseCase(get_task_repository(), **_page_limits())


def get_list_my_created_tasks_use_case() -> ListMyCreatedTasksUseCase:
    return ListMyCreatedTasksUseCase(get_task_repository(), **_page_limits())


def get_task_stats_use_case() -> TaskStatsUseCase:
    return TaskStatsUseCase(get_task_repository())


# =============================================================================
# Casos de uso: usuarios
# =============================================================================


def get_create_user_use_case() -> CreateUserUseCase:
    # Import diferido: identity.auth_users depende de este módulo.
    from .identity.auth_users import hash_password

    return CreateUserUseCase(get_user_repository(), password_hasher=hash_password)


def get_set_user_active_use_case() -> SetUserActiveUseCase:
    return SetUserActiveUseCase(get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(get_user_repository(), **_page_limits())


def get_record_login_use_case() -> RecordLoginUseCase:
    return RecordLoginUseCase(get_user_repository())
