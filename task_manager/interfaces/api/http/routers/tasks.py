"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/tasks.py
===============================================================================

Class/Module:
    Task Router

Responsibilities:
    - Exponer endpoints HTTP de tareas (CRUD, listados, archivado, stats).
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir TaskError -> RFC7807.
    - Enforce de auth/roles en el borde (capa HTTP).

Collaborators:
    - application.usecases.tasks (Create/Get/List/Update/Delete/Archive/Stats)
    - identity.auth_users.require_actor
    - container (factories DI)
    - schemas.tasks (DTOs Pydantic)
    - crosscutting.pagination (cursor opaco)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
    - Error Mapping
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from .....application.usecases.tasks import (
    CLEARABLE_FIELDS,
    ArchiveTaskUseCase,
    CreateTaskInput,
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetTaskUseCase,
    ListMyAssignedTasksUseCase,
    ListMyCreatedTasksUseCase,
    ListTasksUseCase,
    TaskPageResult,
    TaskStatsUseCase,
    UpdateTaskInput,
    UpdateTaskUseCase,
)
from .....container import (
    get_archive_task_use_case,
    get_create_task_use_case,
    get_delete_task_use_case,
    get_get_task_use_case,
    get_list_my_assigned_tasks_use_case,
    get_list_my_created_tasks_use_case,
    get_list_tasks_use_case,
    get_task_stats_use_case,
    get_update_task_use_case,
)
from .....crosscutting.config import get_settings
from .....crosscutting.error_responses import validation_error
from .....crosscutting.pagination import InvalidCursorError, decode_cursor, paginate
from .....domain.entities import Task
from .....domain.task_policy import TaskActor
from .....domain.value_objects import TaskSort, TaskStatus
from .....identity.auth_users import require_actor
from .....identity.users import UserRole
from ..error_mapping import raise_task_error
from ..schemas.tasks import (
    CreateTaskReq,
    TaskPageRes,
    TaskRes,
    TaskStatsRes,
    TaskSummaryRes,
    UpdateTaskReq,
)

router = APIRouter(tags=["tasks"])

_settings = get_settings()

TASK_ROLES = (UserRole.USER, UserRole.MANAGER, UserRole.ADMIN)
require_task_actor = require_actor(*TASK_ROLES)


# =============================================================================
# Helpers internos (puros / sin IO)
# =============================================================================


def _to_task_res(task: Task) -> TaskRes:
    return TaskRes(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        category=task.category,
        due_date=task.due_date,
        assigned_to=task.assigned_to,
        created_by=task.created_by,
        estimated_hours=task.estimated_hours,
        actual_hours=task.actual_hours,
        is_archived=task.is_archived,
        completed_at=task.completed_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
        version=task.version,
        is_overdue=task.is_overdue(),
        is_due_soon=task.is_due_soon(_settings.due_soon_hours),
    )


def _to_task_summary(task: Task) -> TaskSummaryRes:
    return TaskSummaryRes(
        id=task.id,
        title=task.title,
        status=task.status,
        priority=task.priority,
        category=task.category,
        due_date=task.due_date,
        assigned_to=task.assigned_to,
        created_by=task.created_by,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def _offset_from(cursor: str | None) -> int:
    try:
        return decode_cursor(cursor)
    except InvalidCursorError as exc:
        raise validation_error(str(exc), [{"field": "cursor"}]) from exc


def _to_page(result: TaskPageResult) -> TaskPageRes:
    if result.error is not None:
        raise_task_error(result.error)
    page = paginate(
        [_to_task_summary(t) for t in result.tasks],
        limit=result.limit,
        offset=result.offset,
        total=result.total,
    )
    return TaskPageRes(items=page.items, page_info=page.page_info)


def _page_limit() -> int:
    return Query(_settings.default_page_size, ge=1, le=_settings.max_page_size)


# =============================================================================
# Endpoints: colección
# =============================================================================


@router.post("/tasks", response_model=TaskRes, status_code=201)
def create_task(
    req: CreateTaskReq,
    use_case: CreateTaskUseCase = Depends(get_create_task_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(
        CreateTaskInput(
            title=req.title,
            description=req.description,
            priority=req.priority,
            category=req.category,
            due_date=req.due_date,
            assigned_to=req.assigned_to,
            estimated_hours=req.estimated_hours,
        ),
        actor,
    )
    if result.error is not None:
        raise_task_error(result.error)
    return _to_task_res(result.task)


@router.get("/tasks", response_model=TaskPageRes)
def list_tasks(
    status: TaskStatus | None = Query(None),
    sort: TaskSort = Query(TaskSort.CREATED_AT_DESC),
    limit: int = _page_limit(),
    cursor: str | None = Query(None),
    use_case: ListTasksUseCase = Depends(get_list_tasks_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    """
    Lista las tareas visibles para el actor.

    - ADMIN: todas las no archivadas.
    - Resto: asignadas a él o creadas por él.
    """
    result = use_case.execute(
        actor, status=status, sort=sort, limit=limit, offset=_offset_from(cursor)
    )
    return _to_page(result)


@router.get("/tasks/my/assigned", response_model=TaskPageRes)
def list_my_assigned_tasks(
    sort: TaskSort = Query(TaskSort.DUE_DATE_ASC),
    include_archived: bool = Query(False),
    limit: int = _page_limit(),
    cursor: str | None = Query(None),
    use_case: ListMyAssignedTasksUseCase = Depends(
        get_list_my_assigned_tasks_use_case
    ),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(
        actor,
        sort=sort,
        limit=limit,
        offset=_offset_from(cursor),
        include_archived=include_archived,
    )
    return _to_page(result)


@router.get("/tasks/my/created", response_model=TaskPageRes)
def list_my_created_tasks(
    sort: TaskSort = Query(TaskSort.CREATED_AT_DESC),
    include_archived: bool = Query(False),
    limit: int = _page_limit(),
    cursor: str | None = Query(None),
    use_case: ListMyCreatedTasksUseCase = Depends(get_list_my_created_tasks_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(
        actor,
        sort=sort,
        limit=limit,
        offset=_offset_from(cursor),
        include_archived=include_archived,
    )
    return _to_page(result)


@router.get("/tasks/stats", response_model=TaskStatsRes)
def task_stats(
    use_case: TaskStatsUseCase = Depends(get_task_stats_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(actor)
    if result.error is not None:
        raise_task_error(result.error)
    return TaskStatsRes(counts=result.counts, total=result.total)


# =============================================================================
# Endpoints: recurso
# =============================================================================


@router.get("/tasks/{task_id}", response_model=TaskRes)
def get_task(
    task_id: UUID,
    use_case: GetTaskUseCase = Depends(get_get_task_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(task_id, actor)
    if result.error is not None:
        raise_task_error(result.error, task_id=task_id)
    return _to_task_res(result.task)


@router.put("/tasks/{task_id}", response_model=TaskRes)
def update_task(
    task_id: UUID,
    req: UpdateTaskReq,
    use_case: UpdateTaskUseCase = Depends(get_update_task_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    """
    Actualización parcial.

    Un null explícito en description/category/due_date limpia el campo.
    """
    sent = req.model_fields_set
    clear_fields = frozenset(
        name for name in CLEARABLE_FIELDS if name in sent and getattr(req, name) is None
    )

    result = use_case.execute(
        task_id,
        UpdateTaskInput(
            title=req.title,
            description=req.description,
            status=req.status,
            priority=req.priority,
            category=req.category,
            assigned_to=req.assigned_to,
            due_date=req.due_date,
            estimated_hours=req.estimated_hours,
            actual_hours=req.actual_hours,
            expected_version=req.expected_version,
            clear_fields=clear_fields,
        ),
        actor,
    )
    if result.error is not None:
        raise_task_error(result.error, task_id=task_id)
    return _to_task_res(result.task)


@router.delete("/tasks/{task_id}", status_code=204)
def delete_task(
    task_id: UUID,
    use_case: DeleteTaskUseCase = Depends(get_delete_task_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(task_id, actor)
    if result.error is not None:
        raise_task_error(result.error, task_id=task_id)
    return Response(status_code=204)


@router.post("/tasks/{task_id}/archive", response_model=TaskRes)
def archive_task(
    task_id: UUID,
    use_case: ArchiveTaskUseCase = Depends(get_archive_task_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(task_id, actor, archived=True)
    if result.error is not None:
        raise_task_error(result.error, task_id=task_id)
    return _to_task_res(result.task)


@router.post("/tasks/{task_id}/unarchive", response_model=TaskRes)
def unarchive_task(
    task_id: UUID,
    use_case: ArchiveTaskUseCase = Depends(get_archive_task_use_case),
    actor: TaskActor = Depends(require_task_actor),
):
    result = use_case.execute(task_id, actor, archived=False)
    if result.error is not None:
        raise_task_error(result.error, task_id=task_id)
    return _to_task_res(result.task)
