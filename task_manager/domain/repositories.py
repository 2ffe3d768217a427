"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for tasks and users (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing (fake repositories).

Collaborators
- domain.entities: Task
- domain.value_objects: TaskFilter, TaskSort, TaskStatus
- identity.users: User
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.

Notes
- Updates are optimistic: the caller passes the version it read, the store
  persists only if it still matches and bumps the version by exactly 1.
"""

from typing import Dict, List, Optional, Protocol
from uuid import UUID

from ..identity.users import User
from .entities import Task
from .value_objects import TaskFilter, TaskSort, TaskStatus


class TaskRepository(Protocol):
    """
    R: Interface for task persistence.

    Implementations must provide:
      - CRUD by id
      - Version-checked updates
      - Filtered, ordered, paginated listings and counts
    """

    def create_task(self, task: Task) -> Task:
        """R: Persist a new task and return the stored snapshot."""
        ...

    def get_task(self, task_id: UUID) -> Optional[Task]:
        """R: Fetch a task by id (archived ones included)."""
        ...

    def update_task(self, task: Task, *, expected_version: int) -> Optional[Task]:
        """
        R: Persist mutable fields if the stored version equals expected_version.

        Returns:
            The stored task with version == expected_version + 1, or None when
            the row is missing or the version is stale.
        """
        ...

    def delete_task(self, task_id: UUID) -> bool:
        """R: Physically remove a task. Returns False when it did not exist."""
        ...

    def list_tasks(
        self,
        filters: TaskFilter,
        *,
        sort: TaskSort = TaskSort.CREATED_AT_DESC,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Task]:
        """R: List tasks matching every criterion of filters."""
        ...

    def count_tasks(self, filters: TaskFilter) -> int:
        """R: Count tasks matching filters."""
        ...

    def count_tasks_by_status(self, filters: TaskFilter) -> Dict[TaskStatus, int]:
        """R: Count tasks matching filters grouped by status (missing -> absent)."""
        ...

    def ping(self) -> bool:
        """R: True when the backing store is reachable."""
        ...


class UserRepository(Protocol):
    """R: Interface for user account persistence."""

    def get_user(self, user_id: UUID) -> Optional[User]: ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        """R: Lookup by normalized (lower-case) email."""
        ...

    def get_user_by_username(self, username: str) -> Optional[User]: ...

    def create_user(self, user: User) -> User:
        """
        R: Persist a new user.

        Raises:
            ValueError: if email or username already exist.
        """
        ...

    def update_user(self, user: User, *, expected_version: int) -> Optional[User]:
        """R: Version-checked update, same semantics as TaskRepository.update_task."""
        ...

    def list_users(self, *, limit: int = 20, offset: int = 0) -> List[User]: ...

    def count_users(self) -> int: ...
