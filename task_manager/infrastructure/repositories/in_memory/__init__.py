"""In-memory repositories (thread-safe, defensive copies)."""

from .task import InMemoryTaskRepository
from .user import InMemoryUserRepository

__all__ = ["InMemoryTaskRepository", "InMemoryUserRepository"]
