"""PostgreSQL repositories (psycopg + raw SQL)."""

from .task import PostgresTaskRepository
from .user import PostgresUserRepository

__all__ = ["PostgresTaskRepository", "PostgresUserRepository"]
