"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
  - Resolver el pool (inyectado en tests, global en runtime).
  - Ejecutar SQL parametrizado con manejo de errores consistente:
    log estructurado + DatabaseError.

Collaborators:
  - infrastructure.db.pool.get_pool
  - crosscutting.exceptions.DatabaseError
  - crosscutting.logger.logger
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional

import psycopg
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ...db.errors import DatabasePoolError


class PostgresRepositoryBase:
    def __init__(self, pool: Optional[ConnectionPool] = None):
        # Pool inyectable para tests; en runtime se usa el global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def _run(self, action, *, context_msg: str, extra: dict):
        try:
            with self._get_pool().connection() as conn:
                return action(conn)
        except (psycopg.Error, DatabasePoolError) as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        return self._run(
            lambda conn: conn.execute(query, tuple(params)).fetchone(),
            context_msg=context_msg,
            extra=extra,
        )

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        return self._run(
            lambda conn: conn.execute(query, tuple(params)).fetchall(),
            context_msg=context_msg,
            extra=extra,
        )

    def _execute(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> int:
        """Ejecuta un statement sin filas de retorno; devuelve rowcount."""
        return self._run(
            lambda conn: conn.execute(query, tuple(params)).rowcount,
            context_msg=context_msg,
            extra=extra,
        )

    def ping(self) -> bool:
        row = self._fetchone(
            query="SELECT 1",
            params=(),
            context_msg=f"{type(self).__name__}: ping failed",
            extra={},
        )
        return bool(row and row[0] == 1)
