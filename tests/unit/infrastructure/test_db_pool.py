"""
Name: Database Pool Tests

Responsibilities:
  - Test pool lifecycle (init, get, close, reset)
  - Offline unit tests (no real DB)

Notes:
  - Uses mocking for ConnectionPool
  - Tests pool singleton behavior
"""

from unittest.mock import MagicMock, patch

import pytest


@pytest.mark.unit
class TestPoolLifecycle:
    """Test pool initialization and cleanup."""

    def test_init_pool_creates_pool(self):
        """init_pool should create a ConnectionPool."""
        from task_manager.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("task_manager.infrastructure.db.pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            result = init_pool("postgresql://test", min_size=2, max_size=10)

            MockPool.assert_called_once()
            kwargs = MockPool.call_args.kwargs
            assert kwargs["conninfo"] == "postgresql://test"
            assert kwargs["min_size"] == 2
            assert kwargs["max_size"] == 10
            assert result == mock_pool

        reset_pool()

    def test_init_pool_twice_raises_error(self):
        """init_pool called twice should raise RuntimeError."""
        from task_manager.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("task_manager.infrastructure.db.pool.ConnectionPool") as MockPool:
            MockPool.return_value = MagicMock()

            init_pool("postgresql://test", min_size=2, max_size=10)

            with pytest.raises(RuntimeError, match="already initialized"):
                init_pool("postgresql://test", min_size=2, max_size=10)

        reset_pool()

    def test_get_pool_without_init_raises_error(self):
        """get_pool before init_pool should raise RuntimeError."""
        from task_manager.infrastructure.db.pool import get_pool, reset_pool

        reset_pool()

        with pytest.raises(RuntimeError, match="not initialized"):
            get_pool()

    def test_close_pool_clears_singleton(self):
        """close_pool should clear the singleton."""
        from task_manager.infrastructure.db.pool import (
            close_pool,
            get_pool,
            init_pool,
            reset_pool,
        )

        reset_pool()

        with patch("task_manager.infrastructure.db.pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            init_pool("postgresql://test", min_size=2, max_size=10)
            close_pool()

            mock_pool.close.assert_called_once()

            with pytest.raises(RuntimeError, match="not initialized"):
                get_pool()

        reset_pool()

    def test_close_pool_is_idempotent(self):
        from task_manager.infrastructure.db.pool import close_pool, reset_pool

        reset_pool()
        close_pool()
        close_pool()


@pytest.mark.unit
class TestConnectionConfigure:
    def test_statement_timeout_is_applied(self):
        from task_manager.infrastructure.db.pool import _configure_connection

        conn = MagicMock()
        _configure_connection(conn, statement_timeout_ms=1500)

        conn.execute.assert_called_once_with("SET statement_timeout = 1500")
        conn.commit.assert_called_once()

    def test_zero_timeout_disables_guardrail(self):
        from task_manager.infrastructure.db.pool import _configure_connection

        conn = MagicMock()
        _configure_connection(conn, statement_timeout_ms=0)

        conn.execute.assert_not_called()
