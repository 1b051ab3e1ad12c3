from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from docvault.config.settings import Settings


class Database:
    """Owns the connection pool; built once at startup and passed to repositories."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        conninfo = (
            f"host={settings.db_host} "
            f"port={settings.db_port} "
            f"dbname={settings.db_database} "
            f"user={settings.db_username} "
            f"password={settings.db_password}"
        )
        pool = ConnectionPool(
            conninfo,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            open=True,
        )
        return cls(pool)

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        """Yield a pooled connection. Caller manages commit/rollback."""
        with self._pool.connection() as conn:
            yield conn

    def close(self) -> None:
        self._pool.close()
