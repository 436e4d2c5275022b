from __future__ import annotations

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from app.core.config import settings


def create_pool(dsn: str | None = None, *, max_size: int | None = None) -> ConnectionPool:
    if max_size is None:
        max_size = settings.postgres_pool_size + settings.postgres_pool_max_overflow
    return ConnectionPool(
        conninfo=dsn or settings.postgres_dsn,
        min_size=1,
        max_size=max_size,
        kwargs={"row_factory": dict_row},
        check=ConnectionPool.check_connection,
        timeout=settings.postgres_pool_timeout,
        open=True,
    )


def close_pool(pool: ConnectionPool | None) -> None:
    if pool is not None and not pool.closed:
        pool.close()
