from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import psycopg
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.db.memory import InMemoryMenuItemStore
from app.main import create_app


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def memory_store() -> InMemoryMenuItemStore:
    return InMemoryMenuItemStore()


@pytest.fixture()
def client(memory_store: InMemoryMenuItemStore) -> Iterator[TestClient]:
    app = create_app(store_factory=lambda: memory_store)
    with TestClient(app) as test_client:
        yield test_client


def _normalize_dsn(dsn: str) -> str:
    return dsn.replace("postgresql+psycopg", "postgresql")


@pytest.fixture(scope="session")
def postgres_dsn() -> str:
    dsn = _normalize_dsn(os.getenv("POSTGRES_DSN", settings.postgres_dsn))
    try:
        with psycopg.connect(dsn, connect_timeout=2):
            pass
    except psycopg.OperationalError as exc:
        pytest.skip(f"Postgres not available: {exc}")
    return dsn


@pytest.fixture()
def clean_db(postgres_dsn: str) -> Iterator[psycopg.Connection]:
    conn = psycopg.connect(postgres_dsn)

    def _truncate() -> None:
        with conn.cursor() as cur:
            cur.execute("SELECT to_regclass('menu_items')")
            (exists,) = cur.fetchone()
            if exists:
                cur.execute("TRUNCATE TABLE menu_items RESTART IDENTITY")
        conn.commit()

    _truncate()
    yield conn
    _truncate()
    conn.close()
