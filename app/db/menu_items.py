from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

import psycopg
from psycopg.types.json import Json
from psycopg_pool import ConnectionPool

from app.core.errors import StoreError
from app.db.pool import close_pool
from app.menu.models import Allergens, MenuItem, MenuItemCreate
from app.menu.store import MenuItemStore

_COLUMNS = "id, name, description, price, allergens, created_at, updated_at"


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except psycopg.Error as exc:
        raise StoreError(operation, str(exc)) from exc


class PostgresMenuItemStore(MenuItemStore):
    """Menu items as rows in Postgres with the allergen record kept as JSONB."""

    def __init__(self, pool: ConnectionPool, *, auto_create: bool = True) -> None:
        self.pool = pool
        if auto_create:
            self.ensure_tables()

    def list_items(self) -> list[MenuItem]:
        query = f"""
            SELECT {_COLUMNS}
            FROM menu_items
            ORDER BY created_at DESC, seq DESC
        """
        with _store_errors("list"):
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query)
                    rows = cur.fetchall()
        return [self._row_to_item(row) for row in rows]

    def get_item(self, item_id: str) -> MenuItem | None:
        query = f"SELECT {_COLUMNS} FROM menu_items WHERE id = %(id)s"
        with _store_errors("get"):
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, {"id": item_id})
                    row = cur.fetchone()
        return self._row_to_item(row) if row else None

    def insert_item(self, payload: MenuItemCreate, *, created_at: datetime) -> MenuItem:
        query = f"""
            INSERT INTO menu_items (id, name, description, price, allergens, created_at, updated_at)
            VALUES (%(id)s, %(name)s, %(description)s, %(price)s, %(allergens)s,
                    %(created_at)s, %(created_at)s)
            RETURNING {_COLUMNS}
        """
        params = {
            "id": uuid.uuid4().hex,
            "name": payload.name,
            "description": payload.description,
            "price": payload.price,
            "allergens": Json(payload.allergens.model_dump()),
            "created_at": created_at,
        }
        with _store_errors("insert"):
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    row = cur.fetchone()
        return self._row_to_item(row)

    def replace_item(self, item: MenuItem) -> MenuItem | None:
        query = f"""
            UPDATE menu_items
            SET name = %(name)s,
                description = %(description)s,
                price = %(price)s,
                allergens = %(allergens)s,
                updated_at = %(updated_at)s
            WHERE id = %(id)s
            RETURNING {_COLUMNS}
        """
        params = {
            "id": item.id,
            "name": item.name,
            "description": item.description,
            "price": item.price,
            "allergens": Json(item.allergens.model_dump()),
            "updated_at": item.updated_at,
        }
        with _store_errors("update"):
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    row = cur.fetchone()
        return self._row_to_item(row) if row else None

    def delete_item(self, item_id: str) -> bool:
        with _store_errors("delete"):
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM menu_items WHERE id = %(id)s", {"id": item_id})
                    deleted = cur.rowcount
        return deleted > 0

    def ping(self) -> None:
        with _store_errors("ping"):
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
                    cur.fetchone()

    def close(self) -> None:
        close_pool(self.pool)

    def ensure_tables(self) -> None:
        with _store_errors("ensure_tables"):
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        CREATE TABLE IF NOT EXISTS menu_items (
                            id TEXT PRIMARY KEY,
                            seq BIGSERIAL,
                            name TEXT NOT NULL,
                            description TEXT,
                            price DOUBLE PRECISION NOT NULL CHECK (price >= 0),
                            allergens JSONB NOT NULL DEFAULT '{}'::jsonb,
                            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                        )
                        """
                    )
                    cur.execute(
                        """
                        CREATE INDEX IF NOT EXISTS menu_items_created_at_idx
                        ON menu_items (created_at DESC, seq DESC)
                        """
                    )

    @staticmethod
    def _row_to_item(row: dict[str, Any]) -> MenuItem:
        return MenuItem(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=row["price"],
            allergens=Allergens.model_validate(row["allergens"] or {}),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
