from __future__ import annotations

import itertools
import threading
import uuid
from datetime import datetime

from app.menu.models import MenuItem, MenuItemCreate
from app.menu.store import MenuItemStore


class InMemoryMenuItemStore(MenuItemStore):
    """Process-local store for running without Postgres."""

    def __init__(self) -> None:
        self._items: dict[str, MenuItem] = {}
        self._order: dict[str, int] = {}
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def list_items(self) -> list[MenuItem]:
        with self._lock:
            items = list(self._items.values())
            order = dict(self._order)
        items.sort(key=lambda item: (item.created_at, order[item.id]), reverse=True)
        return [item.model_copy(deep=True) for item in items]

    def get_item(self, item_id: str) -> MenuItem | None:
        with self._lock:
            item = self._items.get(item_id)
        return item.model_copy(deep=True) if item else None

    def insert_item(self, payload: MenuItemCreate, *, created_at: datetime) -> MenuItem:
        item = MenuItem(
            id=uuid.uuid4().hex,
            name=payload.name,
            description=payload.description,
            price=payload.price,
            allergens=payload.allergens.model_copy(),
            created_at=created_at,
            updated_at=created_at,
        )
        with self._lock:
            self._items[item.id] = item
            self._order[item.id] = next(self._counter)
        return item.model_copy(deep=True)

    def replace_item(self, item: MenuItem) -> MenuItem | None:
        with self._lock:
            current = self._items.get(item.id)
            if current is None:
                return None
            stored = item.model_copy(update={"created_at": current.created_at}, deep=True)
            self._items[item.id] = stored
        return stored.model_copy(deep=True)

    def delete_item(self, item_id: str) -> bool:
        with self._lock:
            self._order.pop(item_id, None)
            return self._items.pop(item_id, None) is not None

    def ping(self) -> None:
        return None
