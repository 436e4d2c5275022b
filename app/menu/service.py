from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from app.core.errors import MenuItemNotFound
from app.menu.models import MenuItem, MenuItemCreate, MenuItemUpdate
from app.menu.store import MenuItemStore

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = ("name", "description", "price", "allergens")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_falsy(value: Any) -> bool:
    # Allergen records count as objects, which are always truthy
    if value is None or value == "":
        return True
    return isinstance(value, (int, float)) and value == 0


class MenuItemService:
    def __init__(
        self,
        store: MenuItemStore,
        *,
        clock: Callable[[], datetime] = utcnow,
        skip_falsy_updates: bool = False,
    ) -> None:
        self.store = store
        self._clock = clock
        self._skip_falsy_updates = skip_falsy_updates

    def list_items(self) -> list[MenuItem]:
        return self.store.list_items()

    def get_item(self, item_id: str) -> MenuItem:
        item = self.store.get_item(item_id)
        if item is None:
            raise MenuItemNotFound(item_id)
        return item

    def create_item(self, payload: MenuItemCreate) -> MenuItem:
        item = self.store.insert_item(payload, created_at=self._clock())
        logger.info("menu_item_created", item_id=item.id, name=item.name)
        return item

    def update_item(self, item_id: str, payload: MenuItemUpdate) -> MenuItem:
        current = self.get_item(item_id)
        changes = self._resolve_changes(payload)
        changes["updated_at"] = self._clock()

        updated = self.store.replace_item(current.model_copy(update=changes))
        if updated is None:
            raise MenuItemNotFound(item_id)
        logger.info(
            "menu_item_updated",
            item_id=item_id,
            fields=sorted(key for key in changes if key != "updated_at"),
        )
        return updated

    def delete_item(self, item_id: str) -> None:
        if not self.store.delete_item(item_id):
            raise MenuItemNotFound(item_id)
        logger.info("menu_item_deleted", item_id=item_id)

    def _resolve_changes(self, payload: MenuItemUpdate) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        for field in UPDATABLE_FIELDS:
            if field not in payload.model_fields_set:
                continue
            value = getattr(payload, field)
            if self._skip_falsy_updates:
                if _is_falsy(value):
                    continue
            elif value is None and field != "description":
                continue
            changes[field] = value
        return changes
