from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from app.menu.models import MenuItem, MenuItemCreate


class MenuItemStore(ABC):
    @abstractmethod
    def list_items(self) -> list[MenuItem]:
        """Return every item, newest ``created_at`` first."""
        raise NotImplementedError

    @abstractmethod
    def get_item(self, item_id: str) -> MenuItem | None:
        raise NotImplementedError

    @abstractmethod
    def insert_item(self, payload: MenuItemCreate, *, created_at: datetime) -> MenuItem:
        """Persist a new item; the store assigns its id."""
        raise NotImplementedError

    @abstractmethod
    def replace_item(self, item: MenuItem) -> MenuItem | None:
        """Overwrite the stored fields of ``item``; None if it no longer exists."""
        raise NotImplementedError

    @abstractmethod
    def delete_item(self, item_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def ping(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        return None
