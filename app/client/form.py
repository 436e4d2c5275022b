from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

import structlog

from app.client.api import MenuApiClient
from app.core.errors import MenuApiError
from app.menu.models import ALLERGEN_KEYS, MenuItem

logger = structlog.get_logger(__name__)

TEXT_FIELDS = ("name", "description", "price")

REQUIRED_FIELDS_MISSING = "Please fill in all required fields"
LOAD_FAILED = "Failed to load menu items"


def empty_draft() -> dict[str, Any]:
    return {
        "name": "",
        "description": "",
        "price": "",
        "allergens": {key: False for key in ALLERGEN_KEYS},
    }


def _format_price(price: float) -> str:
    text = repr(float(price))
    return text[:-2] if text.endswith(".0") else text


def _price_value(raw: Any) -> Any:
    # Unparseable input is sent as typed and rejected by the server
    try:
        return float(str(raw).strip())
    except ValueError:
        return raw


@dataclass
class MenuForm:
    """View state of the menu form: the listing plus one draft item.

    The form is either creating (``editing_id`` is None) or editing a listed
    item. Every successful mutation re-fetches the whole list.
    """

    client: MenuApiClient
    items: list[MenuItem] = field(default_factory=list)
    draft: dict[str, Any] = field(default_factory=empty_draft)
    editing_id: str | None = None
    message: str = ""
    error: str = ""
    loading: bool = True

    @property
    def mode(self) -> Literal["creating", "editing"]:
        return "creating" if self.editing_id is None else "editing"

    @property
    def status(self) -> str:
        return self.message or self.error

    def load(self) -> bool:
        try:
            self.items = self.client.list_items()
            return True
        except MenuApiError as exc:
            logger.warning("menu_form_load_failed", error=exc.message)
            self._fail(LOAD_FAILED)
            return False
        finally:
            self.loading = False

    def set_field(self, name: str, value: Any) -> None:
        if name not in TEXT_FIELDS:
            raise KeyError(name)
        self.draft[name] = value

    def toggle_allergen(self, key: str) -> None:
        if key not in ALLERGEN_KEYS:
            raise KeyError(key)
        allergens = self.draft["allergens"]
        allergens[key] = not allergens.get(key, False)

    def start_edit(self, item_id: str) -> None:
        item = next((item for item in self.items if item.id == item_id), None)
        if item is None:
            raise KeyError(item_id)
        self.draft = {
            "name": item.name,
            "description": item.description or "",
            "price": _format_price(item.price),
            "allergens": item.allergens.model_dump(),
        }
        self.editing_id = item_id

    def cancel_edit(self) -> None:
        self._reset_draft()

    def submit(self) -> bool:
        name = str(self.draft.get("name") or "")
        raw_price = self.draft.get("price")
        price = "" if raw_price is None else str(raw_price)
        if not name.strip() or not price.strip():
            self._notify(REQUIRED_FIELDS_MISSING)
            return False

        payload = {**self.draft, "price": _price_value(price)}
        editing_id = self.editing_id
        try:
            if editing_id is None:
                self.client.create_item(payload)
            else:
                self.client.update_item(editing_id, payload)
        except MenuApiError as exc:
            action = "add" if editing_id is None else "update"
            logger.warning("menu_form_submit_failed", action=action, error=exc.message)
            self._fail(f"Failed to {action} item")
            return False

        self._reset_draft()
        if self.load():
            self._notify(
                "Item added successfully" if editing_id is None else "Item updated successfully"
            )
        return True

    def delete(self, item_id: str) -> bool:
        try:
            self.client.delete_item(item_id)
        except MenuApiError as exc:
            logger.warning("menu_form_delete_failed", item_id=item_id, error=exc.message)
            self._fail("Failed to delete item")
            return False

        if self.editing_id == item_id:
            self._reset_draft()
        if self.load():
            self._notify("Item deleted successfully")
        return True

    def dismiss(self) -> None:
        self.message = ""
        self.error = ""

    def _reset_draft(self) -> None:
        self.draft = empty_draft()
        self.editing_id = None

    def _notify(self, text: str) -> None:
        self.message = text
        self.error = ""

    def _fail(self, text: str) -> None:
        self.error = text
        self.message = ""
