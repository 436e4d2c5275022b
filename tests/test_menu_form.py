"""
Tests for the menu form view state.

Verifies that:
- Editing copies the listed item into the draft and submit sends an update
- Submitting while idle sends a create
- Every successful mutation re-fetches the list and sets a status message
- Failures set an error message instead
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.client.api import MenuApiClient
from app.client.form import MenuForm, empty_draft
from app.core.errors import MenuApiError
from app.menu.models import ALLERGEN_KEYS, Allergens, MenuItem

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _item(item_id: str, name: str, price: float = 5.0, **allergens: bool) -> MenuItem:
    return MenuItem(
        id=item_id,
        name=name,
        description=f"{name} description",
        price=price,
        allergens=Allergens(**allergens),
        created_at=NOW,
        updated_at=NOW,
    )


class FakeMenuClient:
    def __init__(self, items: list[MenuItem] | None = None) -> None:
        self.items = list(items or [])
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise MenuApiError(f"{operation} failed", status_code=500)

    def list_items(self) -> list[MenuItem]:
        self.calls.append(("list", None))
        self._maybe_fail("list")
        return list(self.items)

    def create_item(self, payload: dict[str, Any]) -> MenuItem:
        self.calls.append(("create", payload))
        self._maybe_fail("create")
        item = _item(f"id-{len(self.items)}", payload["name"], payload["price"])
        self.items.insert(0, item)
        return item

    def update_item(self, item_id: str, payload: dict[str, Any]) -> MenuItem:
        self.calls.append(("update", (item_id, payload)))
        self._maybe_fail("update")
        return self.items[0]

    def delete_item(self, item_id: str) -> str:
        self.calls.append(("delete", item_id))
        self._maybe_fail("delete")
        self.items = [item for item in self.items if item.id != item_id]
        return "Menu item deleted"


@pytest.fixture()
def fake_client() -> FakeMenuClient:
    return FakeMenuClient([_item("a", "Soup", dairy=True), _item("b", "Salad")])


@pytest.fixture()
def form(fake_client: FakeMenuClient) -> MenuForm:
    menu_form = MenuForm(client=fake_client)
    assert menu_form.load() is True
    return menu_form


def test_load_populates_items(form: MenuForm) -> None:
    assert [item.id for item in form.items] == ["a", "b"]
    assert form.loading is False
    assert form.mode == "creating"


def test_load_failure_sets_error(fake_client: FakeMenuClient) -> None:
    fake_client.fail_on.add("list")
    menu_form = MenuForm(client=fake_client)

    assert menu_form.load() is False
    assert menu_form.error == "Failed to load menu items"
    assert menu_form.loading is False


def test_submit_requires_name_and_price(form: MenuForm, fake_client: FakeMenuClient) -> None:
    form.set_field("name", "   ")
    form.set_field("price", "4")

    assert form.submit() is False
    assert form.message == "Please fill in all required fields"
    assert not any(call[0] == "create" for call in fake_client.calls)


def test_submit_while_idle_creates_and_refetches(
    form: MenuForm, fake_client: FakeMenuClient
) -> None:
    form.set_field("name", "Noodles")
    form.set_field("price", "9.50")
    form.toggle_allergen("sesame")

    assert form.submit() is True

    kind, payload = fake_client.calls[-2]
    assert kind == "create"
    assert payload["price"] == 9.5
    assert payload["allergens"]["sesame"] is True
    assert fake_client.calls[-1][0] == "list"
    assert form.items[0].name == "Noodles"
    assert form.message == "Item added successfully"
    assert form.draft == empty_draft()


def test_start_edit_copies_item_and_submit_updates(
    form: MenuForm, fake_client: FakeMenuClient
) -> None:
    form.start_edit("a")

    assert form.mode == "editing"
    assert form.draft["name"] == "Soup"
    assert form.draft["price"] == "5"
    assert form.draft["allergens"]["dairy"] is True
    assert set(form.draft["allergens"]) == set(ALLERGEN_KEYS)

    form.set_field("price", "6")
    assert form.submit() is True

    kind, (item_id, payload) = fake_client.calls[-2]
    assert kind == "update"
    assert item_id == "a"
    assert payload["price"] == 6.0
    assert payload["name"] == "Soup"
    assert form.mode == "creating"
    assert form.message == "Item updated successfully"


def test_editing_name_keeps_exact_price(fake_client: FakeMenuClient) -> None:
    fake_client.items = [_item("a", "Soup", price=2.999)]
    menu_form = MenuForm(client=fake_client)
    menu_form.load()

    menu_form.start_edit("a")
    assert menu_form.draft["price"] == "2.999"

    menu_form.set_field("name", "Soup 2")
    assert menu_form.submit() is True

    kind, (_, payload) = fake_client.calls[-2]
    assert kind == "update"
    assert payload["name"] == "Soup 2"
    assert payload["price"] == 2.999


def test_failed_update_keeps_editing(form: MenuForm, fake_client: FakeMenuClient) -> None:
    fake_client.fail_on.add("update")
    form.start_edit("b")

    assert form.submit() is False
    assert form.mode == "editing"
    assert form.error == "Failed to update item"
    assert form.status == "Failed to update item"


def test_failed_create_sets_error(form: MenuForm, fake_client: FakeMenuClient) -> None:
    fake_client.fail_on.add("create")
    form.set_field("name", "Soup")
    form.set_field("price", "5")

    assert form.submit() is False
    assert form.error == "Failed to add item"
    assert form.message == ""


def test_delete_refetches_and_resets_edit_of_deleted_item(
    form: MenuForm, fake_client: FakeMenuClient
) -> None:
    form.start_edit("a")

    assert form.delete("a") is True

    assert [item.id for item in form.items] == ["b"]
    assert form.mode == "creating"
    assert form.message == "Item deleted successfully"


def test_delete_failure_sets_error(form: MenuForm, fake_client: FakeMenuClient) -> None:
    fake_client.fail_on.add("delete")

    assert form.delete("a") is False
    assert form.error == "Failed to delete item"


def test_dismiss_and_cancel(form: MenuForm) -> None:
    form.start_edit("b")
    form.cancel_edit()
    form.submit()
    assert form.status

    form.dismiss()

    assert form.status == ""
    assert form.mode == "creating"


def test_unknown_fields_rejected(form: MenuForm) -> None:
    with pytest.raises(KeyError):
        form.set_field("id", "x")
    with pytest.raises(KeyError):
        form.toggle_allergen("celery")
    with pytest.raises(KeyError):
        form.start_edit("missing")


class TestClientSession:
    """Adapts FastAPI's TestClient to the ``requests`` session calls the client makes."""

    __test__ = False

    def __init__(self, client: TestClient) -> None:
        self.client = client

    def request(self, method: str, url: str, json: Any = None, timeout: float = 0):
        return self.client.request(method, url, json=json)


def test_form_against_api(client: TestClient) -> None:
    api = MenuApiClient("http://testserver/api", session=TestClientSession(client))
    form = MenuForm(client=api)
    assert form.load() is True
    assert form.items == []

    form.set_field("name", "Soup")
    form.set_field("price", "5")
    form.toggle_allergen("dairy")
    assert form.submit() is True
    assert form.items[0].allergens.present() == ["dairy"]

    form.start_edit(form.items[0].id)
    form.set_field("price", "6")
    assert form.submit() is True
    assert form.items[0].price == 6.0
    assert form.items[0].name == "Soup"

    assert form.delete(form.items[0].id) is True
    assert form.items == []
    assert form.message == "Item deleted successfully"
