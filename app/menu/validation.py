"""Request payload checks for menu items.

The checks run on the raw JSON body before it is turned into models, so a
rejection can name the offending allergen keys instead of a generic
deserialization error.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from app.core.errors import MenuItemValidationError
from app.menu.models import ALLERGEN_KEYS

NAME_REQUIRED = "Name is required"
PRICE_REQUIRED = "Valid price is required"
INVALID_ALLERGENS = "Invalid allergens format"
INVALID_BODY = "Request body must be a JSON object"
INVALID_PAYLOAD = "Invalid menu item payload"


def parse_price(value: Any) -> float | None:
    """Return the price as a float, or None if it is not a valid price."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def invalid_allergen_fields(allergens: Any) -> list[str]:
    if not isinstance(allergens, Mapping):
        return ["allergens"]
    return [
        key
        for key, value in allergens.items()
        if key not in ALLERGEN_KEYS or not isinstance(value, bool)
    ]


def error_fields(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    """Field paths named by pydantic or FastAPI error dicts, without the ``body`` prefix."""
    fields: list[str] = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        if field not in fields:
            fields.append(field)
    return fields


def validate_menu_item(
    payload: Any, *, partial: bool = False
) -> MenuItemValidationError | None:
    """Check a create (or, with ``partial``, update) payload.

    Returns the rejection instead of raising it. Name is checked before
    price; allergens only when present and not null.
    """
    if not isinstance(payload, Mapping):
        return MenuItemValidationError(INVALID_BODY)

    if not partial or "name" in payload:
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            return MenuItemValidationError(NAME_REQUIRED)

    if not partial or "price" in payload:
        if parse_price(payload.get("price")) is None:
            return MenuItemValidationError(PRICE_REQUIRED)

    allergens = payload.get("allergens")
    if allergens is not None:
        invalid = invalid_allergen_fields(allergens)
        if invalid:
            return MenuItemValidationError(INVALID_ALLERGENS, invalid)

    return None
