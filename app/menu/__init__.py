from app.menu.models import (
    ALLERGEN_KEYS,
    Allergens,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
)
from app.menu.service import MenuItemService
from app.menu.store import MenuItemStore
from app.menu.validation import validate_menu_item

__all__ = [
    "ALLERGEN_KEYS",
    "Allergens",
    "MenuItem",
    "MenuItemCreate",
    "MenuItemService",
    "MenuItemStore",
    "MenuItemUpdate",
    "validate_menu_item",
]
