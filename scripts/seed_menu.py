from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import MenuItemValidationError
from app.core.logging import configure_logging
from app.main import build_store
from app.menu.models import MenuItem, MenuItemCreate
from app.menu.service import MenuItemService
from app.menu.validation import INVALID_PAYLOAD, error_fields, validate_menu_item

DEFAULT_MENU_PATH = Path("data/menu.json")

logger = structlog.get_logger(__name__)


def _load_menu(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of menu items")
    return data


def seed_menu(
    service: MenuItemService,
    entries: list[dict[str, Any]],
) -> tuple[list[MenuItem], list[tuple[int, MenuItemValidationError]]]:
    created: list[MenuItem] = []
    rejected: list[tuple[int, MenuItemValidationError]] = []
    for index, entry in enumerate(entries):
        error = validate_menu_item(entry)
        payload = None
        if error is None:
            try:
                payload = MenuItemCreate.model_validate(entry)
            except ValidationError as exc:
                error = MenuItemValidationError(INVALID_PAYLOAD, error_fields(exc.errors()))
        if error is not None:
            logger.warning(
                "seed_entry_rejected",
                index=index,
                reason=error.message,
                invalid_fields=error.invalid_fields,
            )
            rejected.append((index, error))
            continue
        created.append(service.create_item(payload))
    return created, rejected


def main(menu_path: Path = DEFAULT_MENU_PATH) -> int:
    configure_logging(
        settings.log_level, service=f"{settings.app_name}-seed", environment=settings.environment
    )
    store = build_store()
    try:
        service = MenuItemService(store)
        created, rejected = seed_menu(service, _load_menu(menu_path))
    finally:
        store.close()
    logger.info("seed_finished", created=len(created), rejected=len(rejected))
    return 1 if rejected else 0


if __name__ == "__main__":
    sys.exit(main(Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_MENU_PATH))
