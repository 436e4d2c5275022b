from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request

from app.menu.models import MenuItem, MenuItemCreate, MenuItemUpdate
from app.menu.service import MenuItemService
from app.menu.validation import validate_menu_item

router = APIRouter(prefix="/api/menu-items", tags=["menu-items"])

JsonBody = Annotated[Any, Body()]


def get_menu_service(request: Request) -> MenuItemService:
    return request.app.state.menu_service


MenuService = Annotated[MenuItemService, Depends(get_menu_service)]


@router.get("", response_model=list[MenuItem])
def list_menu_items(service: MenuService) -> list[MenuItem]:
    return service.list_items()


@router.get("/{item_id}", response_model=MenuItem)
def get_menu_item(item_id: str, service: MenuService) -> MenuItem:
    return service.get_item(item_id)


@router.post("", response_model=MenuItem, status_code=201)
def create_menu_item(payload: JsonBody, service: MenuService) -> MenuItem:
    error = validate_menu_item(payload)
    if error is not None:
        raise error
    return service.create_item(MenuItemCreate.model_validate(payload))


@router.put("/{item_id}", response_model=MenuItem)
def update_menu_item(item_id: str, payload: JsonBody, service: MenuService) -> MenuItem:
    error = validate_menu_item(payload, partial=True)
    if error is not None:
        raise error
    return service.update_item(item_id, MenuItemUpdate.model_validate(payload))


@router.delete("/{item_id}")
def delete_menu_item(item_id: str, service: MenuService) -> dict[str, str]:
    service.delete_item(item_id)
    return {"message": "Menu item deleted"}
