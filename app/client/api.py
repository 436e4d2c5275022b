from __future__ import annotations

from typing import Any

import requests
import structlog

from app.core.config import settings
from app.core.errors import MenuApiError
from app.menu.models import MenuItem

logger = structlog.get_logger(__name__)


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Menu API error {response.status_code}"


class MenuApiClient:
    """Thin ``requests`` wrapper around the ``/api/menu-items`` endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.api_timeout

    def list_items(self) -> list[MenuItem]:
        data = self._request("GET", "/menu-items")
        return [MenuItem.model_validate(item) for item in data]

    def get_item(self, item_id: str) -> MenuItem:
        return MenuItem.model_validate(self._request("GET", f"/menu-items/{item_id}"))

    def create_item(self, payload: dict[str, Any]) -> MenuItem:
        return MenuItem.model_validate(self._request("POST", "/menu-items", json=payload))

    def update_item(self, item_id: str, payload: dict[str, Any]) -> MenuItem:
        data = self._request("PUT", f"/menu-items/{item_id}", json=payload)
        return MenuItem.model_validate(data)

    def delete_item(self, item_id: str) -> str:
        data = self._request("DELETE", f"/menu-items/{item_id}")
        return str(data.get("message", ""))

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("menu_api_unreachable", method=method, url=url, error=str(exc))
            raise MenuApiError(str(exc)) from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                "menu_api_request_failed",
                method=method,
                url=url,
                status_code=response.status_code,
                error=message,
            )
            raise MenuApiError(message, status_code=response.status_code)
        return response.json()
