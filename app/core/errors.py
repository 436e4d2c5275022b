from __future__ import annotations


class MenuItemValidationError(ValueError):
    def __init__(self, message: str, invalid_fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.invalid_fields = invalid_fields

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"message": self.message}
        if self.invalid_fields is not None:
            payload["invalidFields"] = self.invalid_fields
        return payload


class MenuItemNotFound(LookupError):
    def __init__(self, item_id: str) -> None:
        super().__init__(f"Menu item {item_id} not found")
        self.item_id = item_id


class StoreError(RuntimeError):
    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.operation = operation


class MenuApiError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
