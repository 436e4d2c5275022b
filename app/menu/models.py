from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

ALLERGEN_KEYS: tuple[str, ...] = (
    "gluten",
    "dairy",
    "nuts",
    "eggs",
    "soy",
    "shellfish",
    "fish",
    "sesame",
)


class Allergens(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gluten: StrictBool = False
    dairy: StrictBool = False
    nuts: StrictBool = False
    eggs: StrictBool = False
    soy: StrictBool = False
    shellfish: StrictBool = False
    fish: StrictBool = False
    sesame: StrictBool = False

    def present(self) -> list[str]:
        return [key for key in ALLERGEN_KEYS if getattr(self, key)]


def _clean_name(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Name is required")
    return cleaned


def _reject_bool_price(value: object) -> object:
    if isinstance(value, bool):
        raise ValueError("Valid price is required")
    if isinstance(value, str):
        return value.strip()
    return value


class MenuItemCreate(BaseModel):
    name: str
    description: str | None = None
    price: float = Field(..., ge=0, allow_inf_nan=False)
    allergens: Allergens = Field(default_factory=Allergens)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, value: object) -> object:
        return _reject_bool_price(value)

    @field_validator("allergens", mode="before")
    @classmethod
    def default_allergens(cls, value: object) -> object:
        return Allergens() if value is None else value


class MenuItemUpdate(BaseModel):
    """Partial update; ``model_fields_set`` tells which fields the caller sent."""

    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    allergens: Allergens | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _clean_name(value)

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, value: object) -> object:
        return _reject_bool_price(value)


class MenuItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    price: float
    allergens: Allergens = Field(default_factory=Allergens)
    created_at: datetime
    updated_at: datetime
