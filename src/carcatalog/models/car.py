"""Car models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from carcatalog.models._base import CatalogBaseModel, CatalogRequestModel


def _as_str_list(value: Any) -> Any:
    # Some list items carry tags as a single comma-joined string.
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class CarListItem(CatalogBaseModel):
    """Abbreviated car record as returned by ``GET /api/cars``."""

    id: int
    name: str = ""
    description: str = ""
    image_url: str = ""
    car_type: str = ""
    created_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        return _as_str_list(value)


class Car(CatalogBaseModel):
    """A full car record as returned by ``GET /api/cars/{id}``.

    Fields are mapped from the camelCase JSON body (``imageUrl``,
    ``carType``, ``createdAt``).
    """

    id: int
    name: str = ""
    description: str = ""
    image_url: str = ""
    car_type: str = ""
    """Transmission type, e.g. ``"automatic"`` or ``"manual"``."""
    tags: list[str] = Field(default_factory=list)
    specifications: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator("tags", "specifications", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> Any:
        return _as_str_list(value)


class NewCar(CatalogRequestModel):
    """Body of ``POST /api/cars``."""

    name: str
    description: str
    image_url: str
    car_type: str
    tags: list[str] = Field(default_factory=list)
    specifications: list[str] = Field(default_factory=list)


class CarUpdate(CatalogRequestModel):
    """Body of ``PATCH /api/cars/{id}``; only set fields are sent."""

    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    car_type: str | None = None
    tags: list[str] | None = None
    specifications: list[str] | None = None
