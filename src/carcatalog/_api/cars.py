"""Car endpoints.

Endpoints:
  - GET    /api/cars            (list, filtered and sorted)
  - GET    /api/cars/{id}       (detail)
  - GET    /api/cars/types      (distinct car types)
  - GET    /api/cars/tags       (distinct tags)
  - POST   /api/cars            (create)
  - PATCH  /api/cars/{id}       (partial update)
  - DELETE /api/cars/{id}       (delete)
  - POST   /api/cars/reset      (restore seed data)
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from carcatalog._transport import Transport
from carcatalog.exceptions import CatalogClientFailure
from carcatalog.models.car import Car, CarListItem, CarUpdate, NewCar
from carcatalog.models.query import QueryState

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

CARS_PATH = "/api/cars"
TYPES_PATH = f"{CARS_PATH}/types"
TAGS_PATH = f"{CARS_PATH}/tags"
RESET_PATH = f"{CARS_PATH}/reset"


def _car_path(car_id: int) -> str:
    return f"{CARS_PATH}/{int(car_id)}"


def _expect_list(decoded: Any, endpoint: str) -> list[Any]:
    if decoded is None:
        return []
    if not isinstance(decoded, list):
        raise CatalogClientFailure(
            f"{endpoint} returned {type(decoded).__name__}, expected a list",
            endpoint=endpoint,
        )
    return decoded


def _expect_object(decoded: Any, endpoint: str) -> dict[str, Any]:
    if not isinstance(decoded, dict):
        raise CatalogClientFailure(
            f"{endpoint} returned {type(decoded).__name__}, expected an object",
            endpoint=endpoint,
        )
    return decoded


def _parse(model: type[M], data: Any, endpoint: str) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise CatalogClientFailure(
            f"Unexpected {model.__name__} payload from {endpoint}: {exc.error_count()} error(s)",
            endpoint=endpoint,
        ) from exc


def _distinct_strings(items: list[Any]) -> list[str]:
    values: list[str] = []
    for item in items:
        if item is None:
            continue
        value = str(item)
        if value not in values:
            values.append(value)
    return values


async def list_cars(transport: Transport, query: QueryState) -> list[CarListItem]:
    """Fetch the car list in server order for *query*."""
    decoded = await transport.request("GET", CARS_PATH, params=query.to_params())
    items = _expect_list(decoded, CARS_PATH)
    return [_parse(CarListItem, item, CARS_PATH) for item in items]


async def get_car(transport: Transport, car_id: int) -> Car:
    endpoint = _car_path(car_id)
    decoded = await transport.request("GET", endpoint)
    return _parse(Car, _expect_object(decoded, endpoint), endpoint)


async def get_car_types(transport: Transport) -> list[str]:
    decoded = await transport.request("GET", TYPES_PATH)
    return _distinct_strings(_expect_list(decoded, TYPES_PATH))


async def get_car_tags(transport: Transport) -> list[str]:
    decoded = await transport.request("GET", TAGS_PATH)
    return _distinct_strings(_expect_list(decoded, TAGS_PATH))


async def create_car(transport: Transport, car: NewCar) -> Car:
    """Create a car; the server assigns ``id`` and ``createdAt``."""
    decoded = await transport.request("POST", CARS_PATH, json_body=car.to_payload())
    created = _parse(Car, _expect_object(decoded, CARS_PATH), CARS_PATH)
    _logger.debug("Created car id=%s name=%s", created.id, created.name)
    return created


async def update_car(transport: Transport, car_id: int, update: CarUpdate) -> Car:
    endpoint = _car_path(car_id)
    decoded = await transport.request("PATCH", endpoint, json_body=update.to_payload())
    return _parse(Car, _expect_object(decoded, endpoint), endpoint)


async def delete_car(transport: Transport, car_id: int) -> None:
    await transport.request("DELETE", _car_path(car_id))
    _logger.debug("Deleted car id=%s", car_id)


async def reset_database(transport: Transport) -> None:
    await transport.request("POST", RESET_PATH)
