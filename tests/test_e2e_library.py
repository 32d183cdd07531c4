from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from carcatalog.client import CatalogClient
from carcatalog.config import CatalogConfig
from carcatalog.controller import Notification, QuerySessionController, View
from carcatalog.exceptions import CatalogClientFailure, CatalogNotFoundError, CatalogServerRejection
from carcatalog.models.car import CarUpdate
from carcatalog.models.query import QueryState, SortBy, SortOrder
from carcatalog.state.result import FetchStatus

pytestmark = pytest.mark.e2e


def _seed_cars() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "name": "Golf",
            "description": "Compact hatchback",
            "imageUrl": "https://img.example.com/golf.png",
            "carType": "manual",
            "tags": ["compact", "city"],
            "specifications": ["1.5 TSI"],
            "createdAt": "2025-01-03T08:00:00Z",
        },
        {
            "id": 2,
            "name": "Polo",
            "description": "Small hatchback",
            "imageUrl": "https://img.example.com/polo.png",
            "carType": "automatic",
            "tags": "city",
            "specifications": None,
            "createdAt": "2025-01-01T08:00:00Z",
        },
        {
            "id": 3,
            "name": "Tiguan",
            "description": "Family SUV",
            "imageUrl": "https://img.example.com/tiguan.png",
            "carType": "automatic",
            "tags": ["family", "suv"],
            "specifications": [],
            "createdAt": "2025-01-02T08:00:00Z",
        },
    ]


def _tag_list(car: dict[str, Any]) -> list[str]:
    tags = car.get("tags") or []
    if isinstance(tags, str):
        return [tags]
    return list(tags)


@dataclass
class FakeCarBackend:
    cars: list[dict[str, Any]] = field(default_factory=_seed_cars)
    calls: list[tuple[str, str, dict[str, str]]] = field(default_factory=list)
    next_id: int = 10
    reject_list_with: str | None = None

    def _rejection(self, path: str, status: int, message: str | None) -> CatalogServerRejection:
        error_cls = CatalogNotFoundError if status == 404 else CatalogServerRejection
        return error_cls(f"HTTP {status}", status_code=status, endpoint=path, server_message=message)

    def _find(self, path: str, car_id: int) -> dict[str, Any]:
        for car in self.cars:
            if car["id"] == car_id:
                return car
        raise self._rejection(path, 404, "Car not found")

    def _list(self, params: Mapping[str, str]) -> list[dict[str, Any]]:
        if self.reject_list_with is not None:
            raise self._rejection("/api/cars", 400, self.reject_list_with)
        matched = list(self.cars)
        if search := params.get("search"):
            matched = [
                car
                for car in matched
                if search.lower() in car["name"].lower() or search.lower() in car["description"].lower()
            ]
        if car_type := params.get("carType"):
            matched = [car for car in matched if car["carType"] == car_type]
        if tags := params.get("tags"):
            wanted = tags.split(",")
            matched = [car for car in matched if all(tag in _tag_list(car) for tag in wanted)]
        key = params.get("sortBy", "name")
        matched.sort(key=lambda car: car[key], reverse=params.get("sortOrder") == "DESC")
        return [{k: v for k, v in car.items() if k != "specifications"} for car in matched]

    async def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        params = dict(params or {})
        self.calls.append((method, path, params))

        if (method, path) == ("GET", "/api/cars"):
            return self._list(params)
        if (method, path) == ("GET", "/api/cars/types"):
            return sorted({car["carType"] for car in self.cars})
        if (method, path) == ("GET", "/api/cars/tags"):
            return sorted({tag for car in self.cars for tag in _tag_list(car)})
        if (method, path) == ("POST", "/api/cars"):
            car = dict(json_body)
            car["id"] = self.next_id
            car["createdAt"] = "2025-02-01T08:00:00Z"
            self.next_id += 1
            self.cars.append(car)
            return car
        if (method, path) == ("POST", "/api/cars/reset"):
            self.cars = _seed_cars()
            return None

        car_id = int(path.rsplit("/", 1)[-1])
        car = self._find(path, car_id)
        if method == "GET":
            return car
        if method == "PATCH":
            car.update(json_body)
            return car
        if method == "DELETE":
            self.cars.remove(car)
            return None
        raise AssertionError(f"Unexpected request {method} {path}")


def _patch_transport(monkeypatch: pytest.MonkeyPatch, backend: FakeCarBackend) -> None:
    async def fake_request(
        _self: Any,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        return await backend.request(method, path, params=params, json_body=json_body)

    monkeypatch.setattr("carcatalog._transport.HttpTransport.request", fake_request)


@pytest.mark.asyncio
async def test_client_reads_and_mutates_catalog(monkeypatch: pytest.MonkeyPatch) -> None:
    backend = FakeCarBackend()
    _patch_transport(monkeypatch, backend)

    async with CatalogClient(CatalogConfig()) as client:
        cars = await client.list_cars()
        assert [car.name for car in cars] == ["Golf", "Polo", "Tiguan"]
        assert cars[1].tags == ["city"]
        assert cars[0].raw["imageUrl"] == "https://img.example.com/golf.png"

        types, tags = await client.get_vocabulary()
        assert types == ["automatic", "manual"]
        assert tags == ["city", "compact", "family", "suv"]

        detail = await client.get_car(2)
        assert detail.specifications == []

        updated = await client.update_car(1, CarUpdate(description="Updated"))
        assert updated.description == "Updated"
        assert updated.name == "Golf"

        with pytest.raises(CatalogNotFoundError):
            await client.get_car(42)

    assert ("GET", "/api/cars", {"sortBy": "name", "sortOrder": "ASC"}) in backend.calls
    assert ("PATCH", "/api/cars/1", {}) in backend.calls


@pytest.mark.asyncio
async def test_client_outside_context_manager_fails() -> None:
    client = CatalogClient()

    with pytest.raises(CatalogClientFailure) as exc_info:
        await client.list_cars(QueryState())

    assert exc_info.value.user_message == "Unexpected error occurred"


@pytest.mark.asyncio
async def test_query_session_end_to_end(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    backend = FakeCarBackend()
    _patch_transport(monkeypatch, backend)
    cache_file = tmp_path / "vocabulary.json"
    config = CatalogConfig(debounce_seconds=0.01, cache_path=str(cache_file))
    notifications: list[Notification] = []

    async with CatalogClient(config) as client:
        async with QuerySessionController(client, config=config, on_notify=notifications.append) as session:
            assert session.result.status is FetchStatus.READY
            assert session.vocabulary.car_types == ("automatic", "manual")
            assert json.loads(cache_file.read_text(encoding="utf-8"))["carTypes"] == '["automatic", "manual"]'

            await session.set_type_and_tags("automatic", ["city"])
            assert [item.name for item in session.result.items] == ["Polo"]
            assert backend.calls[-1][2] == {
                "carType": "automatic",
                "tags": "city",
                "sortBy": "name",
                "sortOrder": "ASC",
            }

            await session.set_type_and_tags(None, [])
            await session.set_sort(SortBy.CREATED_AT, SortOrder.DESCENDING)
            assert [item.name for item in session.result.items] == ["Golf", "Tiguan", "Polo"]

            session.set_search_text("fam")
            await session.submit_search()
            assert [item.name for item in session.result.items] == ["Tiguan"]

            await session.submit_search("")
            form = session.open_add_form()
            assert session.view is View.ADD_CAR
            form.set_field("name", "ID.3")
            form.set_field("description", "Electric hatchback")
            form.set_field("image_url", "https://img.example.com/id3.png")
            form.set_field("car_type", "automatic")
            form.toggle_tag("electric")
            outcome = await session.create_car(form)
            assert outcome.created is True
            assert session.view is View.LIST
            assert [item.name for item in session.result.items][0] == "ID.3"

            await session.open_details(outcome.car.id)
            session.request_delete(outcome.car.id, "ID.3")
            assert await session.confirm_delete() is True
            assert session.detail is None
            assert "ID.3" not in [item.name for item in session.result.items]

            backend.reject_list_with = "sortBy must be one of name, createdAt"
            await session.refetch()
            assert session.result.status is FetchStatus.ERROR
            assert session.result.error_message == "Error 400: sortBy must be one of name, createdAt"

            backend.reject_list_with = None
            assert await session.reset_catalog() is True
            assert session.result.status is FetchStatus.READY
            assert session.result.error_message is None

    assert [n.message for n in notifications] == ["Error 400: sortBy must be one of name, createdAt"]
