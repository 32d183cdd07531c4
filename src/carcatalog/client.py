"""High-level async client for the car catalog API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from carcatalog._api import cars as _cars_api
from carcatalog._transport import HttpTransport, Transport
from carcatalog.config import CatalogConfig
from carcatalog.exceptions import CatalogClientFailure
from carcatalog.models.car import Car, CarListItem, CarUpdate, NewCar
from carcatalog.models.query import QueryState

_logger = logging.getLogger(__name__)


class CatalogClient:
    """Async client for the car catalog API.

    Usage::

        async with CatalogClient(config) as client:
            cars = await client.list_cars(QueryState(search="golf"))
    """

    def __init__(
        self,
        config: CatalogConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or CatalogConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None

    @property
    def config(self) -> CatalogConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CatalogClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise CatalogClientFailure("Client not initialized. Use 'async with CatalogClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def list_cars(self, query: QueryState | None = None) -> list[CarListItem]:
        """Fetch cars matching *query* (defaults: no filters, name ascending)."""
        return await _cars_api.list_cars(self._require_transport(), query or QueryState())

    async def get_car(self, car_id: int) -> Car:
        """Fetch one car; raises `CatalogNotFoundError` for unknown ids."""
        return await _cars_api.get_car(self._require_transport(), car_id)

    async def get_car_types(self) -> list[str]:
        return await _cars_api.get_car_types(self._require_transport())

    async def get_car_tags(self) -> list[str]:
        return await _cars_api.get_car_tags(self._require_transport())

    async def get_vocabulary(self) -> tuple[list[str], list[str]]:
        """Fetch car types and tags concurrently."""
        transport = self._require_transport()
        types, tags = await asyncio.gather(
            _cars_api.get_car_types(transport),
            _cars_api.get_car_tags(transport),
        )
        return types, tags

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_car(self, car: NewCar) -> Car:
        return await _cars_api.create_car(self._require_transport(), car)

    async def update_car(self, car_id: int, update: CarUpdate) -> Car:
        return await _cars_api.update_car(self._require_transport(), car_id, update)

    async def delete_car(self, car_id: int) -> None:
        await _cars_api.delete_car(self._require_transport(), car_id)

    async def reset_database(self) -> None:
        """Restore the server's seed data."""
        _logger.info("Resetting car database at %s", self._config.base_url)
        await _cars_api.reset_database(self._require_transport())
