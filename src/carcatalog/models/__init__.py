"""Data models for the car API."""

from carcatalog.models._base import CatalogBaseModel, CatalogRequestModel
from carcatalog.models.car import Car, CarListItem, CarUpdate, NewCar
from carcatalog.models.query import QueryState, SortBy, SortOrder

__all__ = [
    "Car",
    "CarListItem",
    "CarUpdate",
    "CatalogBaseModel",
    "CatalogRequestModel",
    "NewCar",
    "QueryState",
    "SortBy",
    "SortOrder",
]
