"""Search, filter and sort parameters for the car list."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


class SortBy(StrEnum):
    NAME = "name"
    CREATED_AT = "createdAt"


class SortOrder(StrEnum):
    ASCENDING = "ASC"
    DESCENDING = "DESC"


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Keep selection order, drop blanks and repeats."""
    seen: list[str] = []
    for tag in tags:
        value = str(tag).strip()
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


class QueryState(BaseModel):
    """The combined search/filter/sort parameters driving the list fetch.

    Instances are immutable; every transition returns a complete new
    state with exactly one field group changed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    search: str = ""
    car_type: str | None = None
    tags: tuple[str, ...] = ()
    sort_by: SortBy = SortBy.NAME
    sort_order: SortOrder = SortOrder.ASCENDING

    @field_validator("car_type", mode="before")
    @classmethod
    def _empty_type_is_absent(cls, value: str | None) -> str | None:
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Iterable[str] | None) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return _normalize_tags(value.split(","))
        return _normalize_tags(value)

    def with_search(self, text: str) -> QueryState:
        return self.model_copy(update={"search": text})

    def with_type_and_tags(self, car_type: str | None, tags: Iterable[str] | None) -> QueryState:
        # model_copy skips validation, so normalise through the constructor.
        return QueryState(
            search=self.search,
            car_type=car_type,
            tags=tags or (),
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )

    def with_sort(self, sort_by: SortBy | str, sort_order: SortOrder | str) -> QueryState:
        return self.model_copy(update={"sort_by": SortBy(sort_by), "sort_order": SortOrder(sort_order)})

    @property
    def has_filters(self) -> bool:
        return bool(self.search or self.car_type or self.tags)

    def to_params(self) -> dict[str, str]:
        """Query string for ``GET /api/cars``.

        Empty filters are left out entirely; ``tags`` is comma-joined.
        Sort fields are always present.
        """
        params: dict[str, str] = {}
        if self.search:
            params["search"] = self.search
        if self.car_type:
            params["carType"] = self.car_type
        if self.tags:
            params["tags"] = ",".join(self.tags)
        params["sortBy"] = self.sort_by.value
        params["sortOrder"] = self.sort_order.value
        return params
