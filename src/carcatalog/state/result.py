"""List result state reconciled by every fetch cycle."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from carcatalog.models.car import CarListItem


class FetchStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ResultState(BaseModel):
    """Items, status and error banner for the current list.

    ``items`` is only ever replaced wholesale by a successful fetch.
    ``error_message`` survives ``loading`` so the banner stays up until
    the next successful fetch.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    items: tuple[CarListItem, ...] = ()
    status: FetchStatus = FetchStatus.IDLE
    error_message: str | None = None

    def loading(self) -> ResultState:
        return self.model_copy(update={"status": FetchStatus.LOADING})

    @classmethod
    def ready(cls, items: Iterable[CarListItem]) -> ResultState:
        return cls(items=tuple(items), status=FetchStatus.READY, error_message=None)

    def failed(self, message: str) -> ResultState:
        return self.model_copy(update={"status": FetchStatus.ERROR, "error_message": message})

    @property
    def is_empty(self) -> bool:
        return self.status == FetchStatus.READY and not self.items
