"""Query session controller for the car list.

Owns the combined search/filter/sort state, turns every user intent
into exactly one list fetch, and reconciles loading/ready/error state.
Only the most recently issued fetch may commit its result.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from carcatalog._debounce import CancelableTimer
from carcatalog.config import CatalogConfig
from carcatalog.exceptions import CatalogError, CatalogTransportError, CatalogValidationError
from carcatalog.forms import CarForm
from carcatalog.models.car import Car, CarListItem, NewCar
from carcatalog.models.query import QueryState, SortBy, SortOrder
from carcatalog.state.result import ResultState
from carcatalog.state.sequence import RequestSequence
from carcatalog.state.vocabulary import JsonFileStore, KeyValueStore, MemoryStore, OptionsCache, OptionsVocabulary

_logger = logging.getLogger(__name__)


class CatalogApi(Protocol):
    """The parts of `CatalogClient` the controller talks to."""

    async def list_cars(self, query: QueryState | None = None) -> list[CarListItem]: ...

    async def get_car(self, car_id: int) -> Car: ...

    async def get_car_types(self) -> list[str]: ...

    async def get_car_tags(self) -> list[str]: ...

    async def create_car(self, car: NewCar) -> Car: ...

    async def delete_car(self, car_id: int) -> None: ...

    async def reset_database(self) -> None: ...


class View(StrEnum):
    LIST = "list"
    ADD_CAR = "add_car"


@dataclass(frozen=True, slots=True)
class Notification:
    """One user-visible message for one failed network call."""

    message: str
    error: CatalogError | None = None


@dataclass(frozen=True, slots=True)
class PendingDelete:
    car_id: int
    name: str

    @property
    def prompt(self) -> str:
        return f"Delete {self.name} ?"


@dataclass(slots=True)
class CreateOutcome:
    """Result of submitting the add-car form.

    ``car`` is set on success. ``field_errors`` is non-empty when local
    validation blocked the submission.
    """

    car: Car | None = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def created(self) -> bool:
        return self.car is not None


def _log_notification(notification: Notification) -> None:
    _logger.warning("%s", notification.message)


class QuerySessionController:
    """Session state machine behind the car list view.

    Usage::

        async with CatalogClient(config) as client:
            async with QuerySessionController(client, config=config) as session:
                session.set_search_text("golf")
                await session.set_sort(SortBy.CREATED_AT, SortOrder.DESCENDING)

    All methods must be called from the event loop thread.
    """

    def __init__(
        self,
        api: CatalogApi,
        *,
        config: CatalogConfig | None = None,
        store: KeyValueStore | None = None,
        timer: CancelableTimer | None = None,
        on_change: Callable[[], None] | None = None,
        on_notify: Callable[[Notification], None] | None = None,
    ) -> None:
        self._api = api
        self._config = config or CatalogConfig()
        if store is None:
            store = JsonFileStore(self._config.cache_path) if self._config.cache_path else MemoryStore()
        self._cache = OptionsCache(store)
        self._timer = timer or CancelableTimer()
        self._sequence = RequestSequence()
        self._vocabulary_sequence = RequestSequence()
        self._detail_sequence = RequestSequence()
        self._tasks: set[asyncio.Task[Any]] = set()
        self._on_change = on_change
        self._on_notify = on_notify or _log_notification
        self._closed = False

        self._query = QueryState()
        self._result = ResultState()
        self._vocabulary = OptionsVocabulary()
        self._detail: Car | None = None
        self._pending_delete: PendingDelete | None = None
        self._view = View.LIST

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def result(self) -> ResultState:
        return self._result

    @property
    def vocabulary(self) -> OptionsVocabulary:
        return self._vocabulary

    @property
    def detail(self) -> Car | None:
        """Car shown in the detail view, ``None`` when the view is closed."""
        return self._detail

    @property
    def pending_delete(self) -> PendingDelete | None:
        return self._pending_delete

    @property
    def view(self) -> View:
        return self._view

    @property
    def search_pending(self) -> bool:
        """Whether a debounced search fetch is still waiting to fire."""
        return self._timer.pending

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> QuerySessionController:
        await self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def mount(self) -> None:
        """Initial list fetch and vocabulary load."""
        self._ensure_open()
        await asyncio.gather(self.load_vocabulary(), self.refetch())

    async def aclose(self) -> None:
        """Tear down: cancel the debounce timer and ignore in-flight results."""
        if self._closed:
            return
        self._closed = True
        self._timer.cancel()
        self._sequence.invalidate()
        self._vocabulary_sequence.invalidate()
        self._detail_sequence.invalidate()
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)

    async def wait_idle(self) -> None:
        """Wait for fetches started by the debounce timer to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _ensure_open(self) -> None:
        if self._closed:
            raise CatalogError("Query session is closed")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _changed(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change()
        except Exception:
            _logger.debug("on_change callback failed", exc_info=True)

    def _notify(self, error: CatalogTransportError) -> None:
        notification = Notification(message=error.user_message, error=error)
        try:
            self._on_notify(notification)
        except Exception:
            _logger.debug("on_notify callback failed", exc_info=True)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Background fetch failed", exc_info=exc)

    def _on_debounce_elapsed(self) -> None:
        if self._closed:
            return
        self._spawn(self._fetch())

    async def _fetch(self) -> bool:
        """Fetch the list for the current query.

        Returns ``True`` if this fetch committed to the result state,
        ``False`` if it failed or was superseded.
        """
        # This fetch carries the latest search text, so a pending
        # debounced fetch would be redundant.
        self._timer.cancel()
        token = self._sequence.issue()
        query = self._query
        self._result = self._result.loading()
        self._changed()

        try:
            items = await self._api.list_cars(query)
        except CatalogTransportError as exc:
            if not self._sequence.is_current(token):
                _logger.debug("Discarding failure of superseded fetch #%d: %s", token, exc)
                return False
            _logger.debug("Fetch #%d failed: %s", token, exc)
            self._result = self._result.failed(exc.user_message)
            self._changed()
            self._notify(exc)
            return False

        if not self._sequence.is_current(token):
            _logger.debug("Discarding stale result of fetch #%d (latest #%d)", token, self._sequence.latest)
            return False

        self._result = ResultState.ready(items)
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Query intents
    # ------------------------------------------------------------------

    def set_search_text(self, text: str) -> None:
        """Update the search text and (re)arm the debounce timer."""
        self._ensure_open()
        self._query = self._query.with_search(text)
        self._changed()
        self._timer.arm(self._config.debounce_seconds, self._on_debounce_elapsed)

    async def submit_search(self, text: str | None = None) -> None:
        """Explicit search confirmation: fetch now, skipping the debounce."""
        self._ensure_open()
        self._timer.cancel()
        if text is not None and text != self._query.search:
            self._query = self._query.with_search(text)
            self._changed()
        await self._fetch()

    async def set_type_and_tags(self, car_type: str | None, tags: Iterable[str] | None = None) -> None:
        """Apply the filter dialog selection as one transition."""
        self._ensure_open()
        self._query = self._query.with_type_and_tags(car_type, tags)
        self._changed()
        await self._fetch()

    async def set_sort(self, sort_by: SortBy | str, sort_order: SortOrder | str) -> None:
        self._ensure_open()
        self._query = self._query.with_sort(sort_by, sort_order)
        self._changed()
        await self._fetch()

    async def refetch(self) -> None:
        """Re-run the current query, e.g. after a mutation."""
        self._ensure_open()
        await self._fetch()

    # ------------------------------------------------------------------
    # Vocabulary
    # ------------------------------------------------------------------

    async def load_vocabulary(self) -> None:
        """Populate filter choices from the cache, then from the API.

        A successful fetch overwrites both the in-memory vocabulary and
        the cache. A failed one leaves the cached vocabulary in place.
        Only the most recently started load may commit.
        """
        self._ensure_open()
        token = self._vocabulary_sequence.issue()
        cached = self._cache.read()
        if cached is not None:
            self._vocabulary = cached
            self._changed()

        try:
            car_types, tags = await asyncio.gather(self._api.get_car_types(), self._api.get_car_tags())
        except CatalogTransportError as exc:
            if not self._vocabulary_sequence.is_current(token):
                _logger.debug("Discarding failure of superseded vocabulary load #%d: %s", token, exc)
                return
            _logger.debug("Vocabulary fetch failed: %s", exc)
            self._notify(exc)
            return

        if not self._vocabulary_sequence.is_current(token):
            _logger.debug("Discarding stale vocabulary load #%d", token)
            return

        vocabulary = OptionsVocabulary(car_types=car_types, tags=tags)
        try:
            self._cache.write(vocabulary)
        except OSError:
            _logger.warning("Could not persist filter vocabulary", exc_info=True)
        self._vocabulary = vocabulary
        self._changed()

    # ------------------------------------------------------------------
    # Detail view
    # ------------------------------------------------------------------

    async def open_details(self, car_id: int) -> Car | None:
        """Load *car_id* into the detail view.

        Returns ``None`` on failure, or when a later open or close
        superseded this one before it resolved.
        """
        self._ensure_open()
        token = self._detail_sequence.issue()
        try:
            car = await self._api.get_car(car_id)
        except CatalogTransportError as exc:
            if self._detail_sequence.is_current(token):
                self._notify(exc)
            return None
        if not self._detail_sequence.is_current(token):
            _logger.debug("Discarding stale detail load of car %s", car_id)
            return None
        self._detail = car
        self._changed()
        return car

    def close_details(self) -> None:
        self._detail_sequence.invalidate()
        if self._detail is None:
            return
        self._detail = None
        self._changed()

    # ------------------------------------------------------------------
    # Delete flow
    # ------------------------------------------------------------------

    def request_delete(self, car_id: int, name: str) -> PendingDelete:
        """First step: ask the user to confirm deleting *name*."""
        self._ensure_open()
        self._pending_delete = PendingDelete(car_id=car_id, name=name)
        self._changed()
        return self._pending_delete

    def cancel_delete(self) -> None:
        if self._pending_delete is None:
            return
        self._pending_delete = None
        self._changed()

    async def confirm_delete(self) -> bool:
        """Second step: delete on the server, then resync the list.

        On failure the confirmation stays open and the list is untouched.
        """
        self._ensure_open()
        pending = self._pending_delete
        if pending is None:
            return False
        try:
            await self._api.delete_car(pending.car_id)
        except CatalogTransportError as exc:
            self._notify(exc)
            return False

        if self._pending_delete is pending:
            self._pending_delete = None
        if self._detail is not None and self._detail.id == pending.car_id:
            self._detail = None
        self._changed()
        await self._fetch()
        return True

    # ------------------------------------------------------------------
    # Create flow
    # ------------------------------------------------------------------

    def open_add_form(self) -> CarForm:
        self._ensure_open()
        self._view = View.ADD_CAR
        self._changed()
        return CarForm.blank(self._vocabulary.car_types)

    def close_add_form(self) -> None:
        if self._view == View.LIST:
            return
        self._view = View.LIST
        self._changed()

    async def create_car(self, form: CarForm) -> CreateOutcome:
        """Validate *form* locally, create the car, return to the list.

        The form is left as-is on any failure so it can be corrected
        and resubmitted.
        """
        self._ensure_open()
        try:
            new_car = form.to_new_car()
        except CatalogValidationError as exc:
            return CreateOutcome(field_errors=exc.field_errors)

        try:
            created = await self._api.create_car(new_car)
        except CatalogTransportError as exc:
            self._notify(exc)
            return CreateOutcome()

        self._view = View.LIST
        self._changed()
        await self._fetch()
        return CreateOutcome(car=created)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def reset_catalog(self) -> bool:
        """Restore the server's seed data and reload list and vocabulary."""
        self._ensure_open()
        try:
            await self._api.reset_database()
        except CatalogTransportError as exc:
            self._notify(exc)
            return False
        self._detail_sequence.invalidate()
        self._detail = None
        self._pending_delete = None
        self._changed()
        await asyncio.gather(self.load_vocabulary(), self._fetch())
        return True
