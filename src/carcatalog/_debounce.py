"""Cancelable one-shot timer used to debounce search input."""

from __future__ import annotations

import asyncio
from collections.abc import Callable


class CancelableTimer:
    """One-shot timer with a single live handle.

    Arming while a previous callback is still pending cancels that
    callback first, so at most one callback is ever scheduled.
    Must be armed from inside a running event loop.
    """

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, delay: float, callback: Callable[[], None]) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, callback)

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()

    def cancel(self) -> bool:
        """Cancel the pending callback. Returns whether one was pending."""
        handle = self._handle
        self._handle = None
        if handle is None:
            return False
        handle.cancel()
        return True
