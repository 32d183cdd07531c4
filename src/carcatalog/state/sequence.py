"""Issue-order tokens deciding which in-flight fetch may commit."""

from __future__ import annotations


class RequestSequence:
    """Monotonic request counter.

    Every fetch takes a token with :meth:`issue`. When its response
    arrives it may only be applied if :meth:`is_current` still holds,
    i.e. no newer fetch was issued in the meantime. Arrival order is
    irrelevant; issue order wins.
    """

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    def invalidate(self) -> None:
        """Make every outstanding token stale (teardown)."""
        self._latest += 1
