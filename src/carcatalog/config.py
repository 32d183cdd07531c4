"""Client configuration for carcatalog."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from carcatalog.exceptions import CatalogConfigError

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_DEBOUNCE_SECONDS = 0.3
USER_AGENT = "carcatalog/0.1"


@dataclasses.dataclass(frozen=True)
class CatalogConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Address of the car API, without the ``/api/cars`` path.
        A trailing slash is stripped.
    debounce_seconds : float
        Quiet period after the last search keystroke before the list
        is refetched.
    cache_path : str or None
        File used to persist the filter vocabulary between sessions.
        ``None`` keeps the cache in memory only.
    user_agent : str
        User-Agent header sent with every request.
    """

    base_url: str = DEFAULT_BASE_URL
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    cache_path: str | None = None
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        base_url = self.base_url.strip().rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise CatalogConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.debounce_seconds < 0:
            raise CatalogConfigError("debounce_seconds must not be negative")
        object.__setattr__(self, "base_url", base_url)

    @classmethod
    def from_env(cls, **overrides: Any) -> CatalogConfig:
        """Create configuration from environment variables.

        Only ``CARCATALOG_BASE_URL`` is read; everything else comes from
        defaults or explicit keyword arguments, which take precedence.
        """
        config_kwargs: dict[str, Any] = {}
        base_url = os.environ.get("CARCATALOG_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
