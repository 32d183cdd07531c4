"""HTTP transport for the car API with failure classification."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from carcatalog.config import CatalogConfig
from carcatalog.exceptions import (
    CatalogClientFailure,
    CatalogNoResponseError,
    CatalogNotFoundError,
    CatalogServerRejection,
)

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        ...


def _extract_server_message(text: str) -> str | None:
    """Pull the ``message`` field out of an error body, if there is one."""
    try:
        body = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, list):
        # Validation errors arrive as a list of strings.
        message = ", ".join(str(part) for part in message)
    if message is None or message == "":
        return None
    return str(message)


class HttpTransport:
    """JSON-over-HTTP transport.

    Every failure leaves this class as one of the three network-level
    error kinds: `CatalogServerRejection`, `CatalogNoResponseError` or
    `CatalogClientFailure`.
    """

    def __init__(self, config: CatalogConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        url = f"{self._config.base_url}{path}"
        headers = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }

        _logger.debug("%s %s params=%s", method, url, dict(params) if params else {})

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                json=json_body,
                headers=headers,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.InvalidURL as exc:
            raise CatalogClientFailure(f"Invalid request URL for {path}: {exc}", endpoint=path) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise CatalogNoResponseError(f"No response from {path}: {exc!r}", endpoint=path) from exc
        except (TypeError, ValueError) as exc:
            raise CatalogClientFailure(f"Could not build request for {path}: {exc}", endpoint=path) from exc

        if status >= 400:
            server_message = _extract_server_message(text)
            error_cls = CatalogNotFoundError if status == 404 else CatalogServerRejection
            raise error_cls(
                f"HTTP {status} from {method} {path}: {text[:200]}",
                status_code=status,
                endpoint=path,
                server_message=server_message,
            )

        if status == 204 or not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CatalogClientFailure(
                f"Invalid JSON from {method} {path}: {text[:200]}",
                status_code=status,
                endpoint=path,
            ) from exc
