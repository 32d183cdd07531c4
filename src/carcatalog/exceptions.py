"""Custom exception hierarchy for carcatalog."""

from __future__ import annotations

from collections.abc import Mapping

NO_RESPONSE_MESSAGE = "No response received from the server."
CLIENT_FAILURE_MESSAGE = "Unexpected error occurred"
SERVER_REJECTION_FALLBACK = "Bad Request"


class CatalogError(Exception):
    """Base exception for all carcatalog errors."""


class CatalogConfigError(CatalogError):
    """Invalid or missing configuration."""


class CatalogTransportError(CatalogError):
    """Network-level failure talking to the car API.

    Every subclass carries a ``user_message``: the single line shown to
    the user in a notification or the list error banner.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return CLIENT_FAILURE_MESSAGE


class CatalogServerRejection(CatalogTransportError):
    """The API answered with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        endpoint: str = "",
        server_message: str | None = None,
    ) -> None:
        self.server_message = server_message
        super().__init__(message, status_code=status_code, endpoint=endpoint)

    @property
    def user_message(self) -> str:
        return f"Error {self.status_code}: {self.server_message or SERVER_REJECTION_FALLBACK}"


class CatalogNotFoundError(CatalogServerRejection):
    """The requested car id does not exist (HTTP 404)."""


class CatalogNoResponseError(CatalogTransportError):
    """The request was sent but no response came back."""

    @property
    def user_message(self) -> str:
        return NO_RESPONSE_MESSAGE


class CatalogClientFailure(CatalogTransportError):
    """The request could not be built or sent, or the reply was unreadable.

    Usually a programming or configuration error (bad base URL,
    client used outside its context manager).
    """


class CatalogValidationError(CatalogError):
    """Local form validation failed; nothing was sent to the API.

    ``field_errors`` maps form field names (``name``, ``description``,
    ``image_url``, ``car_type``) to the inline message for that field.
    """

    def __init__(self, field_errors: Mapping[str, str]) -> None:
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Invalid car form fields: {fields}")
