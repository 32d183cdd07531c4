"""carcatalog - Async Python client and query session for the car catalog API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("carcatalog")
except PackageNotFoundError:
    __version__ = "0+local"
from carcatalog.client import CatalogClient
from carcatalog.config import CatalogConfig
from carcatalog.controller import (
    CreateOutcome,
    Notification,
    PendingDelete,
    QuerySessionController,
    View,
)
from carcatalog.exceptions import (
    CatalogClientFailure,
    CatalogConfigError,
    CatalogError,
    CatalogNoResponseError,
    CatalogNotFoundError,
    CatalogServerRejection,
    CatalogTransportError,
    CatalogValidationError,
)
from carcatalog.forms import CarForm
from carcatalog.models import (
    Car,
    CarListItem,
    CarUpdate,
    NewCar,
    QueryState,
    SortBy,
    SortOrder,
)
from carcatalog.state import (
    FetchStatus,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    OptionsVocabulary,
    ResultState,
)

__all__ = [
    "__version__",
    "Car",
    "CarForm",
    "CarListItem",
    "CarUpdate",
    "CatalogClient",
    "CatalogClientFailure",
    "CatalogConfig",
    "CatalogConfigError",
    "CatalogError",
    "CatalogNoResponseError",
    "CatalogNotFoundError",
    "CatalogServerRejection",
    "CatalogTransportError",
    "CatalogValidationError",
    "CreateOutcome",
    "FetchStatus",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "NewCar",
    "Notification",
    "OptionsVocabulary",
    "PendingDelete",
    "QuerySessionController",
    "QueryState",
    "ResultState",
    "SortBy",
    "SortOrder",
    "View",
]
