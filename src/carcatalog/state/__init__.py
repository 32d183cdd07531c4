"""Session state layer.

Holds what the query session controller reconciles on every fetch:
the list result, the request sequence that decides which fetch may
commit, and the cached filter vocabulary.
"""

from carcatalog.state.result import FetchStatus, ResultState
from carcatalog.state.sequence import RequestSequence
from carcatalog.state.vocabulary import (
    CAR_TAGS_KEY,
    CAR_TYPES_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    OptionsCache,
    OptionsVocabulary,
)

__all__ = [
    "CAR_TAGS_KEY",
    "CAR_TYPES_KEY",
    "FetchStatus",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "OptionsCache",
    "OptionsVocabulary",
    "RequestSequence",
    "ResultState",
]
