"""Filter vocabulary (car types and tags) and its persisted cache."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, field_validator

_logger = logging.getLogger(__name__)

CAR_TYPES_KEY = "carTypes"
CAR_TAGS_KEY = "carTags"


class KeyValueStore(Protocol):
    """String key-value storage, the local cache backing the vocabulary."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Process-local store; nothing survives the session."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store persisted as one JSON object in a file.

    The file is read once on construction and rewritten in full on
    every ``set`` (temp file + rename, so a crash never leaves half a
    file behind). An unreadable file starts the store empty.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            loaded = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _logger.warning("Ignoring unreadable cache file %s", self.path, exc_info=True)
            return
        if isinstance(loaded, dict):
            self._data = {str(k): v for k, v in loaded.items() if isinstance(v, str)}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._save()


def _distinct(values: Iterable[str]) -> tuple[str, ...]:
    out: list[str] = []
    for value in values:
        text = str(value)
        if text not in out:
            out.append(text)
    return tuple(out)


class OptionsVocabulary(BaseModel):
    """Valid car types and tags used to populate filter choices."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    car_types: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @field_validator("car_types", "tags", mode="before")
    @classmethod
    def _dedupe(cls, value: Iterable[str] | None) -> tuple[str, ...]:
        if value is None:
            return ()
        return _distinct(value)

    @property
    def is_empty(self) -> bool:
        return not self.car_types and not self.tags


def _decode_list(raw: str | None, key: str) -> list[str] | None:
    if raw is None:
        return None
    try:
        decoded = json.loads(raw)
    except ValueError:
        _logger.debug("Cached %s is not JSON; ignoring", key)
        return None
    if not isinstance(decoded, list):
        return None
    return [str(item) for item in decoded]


class OptionsCache:
    """Reads and overwrites the vocabulary under the ``carTypes`` and
    ``carTags`` keys of a `KeyValueStore`."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def read(self) -> OptionsVocabulary | None:
        """Return the cached vocabulary, or ``None`` if nothing usable is cached."""
        car_types = _decode_list(self._store.get(CAR_TYPES_KEY), CAR_TYPES_KEY)
        tags = _decode_list(self._store.get(CAR_TAGS_KEY), CAR_TAGS_KEY)
        if car_types is None and tags is None:
            return None
        return OptionsVocabulary(car_types=car_types or (), tags=tags or ())

    def write(self, vocabulary: OptionsVocabulary) -> None:
        self._store.set(CAR_TYPES_KEY, json.dumps(list(vocabulary.car_types)))
        self._store.set(CAR_TAGS_KEY, json.dumps(list(vocabulary.tags)))
