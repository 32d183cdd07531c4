from __future__ import annotations

import json
from pathlib import Path

from carcatalog.state.vocabulary import (
    CAR_TAGS_KEY,
    CAR_TYPES_KEY,
    JsonFileStore,
    MemoryStore,
    OptionsCache,
    OptionsVocabulary,
)


def test_empty_store_has_no_cached_vocabulary() -> None:
    assert OptionsCache(MemoryStore()).read() is None


def test_write_then_read_uses_fixed_keys() -> None:
    store = MemoryStore()
    cache = OptionsCache(store)

    cache.write(OptionsVocabulary(car_types=["automatic", "manual"], tags=["sport"]))

    assert json.loads(store.get(CAR_TYPES_KEY) or "") == ["automatic", "manual"]
    assert json.loads(store.get(CAR_TAGS_KEY) or "") == ["sport"]
    assert cache.read() == OptionsVocabulary(car_types=("automatic", "manual"), tags=("sport",))


def test_write_overwrites_wholesale() -> None:
    cache = OptionsCache(MemoryStore())
    cache.write(OptionsVocabulary(car_types=["automatic", "manual"], tags=["sport", "family"]))

    cache.write(OptionsVocabulary(car_types=["electric"], tags=[]))

    assert cache.read() == OptionsVocabulary(car_types=("electric",), tags=())


def test_corrupt_entries_are_ignored() -> None:
    store = MemoryStore({CAR_TYPES_KEY: "not json", CAR_TAGS_KEY: json.dumps({"a": 1})})

    assert OptionsCache(store).read() is None


def test_partial_cache_is_still_usable() -> None:
    store = MemoryStore({CAR_TYPES_KEY: json.dumps(["manual"])})

    assert OptionsCache(store).read() == OptionsVocabulary(car_types=("manual",))


def test_vocabulary_deduplicates_in_server_order() -> None:
    vocabulary = OptionsVocabulary(car_types=["manual", "automatic", "manual"], tags=None)

    assert vocabulary.car_types == ("manual", "automatic")
    assert vocabulary.tags == ()


def test_json_file_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "cache" / "vocabulary.json"
    OptionsCache(JsonFileStore(path)).write(OptionsVocabulary(car_types=["manual"], tags=["sport"]))

    reopened = OptionsCache(JsonFileStore(path)).read()

    assert reopened == OptionsVocabulary(car_types=("manual",), tags=("sport",))
    assert list(path.parent.glob("*.tmp")) == []


def test_json_file_store_starts_empty_on_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "vocabulary.json"
    path.write_text("{broken", encoding="utf-8")

    store = JsonFileStore(path)

    assert store.get(CAR_TYPES_KEY) is None
    store.set(CAR_TYPES_KEY, "[]")
    assert json.loads(path.read_text(encoding="utf-8")) == {CAR_TYPES_KEY: "[]"}
