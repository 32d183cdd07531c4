from __future__ import annotations

import pytest

from carcatalog.config import DEFAULT_BASE_URL, CatalogConfig
from carcatalog.exceptions import CatalogConfigError


def test_defaults() -> None:
    config = CatalogConfig()

    assert config.base_url == DEFAULT_BASE_URL
    assert config.debounce_seconds == pytest.approx(0.3)
    assert config.cache_path is None


def test_trailing_slash_is_stripped() -> None:
    assert CatalogConfig(base_url="https://cars.example.com/").base_url == "https://cars.example.com"


@pytest.mark.parametrize("base_url", ["cars.example.com", "ftp://cars.example.com", ""])
def test_non_http_base_url_is_rejected(base_url: str) -> None:
    with pytest.raises(CatalogConfigError):
        CatalogConfig(base_url=base_url)


def test_negative_debounce_is_rejected() -> None:
    with pytest.raises(CatalogConfigError):
        CatalogConfig(debounce_seconds=-1)


def test_from_env_reads_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARCATALOG_BASE_URL", "https://env.example.com")

    assert CatalogConfig.from_env().base_url == "https://env.example.com"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARCATALOG_BASE_URL", "https://env.example.com")

    config = CatalogConfig.from_env(base_url="http://override.example.com", debounce_seconds=0.05)

    assert config.base_url == "http://override.example.com"
    assert config.debounce_seconds == pytest.approx(0.05)


def test_from_env_without_variable_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CARCATALOG_BASE_URL", raising=False)

    assert CatalogConfig.from_env().base_url == DEFAULT_BASE_URL
