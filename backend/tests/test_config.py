"""Tests for settings loading."""

import pytest

from storegate.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("STORE_API_URL", "STORE_HEALTH_CACHE_TTL", "STORE_WAKE_MAX_RETRIES"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.api_url is None
    assert settings.is_backend_configured is False
    assert settings.health_cache_ttl == 30.0
    assert settings.health_check_timeout == 60.0
    assert settings.wake_retry_interval == 5.0
    assert settings.wake_max_retries == 12


def test_reads_backend_url_from_environment(monkeypatch):
    monkeypatch.setenv("STORE_API_URL", "https://store-api.example.com/")

    settings = Settings(_env_file=None)

    assert settings.api_url == "https://store-api.example.com"
    assert settings.is_backend_configured is True


def test_empty_backend_url_means_unset(monkeypatch):
    monkeypatch.setenv("STORE_API_URL", "  ")

    assert Settings(_env_file=None).api_url is None


def test_timing_is_configurable(monkeypatch):
    monkeypatch.setenv("STORE_HEALTH_CACHE_TTL", "10")
    monkeypatch.setenv("STORE_WAKE_MAX_RETRIES", "3")

    settings = Settings(_env_file=None)

    assert settings.health_cache_ttl == 10.0
    assert settings.wake_max_retries == 3
