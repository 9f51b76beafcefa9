"""Tests for settings, logging and client wiring."""

import logging

import pytest
from pydantic import ValidationError

from memoir.config import RemoteStoreSettings, StorageSettings, get_settings, validate_all_settings
from memoir.log import configure_logging
from memoir.orchestrator import Journal, create_journal, create_platform_storage
from memoir.services.storage import FilePlatformStorage, MemoryPlatformStorage


class TestSettings:

    def test_remote_from_environment(self, monkeypatch):
        monkeypatch.setenv("KV_REST_API_URL", "https://db.upstash.io")
        monkeypatch.setenv("KV_REST_API_TOKEN", "secret")

        remote = RemoteStoreSettings(_env_file=None)
        assert remote.is_configured
        assert remote.missing_variables == []

    def test_blank_values_count_as_missing(self, monkeypatch):
        monkeypatch.setenv("KV_REST_API_URL", "   ")
        monkeypatch.setenv("KV_REST_API_TOKEN", "secret")

        remote = RemoteStoreSettings(_env_file=None)
        assert remote.url is None
        assert not remote.is_configured
        assert remote.missing_variables == ["KV_REST_API_URL"]

    def test_storage_defaults(self):
        storage = StorageSettings(_env_file=None)

        assert storage.storage_mode == "redis"
        assert storage.health_check_ttl_seconds == 10
        assert storage.local_quota_bytes == 5 * 1024 * 1024

    def test_storage_mode_is_validated(self, monkeypatch):
        monkeypatch.setenv("MEMOIR_STORAGE_MODE", "sqlite")

        with pytest.raises(ValidationError):
            StorageSettings(_env_file=None)

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_validate_all_settings_reports_missing_remote(self):
        results = validate_all_settings()

        assert results["remote"] is False
        assert results["remote_missing"] == ["KV_REST_API_URL", "KV_REST_API_TOKEN"]
        assert results["storage"] is True
        assert results["app"] is True


class TestJournalWiring:

    def test_memory_storage_by_default(self):
        assert isinstance(create_platform_storage(get_settings()), MemoryPlatformStorage)

    def test_file_storage_when_path_set(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MEMOIR_LOCAL_CACHE_PATH", str(tmp_path / "cache.json"))

        assert isinstance(create_platform_storage(get_settings()), FilePlatformStorage)

    @pytest.mark.asyncio
    async def test_local_only_journal(self):
        journal = create_journal(remote=False)

        async with journal:
            await journal.todos.add("water plants")
            assert [t.title for t in await journal.todos.load()] == ["water plants"]
            assert journal.gateway.remote_enabled is False

        assert not journal.probe.running

    @pytest.mark.asyncio
    async def test_journal_over_api(self, api_app, asgi_factory, remote_store):
        journal = create_journal(http_client=asgi_factory(api_app))
        assert isinstance(journal, Journal)

        async with journal:
            await journal.vault.deposit(20, "CNY")
            assert await journal.probe.check() is True
            assert journal.status().status.value == "available"

        stored = await remote_store.get("memoir_vault")
        assert stored["balance"]["CNY"] == 20


class TestLogging:

    def test_each_call_sets_root_level(self):
        root = logging.getLogger()
        original = root.level
        try:
            configure_logging(json_logs=False, level=logging.DEBUG)
            assert root.level == logging.DEBUG

            configure_logging(json_logs=True, level=logging.WARNING)
            assert root.level == logging.WARNING
        finally:
            root.setLevel(original)
