"""Pytest configuration and fixtures."""

from typing import Optional

import httpx
import pytest
import pytest_asyncio

from memoir.api import create_app
from memoir.config import RemoteStoreSettings, Settings, StorageSettings, get_settings
from memoir.services.storage import (
    LocalCache,
    MemoryPlatformStorage,
    MockRemoteStore,
    RemoteStoreInterface,
    RemoteStoreProvider,
    StorageAPIClient,
    SyncGateway,
)


_ENV_VARS = (
    "KV_REST_API_URL",
    "KV_REST_API_TOKEN",
    "MEMOIR_STORAGE_MODE",
    "MEMOIR_API_BASE_URL",
    "MEMOIR_LOCAL_CACHE_PATH",
    "MEMOIR_PROBE_INTERVAL_SECONDS",
    "REDIS_URL",
    "APP_ENVIRONMENT",
)

TEST_URL = "https://test-db.upstash.io"
TEST_TOKEN = "test-token-123456"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate every test from real credentials and .env files."""
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_provider(
    configured: bool = False,
    mode: str = "redis",
    store: Optional[RemoteStoreInterface] = None,
) -> RemoteStoreProvider:
    remote = RemoteStoreSettings(
        _env_file=None,
        url=TEST_URL if configured else None,
        token=TEST_TOKEN if configured else None,
    )
    storage = StorageSettings(_env_file=None, storage_mode=mode, health_check_ttl_seconds=10)
    return RemoteStoreProvider(remote, storage, store=store)


def asgi_client(app) -> httpx.AsyncClient:
    """httpx client that calls the app in-process."""
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver/api",
    )


@pytest.fixture
def platform():
    return MemoryPlatformStorage()


@pytest.fixture
def local_cache(platform):
    return LocalCache(platform)


@pytest.fixture
def remote_store():
    return MockRemoteStore(seed={})


@pytest.fixture
def api_app(remote_store):
    """API app backed by an in-process remote store."""
    return create_app(Settings(), provider=make_provider(configured=True, store=remote_store))


@pytest.fixture
def unconfigured_app():
    """API app with no remote configuration in strict mode."""
    return create_app(Settings(), provider=make_provider(configured=False))


@pytest_asyncio.fixture
async def gateway(api_app, local_cache):
    """Gateway wired to the in-process API."""
    gw = SyncGateway(local_cache, StorageAPIClient(http_client=asgi_client(api_app)))
    yield gw
    await gw.aclose()


@pytest.fixture
def local_gateway(local_cache):
    """Gateway with the remote tier disabled."""
    return SyncGateway(local_cache)


def failing_client() -> httpx.AsyncClient:
    """httpx client whose every request fails at the transport level."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="http://testserver/api",
    )


@pytest.fixture
def provider_factory():
    return make_provider


@pytest.fixture
def broken_http():
    return failing_client()


@pytest.fixture
def asgi_factory():
    return asgi_client
