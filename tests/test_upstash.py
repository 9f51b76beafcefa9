"""Tests for the Upstash REST client, the mock store and the provider."""

import json

import httpx
import pytest

from memoir.config import RemoteStoreSettings
from memoir.services.storage import (
    MockRemoteStore,
    RemoteConnectionError,
    RemoteNotConfiguredError,
    RemoteStoreError,
    UpstashRedisClient,
)
from memoir.services.storage.upstash import decode_value, encode_value


URL = "https://test-db.upstash.io"
TOKEN = "test-token-123456"


class Recorder:
    """MockTransport handler that records commands and replays answers."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def commands(self) -> list:
        return [json.loads(r.content) for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(recorder: Recorder, retry_attempts: int = 2) -> UpstashRedisClient:
    return UpstashRedisClient(
        url=URL,
        token=TOKEN,
        retry_attempts=retry_attempts,
        backoff_seconds=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


class TestValueEncoding:

    def test_strings_are_stored_as_json(self):
        assert encode_value("ok") == '"ok"'
        assert encode_value("123") == '"123"'

    def test_structures_are_stored_as_json(self):
        assert json.loads(encode_value({"a": [1, 2]})) == {"a": [1, 2]}

    def test_json_strings_are_decoded(self):
        assert decode_value('[{"id": "1"}]') == [{"id": "1"}]

    def test_plain_strings_pass_through(self):
        assert decode_value("connection_test") == "connection_test"

    def test_null_result(self):
        assert decode_value(None) is None


class TestUpstashRedisClient:

    @pytest.mark.asyncio
    async def test_get_sends_command_with_bearer_token(self):
        recorder = Recorder(httpx.Response(200, json={"result": '{"a": 1}'}))
        client = make_client(recorder)

        assert await client.get("memoir_moods") == {"a": 1}
        assert recorder.commands == [["GET", "memoir_moods"]]
        assert recorder.requests[0].headers["Authorization"] == f"Bearer {TOKEN}"
        assert recorder.requests[0].url.host == "test-db.upstash.io"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_set_with_expiry(self):
        recorder = Recorder(httpx.Response(200, json={"result": "OK"}))
        client = make_client(recorder)

        assert await client.set("health_check_1", "ok", ex=10) is True
        assert recorder.commands == [["SET", "health_check_1", '"ok"', "EX", 10]]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_set_serialises_structures(self):
        recorder = Recorder(httpx.Response(200, json={"result": "OK"}))
        client = make_client(recorder)

        await client.set("memoir_todos", [{"id": "1"}])
        command = recorder.commands[0]
        assert command[:2] == ["SET", "memoir_todos"]
        assert json.loads(command[2]) == [{"id": "1"}]
        assert len(command) == 3
        await client.aclose()

    @pytest.mark.asyncio
    async def test_delete_returns_count(self):
        recorder = Recorder(httpx.Response(200, json={"result": 1}))
        client = make_client(recorder)

        assert await client.delete("memoir_todos") == 1
        assert recorder.commands == [["DEL", "memoir_todos"]]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_error_body_raises(self):
        recorder = Recorder(httpx.Response(400, json={"error": "WRONGTYPE"}))
        client = make_client(recorder)

        with pytest.raises(RemoteStoreError, match="WRONGTYPE"):
            await client.get("memoir_todos")
        await client.aclose()

    @pytest.mark.asyncio
    async def test_http_error_without_body_raises(self):
        recorder = Recorder(httpx.Response(401, text="Unauthorized"))
        client = make_client(recorder)

        with pytest.raises(RemoteStoreError, match="401"):
            await client.get("memoir_todos")
        await client.aclose()

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self):
        recorder = Recorder(
            httpx.ConnectError("refused"),
            httpx.Response(200, json={"result": None}),
        )
        client = make_client(recorder, retry_attempts=2)

        assert await client.get("memoir_todos") is None
        assert len(recorder.requests) == 2
        await client.aclose()

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_connection_error(self):
        recorder = Recorder(httpx.ConnectError("refused"), httpx.ConnectError("refused"))
        client = make_client(recorder, retry_attempts=2)

        with pytest.raises(RemoteConnectionError):
            await client.get("memoir_todos")
        assert len(recorder.requests) == 2
        await client.aclose()

    @pytest.mark.asyncio
    async def test_command_errors_are_not_retried(self):
        recorder = Recorder(httpx.Response(200, json={"error": "ERR"}))
        client = make_client(recorder, retry_attempts=3)

        with pytest.raises(RemoteStoreError):
            await client.delete("k")
        assert len(recorder.requests) == 1
        await client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["123", "true", "[1]", "null", "plain", {"a": "1"}])
    async def test_values_round_trip_unchanged(self, value):
        stored = {}

        def redis(request: httpx.Request) -> httpx.Response:
            command = json.loads(request.content)
            if command[0] == "SET":
                stored[command[1]] = command[2]
                return httpx.Response(200, json={"result": "OK"})
            return httpx.Response(200, json={"result": stored.get(command[1])})

        client = UpstashRedisClient(
            url=URL,
            token=TOKEN,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(redis)),
        )
        await client.set("k", value)

        assert await client.get("k") == value
        await client.aclose()

    def test_from_settings_requires_both_variables(self):
        settings = RemoteStoreSettings(_env_file=None, url=URL, token=None)

        with pytest.raises(RemoteNotConfiguredError) as exc_info:
            UpstashRedisClient.from_settings(settings)
        assert exc_info.value.missing == ["KV_REST_API_TOKEN"]

    def test_from_settings_strips_trailing_slash(self):
        settings = RemoteStoreSettings(_env_file=None, url=URL + "/", token=TOKEN)
        assert UpstashRedisClient.from_settings(settings).url == URL


class TestMockRemoteStore:

    @pytest.mark.asyncio
    async def test_default_seed_has_every_collection(self):
        store = MockRemoteStore()

        assert await store.get("memoir_memories") == []
        assert await store.get("memoir_moods") == {}
        assert await store.get("memoir_vault") == {
            "balance": {"CNY": 0.0, "IDR": 0.0},
            "transactions": [],
        }

    @pytest.mark.asyncio
    async def test_values_are_copied(self, remote_store):
        value = [{"id": "1"}]
        await remote_store.set("k", value)
        value.append({"id": "2"})

        assert await remote_store.get("k") == [{"id": "1"}]

    @pytest.mark.asyncio
    async def test_expiry(self):
        now = [100.0]
        store = MockRemoteStore(seed={}, clock=lambda: now[0])
        await store.set("health_check_1", "ok", ex=10)

        assert await store.get("health_check_1") == "ok"
        now[0] = 110.0
        assert await store.get("health_check_1") is None
        assert store.snapshot() == {}

    @pytest.mark.asyncio
    async def test_delete_reports_presence(self, remote_store):
        await remote_store.set("k", 1)

        assert await remote_store.delete("k") == 1
        assert await remote_store.delete("k") == 0


class TestRemoteStoreProvider:

    def test_unconfigured_redis_mode_yields_none(self, provider_factory):
        assert provider_factory(configured=False).get() is None

    def test_unconfigured_mock_mode_yields_seeded_store(self, provider_factory):
        store = provider_factory(configured=False, mode="mock").get()

        assert isinstance(store, MockRemoteStore)
        assert "memoir_vault" in store.snapshot()

    def test_configured_client_is_memoised(self, provider_factory):
        provider = provider_factory(configured=True, mode="mock")
        first = provider.get()

        assert isinstance(first, UpstashRedisClient)
        assert provider.get() is first

    @pytest.mark.asyncio
    async def test_aclose_resets(self, provider_factory):
        provider = provider_factory(configured=False, mode="mock")
        first = provider.get()
        await provider.aclose()

        assert provider.get() is not first
