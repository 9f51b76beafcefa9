"""
Upstash Redis REST Client

The hosted key/value database is reached over HTTPS: every command is a
JSON array POSTed to the database URL with a bearer token, and the answer is
``{"result": ...}`` or ``{"error": "..."}``.

Every value is stored as JSON, strings included, so a string such as "123"
reads back as a string. Reads decode JSON when they can and otherwise return
the raw string, so plain strings written by other clients still load.

Transport errors (connection refused, timeouts) are retried with tenacity;
command errors are not.
"""

import json
from typing import Any, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from memoir.config import RemoteStoreSettings
from memoir.services.storage.interface import (
    RemoteConnectionError,
    RemoteNotConfiguredError,
    RemoteStoreError,
    RemoteStoreInterface,
)


logger = structlog.get_logger(__name__)


def encode_value(value: Any) -> str:
    """Encode a value for storage."""
    return json.dumps(value, ensure_ascii=False)


def decode_value(raw: Any) -> Any:
    """Decode a stored value; non-JSON strings come back unchanged."""
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class UpstashRedisClient(RemoteStoreInterface):
    """
    Remote store backed by the Upstash Redis REST API.

    The httpx client is created on first use and reused for every command.
    Pass ``http_client`` to supply a preconfigured one (tests use
    httpx.MockTransport).
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 10.0,
        retry_attempts: int = 2,
        backoff_seconds: float = 0.2,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._retry_attempts = retry_attempts
        self._backoff_seconds = backoff_seconds
        self._http = http_client

    @classmethod
    def from_settings(
        cls,
        settings: RemoteStoreSettings,
        timeout: float = 10.0,
        retry_attempts: int = 2,
    ) -> "UpstashRedisClient":
        """
        Build a client from environment settings.

        Raises:
            RemoteNotConfiguredError: If URL or token is missing
        """
        if not settings.is_configured:
            raise RemoteNotConfiguredError(settings.missing_variables)
        return cls(
            url=settings.url,
            token=settings.token,
            timeout=timeout,
            retry_attempts=retry_attempts,
        )

    @property
    def url(self) -> str:
        return self._url

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def _post(self, command: list[Any]) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=self._backoff_seconds, max=2),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await self._client().post(
                    self._url,
                    json=command,
                    headers={"Authorization": f"Bearer {self._token}"},
                )
        raise RemoteConnectionError("Redis REST call was not attempted")

    async def execute(self, *command: Any) -> Any:
        """
        Run one Redis command and return its ``result``.

        Raises:
            RemoteConnectionError: If the endpoint cannot be reached
            RemoteStoreError: If the command is rejected
        """
        name = str(command[0]) if command else ""
        try:
            response = await self._post(list(command))
        except httpx.TransportError as e:
            logger.error("redis_unreachable", command=name, error=str(e))
            raise RemoteConnectionError(f"Redis {name} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            raise RemoteStoreError(f"Redis {name} failed: {body['error']}")
        if response.is_error:
            raise RemoteStoreError(
                f"Redis {name} failed: HTTP {response.status_code}"
            )
        if not isinstance(body, dict) or "result" not in body:
            raise RemoteStoreError(f"Redis {name} returned an unexpected response")

        return body["result"]

    async def get(self, key: str) -> Any:
        return decode_value(await self.execute("GET", key))

    async def set(self, key: str, value: Any, ex: Optional[int] = None) -> bool:
        command: list[Any] = ["SET", key, encode_value(value)]
        if ex is not None:
            command.extend(["EX", int(ex)])
        result = await self.execute(*command)
        return result == "OK"

    async def delete(self, key: str) -> int:
        result = await self.execute("DEL", key)
        return int(result or 0)

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
