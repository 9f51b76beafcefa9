"""
Storage API client.

Client side of the /storage boundary, used by the sync gateway. Every
method answers with a value or a failure marker (None / False) and logs the
reason; nothing here raises on network or server errors.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from memoir.models.storage import StorageReadResponse


logger = structlog.get_logger(__name__)

_NO_STORE = {"Cache-Control": "no-store"}


def _error_reason(response: httpx.Response) -> str:
    """Best-effort ``error`` field of an error envelope."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase or f"HTTP {response.status_code}"


class StorageAPIClient:
    """
    HTTP client for GET/POST/DELETE /storage/{key}.

    Args:
        base_url: API root, e.g. ``http://localhost:8000/api``
        timeout: Transport timeout in seconds
        http_client: Preconfigured client (tests pass one with an
            ASGI or mock transport); base_url is then taken from it
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
        )

    @staticmethod
    def _path(key: str) -> str:
        return f"storage/{quote(key, safe='')}"

    async def fetch(self, key: str) -> Optional[StorageReadResponse]:
        """
        Read a key through the API.

        Returns:
            The parsed envelope, or None if the call failed
        """
        try:
            response = await self._http.get(self._path(key), headers=_NO_STORE)
        except httpx.HTTPError as e:
            logger.error("remote_load_failed", key=key, error=str(e))
            return None

        if response.is_error:
            logger.warning(
                "remote_storage_unavailable",
                key=key,
                status=response.status_code,
                reason=_error_reason(response),
            )
            return None

        try:
            return StorageReadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("remote_load_malformed", key=key, error=str(e))
            return None

    async def push(self, key: str, value: Any) -> bool:
        """Write a key through the API. Returns True on acknowledged success."""
        try:
            response = await self._http.post(self._path(key), json={"data": value})
        except (httpx.HTTPError, TypeError, ValueError) as e:
            logger.error("remote_save_failed", key=key, error=str(e))
            return False

        if response.is_error:
            logger.warning(
                "remote_save_rejected",
                key=key,
                status=response.status_code,
                reason=_error_reason(response),
            )
            return False

        try:
            return response.json().get("success") is True
        except (ValueError, AttributeError):
            return False

    async def remove(self, key: str) -> bool:
        """Delete a key through the API."""
        try:
            response = await self._http.delete(self._path(key))
        except httpx.HTTPError as e:
            logger.error("remote_delete_failed", key=key, error=str(e))
            return False
        if response.is_error:
            logger.warning(
                "remote_delete_rejected",
                key=key,
                status=response.status_code,
                reason=_error_reason(response),
            )
            return False
        return True

    async def health_check(self) -> bool:
        """True when the server reports its remote store reachable."""
        try:
            response = await self._http.get("storage/health-check", headers=_NO_STORE)
        except httpx.HTTPError as e:
            logger.error("health_check_failed", error=str(e))
            return False
        return response.is_success

    async def aclose(self) -> None:
        await self._http.aclose()
