"""
Storage routes.

Thin forwarding layer from HTTP to the remote store. Every response uses the
shared envelope: ``{success, data|message, timestamp}`` on success and
``{error, details}`` with a non-2xx status on failure.
"""

import time
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Path, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from memoir.api.dependencies import Provider, RemoteStore
from memoir.models.storage import (
    StorageErrorResponse,
    StorageReadResponse,
    StorageWriteRequest,
    StorageWriteResponse,
)


logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/storage", tags=["storage"])

StorageKey = Annotated[str, Path(min_length=1, description="Storage key")]


def error_response(error: str, details: Any = None, status_code: int = 500) -> JSONResponse:
    """Build an ``{error, details}`` envelope."""
    return JSONResponse(
        status_code=status_code,
        content=StorageErrorResponse(error=error, details=details).model_dump(),
    )


def redis_not_available() -> JSONResponse:
    return error_response(
        "Redis not available",
        "Missing KV_REST_API_URL or KV_REST_API_TOKEN environment variables",
    )


@router.get("/health-check")
async def health_check(provider: Provider, store: RemoteStore):
    """
    Round-trip a short-lived sentinel key.

    Succeeds only when the value written is the value read back.
    """
    if store is None:
        remote = provider.remote_settings
        return error_response(
            "Redis not configured",
            {
                "KV_REST_API_URL": "Present" if remote.url else "Missing",
                "KV_REST_API_TOKEN": "Present" if remote.token else "Missing",
                "message": "Please configure the KV environment variables",
            },
        )

    test_key = f"health_check_{int(time.time() * 1000)}"
    try:
        await store.set(test_key, "ok", ex=provider.storage_settings.health_check_ttl_seconds)
        result = await store.get(test_key)
        await store.delete(test_key)
    except Exception as e:
        logger.error("health_check_failed", error=str(e))
        return error_response("Server storage unavailable", str(e))

    if result != "ok":
        logger.warning("health_check_mismatch", key=test_key)
        return error_response("Redis test failed")

    return StorageWriteResponse(message="Server storage is available")


@router.get("/{key}")
async def read_key(store: RemoteStore, key: StorageKey):
    """Read one key."""
    if store is None:
        return redis_not_available()

    try:
        data = await store.get(key)
    except Exception as e:
        logger.error("storage_get_failed", key=key, error=str(e))
        return error_response("Failed to read data", str(e))

    return StorageReadResponse(data=data)


@router.post("/{key}")
async def write_key(request: Request, store: RemoteStore, key: StorageKey):
    """
    Write one key from a ``{data}`` body.

    ``data: null`` removes the key.
    """
    try:
        payload = StorageWriteRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        return error_response("Invalid request body", str(e), status_code=400)

    if store is None:
        return redis_not_available()

    try:
        if payload.data is None:
            await store.delete(key)
            return StorageWriteResponse(message="Data removed successfully")
        await store.set(key, payload.data)
    except Exception as e:
        logger.error("storage_post_failed", key=key, error=str(e))
        return error_response("Failed to save data", str(e))

    return StorageWriteResponse(message="Data saved successfully")


@router.delete("/{key}")
async def delete_key(store: RemoteStore, key: StorageKey):
    """Delete one key."""
    if store is None:
        return redis_not_available()

    try:
        await store.delete(key)
    except Exception as e:
        logger.error("storage_delete_failed", key=key, error=str(e))
        return error_response("Failed to delete data", str(e))

    return StorageWriteResponse(message="Data deleted successfully")
