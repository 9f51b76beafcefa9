"""
Diagnostic routes for checking the remote store from a browser.

/kv-debug only reports configuration. /test-kv runs a set/get/del round trip
against the configured store and reports each step.
"""

import time
from urllib.parse import urlparse

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from memoir.api.dependencies import AppConfig, Provider
from memoir.models.storage import utc_timestamp


logger = structlog.get_logger(__name__)
router = APIRouter(tags=["diagnostics"])

TEST_KEY_TTL_SECONDS = 60


@router.get("/kv-debug")
async def kv_debug(provider: Provider, app_settings: AppConfig):
    """Report which KV variables are present. Never echoes the token."""
    remote = provider.remote_settings
    url, token, redis_url = remote.url, remote.token, remote.redis_url

    return {
        "environment": {
            "APP_ENVIRONMENT": app_settings.app_environment,
            "DEBUG_MODE": app_settings.debug_mode,
        },
        "storage_mode": provider.mode,
        "kv_config": {
            "KV_REST_API_URL": {
                "present": True,
                "format": "valid https" if url.startswith("https://") else "invalid format",
                "domain": urlparse(url).netloc or "unknown",
                "length": len(url),
            } if url else {"present": False},
            "KV_REST_API_TOKEN": {
                "present": True,
                "length": len(token),
                "starts_with": token[:4] + "...",
            } if token else {"present": False},
            "REDIS_URL": {
                "present": True,
                "format": "valid redis url" if redis_url.startswith(("redis://", "rediss://")) else "invalid format",
                "length": len(redis_url),
            } if redis_url else {"present": False},
        },
        "timestamp": utc_timestamp(),
    }


@router.api_route("/test-kv", methods=["GET", "POST"])
async def test_kv(provider: Provider):
    """Exercise SET (with expiry), GET and DEL and report each result."""
    remote = provider.remote_settings

    if not remote.is_configured:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Missing KV environment variables",
                "details": {
                    "KV_REST_API_URL": "Present" if remote.url else "Missing",
                    "KV_REST_API_TOKEN": "Present" if remote.token else "Missing",
                },
            },
        )

    if not remote.url.startswith("https://"):
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Invalid KV_REST_API_URL format",
                "details": {"expected": "Should start with https://"},
            },
        )

    store = provider.get()
    test_key = f"memoir_health_check_{int(time.time() * 1000)}"
    test_value = "connection_test"

    try:
        set_ok = await store.set(test_key, test_value, ex=TEST_KEY_TTL_SECONDS)
        retrieved = await store.get(test_key)
        deleted = await store.delete(test_key)
    except Exception as e:
        logger.error("kv_test_failed", error=str(e))
        message = str(e)
        details = {"message": message, "type": type(e).__name__}
        if "401" in message or "Unauthorized" in message:
            details["suggestion"] = "Check if your KV_REST_API_TOKEN is correct"
        elif "connect" in message.lower() or "network" in message.lower():
            details["suggestion"] = "Check if your KV_REST_API_URL is correct and accessible"
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "KV operation failed",
                "details": details,
                "timestamp": utc_timestamp(),
            },
        )

    consistent = retrieved == test_value
    return {
        "success": True,
        "message": "KV connection test successful",
        "tests": {
            "operations": {
                "set": "success" if set_ok else "unexpected result",
                "get": "success" if consistent else f"data mismatch: got {retrieved!r}",
                "delete": "success" if deleted == 1 else f"unexpected result: {deleted}",
            },
            "data": {
                "testKey": test_key,
                "testValue": test_value,
                "retrievedValue": retrieved,
                "isConsistent": consistent,
            },
        },
        "timestamp": utc_timestamp(),
    }
