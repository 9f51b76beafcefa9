"""API routes."""

from memoir.api.routes.diagnostics import router as diagnostics_router
from memoir.api.routes.storage import router as storage_router

__all__ = [
    "diagnostics_router",
    "storage_router",
]
