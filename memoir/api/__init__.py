"""Storage API (server tier)."""

from memoir.api.app import create_app

__all__ = ["create_app"]
