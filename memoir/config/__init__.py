"""Configuration package."""

from memoir.config.settings import (
    AppSettings,
    RemoteStoreSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "RemoteStoreSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
