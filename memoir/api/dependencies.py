"""FastAPI dependencies for the storage API."""

from typing import Annotated, Optional

from fastapi import Depends, Request

from memoir.config import AppSettings
from memoir.services.storage.interface import RemoteStoreInterface
from memoir.services.storage.provider import RemoteStoreProvider


def get_provider(request: Request) -> RemoteStoreProvider:
    """The provider created by create_app()."""
    return request.app.state.remote_provider


def get_app_settings(request: Request) -> AppSettings:
    """Application settings the app was built with."""
    return request.app.state.app_settings


def get_remote_store(
    provider: Annotated[RemoteStoreProvider, Depends(get_provider)],
) -> Optional[RemoteStoreInterface]:
    """The remote store, or None when it is not configured."""
    return provider.get()


AppConfig = Annotated[AppSettings, Depends(get_app_settings)]
Provider = Annotated[RemoteStoreProvider, Depends(get_provider)]
RemoteStore = Annotated[Optional[RemoteStoreInterface], Depends(get_remote_store)]
