"""FastAPI dependencies."""

import logging
from typing import Iterator

import httpx
from fastapi import Depends

from smithsonian_open_access.client import OpenAccessClient
from smithsonian_open_access.config import SettingsStore, get_settings


def get_settings_store() -> SettingsStore:
    """Settings store backed by the configured settings file."""
    return SettingsStore.from_settings(get_settings())


def get_http_client() -> Iterator[httpx.Client]:
    """One HTTP client per inbound request, closed afterwards."""
    settings = get_settings()
    with httpx.Client(
        timeout=settings.timeout,
        headers={"Accept": "application/json", "User-Agent": "SmithsonianOpenAccess/1.0"},
        follow_redirects=True,
    ) as client:
        yield client


def get_api_client(
    store: SettingsStore = Depends(get_settings_store),
    http: httpx.Client = Depends(get_http_client),
) -> OpenAccessClient:
    """Get Open Access client instance via dependency injection."""
    return OpenAccessClient(
        config_provider=store.load,
        http=http,
        logger=logging.getLogger("smithsonian_open_access.client"),
    )
