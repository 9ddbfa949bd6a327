"""Client facade for store discovery and instantiation."""

from __future__ import annotations

import asyncio
import importlib
from typing import Any

import aiohttp

from .exceptions import ConfigError
from .models import StoreInfo
from .store.base import BaseStore
from .store.loader import StoreManifest, get_manifest, list_stores

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)


def _load_store_data(store_id: str) -> tuple[StoreManifest, type[BaseStore]]:
    if not store_id:
        raise ConfigError("Store id is required.")
    manifest = get_manifest(store_id)
    module_name = f"pynearbyparking.store.{store_id}"
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise ConfigError("Store module could not be imported.") from exc
    store_cls = getattr(module, "Store", None)
    if store_cls is None:
        raise ConfigError("Store module does not export Store.")
    if not isinstance(store_cls, type) or not issubclass(store_cls, BaseStore):
        raise ConfigError("Store must inherit from BaseStore.")
    return manifest, store_cls


class Client:
    """Facade for store discovery and access."""

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        base_url: str | None = None,
        api_uri: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._base_url = base_url
        self._api_uri = api_uri
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def list_stores(self) -> list[StoreInfo]:
        return await asyncio.to_thread(list_stores)

    async def get_store(
        self,
        store_id: str,
        *,
        base_url: str | None = None,
        api_uri: str | None = None,
        **options: Any,
    ) -> BaseStore:
        """Instantiate a store; extra ``options`` go to the store constructor."""
        manifest, store_cls = await asyncio.to_thread(_load_store_data, store_id)
        session = self._ensure_session() if manifest.requires_session else self._session
        return store_cls(
            manifest,
            session=session,
            base_url=base_url if base_url is not None else self._base_url,
            api_uri=api_uri if api_uri is not None else self._api_uri,
            timeout=self._timeout,
            retry_count=self._retry_count,
            **options,
        )

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session
