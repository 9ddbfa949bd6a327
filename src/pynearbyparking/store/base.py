"""Store base class and shared behavior."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import aiohttp

from ..exceptions import (
    AuthError,
    ConfigError,
    NetworkError,
    NotFoundError,
    StoreError,
    StoreTimeoutError,
    ValidationError,
)
from ..models import GeoPoint, ParkingSpace, StoreInfo
from ..util import parse_timestamp
from .loader import StoreManifest

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)


class BaseStore(ABC):
    """Base class for parking-space store implementations."""

    def __init__(
        self,
        manifest: StoreManifest,
        *,
        session: aiohttp.ClientSession | None = None,
        base_url: str | None = None,
        api_uri: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
    ) -> None:
        if manifest.requires_session and session is None:
            raise ValidationError("Session is required.")
        self._session = session
        self._manifest = manifest
        self._base_url = self._normalize_base_url(base_url)
        self._api_uri = self._normalize_api_uri(api_uri)
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)

    @property
    def store_id(self) -> str:
        return self._manifest.id

    @property
    def store_name(self) -> str:
        return self._manifest.name

    @property
    def native_geo_index(self) -> bool:
        return self._manifest.native_geo_index

    @property
    def info(self) -> StoreInfo:
        return StoreInfo(
            id=self._manifest.id,
            native_geo_index=self._manifest.native_geo_index,
        )

    def _build_url(self, path: str) -> str:
        if not isinstance(path, str) or not path:
            raise ValidationError("Path must be a non-empty string.")
        if path.startswith("http://") or path.startswith("https://"):
            raise ValidationError("Use relative paths when building store requests.")
        if self._base_url is None:
            raise ConfigError("base_url is required to build store requests.")
        normalized_path = path if path.startswith("/") else f"/{path}"
        return f"{self._base_url}{self._api_uri}{normalized_path}"

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._build_url(path)
        return await self._request(method, url, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        if self._session is None:
            raise ConfigError("Store has no HTTP session.")
        retries = self._retry_count if method.upper() == "GET" else 0
        attempts = retries + 1
        timeout = kwargs.pop("timeout", None) or self._timeout
        for attempt in range(attempts):
            try:
                async with self._session.request(
                    method,
                    url,
                    timeout=timeout,
                    **kwargs,
                ) as response:
                    self._raise_for_status(response)
                    try:
                        return await response.json()
                    except (aiohttp.ContentTypeError, ValueError) as exc:
                        raise StoreError("Response did not contain valid JSON.") from exc
            except TimeoutError as exc:
                if attempt >= attempts - 1:
                    raise StoreTimeoutError("Store request timed out.") from exc
            except aiohttp.ClientError as exc:
                if attempt >= attempts - 1:
                    raise NetworkError("Network request failed.") from exc
        raise StoreError("Request failed.")

    @staticmethod
    def _is_open_for(space: ParkingSpace, threshold: datetime) -> bool:
        """Return True when the space is flagged available and open by ``threshold``."""
        if space.is_available is not True:
            return False
        return parse_timestamp(space.available_from) <= threshold

    def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        if 200 <= response.status < 300:
            return
        if response.status in (401, 403):
            raise AuthError("Authentication failed.")
        if response.status == 404:
            raise NotFoundError("Store resource not found.")
        raise StoreError(f"Store request failed with status {response.status}.")

    def _normalize_base_url(self, base_url: str | None) -> str | None:
        if base_url is None:
            return None
        if not isinstance(base_url, str) or not base_url.strip():
            raise ValidationError("base_url must be a non-empty string.")
        return base_url.strip().rstrip("/")

    def _normalize_api_uri(self, api_uri: str | None) -> str:
        if api_uri is None:
            return ""
        if not isinstance(api_uri, str):
            raise ValidationError("api_uri must be a string.")
        normalized = api_uri.strip().strip("/")
        if not normalized:
            return ""
        return f"/{normalized}"

    @abstractmethod
    async def find_within_radius(
        self,
        center: GeoPoint,
        radius_radians: float,
        min_available_from: datetime,
    ) -> list[ParkingSpace]:
        """Return available spaces inside the cap, open on or before the given time."""

    @abstractmethod
    async def get_by_id(self, space_id: str) -> ParkingSpace | None:
        """Return a space by id, or None when it does not exist."""

    @abstractmethod
    async def list_spaces(self) -> list[ParkingSpace]:
        """Return every stored space."""

    @abstractmethod
    async def save(self, space: ParkingSpace) -> ParkingSpace:
        """Insert or replace a space and return the stored record."""
