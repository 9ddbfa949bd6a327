"""In-memory store implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

import aiohttp

from ...exceptions import ValidationError
from ...geo import GridIndex
from ...models import GeoPoint, ParkingSpace
from ...util import make_geo_point, parse_timestamp
from ..base import BaseStore
from ..loader import StoreManifest
from .const import GRID_CELL_SIZE_DEG

_LOGGER = logging.getLogger(__name__)


class Store(BaseStore):
    """Store keeping spaces in process memory."""

    def __init__(
        self,
        manifest: StoreManifest,
        *,
        session: aiohttp.ClientSession | None = None,
        base_url: str | None = None,
        api_uri: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
        spaces: Iterable[ParkingSpace] | None = None,
        cell_size_deg: float = GRID_CELL_SIZE_DEG,
    ) -> None:
        """Initialize the store, optionally seeded with spaces."""
        super().__init__(
            manifest,
            session=session,
            base_url=base_url,
            api_uri=api_uri,
            timeout=timeout,
            retry_count=retry_count,
        )
        self._spaces: dict[str, ParkingSpace] = {}
        self._index = GridIndex(cell_size_deg)
        for space in spaces or ():
            self._put(space)

    def __len__(self) -> int:
        return len(self._spaces)

    async def find_within_radius(
        self,
        center: GeoPoint,
        radius_radians: float,
        min_available_from: datetime,
    ) -> list[ParkingSpace]:
        """Return available spaces inside the cap, open on or before the given time."""
        threshold = parse_timestamp(min_available_from)
        keys = self._index.query(center, radius_radians)
        _LOGGER.debug("Store %s radius query hit %d spaces", self.store_id, len(keys))
        return [self._spaces[key] for key in keys if self._is_open_for(self._spaces[key], threshold)]

    async def get_by_id(self, space_id: str) -> ParkingSpace | None:
        """Return a space by id, or None when it does not exist."""
        return self._spaces.get(space_id)

    async def list_spaces(self) -> list[ParkingSpace]:
        """Return every stored space."""
        return list(self._spaces.values())

    async def save(self, space: ParkingSpace) -> ParkingSpace:
        """Insert or replace a space."""
        self._put(space)
        _LOGGER.debug("Store %s saved space %s", self.store_id, space.id)
        return space

    def _put(self, space: ParkingSpace) -> None:
        if not isinstance(space, ParkingSpace):
            raise ValidationError("Only ParkingSpace records can be stored.")
        if not space.id:
            raise ValidationError("Parking space id is required.")
        location = make_geo_point(space.location.lat, space.location.lng)
        self._spaces[space.id] = space
        self._index.insert(space.id, location)
