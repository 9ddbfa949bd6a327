"""Nearby search: geographic radius, opening date and weekly hours."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, tzinfo
from typing import Any

from .const import DEFAULT_RADIUS_KM, DEFAULT_TIMEZONE
from .exceptions import StoreTimeoutError, ValidationError
from .geo import km_to_radians
from .matcher import matches
from .models import GeoPoint, ParkingSpace, SearchQuery
from .store.base import BaseStore
from .util import parse_origin, parse_timestamp

_LOGGER = logging.getLogger(__name__)

Origin = str | Sequence[Any] | GeoPoint


def build_search_query(
    origin: Origin | None,
    requested_start: str | datetime | None,
    requested_end: str | datetime | None,
    *,
    tz: tzinfo = DEFAULT_TIMEZONE,
    strict: bool = False,
) -> SearchQuery:
    """Validate raw request values into a SearchQuery.

    ``strict`` additionally rejects windows that do not end after they start.
    """
    point = parse_origin(origin)
    start = parse_timestamp(requested_start, tz)
    end = parse_timestamp(requested_end, tz)
    if strict and end <= start:
        raise ValidationError("requested_end must be after requested_start.")
    return SearchQuery(origin=point, requested_start=start, requested_end=end)


async def find_candidates(
    store: BaseStore,
    query: SearchQuery,
    *,
    radius_km: float = DEFAULT_RADIUS_KM,
    timeout: float | None = None,
) -> list[ParkingSpace]:
    """Ask the store for available spaces within ``radius_km`` of the origin."""
    radius_radians = km_to_radians(radius_km)
    try:
        async with asyncio.timeout(timeout):
            return await store.find_within_radius(
                query.origin,
                radius_radians,
                query.requested_start,
            )
    except TimeoutError as exc:
        raise StoreTimeoutError("Store query timed out.") from exc


async def search_nearby(
    store: BaseStore,
    origin: Origin | None,
    requested_start: str | datetime | None,
    requested_end: str | datetime | None,
    *,
    radius_km: float = DEFAULT_RADIUS_KM,
    tz: tzinfo = DEFAULT_TIMEZONE,
    strict: bool = False,
    timeout: float | None = None,
) -> list[ParkingSpace]:
    """Return spaces near ``origin`` that are open for the whole requested window.

    Results keep the order the store returned them in. Any validation or store
    failure aborts the search.
    """
    query = build_search_query(origin, requested_start, requested_end, tz=tz, strict=strict)
    _LOGGER.debug("Search started on store %s", store.store_id)
    candidates = await find_candidates(store, query, radius_km=radius_km, timeout=timeout)
    results = [
        space
        for space in candidates
        if matches(space.weekly_availability, query, tz=tz, strict=strict)
    ]
    _LOGGER.debug(
        "Search completed: %d candidates, %d matches",
        len(candidates),
        len(results),
    )
    return results
