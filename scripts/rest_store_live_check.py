"""Manual live check for the REST store.

Run from the repository root with:
  PYTHONPATH=src REST_BASE_URL=... REST_ORIGIN="37.77,-122.42" \
  REST_START=2024-03-06T10:00 REST_END=2024-03-06T11:00 \
  python scripts/rest_store_live_check.py

Optional environment variables:
  REST_API_URI
  REST_RADIUS_KM
  REST_TIMEOUT
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from pynearbyparking import Client, search_nearby
from pynearbyparking.exceptions import PyNearbyParkingError
from pynearbyparking.geo import distance_km
from pynearbyparking.models import GeoPoint, ParkingSpace
from pynearbyparking.util import format_clock_time, parse_origin


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        print(f"Missing required environment variable: {name}", file=sys.stderr)
        raise SystemExit(2)
    return value


def _format_space(space: ParkingSpace, origin: GeoPoint) -> str:
    hours = ", ".join(
        f"{slot.day.value[:3]} {format_clock_time(slot.from_time)}-{format_clock_time(slot.to_time)}"
        for slot in space.weekly_availability
    )
    title = space.title or "-"
    return (
        f"{space.id} | {title} | {space.location.lat:.5f},{space.location.lng:.5f} | "
        f"{distance_km(origin, space.location):.2f} km | "
        f"{hours or 'closed'}"
    )


async def main() -> int:
    base_url = _require_env("REST_BASE_URL")
    origin = _require_env("REST_ORIGIN")
    start = _require_env("REST_START")
    end = _require_env("REST_END")
    api_uri = os.getenv("REST_API_URI")
    radius_km = float(os.getenv("REST_RADIUS_KM", "5"))
    timeout = float(os.getenv("REST_TIMEOUT", "30"))

    logging.basicConfig(level=logging.DEBUG if os.getenv("REST_DEBUG") else logging.INFO)
    try:
        async with Client(base_url=base_url, api_uri=api_uri) as client:
            store = await client.get_store("rest")
            results = await search_nearby(
                store,
                origin,
                start,
                end,
                radius_km=radius_km,
                timeout=timeout,
            )
    except PyNearbyParkingError as exc:
        print(f"Error: {exc.__class__.__name__} ({exc.error_code}): {exc}", file=sys.stderr)
        return 1

    print(f"Store: {store.store_name} ({store.store_id})")
    print(f"Matches: {len(results)}")
    origin_point = parse_origin(origin)
    for space in results:
        print(f"- {_format_space(space, origin_point)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
