"""REST listing service store implementation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

import aiohttp

from ...exceptions import NotFoundError, StoreError, ValidationError
from ...geo import within_spherical_cap
from ...models import AvailabilitySlot, GeoPoint, ParkingSpace, Weekday
from ...util import (
    format_clock_time,
    format_utc_timestamp,
    make_geo_point,
    parse_clock_time,
    parse_timestamp,
)
from ..base import BaseStore
from ..loader import StoreManifest
from .const import DEFAULT_HEADERS, ENVELOPE_KEY, NEARBY_ENDPOINT, SPACE_ENDPOINT, SPACES_ENDPOINT

_LOGGER = logging.getLogger(__name__)

_TEXT_FIELDS = {
    "address": "address",
    "title": "title",
    "description": "description",
    "access_instructions": "accessInstructions",
    "spot_type": "spotType",
    "vehicle_size": "vehicleSize",
}
_PRICE_FIELDS = {
    "price_per_hour": "pricePerHour",
    "price_per_day": "pricePerDay",
    "price_per_month": "pricePerMonth",
}


class Store(BaseStore):
    """Store backed by a remote listing service with native geo queries."""

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
        """Initialize the store."""
        super().__init__(
            manifest,
            session=session,
            base_url=base_url,
            api_uri=api_uri,
            timeout=timeout,
            retry_count=retry_count,
        )

    async def find_within_radius(
        self,
        center: GeoPoint,
        radius_radians: float,
        min_available_from: datetime,
    ) -> list[ParkingSpace]:
        """Return available spaces inside the cap, open on or before the given time."""
        _LOGGER.debug("Store %s find_within_radius started", self.store_id)
        threshold = parse_timestamp(min_available_from)
        params = {
            "lng": repr(center.lng),
            "lat": repr(center.lat),
            "radius": repr(radius_radians),
            "availableFrom": format_utc_timestamp(threshold),
            "isAvailable": "true",
        }
        data = await self._request_json(
            "GET",
            NEARBY_ENDPOINT,
            params=params,
            headers=dict(DEFAULT_HEADERS),
        )
        received = self._map_space_list(self._unwrap(data))
        # Results must satisfy the gate even when the service ignores its filters.
        spaces = [
            space
            for space in received
            if within_spherical_cap(center, space.location, radius_radians)
            and self._is_open_for(space, threshold)
        ]
        _LOGGER.debug(
            "Store %s find_within_radius completed with %d of %d spaces",
            self.store_id,
            len(spaces),
            len(received),
        )
        return spaces

    async def get_by_id(self, space_id: str) -> ParkingSpace | None:
        """Return a space by id, or None when it does not exist."""
        try:
            data = await self._request_json(
                "GET",
                SPACE_ENDPOINT.format(space_id=quote(space_id, safe="")),
                headers=dict(DEFAULT_HEADERS),
            )
        except NotFoundError:
            return None
        return self._map_space(self._unwrap(data))

    async def list_spaces(self) -> list[ParkingSpace]:
        """Return every stored space."""
        data = await self._request_json("GET", SPACES_ENDPOINT, headers=dict(DEFAULT_HEADERS))
        return self._map_space_list(self._unwrap(data))

    async def save(self, space: ParkingSpace) -> ParkingSpace:
        """Upsert a space and return the record as stored by the service."""
        data = await self._request_json(
            "PUT",
            SPACE_ENDPOINT.format(space_id=quote(space.id, safe="")),
            json=self._serialize_space(space),
            headers=dict(DEFAULT_HEADERS),
        )
        return self._map_space(self._unwrap(data))

    def _unwrap(self, data: Any) -> Any:
        if isinstance(data, dict) and ENVELOPE_KEY in data:
            return data[ENVELOPE_KEY]
        return data

    def _map_space_list(self, data: Any) -> list[ParkingSpace]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError("Store response included invalid parking spaces.")
        return [self._map_space(item) for item in data if isinstance(item, dict)]

    def _map_space(self, data: Any) -> ParkingSpace:
        if not isinstance(data, dict):
            raise StoreError("Store response included invalid parking space data.")
        space_id = self._coerce_response_id(data.get("_id", data.get("id")), "space id")
        owner_id = self._coerce_owner(data.get("owner"))
        location = self._map_coordinates(data.get("coordinates"))
        available_raw = data.get("availableFrom")
        if available_raw is None:
            raise StoreError("Store response missing availableFrom.")
        try:
            available_from = parse_timestamp(available_raw)
        except ValidationError as exc:
            raise StoreError("Store returned invalid availableFrom.") from exc
        text_values = {
            name: self._coerce_text(data.get(wire_name)) for name, wire_name in _TEXT_FIELDS.items()
        }
        prices = {
            name: self._parse_price(data.get(wire_name)) for name, wire_name in _PRICE_FIELDS.items()
        }
        return ParkingSpace(
            id=space_id,
            owner_id=owner_id,
            location=location,
            available_from=available_from,
            is_available=data.get("isAvailable", True) is True,
            weekly_availability=self._map_slots(data.get("daysAvailable")),
            spaces_to_rent=self._parse_int(data.get("spacesToRent"), default=1),
            spot_images=self._map_images(data.get("spotImages")),
            **text_values,
            **prices,
        )

    def _map_coordinates(self, raw: Any) -> GeoPoint:
        # GeoJSON order: [lng, lat].
        if not isinstance(raw, list) or len(raw) != 2:
            raise StoreError("Store response included invalid coordinates.")
        try:
            return make_geo_point(raw[1], raw[0])
        except ValidationError as exc:
            raise StoreError("Store response included invalid coordinates.") from exc

    def _map_slots(self, raw: Any) -> tuple[AvailabilitySlot, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise StoreError("Store response included invalid availability.")
        slots: list[AvailabilitySlot] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                day = Weekday(item.get("day"))
            except ValueError as exc:
                raise StoreError("Store response included an unknown weekday.") from exc
            from_time = parse_clock_time(item.get("fromTime"))
            to_time = parse_clock_time(item.get("toTime"))
            if from_time is None or to_time is None:
                raise StoreError("Store response included invalid opening hours.")
            slots.append(AvailabilitySlot(day=day, from_time=from_time, to_time=to_time))
        return tuple(slots)

    def _map_images(self, raw: Any) -> tuple[str, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise StoreError("Store response included invalid spot images.")
        return tuple(str(item) for item in raw if item)

    def _serialize_space(self, space: ParkingSpace) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "_id": space.id,
            "owner": space.owner_id,
            "coordinates": [space.location.lng, space.location.lat],
            "availableFrom": format_utc_timestamp(parse_timestamp(space.available_from)),
            "isAvailable": space.is_available,
            "daysAvailable": [
                {
                    "day": slot.day.value,
                    "fromTime": format_clock_time(slot.from_time),
                    "toTime": format_clock_time(slot.to_time),
                }
                for slot in space.weekly_availability
            ],
            "spacesToRent": space.spaces_to_rent,
            "spotImages": list(space.spot_images),
        }
        for name, wire_name in _TEXT_FIELDS.items():
            payload[wire_name] = getattr(space, name)
        for name, wire_name in _PRICE_FIELDS.items():
            payload[wire_name] = getattr(space, name)
        return payload

    def _coerce_response_id(self, value: Any, field: str) -> str:
        if value is None:
            raise StoreError(f"Store response missing {field}.")
        text = str(value).strip()
        if not text:
            raise StoreError(f"Store response missing {field}.")
        return text

    def _coerce_owner(self, value: Any) -> str:
        if isinstance(value, dict):
            value = value.get("_id", value.get("id"))
        return self._coerce_response_id(value, "owner")

    def _coerce_text(self, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def _parse_price(self, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def _parse_int(self, value: Any, *, default: int) -> int:
        if value is None or isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return default
            try:
                return int(stripped)
            except ValueError:
                return default
        return default
