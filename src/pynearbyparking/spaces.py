"""Parking-space record creation and lookup."""

from __future__ import annotations

import dataclasses
import logging
import uuid
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from .const import MAX_SPOT_IMAGES, REQUIRED_SPACE_FIELDS
from .exceptions import NotFoundError, ValidationError
from .models import GeoPoint, ParkingSpace
from .schedule import normalize_schedule
from .store.base import BaseStore
from .util import parse_origin, parse_timestamp, require_id

_LOGGER = logging.getLogger(__name__)

OwnerResolver = Callable[[str], Awaitable[str | None]]
Geocoder = Callable[[str], Awaitable[GeoPoint | Sequence[float]]]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _image_urls(raw: Any) -> tuple[str, ...]:
    if isinstance(raw, str) or not isinstance(raw, Sequence):
        raise ValidationError("spot_images must be a list.")
    if len(raw) > MAX_SPOT_IMAGES:
        raise ValidationError(f"You can only upload a maximum of {MAX_SPOT_IMAGES} images.")
    urls: list[str] = []
    for item in raw:
        url = item.get("url") if isinstance(item, Mapping) else item
        if not isinstance(url, str) or not url.strip():
            raise ValidationError("Each spot image needs a URL.")
        urls.append(url.strip())
    return tuple(urls)


def _positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a positive integer.")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a positive integer.") from exc
    if number < 1:
        raise ValidationError(f"{field} must be a positive integer.")
    return number


def _price(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a number.") from exc
    if number < 0:
        raise ValidationError(f"{field} must not be negative.")
    return number


async def create_parking_space(
    store: BaseStore,
    data: Mapping[str, Any],
    *,
    resolve_owner: OwnerResolver,
    geocode: Geocoder,
) -> ParkingSpace:
    """Create a listing from owner input and save it to ``store``.

    The owner reference and the address coordinate come from the injected
    ``resolve_owner`` and ``geocode`` callables.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Parking space data must be a mapping.")
    if any(_is_blank(data.get(field)) for field in REQUIRED_SPACE_FIELDS):
        raise ValidationError("All fields are required.")
    spot_images = _image_urls(data["spot_images"])

    owner_id = await resolve_owner(str(data["owner"]))
    if not owner_id:
        raise ValidationError("Owner not found.")

    location = parse_origin(await geocode(str(data["address"])))
    space = ParkingSpace(
        id=uuid.uuid4().hex,
        owner_id=owner_id,
        location=location,
        available_from=parse_timestamp(data["available_from"]),
        is_available=True,
        weekly_availability=tuple(normalize_schedule(data["custom_times"])),
        address=str(data["address"]),
        title=str(data["title"]),
        description=str(data["description"]),
        access_instructions=str(data.get("access_instructions") or ""),
        spot_type=str(data["spot_type"]),
        vehicle_size=str(data["vehicle_size"]),
        spaces_to_rent=_positive_int(data["spaces_to_rent"], "spaces_to_rent"),
        price_per_hour=_price(data["price_per_hour"], "price_per_hour"),
        price_per_day=_price(data["price_per_day"], "price_per_day"),
        price_per_month=_price(data["price_per_month"], "price_per_month"),
        spot_images=spot_images,
    )
    saved = await store.save(space)
    _LOGGER.debug("Parking space %s created for owner %s", saved.id, owner_id)
    return saved


async def get_parking_space(store: BaseStore, space_id: str) -> ParkingSpace:
    space = await store.get_by_id(require_id(space_id, "space_id"))
    if space is None:
        raise NotFoundError("Parking space not found.")
    return space


async def list_parking_spaces(store: BaseStore) -> list[ParkingSpace]:
    return await store.list_spaces()


async def update_opening_hours(
    store: BaseStore,
    space_id: str,
    custom_times: Mapping[str, Any],
) -> ParkingSpace:
    """Replace a space's weekly availability with a freshly normalized schedule."""
    space = await get_parking_space(store, space_id)
    updated = dataclasses.replace(
        space,
        weekly_availability=tuple(normalize_schedule(custom_times)),
    )
    return await store.save(updated)
