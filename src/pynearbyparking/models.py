"""Public data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum


class Weekday(Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


# Indexed by datetime.weekday().
WEEKDAYS: tuple[Weekday, ...] = (
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
)


@dataclass(frozen=True, slots=True)
class StoreInfo:
    id: str
    native_geo_index: bool


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class AvailabilitySlot:
    day: Weekday
    from_time: time
    to_time: time


@dataclass(frozen=True, slots=True)
class ParkingSpace:
    id: str
    owner_id: str
    location: GeoPoint
    available_from: datetime
    is_available: bool = True
    weekly_availability: tuple[AvailabilitySlot, ...] = ()
    address: str = ""
    title: str = ""
    description: str = ""
    access_instructions: str = ""
    spot_type: str = ""
    vehicle_size: str = ""
    spaces_to_rent: int = 1
    price_per_hour: float | None = None
    price_per_day: float | None = None
    price_per_month: float | None = None
    spot_images: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class SearchQuery:
    origin: GeoPoint
    requested_start: datetime
    requested_end: datetime
