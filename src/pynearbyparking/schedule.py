"""Weekly opening-hours normalization."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .models import WEEKDAYS, AvailabilitySlot, Weekday
from .util import parse_clock_time

OPEN_KEY = "in"
CLOSE_KEY = "out"

_DAY_KEYS: dict[Weekday, str] = {day: day.value.lower() for day in WEEKDAYS}


def day_key(day: Weekday) -> str:
    return _DAY_KEYS[day]


def normalize_schedule(custom_times: Mapping[str, Any] | None) -> list[AvailabilitySlot]:
    """Turn an owner's per-day ``{"in", "out"}`` map into availability slots.

    Days are emitted Monday first. Absent or malformed days count as closed.
    Slots whose opening time is not before their closing time are kept as-is;
    the matcher never accepts them.
    """
    if not isinstance(custom_times, Mapping):
        return []
    slots: list[AvailabilitySlot] = []
    for day in WEEKDAYS:
        entry = custom_times.get(_DAY_KEYS[day])
        if not isinstance(entry, Mapping):
            continue
        from_time = parse_clock_time(entry.get(OPEN_KEY))
        to_time = parse_clock_time(entry.get(CLOSE_KEY))
        if from_time is None or to_time is None:
            continue
        slots.append(AvailabilitySlot(day=day, from_time=from_time, to_time=to_time))
    return slots


def slots_by_day(slots: Iterable[AvailabilitySlot]) -> dict[Weekday, AvailabilitySlot]:
    """Index slots by weekday; a later duplicate never replaces the first."""
    table: dict[Weekday, AvailabilitySlot] = {}
    for slot in slots:
        table.setdefault(slot.day, slot)
    return table
