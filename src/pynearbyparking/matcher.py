"""Match requested reservation windows against weekly opening hours."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, time, tzinfo

from .const import DEFAULT_TIMEZONE
from .models import WEEKDAYS, AvailabilitySlot, SearchQuery, Weekday
from .schedule import slots_by_day


def query_weekday(moment: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> Weekday:
    return WEEKDAYS[_to_zone(moment, tz).weekday()]


def time_of_day(moment: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> time:
    """Wall-clock ``HH:MM`` of ``moment`` in ``tz``; seconds are dropped."""
    local = _to_zone(moment, tz)
    return time(local.hour, local.minute)


def _to_zone(moment: datetime, tz: tzinfo) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def find_slot(
    slots: Iterable[AvailabilitySlot],
    day: Weekday,
) -> AvailabilitySlot | None:
    return slots_by_day(slots).get(day)


def contains_clock_window(slot: AvailabilitySlot, start: time, end: time) -> bool:
    """Clock-time containment; calendar dates play no part."""
    if slot.from_time >= slot.to_time:
        return False
    return start >= slot.from_time and end <= slot.to_time


def contains_anchored_window(
    slot: AvailabilitySlot,
    start: datetime,
    end: datetime,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> bool:
    """Containment against the slot opened on the start's calendar date."""
    if slot.from_time >= slot.to_time or end <= start:
        return False
    local_start = _to_zone(start, tz)
    opens = datetime.combine(local_start.date(), slot.from_time, tzinfo=tz)
    closes = datetime.combine(local_start.date(), slot.to_time, tzinfo=tz)
    return opens <= local_start and _to_zone(end, tz) <= closes


def matches(
    slots: Iterable[AvailabilitySlot],
    query: SearchQuery,
    *,
    tz: tzinfo = DEFAULT_TIMEZONE,
    strict: bool = False,
) -> bool:
    """Return True when the requested window fits the hours of its weekday.

    By default only the clock times of start and end are compared, so a
    request ending on a later date can still match. ``strict`` anchors the
    slot to the start's calendar date and compares full timestamps.
    """
    slot = find_slot(slots, query_weekday(query.requested_start, tz))
    if slot is None:
        return False
    if strict:
        return contains_anchored_window(slot, query.requested_start, query.requested_end, tz)
    return contains_clock_window(
        slot,
        time_of_day(query.requested_start, tz),
        time_of_day(query.requested_end, tz),
    )
