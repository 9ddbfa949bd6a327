"""Shared utilities for validation and normalization."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import UTC, date, datetime, time, tzinfo
from typing import Any

from .const import DEFAULT_TIMEZONE
from .exceptions import ValidationError
from .models import GeoPoint

_CLOCK_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def _coerce_coordinate(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("Invalid location format.")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError("Invalid location format.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Invalid location format.") from exc
    if not math.isfinite(number):
        raise ValidationError("Invalid location format.")
    return number


def make_geo_point(lat: Any, lng: Any) -> GeoPoint:
    lat_value = _coerce_coordinate(lat)
    lng_value = _coerce_coordinate(lng)
    if not -90.0 <= lat_value <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90.")
    if not -180.0 <= lng_value <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180.")
    return GeoPoint(lat=lat_value, lng=lng_value)


def parse_origin(value: str | Sequence[Any] | GeoPoint | None) -> GeoPoint:
    """Parse a search origin given as ``"lat,lng"``, a pair, or a GeoPoint."""
    if value is None or value == "":
        raise ValidationError("Location is required.")
    if isinstance(value, GeoPoint):
        return make_geo_point(value.lat, value.lng)
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, Sequence):
        parts = list(value)
    else:
        raise ValidationError("Invalid location format.")
    if len(parts) != 2:
        raise ValidationError("Invalid location format.")
    return make_geo_point(parts[0], parts[1])


def parse_timestamp(value: str | datetime | date | None, tz: tzinfo = DEFAULT_TIMEZONE) -> datetime:
    """Parse an ISO 8601 value into an aware datetime.

    Naive values are read as wall-clock time in ``tz``.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    else:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Timestamp must be a non-empty string.")
        raw = value.strip()
        if raw.endswith("Z"):
            raw = f"{raw[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise ValidationError("Invalid date format.") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def format_utc_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        raise ValidationError("Timestamp must include timezone information.")
    normalized = value.astimezone(UTC).replace(microsecond=0)
    return normalized.isoformat().replace("+00:00", "Z")


def parse_clock_time(value: Any) -> time | None:
    """Parse an ``HH:MM`` clock time, returning None when malformed."""
    if not isinstance(value, str):
        return None
    match = _CLOCK_TIME_RE.match(value.strip())
    if match is None:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def format_clock_time(value: time) -> str:
    return value.strftime("%H:%M")


def require_id(value: Any, field: str) -> str:
    if value is None:
        raise ValidationError(f"{field} is required.")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{field} is required.")
    return text
