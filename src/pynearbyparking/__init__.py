"""pyNearbyParking package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .client import Client
from .exceptions import (
    AuthError,
    ConfigError,
    NetworkError,
    NotFoundError,
    PyNearbyParkingError,
    StoreError,
    StoreTimeoutError,
    ValidationError,
)
from .models import (
    WEEKDAYS,
    AvailabilitySlot,
    GeoPoint,
    ParkingSpace,
    SearchQuery,
    StoreInfo,
    Weekday,
)
from .schedule import normalize_schedule
from .search import build_search_query, search_nearby
from .spaces import (
    create_parking_space,
    get_parking_space,
    list_parking_spaces,
    update_opening_hours,
)

try:
    __version__ = version("pynearbyparking")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "WEEKDAYS",
    "AuthError",
    "AvailabilitySlot",
    "Client",
    "ConfigError",
    "GeoPoint",
    "NetworkError",
    "NotFoundError",
    "ParkingSpace",
    "PyNearbyParkingError",
    "SearchQuery",
    "StoreError",
    "StoreInfo",
    "StoreTimeoutError",
    "ValidationError",
    "Weekday",
    "__version__",
    "build_search_query",
    "create_parking_space",
    "get_parking_space",
    "list_parking_spaces",
    "normalize_schedule",
    "search_nearby",
    "update_opening_hours",
]
