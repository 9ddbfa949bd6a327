"""Library-wide constants."""

from datetime import UTC

DEFAULT_RADIUS_KM = 5.0
EARTH_RADIUS_KM = 6378.1

DEFAULT_TIMEZONE = UTC

MAX_SPOT_IMAGES = 6

REQUIRED_SPACE_FIELDS = (
    "owner",
    "address",
    "spot_type",
    "vehicle_size",
    "spaces_to_rent",
    "title",
    "description",
    "spot_images",
    "price_per_hour",
    "price_per_day",
    "price_per_month",
    "available_from",
    "custom_times",
)
