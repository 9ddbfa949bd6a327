from datetime import UTC, datetime, time

import aiohttp
import pytest

from pynearbyparking.exceptions import StoreError
from pynearbyparking.models import AvailabilitySlot, GeoPoint, Weekday
from pynearbyparking.store.loader import StoreManifest
from pynearbyparking.store.rest.api import Store

SPACE_SAMPLE = {
    "_id": "65f0c0ffee",
    "owner": {"_id": "user-7", "email": "owner@example.com"},
    "address": "1 Market St, San Francisco",
    "coordinates": [-122.42, 37.77],
    "spotType": "Driveway",
    "vehicleSize": "Sedan",
    "spacesToRent": "2",
    "title": "Sunny driveway",
    "description": "Close to the station",
    "accessInstructions": "Gate code 1234",
    "spotImages": ["https://img/1.jpg", "", "https://img/2.jpg"],
    "pricePerHour": "3.5",
    "pricePerDay": 20,
    "pricePerMonth": None,
    "availableFrom": "2024-01-01T08:00:00+01:00",
    "isAvailable": True,
    "daysAvailable": [
        {"day": "Monday", "fromTime": "09:00", "toTime": "17:00"},
        {"day": "Wednesday", "fromTime": "08:00", "toTime": "20:00"},
    ],
}


def _manifest() -> StoreManifest:
    return StoreManifest(
        id="rest",
        name="REST listing service",
        native_geo_index=True,
        requires_session=True,
    )


@pytest.mark.asyncio
async def test_map_space_full_record():
    async with aiohttp.ClientSession() as session:
        store = Store(_manifest(), session=session, base_url="https://example")
        space = store._map_space(SPACE_SAMPLE)

    assert space.id == "65f0c0ffee"
    assert space.owner_id == "user-7"
    assert space.location == GeoPoint(lat=37.77, lng=-122.42)
    assert space.available_from == datetime(2024, 1, 1, 7, 0, tzinfo=UTC)
    assert space.is_available is True
    assert space.weekly_availability == (
        AvailabilitySlot(day=Weekday.MONDAY, from_time=time(9, 0), to_time=time(17, 0)),
        AvailabilitySlot(day=Weekday.WEDNESDAY, from_time=time(8, 0), to_time=time(20, 0)),
    )
    assert space.spaces_to_rent == 2
    assert space.price_per_hour == 3.5
    assert space.price_per_day == 20.0
    assert space.price_per_month is None
    assert space.spot_images == ("https://img/1.jpg", "https://img/2.jpg")
    assert space.access_instructions == "Gate code 1234"


@pytest.mark.asyncio
async def test_map_space_defaults():
    async with aiohttp.ClientSession() as session:
        store = Store(_manifest(), session=session, base_url="https://example")
        space = store._map_space(
            {
                "id": 12,
                "owner": "user-1",
                "coordinates": [4.9, 52.37],
                "availableFrom": "2024-01-01",
            }
        )

    assert space.id == "12"
    assert space.is_available is True
    assert space.weekly_availability == ()
    assert space.spaces_to_rent == 1
    assert space.title == ""
    assert space.available_from == datetime(2024, 1, 1, tzinfo=UTC)


@pytest.mark.asyncio
async def test_is_available_requires_true():
    async with aiohttp.ClientSession() as session:
        store = Store(_manifest(), session=session, base_url="https://example")
        space = store._map_space({**SPACE_SAMPLE, "isAvailable": "yes"})
    assert space.is_available is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"_id": None},
        {"_id": "  "},
        {"owner": None},
        {"coordinates": [37.77]},
        {"coordinates": [-122.42, 137.77]},
        {"coordinates": "nope"},
        {"availableFrom": None},
        {"availableFrom": "yesterday"},
        {"daysAvailable": "Monday"},
        {"daysAvailable": [{"day": "Funday", "fromTime": "09:00", "toTime": "17:00"}]},
        {"daysAvailable": [{"day": "Monday", "fromTime": "9", "toTime": "17:00"}]},
        {"spotImages": "https://img/1.jpg"},
    ],
)
async def test_map_space_rejects_invalid(overrides):
    async with aiohttp.ClientSession() as session:
        store = Store(_manifest(), session=session, base_url="https://example")
        with pytest.raises(StoreError):
            store._map_space({**SPACE_SAMPLE, **overrides})


@pytest.mark.asyncio
async def test_serialize_round_trips_through_mapping():
    async with aiohttp.ClientSession() as session:
        store = Store(_manifest(), session=session, base_url="https://example")
        space = store._map_space(SPACE_SAMPLE)
        assert store._map_space(store._serialize_space(space)) == space
