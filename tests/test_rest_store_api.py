from __future__ import annotations

from datetime import UTC, datetime, time

import pytest

from pynearbyparking.exceptions import AuthError, StoreError
from pynearbyparking.models import AvailabilitySlot, GeoPoint, ParkingSpace, Weekday
from pynearbyparking.search import search_nearby
from pynearbyparking.store.loader import StoreManifest
from pynearbyparking.store.rest.api import Store
from pynearbyparking.store.rest.const import DEFAULT_HEADERS


class _FakeResponse:
    def __init__(self, *, status: int = 200, json_data: object | None = None) -> None:
        self.status = status
        self._json_data = json_data

    async def json(self) -> object:
        return self._json_data


class _FakeRequestContext:
    def __init__(self, response: _FakeResponse) -> None:
        self._response = response

    async def __aenter__(self) -> _FakeResponse:
        return self._response

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class _SequenceSession:
    def __init__(self, responses: list[object]) -> None:
        self._responses = responses
        self.calls = 0
        self.requests: list[dict[str, object]] = []

    def request(self, method: str, url: str, **kwargs) -> _FakeRequestContext:
        self.requests.append({"method": method, "url": url, "kwargs": kwargs})
        self.calls += 1
        response = self._responses[self.calls - 1]
        if isinstance(response, Exception):
            raise response
        return _FakeRequestContext(response)


def _store(session: object) -> Store:
    return Store(
        StoreManifest(
            id="rest",
            name="REST listing service",
            native_geo_index=True,
            requires_session=True,
        ),
        session=session,  # type: ignore[arg-type]
        base_url="https://example",
        api_uri="api",
    )


def _record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "_id": "65f0c0ffee",
        "owner": "owner-1",
        "coordinates": [-122.42, 37.77],
        "availableFrom": "2024-01-01T00:00:00.000Z",
        "isAvailable": True,
        "daysAvailable": [{"day": "Wednesday", "fromTime": "08:00", "toTime": "20:00"}],
        "title": "Driveway",
    }
    record.update(overrides)
    return record


@pytest.mark.asyncio
async def test_find_within_radius_builds_query() -> None:
    session = _SequenceSession([_FakeResponse(json_data={"data": [_record()]})])
    store = _store(session)

    spaces = await store.find_within_radius(
        GeoPoint(lat=37.77, lng=-122.42),
        5 / 6378.1,
        datetime(2024, 3, 6, 10, 0, tzinfo=UTC),
    )

    assert [space.id for space in spaces] == ["65f0c0ffee"]
    request = session.requests[0]
    assert request["method"] == "GET"
    assert request["url"] == "https://example/api/parking-spaces/nearby"
    kwargs = request["kwargs"]
    assert kwargs["params"] == {
        "lng": "-122.42",
        "lat": "37.77",
        "radius": repr(5 / 6378.1),
        "availableFrom": "2024-03-06T10:00:00Z",
        "isAvailable": "true",
    }
    assert kwargs["headers"] == DEFAULT_HEADERS


@pytest.mark.asyncio
async def test_find_within_radius_without_envelope() -> None:
    session = _SequenceSession([_FakeResponse(json_data=[_record(), "junk"])])
    store = _store(session)
    spaces = await store.find_within_radius(
        GeoPoint(lat=37.77, lng=-122.42),
        0.001,
        datetime(2024, 3, 6, 10, 0, tzinfo=UTC),
    )
    assert len(spaces) == 1


@pytest.mark.asyncio
async def test_find_within_radius_drops_records_outside_the_gate() -> None:
    session = _SequenceSession(
        [
            _FakeResponse(
                json_data={
                    "data": [
                        _record(_id="unavailable", isAvailable=False),
                        _record(_id="not-yet-open", availableFrom="2025-01-01T00:00:00Z"),
                        _record(_id="far-away", coordinates=[-122.42, 40.0]),
                        _record(_id="kept"),
                    ]
                }
            )
        ]
    )
    store = _store(session)

    spaces = await store.find_within_radius(
        GeoPoint(lat=37.77, lng=-122.42),
        5 / 6378.1,
        datetime(2024, 3, 6, 10, 0, tzinfo=UTC),
    )

    assert [space.id for space in spaces] == ["kept"]


@pytest.mark.asyncio
async def test_search_nearby_never_returns_gated_records() -> None:
    session = _SequenceSession(
        [
            _FakeResponse(
                json_data=[
                    _record(_id="unavailable", isAvailable=False),
                    _record(_id="not-yet-open", availableFrom="2025-01-01T00:00:00Z"),
                    _record(_id="far-away", coordinates=[-122.42, 40.0]),
                ]
            )
        ]
    )
    store = _store(session)

    results = await search_nearby(
        store,
        "37.77,-122.42",
        "2024-03-06T10:00",
        "2024-03-06T11:00",
    )

    assert results == []


@pytest.mark.asyncio
async def test_find_within_radius_rejects_bad_payload() -> None:
    session = _SequenceSession([_FakeResponse(json_data={"data": {"not": "a list"}})])
    store = _store(session)
    with pytest.raises(StoreError):
        await store.find_within_radius(
            GeoPoint(lat=37.77, lng=-122.42),
            0.001,
            datetime(2024, 3, 6, 10, 0, tzinfo=UTC),
        )


@pytest.mark.asyncio
async def test_get_by_id_missing_returns_none() -> None:
    session = _SequenceSession([_FakeResponse(status=404)])
    store = _store(session)
    assert await store.get_by_id("abc/def") is None
    assert session.requests[0]["url"] == "https://example/api/parking-spaces/abc%2Fdef"


@pytest.mark.asyncio
async def test_get_by_id_propagates_auth_errors() -> None:
    session = _SequenceSession([_FakeResponse(status=401)])
    store = _store(session)
    with pytest.raises(AuthError):
        await store.get_by_id("abc")


@pytest.mark.asyncio
async def test_list_spaces() -> None:
    session = _SequenceSession([_FakeResponse(json_data={"data": [_record(), _record(_id="2")]})])
    store = _store(session)
    spaces = await store.list_spaces()
    assert [space.id for space in spaces] == ["65f0c0ffee", "2"]


@pytest.mark.asyncio
async def test_save_puts_serialized_space() -> None:
    space = ParkingSpace(
        id="new-1",
        owner_id="owner-1",
        location=GeoPoint(lat=37.77, lng=-122.42),
        available_from=datetime(2024, 1, 1, tzinfo=UTC),
        weekly_availability=(
            AvailabilitySlot(day=Weekday.WEDNESDAY, from_time=time(8, 0), to_time=time(20, 0)),
        ),
        title="Driveway",
        price_per_hour=2.5,
        spot_images=("https://img/1.jpg",),
    )
    session = _SequenceSession([_FakeResponse(json_data={"data": _record(_id="new-1")})])
    store = _store(session)

    saved = await store.save(space)

    assert saved.id == "new-1"
    request = session.requests[0]
    assert request["method"] == "PUT"
    assert request["url"] == "https://example/api/parking-spaces/new-1"
    payload = request["kwargs"]["json"]
    assert payload["coordinates"] == [-122.42, 37.77]
    assert payload["availableFrom"] == "2024-01-01T00:00:00Z"
    assert payload["daysAvailable"] == [
        {"day": "Wednesday", "fromTime": "08:00", "toTime": "20:00"}
    ]
    assert payload["pricePerHour"] == 2.5
    assert payload["pricePerDay"] is None
    assert payload["spotImages"] == ["https://img/1.jpg"]
    assert payload["isAvailable"] is True
