"""Spherical radius math and a grid spatial index."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator

from geopy.distance import great_circle

from .const import EARTH_RADIUS_KM
from .exceptions import ValidationError
from .models import GeoPoint

DEFAULT_CELL_SIZE_DEG = 0.05

LngRange = tuple[float, float]


def km_to_radians(distance_km: float) -> float:
    """Convert a surface distance into a central angle on the reference sphere."""
    if isinstance(distance_km, bool) or not isinstance(distance_km, int | float):
        raise ValidationError("Radius must be a number of kilometers.")
    if not math.isfinite(distance_km) or distance_km < 0:
        raise ValidationError("Radius must be a non-negative number of kilometers.")
    return distance_km / EARTH_RADIUS_KM


def central_angle(a: GeoPoint, b: GeoPoint) -> float:
    # Unit radius makes the great-circle distance the angle itself.
    return great_circle((a.lat, a.lng), (b.lat, b.lng), radius=1.0).km


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    return great_circle((a.lat, a.lng), (b.lat, b.lng), radius=EARTH_RADIUS_KM).km


def within_spherical_cap(center: GeoPoint, point: GeoPoint, radius_radians: float) -> bool:
    return central_angle(center, point) <= radius_radians


def bounding_box(center: GeoPoint, radius_radians: float) -> tuple[float, float, list[LngRange]]:
    """Return ``(lat_min, lat_max, lng_ranges)`` enclosing the spherical cap.

    Longitude ranges are split at the antimeridian. A cap touching a pole
    spans every longitude.
    """
    delta_lat = math.degrees(radius_radians)
    lat_min = center.lat - delta_lat
    lat_max = center.lat + delta_lat
    if lat_min <= -90.0 or lat_max >= 90.0 or radius_radians >= math.pi / 2:
        return max(lat_min, -90.0), min(lat_max, 90.0), [(-180.0, 180.0)]
    ratio = math.sin(radius_radians) / math.cos(math.radians(center.lat))
    if ratio >= 1.0:
        return lat_min, lat_max, [(-180.0, 180.0)]
    delta_lng = math.degrees(math.asin(ratio))
    lng_min = center.lng - delta_lng
    lng_max = center.lng + delta_lng
    if lng_min < -180.0:
        return lat_min, lat_max, [(lng_min + 360.0, 180.0), (-180.0, lng_max)]
    if lng_max > 180.0:
        return lat_min, lat_max, [(lng_min, 180.0), (-180.0, lng_max - 360.0)]
    return lat_min, lat_max, [(lng_min, lng_max)]


class GridIndex:
    """Fixed-size lat/lng cell index answering spherical-cap queries.

    Keys come back in first-insertion order. Re-inserting a key moves its
    point but keeps its position.
    """

    def __init__(self, cell_size_deg: float = DEFAULT_CELL_SIZE_DEG) -> None:
        if not cell_size_deg > 0:
            raise ValidationError("cell_size_deg must be positive.")
        self._cell_size = cell_size_deg
        self._cells: dict[tuple[int, int], set[str]] = {}
        self._points: dict[str, GeoPoint] = {}
        self._order: dict[str, int] = {}
        self._next_order = 0

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, key: object) -> bool:
        return key in self._points

    def _cell_of(self, point: GeoPoint) -> tuple[int, int]:
        return (
            math.floor(point.lat / self._cell_size),
            math.floor(point.lng / self._cell_size),
        )

    def insert(self, key: str, point: GeoPoint) -> None:
        if key in self._points:
            self.remove(key)
        self._points[key] = point
        self._cells.setdefault(self._cell_of(point), set()).add(key)
        if key not in self._order:
            self._order[key] = self._next_order
            self._next_order += 1

    def remove(self, key: str) -> None:
        point = self._points.pop(key, None)
        if point is None:
            return
        cell = self._cell_of(point)
        members = self._cells.get(cell)
        if members is not None:
            members.discard(key)
            if not members:
                del self._cells[cell]

    def query(self, center: GeoPoint, radius_radians: float) -> list[str]:
        hits = [
            key
            for key in self._candidate_keys(center, radius_radians)
            if within_spherical_cap(center, self._points[key], radius_radians)
        ]
        hits.sort(key=self._order.__getitem__)
        return hits

    def _candidate_keys(self, center: GeoPoint, radius_radians: float) -> Iterable[str]:
        lat_min, lat_max, lng_ranges = bounding_box(center, radius_radians)
        row_min = math.floor(lat_min / self._cell_size)
        row_max = math.floor(lat_max / self._cell_size)
        columns = [
            (math.floor(lng_lo / self._cell_size), math.floor(lng_hi / self._cell_size))
            for lng_lo, lng_hi in lng_ranges
        ]
        visits = (row_max - row_min + 1) * sum(hi - lo + 1 for lo, hi in columns)
        if visits > len(self._cells):
            # Fewer occupied cells than box cells; filter the occupied ones.
            return list(self._scan_occupied(row_min, row_max, columns))
        return list(self._walk(row_min, row_max, columns))

    def _walk(
        self,
        row_min: int,
        row_max: int,
        columns: list[tuple[int, int]],
    ) -> Iterator[str]:
        for row in range(row_min, row_max + 1):
            for col_min, col_max in columns:
                for col in range(col_min, col_max + 1):
                    yield from self._cells.get((row, col), ())

    def _scan_occupied(
        self,
        row_min: int,
        row_max: int,
        columns: list[tuple[int, int]],
    ) -> Iterator[str]:
        for (row, col), members in self._cells.items():
            if not row_min <= row <= row_max:
                continue
            if any(col_min <= col <= col_max for col_min, col_max in columns):
                yield from members
