"""Great-circle distances and radius search over centre entries."""

from __future__ import annotations

import math
from collections.abc import Iterable

from centrematch.types import LocationEntry, NearbyCentre

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometres, rounded to one decimal place.

    Callers filter out missing or invalid coordinates beforehand.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # rounding can push a just past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round_km(EARTH_RADIUS_KM * c)


def round_km(distance: float) -> float:
    """Round to one decimal place, with halves rounded up."""
    return math.floor(distance * 10 + 0.5) / 10


def is_valid_coordinate(lat: float | None, lng: float | None) -> bool:
    """Check that a latitude/longitude pair is present, finite and in range."""
    if lat is None or lng is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def filter_near_coordinates(
    entries: Iterable[LocationEntry],
    lat: float,
    lng: float,
    radius_km: float,
) -> list[NearbyCentre]:
    """Entries within radius_km of (lat, lng), nearest first.

    Entries without coordinates are skipped, never treated as distance 0.
    """
    nearby: list[NearbyCentre] = []
    for entry in entries:
        if not entry.has_coordinates:
            continue
        distance = distance_km(lat, lng, entry.latitude, entry.longitude)
        if distance <= radius_km:
            nearby.append(NearbyCentre(entry=entry, distance=distance))

    nearby.sort(key=lambda n: n.distance)
    return nearby


def find_nearby_centres(
    centres: Iterable[LocationEntry],
    target_centre_id: int,
    radius_km: float = 10.0,
) -> list[NearbyCentre]:
    """Find centres within radius_km of the target centre, nearest first.

    The target itself is excluded. Returns an empty list when the target is
    unknown or has no coordinates.
    """
    centres = list(centres)
    target = next((c for c in centres if c.centre_id == target_centre_id), None)
    if target is None or not target.has_coordinates:
        return []

    others = [c for c in centres if c.centre_id != target_centre_id]
    return filter_near_coordinates(others, target.latitude, target.longitude, radius_km)
