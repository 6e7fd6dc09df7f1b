"""Great-circle distance and bounding boxes (degrees in, kilometres out)."""
import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0
# Rounded down from ~111.19 so derived boxes are never too small.
KM_PER_DEGREE_LAT = 111.0
DEFAULT_RADIUS_KM = 10.0


def great_circle_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Distance in km using the spherical law of cosines form of the haversine
    query. The cosine is clamped to [-1, 1]: rounding can push it just past 1
    for near-identical points, which would make acos raise.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    cos_angle = (
        math.cos(phi1) * math.cos(phi2) * math.cos(math.radians(lng2) - math.radians(lng1))
        + math.sin(phi1) * math.sin(phi2)
    )
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return EARTH_RADIUS_KM * math.acos(cos_angle)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lng rectangle; bounds are inclusive."""

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """
    Smallest convenient box guaranteed to contain every point within radius_km
    of (lat, lng). Falls back to the full longitude range near the poles and
    when the box would cross the antimeridian.
    """
    lat_delta = radius_km / KM_PER_DEGREE_LAT
    min_lat = max(-90.0, lat - lat_delta)
    max_lat = min(90.0, lat + lat_delta)

    # Longitude degrees shrink towards the poles: size for the extreme latitude.
    widest = math.cos(math.radians(max(abs(min_lat), abs(max_lat))))
    if widest <= 1e-9:
        return BoundingBox(min_lat, -180.0, max_lat, 180.0)
    lng_delta = radius_km / (KM_PER_DEGREE_LAT * widest)
    if lng_delta >= 180.0 or lng - lng_delta < -180.0 or lng + lng_delta > 180.0:
        return BoundingBox(min_lat, -180.0, max_lat, 180.0)
    return BoundingBox(min_lat, lng - lng_delta, max_lat, lng + lng_delta)
