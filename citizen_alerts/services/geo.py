"""Location string parsing and great-circle distance."""

import math
import re

from citizen_alerts.schemas.alert import Coordinates

EARTH_RADIUS_KM = 6371.0

_POINT_PREFIX = re.compile(r"^point", re.IGNORECASE)


def _parse_float(token: str) -> float | None:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_location_string(value: str | None) -> tuple[float, float] | None:
    """
    Parse a location string into a (latitude, longitude) pair.

    Accepts WKT points, which are longitude-first ("POINT(114.17 22.28)"),
    and comma-separated pairs, which are latitude-first ("22.28, 114.17").

    Returns:
        (latitude, longitude), or None if the string is not parseable
    """
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    if _POINT_PREFIX.match(text):
        cleaned = _POINT_PREFIX.sub("", text).replace("(", "").replace(")", "")
        parts = cleaned.split()
        if len(parts) < 2:
            return None
        longitude = _parse_float(parts[0])
        latitude = _parse_float(parts[1])
    elif "," in text:
        parts = [part.strip() for part in text.split(",")]
        if len(parts) < 2:
            return None
        latitude = _parse_float(parts[0])
        longitude = _parse_float(parts[1])
    else:
        return None

    if latitude is None or longitude is None:
        return None
    return latitude, longitude


def coordinates_in_range(latitude: float, longitude: float) -> bool:
    """Check latitude/longitude are within [-90, 90] and [-180, 180]."""
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dl / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)
