"""Pydantic schemas for incident records returned by the backend."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LocationCoordinates(BaseModel):
    """Coordinate object; each axis may be missing independently."""

    latitude: float | None = None
    longitude: float | None = None


class RawIncident(BaseModel):
    """Backend incident record (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    incident_id: int | None = None
    type: str | None = None
    location_coordinates: LocationCoordinates | None = None
    location: str | None = None  # Legacy geometry string, e.g. "POINT(lng lat)"
    location_description: str | None = None
    urgency: float | None = None
    credibility: float | None = None
    is_ongoing: bool | None = None
    first_reported_at: str | None = None  # ISO 8601
    last_reported_at: str | None = None  # ISO 8601
    description: str | None = None
    report_count: int | None = None
