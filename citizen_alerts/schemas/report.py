"""Pydantic schemas for report submission."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

REPORT_TYPE_USER = "user"


class ReportCoordinates(BaseModel):
    """Coordinate pair sent with a report."""

    latitude: float
    longitude: float


class ReportSubmission(BaseModel):
    """Outbound report payload.

    ``incident_type`` is only set for reports against a new incident; when
    ``incident_id`` points at an existing incident the type is omitted.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    location_coordinates: ReportCoordinates
    location_description: str | None = None
    incident_type: str | None = None
    credibility: int
    urgency: int
    report_type: str = REPORT_TYPE_USER
    description: str | None = None
    incident_id: int | None = None

    def to_payload(self) -> dict:
        """JSON body with camelCase keys and absent optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ReportAck(BaseModel):
    """Backend response to a report submission."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    report_id: int | None = None
    type: str | None = None
    location_coordinates: ReportCoordinates | None = None
    location_description: str | None = None
    credibility: int | None = None
    urgency: int | None = None
    report_type: str | None = None
    incident_id: int | None = None
    timestamp: str | None = None
    description: str | None = None
