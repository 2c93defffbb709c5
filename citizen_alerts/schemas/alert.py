"""Pydantic schemas for the client-side alert model."""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    """Client alert taxonomy."""

    FIRE = "fire"
    TRAFFIC = "traffic"
    EMERGENCY = "emergency"
    CRIME = "crime"
    DISASTER = "disaster"
    PUBLIC_SAFETY = "public_safety"
    WEATHER = "weather"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _ALERT_TYPE_LABELS[self]


_ALERT_TYPE_LABELS = {
    AlertType.FIRE: "Fire",
    AlertType.TRAFFIC: "Traffic Accident",
    AlertType.EMERGENCY: "Emergency",
    AlertType.CRIME: "Crime",
    AlertType.DISASTER: "Disaster",
    AlertType.PUBLIC_SAFETY: "Public Safety",
    AlertType.WEATHER: "Weather Alert",
    AlertType.OTHER: "Other",
}


class Severity(str, Enum):
    """Ordinal alert severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordinal position, LOW=0 through CRITICAL=3."""
        return _SEVERITY_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()


_SEVERITY_ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]


class SortKey(str, Enum):
    """Alert list orderings."""

    RECENCY = "recency"
    DISTANCE = "distance"
    SEVERITY = "severity"


class AnonymityLevel(str, Enum):
    """How much of the reporter's identity is attached to a report."""

    ANONYMOUS = "anonymous"
    NICKNAME = "nickname"
    VERIFIED = "verified"


class Coordinates(BaseModel):
    """Geographic coordinates."""

    latitude: float
    longitude: float


class Location(BaseModel):
    """Alert location with optional human-readable parts."""

    latitude: float
    longitude: float
    address: str | None = None
    city: str | None = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class Alert(BaseModel):
    """Normalized, display-ready alert."""

    id: UUID = Field(default_factory=uuid4)
    incident_id: int | None = None
    type: AlertType
    title: str = Field(..., min_length=1)
    description: str | None = None
    location: Location
    severity: Severity = Severity.MEDIUM
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    photos: list[str] = Field(default_factory=list)  # Image URLs or file names
    is_verified: bool = False
    report_count: int = Field(1, ge=1)  # Duplicate/corroborating reports
    reporter_id: str | None = None  # None for anonymous reports


class UserReportInput(BaseModel):
    """User-entered data for a new report."""

    type: AlertType = AlertType.OTHER
    title: str = ""
    description: str = ""
    location: Location | None = None
    location_description: str = ""
    severity: Severity = Severity.MEDIUM
    photos: list[str] = Field(default_factory=list)
    anonymity_level: AnonymityLevel = AnonymityLevel.ANONYMOUS
    reporter_id: str | None = None


class AlertsResponse(BaseModel):
    """Alert list response with the store's load status."""

    alerts: list[Alert]
    total: int
    state: str
    error: str | None = None
