"""Pydantic schemas for backend records, alerts and API payloads."""

from citizen_alerts.schemas.alert import (
    Alert,
    AlertsResponse,
    AlertType,
    AnonymityLevel,
    Coordinates,
    Location,
    Severity,
    SortKey,
    UserReportInput,
)
from citizen_alerts.schemas.chat import ChatAlertCard, ChatMessage
from citizen_alerts.schemas.incident import LocationCoordinates, RawIncident
from citizen_alerts.schemas.report import ReportAck, ReportCoordinates, ReportSubmission

__all__ = [
    "Alert",
    "AlertsResponse",
    "AlertType",
    "AnonymityLevel",
    "ChatAlertCard",
    "ChatMessage",
    "Coordinates",
    "Location",
    "LocationCoordinates",
    "RawIncident",
    "ReportAck",
    "ReportCoordinates",
    "ReportSubmission",
    "Severity",
    "SortKey",
    "UserReportInput",
]
