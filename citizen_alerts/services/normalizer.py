"""Conversion between backend incident/report records and client alerts."""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from citizen_alerts.config import get_settings
from citizen_alerts.schemas.alert import Alert, AnonymityLevel, Location, UserReportInput
from citizen_alerts.schemas.incident import RawIncident
from citizen_alerts.schemas.report import ReportAck, ReportCoordinates, ReportSubmission
from citizen_alerts.services.geo import coordinates_in_range, parse_location_string
from citizen_alerts.services.severity import credibility_for, severity_level, urgency_for
from citizen_alerts.services.timestamps import parse_timestamp
from citizen_alerts.services.type_mapper import alert_type_from_backend, backend_type_for

logger = logging.getLogger(__name__)
settings = get_settings()

# Credibility above which an alert counts as verified
INGESTED_VERIFIED_THRESHOLD = 60
SUBMITTED_VERIFIED_THRESHOLD = 50


@dataclass
class NormalizationStats:
    """Outcome of the last normalization batch."""

    received: int = 0
    normalized: int = 0
    reasons: Counter = field(default_factory=Counter)

    @property
    def skipped(self) -> int:
        return self.received - self.normalized


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


class IncidentNormalizer:
    """
    Normalizes backend incidents into alerts and composes report payloads.

    Records that cannot be normalized are skipped, logged and counted; they
    never abort a batch.
    """

    def __init__(self, strict_coordinates: bool = settings.strict_coordinates):
        self.strict_coordinates = strict_coordinates
        self.last_stats = NormalizationStats()

    def _skip(self, stats: NormalizationStats | None, reason: str, incident_id: Any) -> None:
        logger.warning(f"Skipping incident {incident_id}: {reason}")
        if stats is not None:
            stats.reasons[reason] += 1

    def _resolve_coordinates(
        self, raw: RawIncident, stats: NormalizationStats | None
    ) -> tuple[float, float] | None:
        coords = raw.location_coordinates
        if coords is not None:
            if coords.latitude is None or coords.longitude is None:
                self._skip(stats, "missing location coordinates", raw.incident_id)
                return None
            latitude, longitude = coords.latitude, coords.longitude
        else:
            # Older backends only send a geometry string
            parsed = parse_location_string(raw.location)
            if parsed is None:
                self._skip(stats, "no parseable location", raw.incident_id)
                return None
            latitude, longitude = parsed

        if not coordinates_in_range(latitude, longitude):
            if self.strict_coordinates:
                self._skip(stats, "coordinates out of range", raw.incident_id)
                return None
            logger.warning(
                f"Incident {raw.incident_id} has out-of-range coordinates "
                f"({latitude}, {longitude})"
            )
        return latitude, longitude

    def _normalize(
        self, raw: RawIncident | Mapping[str, Any], stats: NormalizationStats | None
    ) -> Alert | None:
        if not isinstance(raw, RawIncident):
            try:
                raw = RawIncident.model_validate(raw)
            except ValidationError as e:
                self._skip(stats, "invalid record", "<unparsed>")
                logger.debug(f"Validation errors: {e}")
                return None

        coordinates = self._resolve_coordinates(raw, stats)
        if coordinates is None:
            return None
        latitude, longitude = coordinates

        alert_type = alert_type_from_backend(raw.type)
        created_at = parse_timestamp(raw.first_reported_at) or datetime.now(UTC)
        updated_at = parse_timestamp(raw.last_reported_at) or created_at
        if updated_at < created_at:
            logger.warning(
                f"Incident {raw.incident_id} last report ({updated_at}) "
                f"precedes first report ({created_at})"
            )

        description = _blank_to_none(raw.description)

        return Alert(
            incident_id=raw.incident_id,
            type=alert_type,
            title=description or alert_type.label,
            description=raw.description,
            location=Location(
                latitude=latitude,
                longitude=longitude,
                address=raw.location_description,
            ),
            severity=severity_level(raw.urgency, raw.credibility),
            created_at=created_at,
            updated_at=updated_at,
            photos=[],
            is_verified=(raw.credibility or 0) > INGESTED_VERIFIED_THRESHOLD,
            # TODO: propagate raw.report_count once the backend documents its semantics
            report_count=1,
        )

    def normalize(self, raw: RawIncident | Mapping[str, Any]) -> Alert | None:
        """Convert a single backend incident into an alert, or None if unusable."""
        return self._normalize(raw, None)

    def normalize_all(self, raws: Iterable[RawIncident | Mapping[str, Any]]) -> list[Alert]:
        """
        Normalize a batch of incidents.

        Returns:
            Surviving alerts sorted by created_at, newest first
        """
        stats = NormalizationStats()
        alerts: list[Alert] = []
        for raw in raws:
            stats.received += 1
            alert = self._normalize(raw, stats)
            if alert is not None:
                alerts.append(alert)
        stats.normalized = len(alerts)
        self.last_stats = stats

        if stats.skipped:
            logger.info(
                f"Normalized {stats.normalized}/{stats.received} incidents, "
                f"skipped {stats.skipped}: {dict(stats.reasons)}"
            )
        else:
            logger.info(f"Normalized {stats.normalized} incidents")

        return sorted(alerts, key=lambda a: a.created_at, reverse=True)

    def build_submission(
        self,
        report: UserReportInput,
        location: Location,
        existing_incident_id: int | None = None,
    ) -> ReportSubmission:
        """Compose the backend payload for a user report."""
        location_description = _blank_to_none(report.location_description) or location.address
        return ReportSubmission(
            location_coordinates=ReportCoordinates(
                latitude=location.latitude,
                longitude=location.longitude,
            ),
            location_description=location_description,
            incident_type=(
                backend_type_for(report.type) if existing_incident_id is None else None
            ),
            credibility=credibility_for(report.severity),
            urgency=urgency_for(report.severity),
            description=_blank_to_none(report.description),
            incident_id=existing_incident_id,
        )

    def alert_from_ack(
        self,
        ack: ReportAck,
        report: UserReportInput,
        location: Location,
        existing_incident_id: int | None = None,
        photos: list[str] | None = None,
    ) -> Alert:
        """Build the locally created alert for an accepted report."""
        created_at = parse_timestamp(ack.timestamp) or datetime.now(UTC)
        reporter_id = (
            None if report.anonymity_level == AnonymityLevel.ANONYMOUS else report.reporter_id
        )
        return Alert(
            incident_id=ack.incident_id if ack.incident_id is not None else existing_incident_id,
            type=report.type,
            title=_blank_to_none(report.title) or report.type.label,
            description=_blank_to_none(report.description) or ack.description,
            location=Location(
                latitude=location.latitude,
                longitude=location.longitude,
                address=_blank_to_none(report.location_description) or location.address,
                city=location.city,
            ),
            severity=report.severity,
            created_at=created_at,
            updated_at=created_at,
            photos=photos or [],
            is_verified=(ack.credibility or 0) > SUBMITTED_VERIFIED_THRESHOLD,
            report_count=1,
            reporter_id=reporter_id,
        )
