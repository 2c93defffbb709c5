"""Tests for incident normalization and report composition."""

from datetime import UTC, datetime

import pytest

from citizen_alerts.schemas.alert import (
    AlertType,
    AnonymityLevel,
    Location,
    Severity,
    UserReportInput,
)
from citizen_alerts.schemas.incident import RawIncident
from citizen_alerts.schemas.report import ReportAck
from citizen_alerts.services.normalizer import IncidentNormalizer


@pytest.fixture
def normalizer() -> IncidentNormalizer:
    return IncidentNormalizer(strict_coordinates=True)


@pytest.fixture
def hong_kong() -> Location:
    return Location(latitude=22.2819, longitude=114.1577, address="Central", city="Hong Kong")


class TestNormalize:
    """Tests for IncidentNormalizer.normalize."""

    def test_full_record(self, normalizer, sample_incident_records):
        alert = normalizer.normalize(sample_incident_records[0])

        assert alert is not None
        assert alert.incident_id == 101
        assert alert.type == AlertType.FIRE
        assert alert.title == "Smoke visible from building near Central MTR station."
        assert alert.description == alert.title
        assert alert.location.latitude == 22.2819
        assert alert.location.longitude == 114.1577
        assert alert.location.address == "Central District"
        assert alert.location.city is None
        assert alert.severity == Severity.CRITICAL  # 63 + 24 = 87
        assert alert.created_at == datetime(2025, 11, 24, 10, 0, 0, 123000, tzinfo=UTC)
        assert alert.updated_at == datetime(2025, 11, 24, 10, 30, 0, tzinfo=UTC)
        assert alert.photos == []
        assert alert.is_verified is True
        assert alert.report_count == 1
        assert alert.reporter_id is None

    def test_missing_axis_is_dropped(self, normalizer):
        raw = RawIncident(location_coordinates={"latitude": None, "longitude": 22.3})
        assert normalizer.normalize(raw) is None

    def test_missing_type_maps_to_other(self, normalizer):
        raw = {"locationCoordinates": {"latitude": 22.28, "longitude": 114.17}}
        alert = normalizer.normalize(raw)

        assert alert is not None
        assert alert.type == AlertType.OTHER
        assert alert.title == "Other"

    def test_title_falls_back_to_type_label(self, normalizer, sample_incident_records):
        alert = normalizer.normalize(sample_incident_records[1])

        assert alert.type == AlertType.CRIME
        assert alert.title == "Crime"
        assert alert.description is None

    def test_blank_description_does_not_become_title(self, normalizer):
        raw = {
            "type": "FIRE",
            "locationCoordinates": {"latitude": 22.28, "longitude": 114.17},
            "description": "   ",
        }
        assert normalizer.normalize(raw).title == "Fire"

    def test_missing_timestamps_default_to_now(self, normalizer):
        before = datetime.now(UTC)
        alert = normalizer.normalize(
            {"locationCoordinates": {"latitude": 22.28, "longitude": 114.17}}
        )
        after = datetime.now(UTC)

        assert before <= alert.created_at <= after
        assert alert.updated_at == alert.created_at

    def test_unparseable_last_report_uses_created_at(self, normalizer, sample_incident_records):
        record = dict(sample_incident_records[0], lastReportedAt="yesterday")
        alert = normalizer.normalize(record)

        assert alert.updated_at == alert.created_at

    def test_updated_before_created_is_kept(self, normalizer, caplog):
        record = {
            "locationCoordinates": {"latitude": 22.28, "longitude": 114.17},
            "firstReportedAt": "2025-11-24T10:00:00Z",
            "lastReportedAt": "2025-11-24T09:00:00Z",
        }
        alert = normalizer.normalize(record)

        assert alert is not None
        assert alert.updated_at < alert.created_at
        assert "precedes first report" in caplog.text

    @pytest.mark.parametrize("credibility, verified", [(None, False), (60, False), (61, True)])
    def test_verified_threshold(self, normalizer, credibility, verified):
        raw = RawIncident(
            location_coordinates={"latitude": 22.28, "longitude": 114.17},
            credibility=credibility,
        )
        assert normalizer.normalize(raw).is_verified is verified

    def test_backend_report_count_not_propagated(self, normalizer):
        raw = RawIncident(
            location_coordinates={"latitude": 22.28, "longitude": 114.17},
            report_count=7,
        )
        assert normalizer.normalize(raw).report_count == 1

    def test_geometry_string_fallback(self, normalizer):
        """Records without a coordinate object fall back to the location string."""
        alert = normalizer.normalize({"location": "POINT(114.17 22.28)"})

        assert alert.location.latitude == 22.28
        assert alert.location.longitude == 114.17

    def test_coordinate_object_takes_precedence(self, normalizer):
        """A partial coordinate object is not rescued by the location string."""
        raw = {
            "locationCoordinates": {"latitude": 22.28},
            "location": "POINT(114.17 22.28)",
        }
        assert normalizer.normalize(raw) is None

    def test_out_of_range_dropped_when_strict(self, normalizer):
        raw = {"locationCoordinates": {"latitude": 95.0, "longitude": 114.17}}
        assert normalizer.normalize(raw) is None

    def test_out_of_range_kept_when_lenient(self):
        normalizer = IncidentNormalizer(strict_coordinates=False)
        alert = normalizer.normalize({"locationCoordinates": {"latitude": 95.0, "longitude": 0}})

        assert alert is not None
        assert alert.location.latitude == 95.0

    def test_invalid_record_is_dropped(self, normalizer):
        assert normalizer.normalize({"incidentId": "not-a-number"}) is None


class TestNormalizeAll:
    """Tests for batch normalization."""

    def test_drops_failures_and_sorts_newest_first(self, normalizer, sample_incident_records):
        alerts = normalizer.normalize_all(sample_incident_records)

        assert [a.incident_id for a in alerts] == [102, 101]

    def test_records_skip_stats(self, normalizer, sample_incident_records):
        normalizer.normalize_all(sample_incident_records + [{"incidentId": "bad"}])
        stats = normalizer.last_stats

        assert stats.received == 4
        assert stats.normalized == 2
        assert stats.skipped == 2
        assert stats.reasons == {"missing location coordinates": 1, "invalid record": 1}

    def test_empty_batch(self, normalizer):
        assert normalizer.normalize_all([]) == []
        assert normalizer.last_stats.skipped == 0


class TestBuildSubmission:
    """Tests for report payload composition."""

    def test_new_incident(self, normalizer, hong_kong):
        report = UserReportInput(
            type=AlertType.WEATHER,
            description="Flooding on the road",
            location_description="Queen's Road",
            severity=Severity.HIGH,
        )
        payload = normalizer.build_submission(report, hong_kong).to_payload()

        assert payload == {
            "locationCoordinates": {"latitude": 22.2819, "longitude": 114.1577},
            "locationDescription": "Queen's Road",
            "incidentType": "DISASTER",
            "credibility": 70,
            "urgency": 75,
            "reportType": "user",
            "description": "Flooding on the road",
        }

    def test_existing_incident_omits_type(self, normalizer, hong_kong):
        report = UserReportInput(type=AlertType.FIRE, severity=Severity.CRITICAL)
        payload = normalizer.build_submission(report, hong_kong, existing_incident_id=42)

        assert payload.incident_type is None
        assert payload.incident_id == 42
        body = payload.to_payload()
        assert "incidentType" not in body
        assert body["incidentId"] == 42
        assert body["urgency"] == 95
        assert body["credibility"] == 90

    def test_blank_fields_fall_back(self, normalizer, hong_kong):
        report = UserReportInput(description="  ", location_description="")
        payload = normalizer.build_submission(report, hong_kong)

        assert payload.description is None
        assert payload.location_description == "Central"
        assert payload.incident_type == "ETC"


class TestAlertFromAck:
    """Tests for building the locally created alert."""

    def test_uses_ack_values(self, normalizer, hong_kong):
        report = UserReportInput(type=AlertType.TRAFFIC, severity=Severity.LOW)
        ack = ReportAck.model_validate(
            {
                "reportId": 7,
                "incidentId": 55,
                "credibility": 51,
                "timestamp": "2025-11-24T10:00:00Z",
                "description": "Collision at Admiralty",
            }
        )
        alert = normalizer.alert_from_ack(ack, report, hong_kong)

        assert alert.incident_id == 55
        assert alert.type == AlertType.TRAFFIC
        assert alert.title == "Traffic Accident"
        assert alert.description == "Collision at Admiralty"
        assert alert.severity == Severity.LOW
        assert alert.created_at == datetime(2025, 11, 24, 10, 0, tzinfo=UTC)
        assert alert.updated_at == alert.created_at
        assert alert.is_verified is True
        assert alert.report_count == 1
        assert alert.location.city == "Hong Kong"

    def test_falls_back_to_existing_incident(self, normalizer, hong_kong):
        report = UserReportInput(title="Still burning", description="Second report")
        alert = normalizer.alert_from_ack(ReportAck(credibility=50), report, hong_kong, 42)

        assert alert.incident_id == 42
        assert alert.title == "Still burning"
        assert alert.description == "Second report"
        assert alert.is_verified is False

    @pytest.mark.parametrize(
        "level, expected",
        [
            (AnonymityLevel.ANONYMOUS, None),
            (AnonymityLevel.NICKNAME, "user-1"),
            (AnonymityLevel.VERIFIED, "user-1"),
        ],
    )
    def test_reporter_follows_anonymity(self, normalizer, hong_kong, level, expected):
        report = UserReportInput(anonymity_level=level, reporter_id="user-1")
        alert = normalizer.alert_from_ack(ReportAck(), report, hong_kong)

        assert alert.reporter_id == expected
