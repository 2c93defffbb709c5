"""Tests for ISO 8601 timestamp parsing."""

from datetime import UTC, datetime

import pytest

from citizen_alerts.services.timestamps import parse_timestamp


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_fractional_seconds(self):
        result = parse_timestamp("2025-11-24T10:30:00.123Z")
        assert result == datetime(2025, 11, 24, 10, 30, 0, 123000, tzinfo=UTC)

    def test_without_fractional_seconds(self):
        result = parse_timestamp("2025-11-24T10:30:00Z")
        assert result == datetime(2025, 11, 24, 10, 30, 0, tzinfo=UTC)

    def test_offset_converted_to_utc(self):
        result = parse_timestamp("2025-11-24T18:30:00+08:00")
        assert result == datetime(2025, 11, 24, 10, 30, 0, tzinfo=UTC)
        assert result.tzinfo == UTC

    def test_nanosecond_fraction_truncated(self):
        result = parse_timestamp("2025-11-24T10:30:00.123456789Z")
        assert result == datetime(2025, 11, 24, 10, 30, 0, 123456, tzinfo=UTC)

    @pytest.mark.parametrize(
        "value",
        [None, "", "invalid", "11/24/2025", "2025-11-24", "2025-11-24T10:30:00", 1732444200],
    )
    def test_unparseable(self, value):
        """Test missing or malformed timestamps return None instead of raising."""
        assert parse_timestamp(value) is None
