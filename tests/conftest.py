"""Pytest fixtures for Citizen Alerts tests."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from citizen_alerts.config import Settings
from citizen_alerts.context import AppContext, build_context
from citizen_alerts.main import create_app
from citizen_alerts.schemas.alert import Alert, AlertType, Location, Severity
from citizen_alerts.services.alert_service import AlertService
from citizen_alerts.services.alert_store import AlertStore
from citizen_alerts.services.backend_client import BackendClient
from citizen_alerts.services.location import LocationProvider
from citizen_alerts.services.normalizer import IncidentNormalizer


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults."""
    return Settings(
        backend_base_url="http://backend.test",
        backend_max_retries=2,
        chat_typing_delay_seconds=0,
        debug=True,
    )


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for ordering tests."""
    return datetime(2025, 11, 24, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_alert(now) -> Callable[..., Alert]:
    """Factory for alerts; ``age`` is seconds before ``now``."""

    def _make(
        age: int = 0,
        title: str = "Test alert",
        alert_type: AlertType = AlertType.OTHER,
        severity: Severity = Severity.MEDIUM,
        latitude: float = 22.2819,
        longitude: float = 114.1577,
        description: str | None = None,
    ) -> Alert:
        created_at = now - timedelta(seconds=age)
        return Alert(
            type=alert_type,
            title=title,
            description=description,
            location=Location(latitude=latitude, longitude=longitude),
            severity=severity,
            created_at=created_at,
            updated_at=created_at,
        )

    return _make


@pytest.fixture
def mock_backend_client() -> BackendClient:
    """Create mocked backend client."""
    client = BackendClient(base_url="http://backend.test")
    client.fetch_incidents = AsyncMock(return_value=[])
    client.submit_report = AsyncMock()
    return client


@pytest.fixture
def alert_service(mock_backend_client) -> AlertService:
    return AlertService(
        store=AlertStore(),
        backend_client=mock_backend_client,
        normalizer=IncidentNormalizer(strict_coordinates=True),
        location_provider=LocationProvider(),
    )


@pytest.fixture
def app_context(test_settings, mock_backend_client) -> AppContext:
    return build_context(test_settings, backend_client=mock_backend_client)


@pytest_asyncio.fixture
async def client(app_context) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client over an app with injected services."""
    app = create_app(context=app_context, enable_scheduler=False)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def sample_incident_records() -> list[dict[str, Any]]:
    """Sample incident records as returned by the backend."""
    return [
        {
            "incidentId": 101,
            "type": "FIRE",
            "locationCoordinates": {"latitude": 22.2819, "longitude": 114.1577},
            "locationDescription": "Central District",
            "urgency": 90,
            "credibility": 80,
            "isOngoing": True,
            "firstReportedAt": "2025-11-24T10:00:00.123Z",
            "lastReportedAt": "2025-11-24T10:30:00Z",
            "description": "Smoke visible from building near Central MTR station.",
        },
        {
            "incidentId": 102,
            "type": "crime",
            "locationCoordinates": {"latitude": 22.2783, "longitude": 114.1653},
            "locationDescription": "Wan Chai",
            "urgency": 40,
            "credibility": 30,
            "isOngoing": True,
            "firstReportedAt": "2025-11-24T11:00:00Z",
            "lastReportedAt": None,
            "description": None,
        },
        {
            "incidentId": 103,
            "type": "DISASTER",
            "locationCoordinates": {"latitude": None, "longitude": 114.1694},
            "urgency": 10,
            "credibility": 10,
            "firstReportedAt": "2025-11-24T09:00:00Z",
        },
    ]
