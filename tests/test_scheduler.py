"""Tests for the scheduled alert refresh."""

import pytest

from citizen_alerts.services.alert_store import StoreState
from citizen_alerts.services.backend_client import BackendClientError
from citizen_alerts.tasks.scheduler import refresh_alerts_job


@pytest.mark.asyncio
async def test_refresh_job_loads_alerts(app_context, mock_backend_client, sample_incident_records):
    mock_backend_client.fetch_incidents.return_value = sample_incident_records

    await refresh_alerts_job(app_context)

    assert len(app_context.store) == 2
    mock_backend_client.fetch_incidents.assert_called_once_with(is_ongoing=True)


@pytest.mark.asyncio
async def test_refresh_job_survives_backend_failure(app_context, mock_backend_client):
    mock_backend_client.fetch_incidents.side_effect = BackendClientError("offline")

    await refresh_alerts_job(app_context)

    assert app_context.store.state == StoreState.FAILED
