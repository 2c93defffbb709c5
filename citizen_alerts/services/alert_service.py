"""Alert service: fetch, query and report operations over the alert store."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from citizen_alerts.config import get_settings
from citizen_alerts.errors import InvalidLocationError, NetworkError
from citizen_alerts.schemas.alert import (
    Alert,
    AlertType,
    Coordinates,
    Location,
    SortKey,
    UserReportInput,
)
from citizen_alerts.services import alert_store as queries
from citizen_alerts.services.alert_store import AlertStore
from citizen_alerts.services.backend_client import BackendClient, BackendClientError
from citizen_alerts.services.geo import coordinates_in_range
from citizen_alerts.services.location import LocationProvider
from citizen_alerts.services.normalizer import IncidentNormalizer

logger = logging.getLogger(__name__)
settings = get_settings()


class AlertService:
    """
    Entry point for consumers of the alert core.

    Composes the backend client, normalizer, store and location provider.
    Fetch and submit are the only operations that wait on the network.
    """

    def __init__(
        self,
        store: AlertStore | None = None,
        backend_client: BackendClient | None = None,
        normalizer: IncidentNormalizer | None = None,
        location_provider: LocationProvider | None = None,
    ):
        self.store = store or AlertStore()
        self.backend_client = backend_client or BackendClient()
        self.normalizer = normalizer or IncidentNormalizer()
        self.location_provider = location_provider or LocationProvider()

    @property
    def alerts(self) -> list[Alert]:
        """Current snapshot, newest first."""
        return self.store.alerts

    async def fetch(self, is_ongoing: bool | None = settings.default_is_ongoing) -> list[Alert]:
        """
        Reload alerts from the backend, replacing the store contents.

        On failure the previous snapshot stays in place, the error is
        published on the store and raised as NetworkError.
        """
        token = await self.store.begin_load()
        try:
            records = await self.backend_client.fetch_incidents(is_ongoing=is_ongoing)
            alerts = self.normalizer.normalize_all(records)
        except Exception as e:
            error = NetworkError(str(e) or type(e).__name__)
            logger.error(f"Error fetching incidents: {e!r}")
            await self.store.fail_load(token, error)
            raise error from e
        except BaseException:
            # Cancelled mid-request; settle the load so the store leaves LOADING
            await self.store.fail_load(token, NetworkError("request cancelled"))
            raise

        await self.store.complete_load(token, alerts, loaded_at=datetime.now(UTC))
        return alerts

    def _center(self, center: Coordinates | None) -> Coordinates | None:
        return center or self.location_provider.current

    def filtered(
        self,
        alert_type: AlertType | None = None,
        radius_km: float | None = None,
        center: Coordinates | None = None,
        text: str | None = None,
    ) -> list[Alert]:
        """
        Filter the snapshot by type, distance and free text.

        The radius filter is skipped when neither ``center`` nor a user
        location is known. Results are ordered newest first.
        """
        alerts = queries.filter_by_type(self.store.alerts, alert_type)

        if radius_km is not None:
            reference = self._center(center)
            if reference is not None:
                alerts = queries.filter_by_radius(alerts, reference, radius_km)

        alerts = queries.filter_by_text(alerts, text)
        return queries.by_recency(alerts)

    def sorted(
        self,
        by: SortKey = SortKey.RECENCY,
        reference_point: Coordinates | None = None,
        alerts: list[Alert] | None = None,
    ) -> list[Alert]:
        if alerts is None:
            alerts = self.store.alerts
        return queries.sort_alerts(alerts, by, self._center(reference_point))

    def nearby(
        self, center: Coordinates, radius_km: float = settings.default_radius_km
    ) -> list[Alert]:
        return self.filtered(radius_km=radius_km, center=center)

    async def upload_photos(self, photos: list[str]) -> list[str]:
        """Photo upload is not implemented; attachments are dropped."""
        if photos:
            logger.info(f"Photo upload not available, dropping {len(photos)} attachments")
        return []

    async def submit(
        self,
        report: UserReportInput,
        existing_incident_id: int | None = None,
    ) -> Alert:
        """
        Submit a user report and return the resulting alert.

        Args:
            report: User-entered report data
            existing_incident_id: Attach the report to this incident instead
                of opening a new one

        Raises:
            InvalidLocationError: No usable location (missing or out of range)
            NetworkError: The backend rejected or never answered the report
        """
        base = report.location
        if base is None and self.location_provider.current is not None:
            current = self.location_provider.current
            base = Location(latitude=current.latitude, longitude=current.longitude)
        if base is None:
            raise InvalidLocationError()
        # Same range the ingest path accepts
        if not coordinates_in_range(base.latitude, base.longitude):
            logger.warning(f"Rejecting report at ({base.latitude}, {base.longitude})")
            raise InvalidLocationError()

        payload = self.normalizer.build_submission(report, base, existing_incident_id)

        try:
            ack = await self.backend_client.submit_report(payload)
        except BackendClientError as e:
            logger.error(f"Error submitting report: {e}")
            raise NetworkError(str(e)) from e

        photos = await self.upload_photos(report.photos)
        alert = self.normalizer.alert_from_ack(
            ack, report, base, existing_incident_id, photos=photos
        )

        try:
            await self.fetch()
        except NetworkError as e:
            # The report itself was accepted; the store carries the refresh error
            logger.warning(f"Refresh after report submission failed: {e}")

        return alert

    async def add_alert(self, alert: Alert) -> None:
        await self.store.append(alert)

    async def update_alert(self, alert: Alert) -> None:
        # Local only until the backend exposes an update endpoint
        await self.store.replace(alert)

    async def delete_alert(self, alert_id: UUID) -> bool:
        return await self.store.remove(alert_id)

    async def increment_report_count(self, alert_id: UUID) -> Alert:
        return await self.store.increment_report_count(alert_id)
