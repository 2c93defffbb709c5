"""In-memory alert store with load state tracking, queries and local mutations."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from enum import Enum
from uuid import UUID

from citizen_alerts.errors import AlertError, AlertNotFoundError
from citizen_alerts.schemas.alert import Alert, AlertType, Coordinates, SortKey
from citizen_alerts.services.geo import distance_km

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def by_recency(alerts: Iterable[Alert]) -> list[Alert]:
    return sorted(alerts, key=lambda a: a.created_at, reverse=True)


def filter_by_type(alerts: Iterable[Alert], alert_type: AlertType | None) -> list[Alert]:
    if alert_type is None:
        return list(alerts)
    return [a for a in alerts if a.type == alert_type]


def filter_by_radius(
    alerts: Iterable[Alert], center: Coordinates, radius_km: float
) -> list[Alert]:
    return [a for a in alerts if distance_km(center, a.location.coordinates) <= radius_km]


def filter_by_text(alerts: Iterable[Alert], query: str | None) -> list[Alert]:
    """Case-insensitive substring match on title or description."""
    if not query:
        return list(alerts)
    needle = query.casefold()
    return [
        a
        for a in alerts
        if needle in a.title.casefold()
        or (a.description is not None and needle in a.description.casefold())
    ]


def sort_alerts(
    alerts: Iterable[Alert],
    key: SortKey,
    reference: Coordinates | None = None,
) -> list[Alert]:
    """
    Order alerts for display.

    Distance ordering needs a reference point and falls back to recency
    without one. Severity ties are broken by recency.
    """
    if key == SortKey.DISTANCE:
        if reference is None:
            return by_recency(alerts)
        return sorted(alerts, key=lambda a: distance_km(reference, a.location.coordinates))
    if key == SortKey.SEVERITY:
        return sorted(alerts, key=lambda a: (a.severity.rank, a.created_at), reverse=True)
    return by_recency(alerts)


class AlertStore:
    """
    Holds the current alert snapshot.

    Every fetch replaces the collection wholesale, so local mutations last
    only until the next successful load. Loads are ordered by request token:
    once a load has settled, successfully or not, no load started before it
    can replace the snapshot. All writes go through a single lock.
    """

    def __init__(self):
        self._alerts: list[Alert] = []
        self._lock = asyncio.Lock()
        self._latest_token = 0
        self._settled_token = 0
        self.state = StoreState.IDLE
        self.error: AlertError | None = None
        self.last_loaded_at: datetime | None = None

    @property
    def alerts(self) -> list[Alert]:
        """Copy of the current snapshot."""
        return list(self._alerts)

    def __len__(self) -> int:
        return len(self._alerts)

    # ------------------------------------------------------------------
    # Load state machine
    # ------------------------------------------------------------------

    async def begin_load(self) -> int:
        """Enter LOADING, clear the error and return the request token."""
        async with self._lock:
            self._latest_token += 1
            self.state = StoreState.LOADING
            self.error = None
            return self._latest_token

    async def complete_load(
        self, token: int, alerts: Sequence[Alert], loaded_at: datetime | None = None
    ) -> bool:
        """
        Replace the collection with a freshly normalized batch.

        Returns:
            False if a more recent load has already settled
        """
        async with self._lock:
            if token < self._settled_token:
                logger.info(
                    f"Discarding stale load {token} (load {self._settled_token} already settled)"
                )
                return False

            self._alerts = by_recency(alerts)
            self._settled_token = token
            self.last_loaded_at = loaded_at
            if token == self._latest_token:
                self.state = StoreState.LOADED
            logger.info(f"Store replaced with {len(self._alerts)} alerts (load {token})")
            return True

    async def fail_load(self, token: int, error: AlertError) -> bool:
        """
        Record a failed load; the previous snapshot is kept.

        Only the latest request publishes its error, but any failure still
        blocks older loads from landing afterwards.
        """
        async with self._lock:
            self._settled_token = max(self._settled_token, token)
            if token != self._latest_token:
                logger.info(f"Ignoring failure of superseded load {token}: {error}")
                return False
            self.state = StoreState.FAILED
            self.error = error
            return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def filter_by_type(self, alert_type: AlertType | None) -> list[Alert]:
        return filter_by_type(self._alerts, alert_type)

    def filter_by_radius(self, center: Coordinates, radius_km: float) -> list[Alert]:
        return filter_by_radius(self._alerts, center, radius_km)

    def filter_by_text(self, query: str | None) -> list[Alert]:
        return filter_by_text(self._alerts, query)

    def sort_alerts(self, key: SortKey, reference: Coordinates | None = None) -> list[Alert]:
        return sort_alerts(self._alerts, key, reference)

    def get(self, alert_id: UUID) -> Alert | None:
        return next((a for a in self._alerts if a.id == alert_id), None)

    # ------------------------------------------------------------------
    # Local mutations
    # ------------------------------------------------------------------

    def _index_of(self, alert_id: UUID) -> int:
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                return index
        raise AlertNotFoundError(alert_id)

    async def append(self, alert: Alert) -> None:
        async with self._lock:
            self._alerts.append(alert)

    async def replace(self, alert: Alert) -> None:
        """Replace the alert with the same id."""
        async with self._lock:
            self._alerts[self._index_of(alert.id)] = alert

    async def remove(self, alert_id: UUID) -> bool:
        """Remove an alert by id; returns whether anything was removed."""
        async with self._lock:
            before = len(self._alerts)
            self._alerts = [a for a in self._alerts if a.id != alert_id]
            return len(self._alerts) != before

    async def increment_report_count(self, alert_id: UUID) -> Alert:
        """Count one more corroborating report for an alert."""
        async with self._lock:
            index = self._index_of(alert_id)
            current = self._alerts[index]
            updated = current.model_copy(update={"report_count": current.report_count + 1})
            self._alerts[index] = updated
            return updated
