"""Holder for the user's last known position."""

import logging
from datetime import UTC, datetime

from citizen_alerts.schemas.alert import Coordinates
from citizen_alerts.services.geo import coordinates_in_range

logger = logging.getLogger(__name__)


class LocationProvider:
    """Last known user location, updated by the consumer."""

    def __init__(self, current: Coordinates | None = None):
        self.current = current
        self.updated_at: datetime | None = datetime.now(UTC) if current else None

    def update(self, latitude: float, longitude: float) -> Coordinates:
        if not coordinates_in_range(latitude, longitude):
            raise ValueError(f"Coordinates out of range: ({latitude}, {longitude})")
        self.current = Coordinates(latitude=latitude, longitude=longitude)
        self.updated_at = datetime.now(UTC)
        logger.debug(f"User location updated to {self.current}")
        return self.current

    def clear(self) -> None:
        self.current = None
        self.updated_at = None
