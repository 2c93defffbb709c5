"""Services for incident ingestion, alert queries and chat."""

from citizen_alerts.services.alert_service import AlertService
from citizen_alerts.services.alert_store import AlertStore
from citizen_alerts.services.backend_client import BackendClient
from citizen_alerts.services.chat import ChatService
from citizen_alerts.services.location import LocationProvider
from citizen_alerts.services.normalizer import IncidentNormalizer

__all__ = [
    "AlertService",
    "AlertStore",
    "BackendClient",
    "ChatService",
    "IncidentNormalizer",
    "LocationProvider",
]
