"""Application context holding the explicitly constructed services."""

from dataclasses import dataclass, field

from fastapi import Request

from citizen_alerts.config import Settings, get_settings
from citizen_alerts.services.alert_service import AlertService
from citizen_alerts.services.alert_store import AlertStore
from citizen_alerts.services.backend_client import BackendClient
from citizen_alerts.services.chat import ChatService
from citizen_alerts.services.location import LocationProvider
from citizen_alerts.services.normalizer import IncidentNormalizer


@dataclass
class AppContext:
    """Owns one instance of each service; there are no module-level singletons."""

    settings: Settings
    alert_service: AlertService
    chat_service: ChatService
    location_provider: LocationProvider = field(default_factory=LocationProvider)

    @property
    def store(self) -> AlertStore:
        return self.alert_service.store


def build_context(
    settings: Settings | None = None,
    backend_client: BackendClient | None = None,
) -> AppContext:
    """Wire up services from settings."""
    settings = settings or get_settings()
    location_provider = LocationProvider()
    backend_client = backend_client or BackendClient(
        base_url=settings.backend_base_url,
        api_prefix=settings.backend_api_prefix,
        max_retries=settings.backend_max_retries,
        timeout=settings.backend_timeout_seconds,
    )
    alert_service = AlertService(
        store=AlertStore(),
        backend_client=backend_client,
        normalizer=IncidentNormalizer(strict_coordinates=settings.strict_coordinates),
        location_provider=location_provider,
    )
    return AppContext(
        settings=settings,
        alert_service=alert_service,
        chat_service=ChatService(typing_delay=settings.chat_typing_delay_seconds),
        location_provider=location_provider,
    )


def get_context(request: Request) -> AppContext:
    """Dependency returning the context attached to the running app."""
    return request.app.state.context
