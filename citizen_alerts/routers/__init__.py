"""API routers."""

from citizen_alerts.routers.alerts import router as alerts_router
from citizen_alerts.routers.chat import router as chat_router
from citizen_alerts.routers.health import router as health_router
from citizen_alerts.routers.location import router as location_router
from citizen_alerts.routers.reports import router as reports_router

__all__ = [
    "alerts_router",
    "chat_router",
    "health_router",
    "location_router",
    "reports_router",
]
