"""Mapping between backend incident categories and client alert types.

The backend only distinguishes CRIME, FIRE and DISASTER; every other client
type collapses to ``other`` on the way in and to ``ETC`` on the way out.
Weather reports are filed as DISASTER but come back as ``disaster``.
"""

from citizen_alerts.schemas.alert import AlertType

FALLBACK_BACKEND_TYPE = "ETC"

_FROM_BACKEND = {
    "CRIME": AlertType.CRIME,
    "FIRE": AlertType.FIRE,
    "DISASTER": AlertType.DISASTER,
}

_TO_BACKEND = {
    AlertType.CRIME: "CRIME",
    AlertType.FIRE: "FIRE",
    AlertType.DISASTER: "DISASTER",
    AlertType.WEATHER: "DISASTER",
}


def alert_type_from_backend(category: str | None) -> AlertType:
    if not category:
        return AlertType.OTHER
    return _FROM_BACKEND.get(category.upper(), AlertType.OTHER)


def backend_type_for(alert_type: AlertType) -> str:
    return _TO_BACKEND.get(alert_type, FALLBACK_BACKEND_TYPE)
