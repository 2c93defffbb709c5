"""API routes for the alert list and local alert mutations."""

import logging
from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from citizen_alerts.context import AppContext, get_context
from citizen_alerts.errors import AlertNotFoundError, NetworkError
from citizen_alerts.schemas.alert import Alert, AlertsResponse, AlertType, Coordinates, SortKey

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/alerts", tags=["alerts"])

_ONGOING_FILTER: dict[str, bool | None] = {
    "ongoing": True,
    "finished": False,
    "all": None,
}


def _snapshot_response(context: AppContext, alerts: list[Alert]) -> AlertsResponse:
    store = context.store
    return AlertsResponse(
        alerts=alerts,
        total=len(alerts),
        state=store.state.value,
        error=str(store.error) if store.error else None,
    )


@router.get("", response_model=AlertsResponse)
async def list_alerts(
    context: Annotated[AppContext, Depends(get_context)],
    type: AlertType | None = Query(None, description="Only alerts of this type"),
    radius_km: float | None = Query(None, gt=0, description="Max distance from center"),
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    q: str | None = Query(None, description="Search title and description"),
    sort: SortKey = Query(SortKey.RECENCY),
) -> AlertsResponse:
    """
    List alerts from the current snapshot.

    Without lat/lng the user's last known location is used for radius
    filtering and distance sorting.
    """
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=422, detail="lat and lng must be given together")
    center = Coordinates(latitude=lat, longitude=lng) if lat is not None else None

    service = context.alert_service
    alerts = service.filtered(alert_type=type, radius_km=radius_km, center=center, text=q)
    alerts = service.sorted(by=sort, reference_point=center, alerts=alerts)
    return _snapshot_response(context, alerts)


@router.post("/refresh", response_model=AlertsResponse)
async def refresh_alerts(
    context: Annotated[AppContext, Depends(get_context)],
    status: Literal["ongoing", "finished", "all"] = Query("ongoing"),
) -> AlertsResponse:
    """Reload alerts from the incident backend."""
    try:
        await context.alert_service.fetch(is_ongoing=_ONGOING_FILTER[status])
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return _snapshot_response(context, context.alert_service.alerts)


@router.get("/{alert_id}", response_model=Alert)
async def get_alert(
    alert_id: UUID,
    context: Annotated[AppContext, Depends(get_context)],
) -> Alert:
    alert = context.store.get(alert_id)
    if alert is None:
        raise HTTPException(status_code=404, detail="Alert not found")
    return alert


@router.put("/{alert_id}", response_model=Alert)
async def update_alert(
    alert_id: UUID,
    alert: Alert,
    context: Annotated[AppContext, Depends(get_context)],
) -> Alert:
    """Replace an alert locally; lost on the next refresh."""
    if alert.id != alert_id:
        raise HTTPException(status_code=422, detail="Alert id does not match path")
    try:
        await context.alert_service.update_alert(alert)
    except AlertNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return alert


@router.delete("/{alert_id}")
async def delete_alert(
    alert_id: UUID,
    context: Annotated[AppContext, Depends(get_context)],
) -> dict:
    """Remove an alert locally; it reappears on the next refresh."""
    deleted = await context.alert_service.delete_alert(alert_id)
    return {"deleted": deleted}


@router.post("/{alert_id}/report-count", response_model=Alert)
async def increment_report_count(
    alert_id: UUID,
    context: Annotated[AppContext, Depends(get_context)],
) -> Alert:
    """Count a duplicate report of an alert."""
    try:
        return await context.alert_service.increment_report_count(alert_id)
    except AlertNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
