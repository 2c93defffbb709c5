"""API routes for report submission."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from citizen_alerts.context import AppContext, get_context
from citizen_alerts.errors import InvalidLocationError, NetworkError
from citizen_alerts.schemas.alert import Alert, UserReportInput

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reports", tags=["reports"])


class ReportIn(UserReportInput):
    """Report body; ``incident_id`` re-reports an existing incident."""

    incident_id: int | None = None


@router.post("", response_model=Alert, status_code=201)
async def create_report(
    body: ReportIn,
    context: Annotated[AppContext, Depends(get_context)],
) -> Alert:
    """Submit a report and return the resulting alert."""
    report = UserReportInput.model_validate(body.model_dump(exclude={"incident_id"}))
    try:
        return await context.alert_service.submit(report, existing_incident_id=body.incident_id)
    except InvalidLocationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
