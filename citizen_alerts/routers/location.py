"""API routes for the user's current location."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from citizen_alerts.context import AppContext, get_context
from citizen_alerts.schemas.alert import Coordinates

router = APIRouter(prefix="/location", tags=["location"])


@router.get("", response_model=Coordinates | None)
async def get_location(
    context: Annotated[AppContext, Depends(get_context)],
) -> Coordinates | None:
    return context.location_provider.current


@router.put("", response_model=Coordinates)
async def set_location(
    coordinates: Coordinates,
    context: Annotated[AppContext, Depends(get_context)],
) -> Coordinates:
    """Set the reference point used for radius filters, distance sorting and reports."""
    try:
        return context.location_provider.update(coordinates.latitude, coordinates.longitude)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
