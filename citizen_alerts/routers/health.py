"""Health and status endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from citizen_alerts.context import AppContext, get_context

router = APIRouter(tags=["health"])


class StoreStatus(BaseModel):
    """Status of the alert store."""

    state: str
    alert_count: int
    last_loaded_at: datetime | None = None
    error: str | None = None


class NormalizationStatus(BaseModel):
    """Outcome of the last normalization batch."""

    received: int
    normalized: int
    skipped: int
    skip_reasons: dict[str, int]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    store: StoreStatus
    last_normalization: NormalizationStatus


@router.get("/health", response_model=HealthResponse)
async def health_check(
    context: Annotated[AppContext, Depends(get_context)],
) -> HealthResponse:
    """
    Health check endpoint with ingestion status.

    Reports the store's load state and how many records the last batch skipped.
    """
    store = context.store
    stats = context.alert_service.normalizer.last_stats

    return HealthResponse(
        status="degraded" if store.error else "healthy",
        timestamp=datetime.now(UTC),
        store=StoreStatus(
            state=store.state.value,
            alert_count=len(store),
            last_loaded_at=store.last_loaded_at,
            error=str(store.error) if store.error else None,
        ),
        last_normalization=NormalizationStatus(
            received=stats.received,
            normalized=stats.normalized,
            skipped=stats.skipped,
            skip_reasons=dict(stats.reasons),
        ),
    )


@router.get("/ready")
async def readiness_check() -> dict:
    """Simple readiness probe for container orchestration."""
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict:
    """Simple liveness probe for container orchestration."""
    return {"status": "alive"}
