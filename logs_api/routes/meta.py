from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models import HealthStatus, StatsResponse
from ..services import EventStore, get_event_store

router = APIRouter(tags=["meta"])


@router.get("/health", response_model=HealthStatus)
# Return service health status for monitoring and load balancers
def health(store: EventStore = Depends(get_event_store)) -> HealthStatus:
    return store.health()


@router.get("/stats", response_model=StatsResponse)
# Return today's counters for the dashboard header
def stats(store: EventStore = Depends(get_event_store)) -> StatsResponse:
    return StatsResponse(data=store.compute_stats())


__all__ = ["router"]
