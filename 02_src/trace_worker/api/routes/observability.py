"""Observability API routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Query

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for worker status."""

    running: bool
    in_flight: bool
    phase: str
    runs: int
    interval_ms: int
    threshold_seconds: int
    batch_size: int
    marker_key: str


class CycleOutcomeResponse(BaseModel):
    """Response model for one cycle outcome."""

    found: int
    succeeded: int
    failed: int
    phase: str
    started_at: datetime
    finished_at: datetime | None = None


def create_observability_router(app: Application) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api/conclusion", tags=["observability"])

    @router.get("/status", response_model=StatusResponse)
    async def get_status() -> dict:
        """Scheduler state and effective configuration."""
        try:
            scheduler = app.scheduler
            orchestrator = app.orchestrator
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        config = app.config
        return {
            "running": scheduler.running,
            "in_flight": scheduler.in_flight,
            "phase": orchestrator.phase.value,
            "runs": scheduler.runs,
            "interval_ms": scheduler.interval_ms,
            "threshold_seconds": config.threshold_seconds,
            "batch_size": config.batch_size,
            "marker_key": config.marker_key,
        }

    @router.get("/cycles", response_model=list[CycleOutcomeResponse])
    async def get_cycles(
        limit: int = Query(20, ge=1, le=100),
    ) -> list[dict]:
        """Most recent cycle outcomes, newest first."""
        try:
            tracker = app.tracker
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        return [outcome.to_dict() for outcome in tracker.recent(limit)]

    return router
