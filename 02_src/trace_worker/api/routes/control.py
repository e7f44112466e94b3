"""Control API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_control_router(app: Application) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/run", response_model=StatusResponse)
    async def run_cycle() -> dict:
        """Run one conclusion cycle now, unless one is already in flight."""
        try:
            ran = await app.scheduler.trigger()
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        if not ran:
            raise HTTPException(status_code=409, detail="Cycle already in flight")
        return {"status": "ok"}

    return router
