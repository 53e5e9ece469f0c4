from __future__ import annotations

from fastapi import APIRouter, Depends

from pulverizer.deps import get_telemetry_store

router = APIRouter(tags=["stats"])


@router.get("/stats")
async def stats(store=Depends(get_telemetry_store)):
    # TelemetryReadError propagates to the exception handler as a 500.
    rows = await store.query()
    return {"stats": [row.to_dict() for row in rows]}
