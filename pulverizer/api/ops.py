from __future__ import annotations

from fastapi import APIRouter, Depends

from pulverizer.deps import get_settings
from pulverizer.observability.metrics import get_runtime_metrics

router = APIRouter(tags=["ops"])


@router.get("/health")
async def health(settings=Depends(get_settings)):
    return {"ok": True, "version": settings.version}


@router.get("/version")
async def version(settings=Depends(get_settings)):
    return {"version": settings.version}


@router.get("/metrics")
async def metrics():
    return get_runtime_metrics().snapshot()
