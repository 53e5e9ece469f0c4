from __future__ import annotations

from fastapi import Request

from pulverizer.config import Settings
from pulverizer.telemetry.base import TelemetryStore


async def get_telemetry_store(request: Request) -> TelemetryStore:
    store = getattr(request.app.state, "telemetry_store", None)
    if store is None:
        raise RuntimeError("TelemetryStore not initialized")
    return store


async def get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings not initialized")
    return settings
