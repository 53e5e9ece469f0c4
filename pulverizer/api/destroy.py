from __future__ import annotations

import random

from fastapi import APIRouter, Depends, Request, Response

from pulverizer.api.common import read_body, record_best_effort
from pulverizer.deps import get_settings, get_telemetry_store
from pulverizer.endpoints import Endpoint
from pulverizer.services.theatrics import BURN_MESSAGE, FIRE_ART, PULVERIZE_MESSAGE, pick_shredder_log
from pulverizer.timing import RequestTimer, start_request_timer

router = APIRouter(tags=["destroy"])


async def get_shredder_rng() -> random.Random | None:
    return None


@router.post("/pulverize")
async def pulverize(
    request: Request,
    timer: RequestTimer = Depends(start_request_timer),
    store=Depends(get_telemetry_store),
    settings=Depends(get_settings),
):
    body = await read_body(request, settings.max_body_bytes)
    response = {
        "status": "success",
        "message": PULVERIZE_MESSAGE,
        "runtime_us": timer.elapsed_us(),
    }
    await record_best_effort(store, Endpoint.PULVERIZE, len(body), timer.elapsed_us())
    return response


@router.post("/blackhole", status_code=204)
async def blackhole(
    request: Request,
    timer: RequestTimer = Depends(start_request_timer),
    store=Depends(get_telemetry_store),
    settings=Depends(get_settings),
):
    body = await read_body(request, settings.max_body_bytes)
    await record_best_effort(store, Endpoint.BLACKHOLE, len(body), timer.elapsed_us())
    return Response(status_code=204)


@router.post("/shred")
async def shred(
    request: Request,
    timer: RequestTimer = Depends(start_request_timer),
    store=Depends(get_telemetry_store),
    settings=Depends(get_settings),
    rng: random.Random | None = Depends(get_shredder_rng),
):
    body = await read_body(request, settings.max_body_bytes)
    response = {
        "status": "shredded",
        "log": pick_shredder_log(rng),
        "runtime_us": timer.elapsed_us(),
    }
    await record_best_effort(store, Endpoint.SHRED, len(body), timer.elapsed_us())
    return response


@router.post("/burn")
async def burn(
    request: Request,
    timer: RequestTimer = Depends(start_request_timer),
    store=Depends(get_telemetry_store),
    settings=Depends(get_settings),
):
    body = await read_body(request, settings.max_body_bytes)
    response = {
        "status": "incinerated",
        "message": BURN_MESSAGE,
        "fire": FIRE_ART,
        "runtime_us": timer.elapsed_us(),
    }
    await record_best_effort(store, Endpoint.BURN, len(body), timer.elapsed_us())
    return response
