from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from pulverizer.api.common import read_body, record_best_effort
from pulverizer.deps import get_settings, get_telemetry_store
from pulverizer.endpoints import Endpoint
from pulverizer.errors import PulverizerApiError
from pulverizer.services.format_sniffer import MAX_CLASSIFY_BYTES, OVERSIZE_MESSAGE, classify
from pulverizer.timing import RequestTimer, start_request_timer

router = APIRouter(tags=["validate"])


def _too_large_response() -> JSONResponse:
    return JSONResponse(status_code=413, content={"error": OVERSIZE_MESSAGE})


@router.post("/validate-before-destroy")
async def validate_before_destroy(
    request: Request,
    timer: RequestTimer = Depends(start_request_timer),
    store=Depends(get_telemetry_store),
    settings=Depends(get_settings),
):
    # Refused before any telemetry is written; at most MAX_CLASSIFY_BYTES are buffered.
    limit = min(settings.max_body_bytes, MAX_CLASSIFY_BYTES)
    try:
        body = await read_body(request, limit)
    except PulverizerApiError as exc:
        if exc.status_code != 413 or limit < MAX_CLASSIFY_BYTES:
            raise
        return _too_large_response()

    report = await asyncio.to_thread(classify, body, MAX_CLASSIFY_BYTES)

    await record_best_effort(store, Endpoint.VALIDATE_BEFORE_DESTROY, len(body), timer.elapsed_us())

    payload = report.to_dict()
    payload["runtime_us"] = timer.elapsed_us()
    return payload
