from __future__ import annotations

from fastapi import Request

from pulverizer.endpoints import Endpoint
from pulverizer.errors import PulverizerApiError
from pulverizer.observability.metrics import get_runtime_metrics
from pulverizer.telemetry.base import RecordResult, TelemetryStore

metrics = get_runtime_metrics()


def _too_large(size: int | None, limit: int) -> PulverizerApiError:
    details: dict[str, int] = {"limit": limit}
    if size is not None:
        details["size"] = size
    return PulverizerApiError(
        code="E_PAYLOAD_TOO_LARGE",
        message=f"Request body exceeds the {limit} byte limit.",
        retryable=False,
        status_code=413,
        details=details,
        cause="body_limit",
    )


async def read_body(request: Request, limit: int) -> bytes:
    """Read the whole request body, refusing anything above ``limit`` bytes."""
    declared = request.headers.get("content-length", "").strip()
    if declared.isdigit() and int(declared) > limit:
        raise _too_large(int(declared), limit)

    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            raise _too_large(None, limit)
        chunks.append(chunk)
    return b"".join(chunks)


async def record_best_effort(
    store: TelemetryStore,
    endpoint: Endpoint,
    payload_size: int,
    runtime_us: int,
) -> RecordResult:
    # A failed write is already logged by the store; the response never depends on it.
    metrics.increment_request(endpoint.value)
    return await store.record(endpoint.value, payload_size, runtime_us)
