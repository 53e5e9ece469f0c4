from __future__ import annotations

import asyncio
import sqlite3

from pulverizer.db.repositories import StatsRepository
from pulverizer.endpoints import KNOWN_ENDPOINTS, Endpoint
from pulverizer.observability.logging import get_runtime_logger
from pulverizer.observability.metrics import get_runtime_metrics
from pulverizer.telemetry.base import RECORDED, AggregateRow, RawEvent, RecordResult, TelemetryReadError

logger = get_runtime_logger()
metrics = get_runtime_metrics()


class SqliteTelemetryStore:
    """Append-only event log on one SQLite connection behind one lock."""

    def __init__(self, repo: StatsRepository) -> None:
        self.repo = repo
        self._lock = asyncio.Lock()

    async def record(self, endpoint: str, payload_size: int, runtime_us: int) -> RecordResult:
        try:
            event = _build_event(endpoint, payload_size, runtime_us)
        except ValueError as exc:
            return self._record_failed(endpoint, payload_size, runtime_us, exc)

        try:
            async with self._lock:
                try:
                    await self.repo.insert_event(event)
                except sqlite3.Error:
                    await self._rollback_quietly()
                    raise
        except (sqlite3.Error, ValueError, OSError) as exc:
            return self._record_failed(endpoint, payload_size, runtime_us, exc)
        return RECORDED

    async def query(self) -> list[AggregateRow]:
        try:
            async with self._lock:
                return await self.repo.aggregate_by_endpoint()
        except (sqlite3.Error, ValueError, OSError) as exc:
            metrics.telemetry_read_failures_total += 1
            logger.error(
                "telemetry_query_failed",
                extra={"outcome": "error", "error": f"{exc.__class__.__name__}: {exc}"},
            )
            raise TelemetryReadError("Telemetry aggregate could not be read.", cause=exc.__class__.__name__) from exc

    async def _rollback_quietly(self) -> None:
        try:
            await self.repo.conn.rollback()
        except sqlite3.Error as exc:
            logger.warning("telemetry_rollback_failed", extra={"error": str(exc)})

    def _record_failed(self, endpoint: str, payload_size: int, runtime_us: int, exc: Exception) -> RecordResult:
        metrics.telemetry_write_failures_total += 1
        logger.warning(
            "telemetry_record_failed",
            extra={
                "endpoint": endpoint,
                "payload_size": payload_size,
                "runtime_us": runtime_us,
                "outcome": "dropped",
                "error": f"{exc.__class__.__name__}: {exc}",
            },
        )
        return RecordResult(error=exc)


def _build_event(endpoint: str, payload_size: int, runtime_us: int) -> RawEvent:
    if isinstance(endpoint, Endpoint):
        endpoint = endpoint.value
    if endpoint not in KNOWN_ENDPOINTS:
        raise ValueError(f"unknown endpoint: {endpoint!r}")
    if payload_size < 0 or runtime_us < 0:
        raise ValueError("payload_size and runtime_us must be non-negative")
    return RawEvent(endpoint=endpoint, payload_size=int(payload_size), runtime_us=int(runtime_us))
