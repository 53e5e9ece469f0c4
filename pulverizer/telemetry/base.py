"""Telemetry storage contract.

Handlers depend on ``TelemetryStore`` only. Writes report failure through a
returned ``RecordResult`` instead of raising; reads raise
``TelemetryReadError`` because an empty result cannot stand in for a failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class TelemetryReadError(Exception):
    def __init__(self, message: str, cause: str | None = None) -> None:
        super().__init__(message)
        self.cause = cause


@dataclass(frozen=True, slots=True)
class RawEvent:
    endpoint: str
    payload_size: int
    runtime_us: int


@dataclass(frozen=True, slots=True)
class AggregateRow:
    endpoint: str
    count: int
    total_bytes: int
    total_runtime_us: int
    avg_payload_size: float
    avg_runtime_us: float

    def to_dict(self) -> dict[str, object]:
        return {
            "endpoint": self.endpoint,
            "count": self.count,
            "total_bytes": self.total_bytes,
            "total_runtime_us": self.total_runtime_us,
            "avg_payload_size": self.avg_payload_size,
            "avg_runtime_us": self.avg_runtime_us,
        }


@dataclass(frozen=True, slots=True)
class RecordResult:
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


RECORDED = RecordResult()


class TelemetryStore(Protocol):
    async def record(self, endpoint: str, payload_size: int, runtime_us: int) -> RecordResult:
        ...

    async def query(self) -> list[AggregateRow]:
        ...
