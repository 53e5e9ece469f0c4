from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class RuntimeMetrics:
    requests_total: Dict[str, int] = field(default_factory=dict)
    telemetry_write_failures_total: int = 0
    telemetry_read_failures_total: int = 0

    def increment_request(self, endpoint: str) -> None:
        self.requests_total[endpoint] = self.requests_total.get(endpoint, 0) + 1

    def snapshot(self) -> dict:
        return {
            "requests_total": dict(self.requests_total),
            "telemetry_write_failures_total": self.telemetry_write_failures_total,
            "telemetry_read_failures_total": self.telemetry_read_failures_total,
        }


_runtime_metrics = RuntimeMetrics()


def get_runtime_metrics() -> RuntimeMetrics:
    return _runtime_metrics
