from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class RequestTimer:
    """Elapsed-time context created once at request entry."""

    started_ns: int = field(default_factory=time.perf_counter_ns)

    def elapsed_us(self) -> int:
        return max(0, (time.perf_counter_ns() - self.started_ns) // 1_000)


async def start_request_timer() -> RequestTimer:
    return RequestTimer()
