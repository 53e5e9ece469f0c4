from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from pulverizer.trace import peek_current_trace_id

_EXTRA_KEYS = (
    "trace_id",
    "endpoint",
    "payload_size",
    "runtime_us",
    "duration_ms",
    "outcome",
    "path",
    "status",
    "method",
    "error",
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname.lower(),
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "message": record.getMessage(),
        }

        for key in _EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        trace_id = peek_current_trace_id()
        if "trace_id" not in payload and trace_id:
            payload["trace_id"] = trace_id

        return json.dumps(payload, ensure_ascii=False)


def get_runtime_logger() -> logging.Logger:
    logger = logging.getLogger("pulverizer.runtime")
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def configure_log_level(level: str) -> None:
    resolved = logging.getLevelName(level.upper())
    get_runtime_logger().setLevel(resolved if isinstance(resolved, int) else logging.INFO)
