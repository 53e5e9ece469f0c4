from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from pulverizer.telemetry.base import TelemetryReadError

DEFAULT_INTERNAL_MESSAGE = "Internal server error"


@dataclass(slots=True)
class PulverizerApiError(Exception):
    code: str
    message: str
    retryable: bool
    status_code: int
    details: dict[str, Any] | None = None
    cause: str | None = None


def build_error(
    *,
    code: str,
    message: str,
    trace_id: str,
    retryable: bool,
    details: dict[str, Any] | None = None,
    cause: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "code": code,
        "message": message,
        "trace_id": trace_id,
        "retryable": retryable,
        "ts": datetime.now(tz=timezone.utc).isoformat(),
    }
    if details:
        payload["details"] = details
    if cause:
        payload["cause"] = cause
    return payload


def error_response(
    *,
    code: str,
    message: str,
    trace_id: str,
    retryable: bool,
    details: dict[str, Any] | None = None,
    cause: str | None = None,
) -> dict[str, Any]:
    return {
        "error": build_error(
            code=code,
            message=message,
            trace_id=trace_id,
            retryable=retryable,
            details=details,
            cause=cause,
        )
    }


def error_from_exception(exc: Exception, trace_id: str) -> tuple[int, dict[str, Any]]:
    if isinstance(exc, PulverizerApiError):
        return (
            exc.status_code,
            error_response(
                code=exc.code,
                message=exc.message,
                trace_id=trace_id,
                retryable=exc.retryable,
                details=exc.details,
                cause=exc.cause,
            ),
        )

    if isinstance(exc, TelemetryReadError):
        return (
            500,
            error_response(
                code="E_TELEMETRY_READ",
                message="Telemetry could not be read.",
                trace_id=trace_id,
                retryable=True,
                cause=exc.cause,
            ),
        )

    if isinstance(exc, RequestValidationError):
        return (
            422,
            error_response(
                code="E_SCHEMA_INVALID",
                message="Request validation failed.",
                trace_id=trace_id,
                retryable=False,
                details={"errors": exc.errors()},
                cause="request_validation_error",
            ),
        )

    if isinstance(exc, HTTPException):
        retryable = exc.status_code >= 500
        code = "E_INTERNAL" if retryable else "E_BAD_REQUEST"
        if exc.status_code == 404:
            code = "E_NOT_FOUND"
        elif exc.status_code == 405:
            code = "E_METHOD_NOT_ALLOWED"
        return (
            exc.status_code,
            error_response(
                code=code,
                message=str(exc.detail),
                trace_id=trace_id,
                retryable=retryable,
                cause="http_exception",
            ),
        )

    return (
        500,
        error_response(
            code="E_INTERNAL",
            message=DEFAULT_INTERNAL_MESSAGE,
            trace_id=trace_id,
            retryable=False,
            cause=exc.__class__.__name__,
        ),
    )
