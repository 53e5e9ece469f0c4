from __future__ import annotations

import argparse
import time
from contextlib import asynccontextmanager
from typing import Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pulverizer.api import destroy, ops, stats, validate
from pulverizer.config import Settings, load_settings, with_overrides
from pulverizer.db.connection import open_connection
from pulverizer.db.migrations import apply_migrations
from pulverizer.db.repositories import StatsRepository
from pulverizer.errors import PulverizerApiError, error_from_exception
from pulverizer.observability.logging import configure_log_level, get_runtime_logger
from pulverizer.telemetry.base import TelemetryReadError
from pulverizer.telemetry.sqlite_store import SqliteTelemetryStore
from pulverizer.trace import (
    TRACE_HEADER,
    get_current_trace_id,
    normalize_trace_id,
    reset_current_trace_id,
    set_current_trace_id,
)

logger = get_runtime_logger()


def create_app(settings: Settings) -> FastAPI:
    configure_log_level(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        applied = await apply_migrations(settings.db_path)
        conn = await open_connection(settings.db_path)
        store = SqliteTelemetryStore(StatsRepository(conn))
        app.state.telemetry_store = store
        logger.info(
            "telemetry_store_ready",
            extra={"path": str(settings.db_path), "outcome": f"migrations_applied={len(applied)}"},
        )

        yield

        app.state.telemetry_store = None
        await conn.close()

    app = FastAPI(title="Payload Pulverizer", version=settings.version, lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def trace_middleware(request: Request, call_next):
        trace_id = normalize_trace_id(request.headers.get(TRACE_HEADER))
        request.state.trace_id = trace_id
        token = set_current_trace_id(trace_id)
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:  # noqa: BLE001
                status_code, payload = error_from_exception(exc, trace_id)
                response = JSONResponse(status_code=status_code, content=payload)
            duration_ms = int((time.perf_counter() - started) * 1000)
            logger.info(
                "http_request",
                extra={
                    "trace_id": trace_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                    "outcome": "ok" if response.status_code < 400 else "error",
                },
            )
        finally:
            reset_current_trace_id(token)
        response.headers[TRACE_HEADER] = trace_id
        return response

    @app.exception_handler(Exception)
    async def exception_handler(request: Request, exc: Exception):
        trace_id = str(getattr(request.state, "trace_id", "") or get_current_trace_id())
        status_code, payload = error_from_exception(exc, trace_id)
        if status_code >= 500:
            logger.error(
                "request_failed",
                extra={"trace_id": trace_id, "path": request.url.path, "error": exc.__class__.__name__},
            )
        response = JSONResponse(status_code=status_code, content=payload)
        response.headers[TRACE_HEADER] = trace_id
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await exception_handler(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return await exception_handler(request, exc)

    @app.exception_handler(PulverizerApiError)
    async def api_error_handler(request: Request, exc: PulverizerApiError):
        return await exception_handler(request, exc)

    @app.exception_handler(TelemetryReadError)
    async def telemetry_read_error_handler(request: Request, exc: TelemetryReadError):
        return await exception_handler(request, exc)

    app.include_router(destroy.router)
    app.include_router(validate.router)
    app.include_router(stats.router)
    app.include_router(ops.router)
    return app


settings = load_settings()
app = create_app(settings)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payload-pulverizer",
        description="Accepts payloads and destroys them, keeping per-endpoint usage statistics.",
    )
    parser.add_argument("--db-path", default=None, help="Path to the SQLite database file")
    parser.add_argument("--host", default=None, help="Interface to bind")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    import uvicorn

    args = build_arg_parser().parse_args(argv)
    resolved = with_overrides(load_settings(), db_path=args.db_path, host=args.host, port=args.port)
    logger.info(
        "starting_server",
        extra={"path": str(resolved.db_path), "outcome": f"http://{resolved.host}:{resolved.port}"},
    )
    uvicorn.run(create_app(resolved), host=resolved.host, port=resolved.port)


if __name__ == "__main__":
    main()
