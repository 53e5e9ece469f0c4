from __future__ import annotations

import secrets
from contextvars import ContextVar, Token

TRACE_HEADER = "X-Trace-Id"

_trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")


def generate_trace_id() -> str:
    return f"tr_{secrets.token_hex(16)}"


def normalize_trace_id(candidate: str | None) -> str:
    value = (candidate or "").strip()
    if value:
        return value
    return generate_trace_id()


def set_current_trace_id(trace_id: str) -> Token[str]:
    return _trace_id_var.set(trace_id)


def reset_current_trace_id(token: Token[str]) -> None:
    _trace_id_var.reset(token)


def get_current_trace_id() -> str:
    return _trace_id_var.get() or generate_trace_id()


def peek_current_trace_id() -> str:
    return _trace_id_var.get()
