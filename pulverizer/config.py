from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_DB_PATH = "/tmp/payload-pulverizer.db"
DEFAULT_PORT = 8080
DEFAULT_MAX_BODY_BYTES = 250 * 1024 * 1024
DEFAULT_VERSION = "0.0.0-dev"


@dataclass(slots=True)
class Settings:
    db_path: Path
    host: str
    port: int
    max_body_bytes: int
    log_level: str
    version: str = DEFAULT_VERSION


def _parse_int(value: str | None, default: int) -> int:
    raw = (value or "").strip()
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_version(value: str | None) -> str:
    normalized = (value or "").strip().removeprefix("v").removeprefix("V").strip()
    return normalized or DEFAULT_VERSION


def load_settings() -> Settings:
    db_path = Path(os.getenv("PULVERIZER_DB_PATH", DEFAULT_DB_PATH))
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return Settings(
        db_path=db_path,
        host=os.getenv("PULVERIZER_HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=_parse_int(os.getenv("PULVERIZER_PORT"), DEFAULT_PORT),
        max_body_bytes=_parse_int(os.getenv("PULVERIZER_MAX_BODY_BYTES"), DEFAULT_MAX_BODY_BYTES),
        log_level=os.getenv("PULVERIZER_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        version=_parse_version(os.getenv("PULVERIZER_VERSION")),
    )


def with_overrides(
    settings: Settings,
    *,
    db_path: str | None = None,
    host: str | None = None,
    port: int | None = None,
) -> Settings:
    updated = settings
    if db_path:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        updated = replace(updated, db_path=path)
    if host:
        updated = replace(updated, host=host)
    if port:
        updated = replace(updated, port=port)
    return updated
