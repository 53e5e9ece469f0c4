from __future__ import annotations

from pathlib import Path

import aiosqlite

DEFAULT_BUSY_TIMEOUT_MS = 5000


async def open_connection(db_path: Path, busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS) -> aiosqlite.Connection:
    conn = await aiosqlite.connect(str(db_path))
    conn.row_factory = aiosqlite.Row
    await conn.execute("PRAGMA journal_mode=WAL;")
    # Telemetry rows may be lost on power failure; WAL keeps the file consistent.
    await conn.execute("PRAGMA synchronous=NORMAL;")
    await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)};")
    await conn.commit()
    return conn
