from __future__ import annotations

import aiosqlite

from pulverizer.telemetry.base import AggregateRow, RawEvent

_AGGREGATE_SQL = """
SELECT
  endpoint,
  COUNT(*) AS count,
  SUM(payload_size) AS total_bytes,
  SUM(runtime_us) AS total_runtime_us,
  AVG(payload_size) AS avg_payload_size,
  AVG(runtime_us) AS avg_runtime_us
FROM endpoint_stats_raw
GROUP BY endpoint
ORDER BY endpoint ASC
"""


class StatsRepository:
    def __init__(self, conn: aiosqlite.Connection):
        self.conn = conn

    async def insert_event(self, event: RawEvent) -> None:
        await self.conn.execute(
            "INSERT INTO endpoint_stats_raw(endpoint, payload_size, runtime_us) VALUES(?, ?, ?)",
            (event.endpoint, event.payload_size, event.runtime_us),
        )
        await self.conn.commit()

    async def aggregate_by_endpoint(self) -> list[AggregateRow]:
        cursor = await self.conn.execute(_AGGREGATE_SQL)
        rows = await cursor.fetchall()
        await cursor.close()
        return [
            AggregateRow(
                endpoint=str(row["endpoint"]),
                count=int(row["count"]),
                total_bytes=int(row["total_bytes"] or 0),
                total_runtime_us=int(row["total_runtime_us"] or 0),
                avg_payload_size=float(row["avg_payload_size"] or 0.0),
                avg_runtime_us=float(row["avg_runtime_us"] or 0.0),
            )
            for row in rows
        ]
