"""Append-only marketplace event log (marketplace_events table).

Written inside the caller's transaction, so an aborted operation never
leaves an event behind. Off-chain indexers tail it by ascending id.
"""
import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_market.domain.models import MarketEvent

_INSERT_EVENT_SQL = text("""
    INSERT INTO marketplace_events (event_type, order_id, payload)
    VALUES (:event_type, :order_id, CAST(:payload AS JSONB))
""")

_LIST_AFTER_SQL = text("""
    SELECT id, event_type, order_id, payload, created_at
    FROM marketplace_events
    WHERE id > :after_id
    ORDER BY id ASC
    LIMIT :limit
""")


def _row_to_event(row: Any) -> MarketEvent:
    payload = row.payload
    if isinstance(payload, str):
        payload = json.loads(payload)
    return MarketEvent(
        id=row.id,
        event_type=row.event_type,
        order_id=row.order_id,
        payload=payload,
        created_at=row.created_at,
    )


class MarketEventLog:
    async def append(
        self, event_type: str, order_id: str, payload: dict[str, Any], db: AsyncSession
    ) -> None:
        await db.execute(
            _INSERT_EVENT_SQL,
            {
                "event_type": event_type,
                "order_id": order_id,
                "payload": json.dumps({"order_id": order_id, **payload}),
            },
        )

    async def list_after(self, after_id: int, limit: int, db: AsyncSession) -> list[MarketEvent]:
        result = await db.execute(_LIST_AFTER_SQL, {"after_id": after_id, "limit": limit})
        return [_row_to_event(row) for row in result.fetchall()]
