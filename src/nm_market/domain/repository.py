"""Marketplace persistence Protocols — interface contracts for the engine."""
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_market.domain.models import MarketEvent, OrderRecord, SaleOrder


class SaleOrderRepositoryProtocol(Protocol):
    async def next_item_id(self, db: AsyncSession) -> int: ...

    async def save(self, order: SaleOrder, db: AsyncSession) -> None: ...

    async def get_by_id(
        self, order_id: str, db: AsyncSession, for_update: bool = False
    ) -> SaleOrder | None: ...

    async def list_open(self, db: AsyncSession) -> list[SaleOrder]: ...

    async def list_by_ids(self, order_ids: list[str], db: AsyncSession) -> list[SaleOrder]: ...

    async def record_sale(self, order: SaleOrder, amount_paid: int, db: AsyncSession) -> None: ...

    async def record_cancel(self, order: SaleOrder, db: AsyncSession) -> None: ...

    async def delete(self, order_id: str, db: AsyncSession) -> None: ...

    async def get_record(self, order_id: str, db: AsyncSession) -> OrderRecord | None: ...

    async def list_records_by_buyer(self, buyer: str, db: AsyncSession) -> list[OrderRecord]: ...

    async def list_records_by_seller(self, seller: str, db: AsyncSession) -> list[OrderRecord]: ...


class MarketEventLogProtocol(Protocol):
    async def append(
        self, event_type: str, order_id: str, payload: dict[str, Any], db: AsyncSession
    ) -> None: ...

    async def list_after(
        self, after_id: int, limit: int, db: AsyncSession
    ) -> list[MarketEvent]: ...
