# src/nm_market/application/service.py
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_common.units import micro_to_display
from src.nm_market.application.schemas import (
    CommissionResponse,
    MarketEventListResponse,
    MarketEventResponse,
    OrderListResponse,
    OrderRecordListResponse,
    OrderRecordResponse,
    PurchaseResponse,
    SaleOrderResponse,
)
from src.nm_market.engine.engine import MarketplaceEngine

_engine: MarketplaceEngine | None = None


def get_marketplace_engine() -> MarketplaceEngine:
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = MarketplaceEngine()
    return _engine


def get_commission() -> CommissionResponse:
    engine = get_marketplace_engine()
    return CommissionResponse(
        commission=engine.commission,
        commission_display=micro_to_display(engine.commission),
        platform_account=engine.platform_account,
    )


async def list_order(
    asset_address: str, asset_id: int, price: int, seller: str, db: AsyncSession
) -> SaleOrderResponse:
    order = await get_marketplace_engine().list_order(asset_address, asset_id, price, seller, db)
    return SaleOrderResponse.from_order(order)


async def buy_order(order_id: str, buyer: str, value: int, db: AsyncSession) -> PurchaseResponse:
    receipt = await get_marketplace_engine().buy(order_id, buyer, value, db)
    return PurchaseResponse.from_receipt(receipt)


async def cancel_order(order_id: str, caller: str, db: AsyncSession) -> SaleOrderResponse:
    order = await get_marketplace_engine().cancel(order_id, caller, db)
    return SaleOrderResponse.from_order(order)


async def get_on_sale_orders(db: AsyncSession) -> OrderListResponse:
    orders = await get_marketplace_engine().get_on_sale_orders(db)
    return OrderListResponse(
        items=[SaleOrderResponse.from_order(o) for o in orders],
        count=len(orders),
    )


async def get_order(order_id: str, db: AsyncSession) -> OrderRecordResponse:
    record = await get_marketplace_engine().get_order(order_id, db)
    return OrderRecordResponse.from_record(record)


async def fetch_purchases(user_id: str, db: AsyncSession) -> OrderRecordListResponse:
    records = await get_marketplace_engine().fetch_my_nfts(user_id, db)
    return OrderRecordListResponse(
        items=[OrderRecordResponse.from_record(r) for r in records],
        count=len(records),
    )


async def fetch_listings(user_id: str, db: AsyncSession) -> OrderRecordListResponse:
    records = await get_marketplace_engine().fetch_items_created(user_id, db)
    return OrderRecordListResponse(
        items=[OrderRecordResponse.from_record(r) for r in records],
        count=len(records),
    )


async def list_events(after_id: int, limit: int, db: AsyncSession) -> MarketEventListResponse:
    events = await get_marketplace_engine().list_events(after_id, limit, db)
    return MarketEventListResponse(
        items=[MarketEventResponse.from_event(e) for e in events],
        next_after_id=events[-1].id if events else after_id,
    )
