"""MarketplaceEngine — stateful orchestrator for listing, buying and cancelling orders.

Every mutating entry point runs under the ReentrancyGuard and inside one
database transaction (savepoint + commit). The in-memory open-order index is
only touched after the commit succeeded, so it never reflects state that
was rolled back.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.nm_account.domain.repository import AccountRepositoryProtocol
from src.nm_account.infrastructure.persistence import AccountRepository
from src.nm_asset.domain.models import normalize_address
from src.nm_asset.domain.repository import AssetRegistryProtocol
from src.nm_asset.infrastructure.persistence import AssetRegistry
from src.nm_common.datetime_utils import utc_now
from src.nm_common.enums import MarketEventType
from src.nm_common.errors import NotOrderSellerError, UnknownOrderError
from src.nm_common.id_generator import derive_order_id, is_well_formed_order_id
from src.nm_market.domain.constants import ESCROW_HOLDER_ID
from src.nm_market.domain.models import MarketEvent, OrderRecord, PurchaseReceipt, SaleOrder
from src.nm_market.domain.repository import MarketEventLogProtocol, SaleOrderRepositoryProtocol
from src.nm_market.domain.settlement import plan_settlement, validate_listing_price
from src.nm_market.engine.guard import ReentrancyGuard
from src.nm_market.engine.open_order_index import OpenOrderIndex
from src.nm_market.infrastructure.event_log import MarketEventLog
from src.nm_market.infrastructure.persistence import SaleOrderRepository
from src.nm_market.infrastructure.settlement import settle_purchase

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MarketplaceEngine:
    def __init__(
        self,
        orders: SaleOrderRepositoryProtocol | None = None,
        assets: AssetRegistryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        events: MarketEventLogProtocol | None = None,
        commission: int = settings.MARKETPLACE_COMMISSION,
        platform_account: str = settings.PLATFORM_OWNER_ID,
    ) -> None:
        if commission < 0:
            raise ValueError(f"commission must be >= 0, got {commission}")
        self._orders: SaleOrderRepositoryProtocol = orders or SaleOrderRepository()
        self._assets: AssetRegistryProtocol = assets or AssetRegistry()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._events: MarketEventLogProtocol = events or MarketEventLog()
        self._commission = commission
        self._platform_account = platform_account
        self._guard = ReentrancyGuard()
        self._index: OpenOrderIndex | None = None
        self._index_lock = asyncio.Lock()

    @property
    def commission(self) -> int:
        return self._commission

    @property
    def platform_account(self) -> str:
        return self._platform_account

    # ------------------------------------------------------------------
    # Open-order index
    # ------------------------------------------------------------------

    async def _get_or_rebuild_index(self, db: AsyncSession) -> OpenOrderIndex:
        """Lazy rebuild from the registry on first use or after eviction.

        Readers and mutations share one rebuild, so a read that started first
        cannot overwrite an index a mutation has already appended to.
        """
        if self._index is not None:
            return self._index
        async with self._index_lock:
            if self._index is None:
                open_orders = await self._orders.list_open(db)
                self._index = OpenOrderIndex(o.order_id for o in open_orders)
            return self._index

    def evict_index(self) -> None:
        self._index = None

    def remove_order_id(self, order_id: str) -> bool:
        if self._index is None:
            return False
        return self._index.remove(order_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _atomically(self, db: AsyncSession, work: Callable[[], Awaitable[T]]) -> T:
        try:
            async with db.begin_nested():
                result = await work()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return result

    async def list_order(
        self, asset_address: str, asset_id: int, price: int, seller: str, db: AsyncSession
    ) -> SaleOrder:
        """Escrow the asset and open a sale order for it."""
        async with self._guard.hold("list"):
            index = await self._get_or_rebuild_index(db)
            order = await self._atomically(
                db, lambda: self._list_inner(asset_address, asset_id, price, seller, db)
            )
            index.append(order.order_id)
        logger.info(
            "Order %s listed: %s#%s by %s at %d",
            order.order_id, order.asset_address, order.asset_id, seller, price,
        )
        return order

    async def _list_inner(
        self, asset_address: str, asset_id: int, price: int, seller: str, db: AsyncSession
    ) -> SaleOrder:
        validate_listing_price(price, self._commission)
        address = normalize_address(asset_address)

        item_id = await self._orders.next_item_id(db)
        created_at = utc_now()
        order = SaleOrder(
            order_id=derive_order_id(item_id, created_at, address, asset_id, price, seller),
            item_id=item_id,
            asset_address=address,
            asset_id=asset_id,
            seller=seller,
            price=price,
            created_at=created_at,
        )

        await self._assets.transfer(db, address, asset_id, seller, ESCROW_HOLDER_ID, seller)
        await self._orders.save(order, db)
        await self._events.append(
            MarketEventType.LISTED.value,
            order.order_id,
            {
                "asset_address": address,
                "asset_id": asset_id,
                "seller": seller,
                "price": price,
            },
            db,
        )
        return order

    async def buy(
        self, order_id: str, buyer: str, value: int, db: AsyncSession
    ) -> PurchaseReceipt:
        """Fulfil an open order with `value` attached; surplus over the price is refunded."""
        async with self._guard.hold("buy"):
            await self._get_or_rebuild_index(db)
            receipt = await self._atomically(
                db, lambda: self._buy_inner(order_id, buyer, value, db)
            )
            self.remove_order_id(order_id)
        logger.info(
            "Order %s bought by %s for %d (seller %s +%d, commission %d, refund %d)",
            order_id, buyer, receipt.amount_paid, receipt.order.seller,
            receipt.seller_proceeds, receipt.commission, receipt.refund,
        )
        return receipt

    async def _buy_inner(
        self, order_id: str, buyer: str, value: int, db: AsyncSession
    ) -> PurchaseReceipt:
        order = await self._load_open_order(order_id, db)
        plan = plan_settlement(order.price, value, self._commission, buyer)

        # (a) escrow -> buyer
        await self._assets.transfer(
            db, order.asset_address, order.asset_id, ESCROW_HOLDER_ID, buyer, ESCROW_HOLDER_ID
        )
        # (b) mark sold
        order.sold = True
        order.buyer = buyer
        await self._orders.record_sale(order, plan.amount_paid, db)
        # (c) drop from registry
        await self._orders.delete(order.order_id, db)
        # (d)(e) seller proceeds, commission, refund
        await settle_purchase(order, buyer, plan, self._accounts, self._platform_account, db)
        # (f)
        await self._events.append(
            MarketEventType.PURCHASED.value,
            order.order_id,
            {
                "asset_address": order.asset_address,
                "asset_id": order.asset_id,
                "seller": order.seller,
                "buyer": buyer,
                "price": order.price,
                "amount_paid": plan.amount_paid,
            },
            db,
        )
        return PurchaseReceipt(
            order=order,
            amount_paid=plan.amount_paid,
            seller_proceeds=plan.seller_proceeds,
            commission=plan.commission,
            refund=plan.refund,
        )

    async def cancel(self, order_id: str, caller: str, db: AsyncSession) -> SaleOrder:
        """Seller-only delisting: return the asset from escrow and close the order."""
        async with self._guard.hold("cancel"):
            await self._get_or_rebuild_index(db)
            order = await self._atomically(db, lambda: self._cancel_inner(order_id, caller, db))
            self.remove_order_id(order_id)
        logger.info("Order %s cancelled by seller %s", order_id, caller)
        return order

    async def _cancel_inner(self, order_id: str, caller: str, db: AsyncSession) -> SaleOrder:
        order = await self._load_open_order(order_id, db)
        if order.seller != caller:
            raise NotOrderSellerError(order_id)

        await self._assets.transfer(
            db, order.asset_address, order.asset_id, ESCROW_HOLDER_ID, order.seller,
            ESCROW_HOLDER_ID,
        )
        await self._orders.record_cancel(order, db)
        await self._orders.delete(order.order_id, db)
        await self._events.append(
            MarketEventType.CANCELLED.value,
            order.order_id,
            {
                "asset_address": order.asset_address,
                "asset_id": order.asset_id,
                "price": order.price,
                "seller": order.seller,
            },
            db,
        )
        return order

    async def _load_open_order(self, order_id: str, db: AsyncSession) -> SaleOrder:
        if not order_id or not is_well_formed_order_id(order_id):
            raise UnknownOrderError(order_id)
        order = await self._orders.get_by_id(order_id, db, for_update=True)
        if order is None or order.sold:
            raise UnknownOrderError(order_id)
        return order

    # ------------------------------------------------------------------
    # Reads: no guard
    # ------------------------------------------------------------------

    async def get_on_sale_orders(self, db: AsyncSession) -> list[SaleOrder]:
        """Open orders in current index order (not stable across removals)."""
        index = await self._get_or_rebuild_index(db)
        ids = index.snapshot()
        by_id = {o.order_id: o for o in await self._orders.list_by_ids(ids, db)}
        return [by_id[i] for i in ids if i in by_id and not by_id[i].sold]

    async def get_order(self, order_id: str, db: AsyncSession) -> OrderRecord:
        record = await self._orders.get_record(order_id, db) if order_id else None
        if record is None:
            raise UnknownOrderError(order_id)
        return record

    async def fetch_my_nfts(self, user: str, db: AsyncSession) -> list[OrderRecord]:
        """Every order ever bought by `user`, ascending item_id."""
        return await self._orders.list_records_by_buyer(user, db)

    async def fetch_items_created(self, user: str, db: AsyncSession) -> list[OrderRecord]:
        """Every order ever listed by `user` (open, sold or cancelled), ascending item_id."""
        return await self._orders.list_records_by_seller(user, db)

    async def list_events(self, after_id: int, limit: int, db: AsyncSession) -> list[MarketEvent]:
        return await self._events.list_after(after_id, limit, db)
