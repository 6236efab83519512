# src/nm_market/infrastructure/persistence.py
"""SaleOrderRepository — raw SQL persistence for the order registry and its history.

sale_orders holds open orders only (rows are deleted on sale/cancel);
order_history keeps one row per order ever created, keyed by item_id.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_common.datetime_utils import utc_now
from src.nm_common.enums import OrderStatus
from src.nm_common.errors import InternalError
from src.nm_market.domain.models import OrderRecord, SaleOrder

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_NEXT_ITEM_ID_SQL = text("SELECT nextval('sale_order_item_id_seq') AS item_id")

_INSERT_ORDER_SQL = text("""
    INSERT INTO sale_orders (order_id, item_id, asset_address, asset_id,
        seller, price, buyer, sold, created_at)
    VALUES (:order_id, :item_id, :asset_address, :asset_id,
        :seller, :price, NULL, FALSE, :created_at)
""")

_INSERT_HISTORY_SQL = text("""
    INSERT INTO order_history (item_id, order_id, asset_address, asset_id,
        seller, price, status, created_at)
    VALUES (:item_id, :order_id, :asset_address, :asset_id,
        :seller, :price, 'OPEN', :created_at)
""")

_ORDER_COLUMNS = """
    order_id, item_id, asset_address, asset_id, seller, price, buyer, sold, created_at
"""

_GET_ORDER_SQL = text(f"SELECT {_ORDER_COLUMNS} FROM sale_orders WHERE order_id = :order_id")

_GET_ORDER_FOR_UPDATE_SQL = text(
    f"SELECT {_ORDER_COLUMNS} FROM sale_orders WHERE order_id = :order_id FOR UPDATE"
)

_LIST_OPEN_SQL = text(f"""
    SELECT {_ORDER_COLUMNS}
    FROM sale_orders
    WHERE sold = FALSE
    ORDER BY item_id ASC
""")

_LIST_BY_IDS_SQL = text(f"""
    SELECT {_ORDER_COLUMNS}
    FROM sale_orders
    WHERE order_id = ANY(string_to_array(CAST(:ids_csv AS TEXT), ','))
""")

_CLOSE_HISTORY_SQL = text("""
    UPDATE order_history
    SET status = :status, buyer = :buyer, amount_paid = :amount_paid, closed_at = :closed_at
    WHERE order_id = :order_id AND status = 'OPEN'
""")

_DELETE_ORDER_SQL = text("DELETE FROM sale_orders WHERE order_id = :order_id")

_HISTORY_COLUMNS = """
    item_id, order_id, asset_address, asset_id, seller, price,
    status, buyer, amount_paid, created_at, closed_at
"""

_GET_RECORD_SQL = text(f"SELECT {_HISTORY_COLUMNS} FROM order_history WHERE order_id = :order_id")

_LIST_BY_BUYER_SQL = text(f"""
    SELECT {_HISTORY_COLUMNS}
    FROM order_history
    WHERE buyer = :user_id
    ORDER BY item_id ASC
""")

_LIST_BY_SELLER_SQL = text(f"""
    SELECT {_HISTORY_COLUMNS}
    FROM order_history
    WHERE seller = :user_id
    ORDER BY item_id ASC
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> SaleOrder:
    return SaleOrder(
        order_id=row.order_id,
        item_id=row.item_id,
        asset_address=row.asset_address,
        asset_id=int(row.asset_id),
        seller=row.seller,
        price=row.price,
        buyer=row.buyer,
        sold=row.sold,
        created_at=row.created_at,
    )


def _row_to_record(row: Any) -> OrderRecord:
    return OrderRecord(
        item_id=row.item_id,
        order_id=row.order_id,
        asset_address=row.asset_address,
        asset_id=int(row.asset_id),
        seller=row.seller,
        price=row.price,
        status=row.status,
        buyer=row.buyer,
        amount_paid=row.amount_paid,
        created_at=row.created_at,
        closed_at=row.closed_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SaleOrderRepository:
    """Concrete implementation of SaleOrderRepositoryProtocol using raw SQL."""

    async def next_item_id(self, db: AsyncSession) -> int:
        result = await db.execute(_NEXT_ITEM_ID_SQL)
        row = result.fetchone()
        if row is None:
            raise InternalError("item id sequence returned no value")
        return int(row.item_id)

    async def save(self, order: SaleOrder, db: AsyncSession) -> None:
        params = {
            "order_id": order.order_id,
            "item_id": order.item_id,
            "asset_address": order.asset_address,
            "asset_id": order.asset_id,
            "seller": order.seller,
            "price": order.price,
            "created_at": order.created_at or utc_now(),
        }
        await db.execute(_INSERT_ORDER_SQL, params)
        await db.execute(_INSERT_HISTORY_SQL, params)

    async def get_by_id(
        self, order_id: str, db: AsyncSession, for_update: bool = False
    ) -> SaleOrder | None:
        sql = _GET_ORDER_FOR_UPDATE_SQL if for_update else _GET_ORDER_SQL
        result = await db.execute(sql, {"order_id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def list_open(self, db: AsyncSession) -> list[SaleOrder]:
        result = await db.execute(_LIST_OPEN_SQL)
        return [_row_to_order(row) for row in result.fetchall()]

    async def list_by_ids(self, order_ids: list[str], db: AsyncSession) -> list[SaleOrder]:
        if not order_ids:
            return []
        result = await db.execute(_LIST_BY_IDS_SQL, {"ids_csv": ",".join(order_ids)})
        return [_row_to_order(row) for row in result.fetchall()]

    async def record_sale(self, order: SaleOrder, amount_paid: int, db: AsyncSession) -> None:
        await self._close(order, OrderStatus.SOLD, order.buyer, amount_paid, db)

    async def record_cancel(self, order: SaleOrder, db: AsyncSession) -> None:
        await self._close(order, OrderStatus.CANCELLED, None, None, db)

    async def delete(self, order_id: str, db: AsyncSession) -> None:
        await db.execute(_DELETE_ORDER_SQL, {"order_id": order_id})

    async def get_record(self, order_id: str, db: AsyncSession) -> OrderRecord | None:
        result = await db.execute(_GET_RECORD_SQL, {"order_id": order_id})
        row = result.fetchone()
        return _row_to_record(row) if row else None

    async def list_records_by_buyer(self, buyer: str, db: AsyncSession) -> list[OrderRecord]:
        result = await db.execute(_LIST_BY_BUYER_SQL, {"user_id": buyer})
        return [_row_to_record(row) for row in result.fetchall()]

    async def list_records_by_seller(self, seller: str, db: AsyncSession) -> list[OrderRecord]:
        result = await db.execute(_LIST_BY_SELLER_SQL, {"user_id": seller})
        return [_row_to_record(row) for row in result.fetchall()]

    async def _close(
        self,
        order: SaleOrder,
        status: OrderStatus,
        buyer: str | None,
        amount_paid: int | None,
        db: AsyncSession,
    ) -> None:
        await db.execute(
            _CLOSE_HISTORY_SQL,
            {
                "order_id": order.order_id,
                "status": status.value,
                "buyer": buyer,
                "amount_paid": amount_paid,
                "closed_at": utc_now(),
            },
        )
