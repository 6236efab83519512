"""Marketplace domain models — pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.nm_common.enums import OrderStatus


@dataclass
class SaleOrder:
    """A row of the open-order registry. Deleted once sold or cancelled."""

    order_id: str
    item_id: int  # stable creation sequence, survives deletion in order_history
    asset_address: str
    asset_id: int
    seller: str
    price: int  # micro-units, immutable after creation
    buyer: str | None = None
    sold: bool = False
    created_at: datetime | None = None


@dataclass
class OrderRecord:
    """Historical view of an order; kept for every order ever created."""

    item_id: int
    order_id: str
    asset_address: str
    asset_id: int
    seller: str
    price: int
    status: str = OrderStatus.OPEN.value
    buyer: str | None = None
    amount_paid: int | None = None
    created_at: datetime | None = None
    closed_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.status == OrderStatus.OPEN.value


@dataclass
class MarketEvent:
    id: int
    event_type: str
    order_id: str
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass
class PurchaseReceipt:
    order: SaleOrder
    amount_paid: int
    seller_proceeds: int
    commission: int
    refund: int
