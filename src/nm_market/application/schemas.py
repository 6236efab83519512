# src/nm_market/application/schemas.py
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.nm_common.datetime_utils import isoformat_or_none
from src.nm_common.units import micro_to_display
from src.nm_market.domain.models import MarketEvent, OrderRecord, PurchaseReceipt, SaleOrder


class ListOrderRequest(BaseModel):
    asset_address: str = Field(..., min_length=1, max_length=128)
    asset_id: int = Field(..., ge=0)
    price: int = Field(
        ..., description="Price in micro-units; must be > 0, >= commission and <= 2**63 - 1"
    )

    @field_validator("asset_address")
    @classmethod
    def no_whitespace(cls, v: str) -> str:
        if v != v.strip() or " " in v:
            raise ValueError("asset_address must not contain whitespace")
        return v


class BuyOrderRequest(BaseModel):
    value: int = Field(
        ..., ge=0, description="Funds attached to the purchase, micro-units; <= 2**63 - 1"
    )


class SaleOrderResponse(BaseModel):
    order_id: str
    item_id: int
    asset_address: str
    asset_id: int
    seller: str
    price: int
    price_display: str
    buyer: str | None
    sold: bool
    created_at: str | None

    @classmethod
    def from_order(cls, order: SaleOrder) -> "SaleOrderResponse":
        return cls(
            order_id=order.order_id,
            item_id=order.item_id,
            asset_address=order.asset_address,
            asset_id=order.asset_id,
            seller=order.seller,
            price=order.price,
            price_display=micro_to_display(order.price),
            buyer=order.buyer,
            sold=order.sold,
            created_at=isoformat_or_none(order.created_at),
        )


class OrderRecordResponse(BaseModel):
    order_id: str
    item_id: int
    asset_address: str
    asset_id: int
    seller: str
    price: int
    status: str
    buyer: str | None
    amount_paid: int | None
    created_at: str | None
    closed_at: str | None

    @classmethod
    def from_record(cls, record: OrderRecord) -> "OrderRecordResponse":
        return cls(
            order_id=record.order_id,
            item_id=record.item_id,
            asset_address=record.asset_address,
            asset_id=record.asset_id,
            seller=record.seller,
            price=record.price,
            status=record.status,
            buyer=record.buyer,
            amount_paid=record.amount_paid,
            created_at=isoformat_or_none(record.created_at),
            closed_at=isoformat_or_none(record.closed_at),
        )


class PurchaseResponse(BaseModel):
    order: SaleOrderResponse
    amount_paid: int
    seller_proceeds: int
    commission: int
    refund: int

    @classmethod
    def from_receipt(cls, receipt: PurchaseReceipt) -> "PurchaseResponse":
        return cls(
            order=SaleOrderResponse.from_order(receipt.order),
            amount_paid=receipt.amount_paid,
            seller_proceeds=receipt.seller_proceeds,
            commission=receipt.commission,
            refund=receipt.refund,
        )


class CommissionResponse(BaseModel):
    commission: int
    commission_display: str
    platform_account: str


class OrderListResponse(BaseModel):
    items: list[SaleOrderResponse]
    count: int


class OrderRecordListResponse(BaseModel):
    items: list[OrderRecordResponse]
    count: int


class MarketEventResponse(BaseModel):
    id: int
    event_type: str
    order_id: str
    payload: dict[str, Any]
    created_at: str | None

    @classmethod
    def from_event(cls, event: MarketEvent) -> "MarketEventResponse":
        return cls(
            id=event.id,
            event_type=event.event_type,
            order_id=event.order_id,
            payload=event.payload,
            created_at=isoformat_or_none(event.created_at),
        )


class MarketEventListResponse(BaseModel):
    items: list[MarketEventResponse]
    next_after_id: int
