"""Price validation and purchase settlement arithmetic.

The commission is a fixed amount per sale, not a rate. A listing price below
the commission would leave the seller with negative proceeds, so it is
rejected at listing time. Prices and attached values are capped at
MAX_AMOUNT, the largest value the BIGINT amount columns hold.
"""
from dataclasses import dataclass

from src.nm_common.errors import InsufficientPaymentError, InvalidPriceError, PaymentTransferError
from src.nm_common.units import MAX_AMOUNT


@dataclass(frozen=True)
class SettlementPlan:
    """How an attached payment is split. amount_paid == seller_proceeds + commission + refund."""

    amount_paid: int
    seller_proceeds: int
    commission: int
    refund: int


def validate_listing_price(price: int, commission: int) -> None:
    if price <= 0 or price < commission or price > MAX_AMOUNT:
        raise InvalidPriceError(price, commission)


def plan_settlement(price: int, value: int, commission: int, buyer: str) -> SettlementPlan:
    """Split `value` attached by `buyer` to a purchase of an order priced at `price`.

    Overpayment is refunded to the buyer; only `price` is consumed.
    """
    if value < price:
        raise InsufficientPaymentError(price, value)
    if value > MAX_AMOUNT:
        raise PaymentTransferError(buyer, f"attached value {value} exceeds {MAX_AMOUNT}")
    return SettlementPlan(
        amount_paid=value,
        seller_proceeds=price - commission,
        commission=commission,
        refund=value - price,
    )
