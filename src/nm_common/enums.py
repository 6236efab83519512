"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class OrderStatus(str, Enum):
    """Lifecycle of a sale order as kept in order_history."""
    OPEN = "OPEN"
    SOLD = "SOLD"
    CANCELLED = "CANCELLED"


class MarketEventType(str, Enum):
    LISTED = "LISTED"
    PURCHASED = "PURCHASED"
    CANCELLED = "CANCELLED"


class LedgerEntryType(str, Enum):
    # Deposit/Withdraw
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    # Purchase (buyer side)
    PURCHASE_PAYMENT = "PURCHASE_PAYMENT"
    PURCHASE_REFUND = "PURCHASE_REFUND"
    # Sale (seller side)
    SALE_PROCEEDS = "SALE_PROCEEDS"
    # Commission (platform side)
    COMMISSION_REVENUE = "COMMISSION_REVENUE"
