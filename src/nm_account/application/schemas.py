"""Pydantic schemas and cursor utilities for nm_account API."""

import base64
import binascii
import json

from pydantic import BaseModel, Field

from src.nm_common.units import MAX_AMOUNT, micro_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on a malformed cursor."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    amount: int = Field(..., gt=0, le=MAX_AMOUNT, description="Amount to deposit in micro-units")


class WithdrawRequest(BaseModel):
    amount: int = Field(..., gt=0, le=MAX_AMOUNT, description="Amount to withdraw in micro-units")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    available_balance: int
    available_balance_display: str

    @classmethod
    def from_micro(cls, user_id: str, available: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            available_balance=available,
            available_balance_display=micro_to_display(available),
        )


class BalanceChangeResponse(BaseModel):
    """Shared shape of deposit and withdraw results."""

    available_balance: int
    available_balance_display: str
    amount: int
    amount_display: str
    ledger_entry_id: int

    @classmethod
    def from_result(cls, available: int, amount: int, entry_id: int) -> "BalanceChangeResponse":
        return cls(
            available_balance=available,
            available_balance_display=micro_to_display(available),
            amount=amount,
            amount_display=micro_to_display(amount),
            ledger_entry_id=entry_id,
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount: int
    amount_display: str
    balance_after: int
    balance_after_display: str
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
