"""In-memory collaborators for MarketplaceEngine tests.

FakeSession mimics the transactional contract the engine relies on:
``begin_nested()`` snapshots every fake store and restores it when the
block raises, so a failed operation leaves no trace.
"""
import copy
import dataclasses
from contextlib import asynccontextmanager
from typing import Any

from src.nm_account.domain.models import Account, LedgerEntry
from src.nm_asset.domain.models import Asset, normalize_address
from src.nm_common.datetime_utils import utc_now
from src.nm_common.errors import (
    AccountNotFoundError,
    AssetAlreadyRegisteredError,
    AssetNotFoundError,
    AssetTransferError,
    InsufficientBalanceError,
)
from src.nm_market.domain.models import MarketEvent, OrderRecord, SaleOrder


class FakeState:
    def __init__(self) -> None:
        self.assets: dict[tuple[str, int], Asset] = {}
        self.balances: dict[str, int] = {}
        self.ledger: list[LedgerEntry] = []
        self.orders: dict[str, SaleOrder] = {}
        self.history: dict[str, OrderRecord] = {}
        self.events: list[MarketEvent] = []
        self.item_seq = 0

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self.__dict__)

    def restore(self, snap: dict[str, Any]) -> None:
        self.__dict__.update(snap)


class FakeSession:
    def __init__(self, state: FakeState) -> None:
        self._state = state
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def begin_nested(self):
        snap = self._state.snapshot()
        try:
            yield self
        except BaseException:
            self._state.restore(snap)
            raise

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class FakeOrders:
    def __init__(self, state: FakeState) -> None:
        self._s = state

    async def next_item_id(self, db) -> int:
        self._s.item_seq += 1
        return self._s.item_seq

    async def save(self, order: SaleOrder, db) -> None:
        self._s.orders[order.order_id] = dataclasses.replace(order)
        self._s.history[order.order_id] = OrderRecord(
            item_id=order.item_id,
            order_id=order.order_id,
            asset_address=order.asset_address,
            asset_id=order.asset_id,
            seller=order.seller,
            price=order.price,
            created_at=order.created_at,
        )

    async def get_by_id(self, order_id: str, db, for_update: bool = False) -> SaleOrder | None:
        order = self._s.orders.get(order_id)
        return dataclasses.replace(order) if order else None

    async def list_open(self, db) -> list[SaleOrder]:
        opened = [o for o in self._s.orders.values() if not o.sold]
        return sorted(opened, key=lambda o: o.item_id)

    async def list_by_ids(self, order_ids: list[str], db) -> list[SaleOrder]:
        return [dataclasses.replace(self._s.orders[i]) for i in order_ids if i in self._s.orders]

    async def record_sale(self, order: SaleOrder, amount_paid: int, db) -> None:
        self._close(order.order_id, "SOLD", order.buyer, amount_paid)

    async def record_cancel(self, order: SaleOrder, db) -> None:
        self._close(order.order_id, "CANCELLED", None, None)

    async def delete(self, order_id: str, db) -> None:
        self._s.orders.pop(order_id, None)

    async def get_record(self, order_id: str, db) -> OrderRecord | None:
        return self._s.history.get(order_id)

    async def list_records_by_buyer(self, buyer: str, db) -> list[OrderRecord]:
        found = [r for r in self._s.history.values() if r.buyer == buyer]
        return sorted(found, key=lambda r: r.item_id)

    async def list_records_by_seller(self, seller: str, db) -> list[OrderRecord]:
        found = [r for r in self._s.history.values() if r.seller == seller]
        return sorted(found, key=lambda r: r.item_id)

    def _close(self, order_id: str, status: str, buyer, amount_paid) -> None:
        record = self._s.history[order_id]
        if record.status == "OPEN":
            record.status = status
            record.buyer = buyer
            record.amount_paid = amount_paid
            record.closed_at = utc_now()


class FakeAssets:
    def __init__(self, state: FakeState) -> None:
        self._s = state

    async def get(self, db, asset_address: str, asset_id: int) -> Asset | None:
        return self._s.assets.get((normalize_address(asset_address), asset_id))

    async def register(self, db, asset_address: str, asset_id: int, owner_id: str) -> Asset:
        key = (normalize_address(asset_address), asset_id)
        if key in self._s.assets:
            raise AssetAlreadyRegisteredError(*key)
        self._s.assets[key] = Asset(asset_address=key[0], asset_id=asset_id, owner_id=owner_id)
        return self._s.assets[key]

    async def approve(self, db, asset_address, asset_id, owner_id, operator_id) -> Asset:
        asset = await self.get(db, asset_address, asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_address, asset_id)
        if asset.owner_id != owner_id:
            raise AssetTransferError(asset_address, asset_id, f"{owner_id} is not the owner")
        asset.approved_id = operator_id
        return asset

    async def transfer(self, db, asset_address, asset_id, from_owner, to_owner, operator) -> Asset:
        asset = await self.get(db, asset_address, asset_id)
        if asset is None:
            raise AssetTransferError(asset_address, asset_id, "asset is not registered")
        reason = asset.transfer_rejection(from_owner, operator)
        if reason:
            raise AssetTransferError(asset_address, asset_id, reason)
        asset.owner_id = to_owner
        asset.approved_id = None
        return asset


class FakeAccounts:
    def __init__(self, state: FakeState) -> None:
        self._s = state

    def open(self, user_id: str, balance: int = 0) -> None:
        self._s.balances[user_id] = balance

    async def get_account_by_user_id(self, db, user_id: str) -> Account | None:
        if user_id not in self._s.balances:
            return None
        return Account(id=user_id, user_id=user_id, available_balance=self._s.balances[user_id], version=0)

    async def deposit(self, db, user_id: str, amount: int):
        return await self.credit(db, user_id, amount, "DEPOSIT", "DEPOSIT", "", "deposit")

    async def withdraw(self, db, user_id: str, amount: int):
        return await self.debit(db, user_id, amount, "WITHDRAW", "WITHDRAW", "", "withdraw")

    async def debit(self, db, user_id, amount, entry_type, ref_type, ref_id, description):
        if user_id not in self._s.balances:
            raise AccountNotFoundError(user_id)
        if self._s.balances[user_id] < amount:
            raise InsufficientBalanceError(amount, self._s.balances[user_id])
        return self._move(user_id, -amount, entry_type, ref_type, ref_id, description)

    async def credit(self, db, user_id, amount, entry_type, ref_type, ref_id, description):
        if user_id not in self._s.balances:
            raise AccountNotFoundError(user_id)
        return self._move(user_id, amount, entry_type, ref_type, ref_id, description)

    async def list_ledger_entries(self, db, user_id, cursor_id, limit, entry_type):
        rows = [e for e in reversed(self._s.ledger) if e.user_id == user_id]
        return rows[:limit]

    def _move(self, user_id, signed, entry_type, ref_type, ref_id, description):
        self._s.balances[user_id] += signed
        entry = LedgerEntry(
            id=len(self._s.ledger) + 1,
            user_id=user_id,
            entry_type=str(getattr(entry_type, "value", entry_type)),
            amount=signed,
            balance_after=self._s.balances[user_id],
            reference_type=ref_type,
            reference_id=ref_id or None,
            description=description,
            created_at=utc_now(),
        )
        self._s.ledger.append(entry)
        account = Account(
            id=user_id, user_id=user_id, available_balance=self._s.balances[user_id], version=0
        )
        return account, entry


class FakeEvents:
    def __init__(self, state: FakeState) -> None:
        self._s = state

    async def append(self, event_type: str, order_id: str, payload: dict[str, Any], db) -> None:
        self._s.events.append(
            MarketEvent(
                id=len(self._s.events) + 1,
                event_type=event_type,
                order_id=order_id,
                payload={"order_id": order_id, **payload},
                created_at=utc_now(),
            )
        )

    async def list_after(self, after_id: int, limit: int, db) -> list[MarketEvent]:
        return [e for e in self._s.events if e.id > after_id][:limit]
