"""AccountApplicationService — thin composition layer.

Deposit and withdraw commit (or roll back) their own transaction.
get_balance and list_ledger are read-only.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_account.application.schemas import (
    BalanceChangeResponse,
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.nm_account.domain.repository import AccountRepositoryProtocol
from src.nm_account.infrastructure.persistence import AccountRepository
from src.nm_common.errors import AccountNotFoundError
from src.nm_common.units import micro_to_display


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        account = await self._repo.get_account_by_user_id(db, user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        return BalanceResponse.from_micro(user_id=user_id, available=account.available_balance)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> BalanceChangeResponse:
        try:
            account, entry = await self._repo.deposit(db, user_id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BalanceChangeResponse.from_result(account.available_balance, amount, entry.id)

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> BalanceChangeResponse:
        try:
            account, entry = await self._repo.withdraw(db, user_id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BalanceChangeResponse.from_result(account.available_balance, amount, entry.id)

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # limit+1 detects has_more without a COUNT(*)
        entries = await self._repo.list_ledger_entries(
            db, user_id, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                amount=e.amount,
                amount_display=micro_to_display(e.amount),
                balance_after=e.balance_after,
                balance_after_display=micro_to_display(e.balance_after),
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                description=e.description,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)
