"""Purchase fund movements — debit buyer, credit seller, credit platform, refund surplus.

Called from MarketplaceEngine within a transaction. Any rejected movement is
re-raised as PaymentTransferError so the whole purchase rolls back.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_account.domain.repository import AccountRepositoryProtocol
from src.nm_common.enums import LedgerEntryType
from src.nm_common.errors import AccountNotFoundError, InsufficientBalanceError, PaymentTransferError
from src.nm_market.domain.models import SaleOrder
from src.nm_market.domain.settlement import SettlementPlan

_REFERENCE_TYPE = "SALE_ORDER"


async def settle_purchase(
    order: SaleOrder,
    buyer: str,
    plan: SettlementPlan,
    accounts: AccountRepositoryProtocol,
    platform_account: str,
    db: AsyncSession,
) -> None:
    ref = order.order_id
    try:
        await accounts.debit(
            db, buyer, plan.amount_paid, LedgerEntryType.PURCHASE_PAYMENT,
            _REFERENCE_TYPE, ref, "Payment attached to purchase",
        )
        if plan.seller_proceeds:
            await accounts.credit(
                db, order.seller, plan.seller_proceeds, LedgerEntryType.SALE_PROCEEDS,
                _REFERENCE_TYPE, ref, "Sale proceeds net of commission",
            )
        if plan.commission:
            await accounts.credit(
                db, platform_account, plan.commission, LedgerEntryType.COMMISSION_REVENUE,
                _REFERENCE_TYPE, ref, "Marketplace commission",
            )
        if plan.refund:
            await accounts.credit(
                db, buyer, plan.refund, LedgerEntryType.PURCHASE_REFUND,
                _REFERENCE_TYPE, ref, "Overpayment refund",
            )
    except (InsufficientBalanceError, AccountNotFoundError) as exc:
        raise PaymentTransferError(buyer, exc.message) from exc
