"""Tests for listing price validation and the purchase settlement split."""
import pytest

from src.nm_common.errors import InsufficientPaymentError, InvalidPriceError, PaymentTransferError
from src.nm_common.units import MAX_AMOUNT
from src.nm_market.domain.settlement import plan_settlement, validate_listing_price


class TestValidateListingPrice:
    @pytest.mark.parametrize("price", [0, -1, 24_999])
    def test_rejects(self, price: int) -> None:
        with pytest.raises(InvalidPriceError):
            validate_listing_price(price, 25_000)

    def test_accepts_commission_and_above(self) -> None:
        validate_listing_price(25_000, 25_000)
        validate_listing_price(100_000_000, 25_000)

    def test_zero_commission_still_needs_positive_price(self) -> None:
        with pytest.raises(InvalidPriceError):
            validate_listing_price(0, 0)


class TestPlanSettlement:
    def test_exact_payment(self) -> None:
        plan = plan_settlement(100_000_000, 100_000_000, 2_500_000, "bob")
        assert plan.seller_proceeds == 97_500_000
        assert plan.commission == 2_500_000
        assert plan.refund == 0
        assert plan.amount_paid == 100_000_000

    def test_overpayment_refund(self) -> None:
        plan = plan_settlement(100, 130, 10, "bob")
        assert plan.refund == 30
        assert plan.amount_paid == plan.seller_proceeds + plan.commission + plan.refund

    def test_underpayment(self) -> None:
        with pytest.raises(InsufficientPaymentError):
            plan_settlement(100, 99, 10, "bob")


class TestAmountBounds:
    def test_price_above_bigint_rejected(self) -> None:
        with pytest.raises(InvalidPriceError):
            validate_listing_price(MAX_AMOUNT + 1, 25_000)

    def test_price_at_bigint_max_accepted(self) -> None:
        validate_listing_price(MAX_AMOUNT, 25_000)

    def test_value_above_bigint_rejected(self) -> None:
        with pytest.raises(PaymentTransferError) as exc_info:
            plan_settlement(100, MAX_AMOUNT + 1, 10, "bob")
        assert exc_info.value.code == 4005
        assert "bob" in exc_info.value.message

    def test_value_at_bigint_max_refunds_surplus(self) -> None:
        plan = plan_settlement(100, MAX_AMOUNT, 10, "bob")
        assert plan.refund == MAX_AMOUNT - 100
