"""Tests for nm_common.errors and nm_common.response."""

from src.nm_common.errors import (
    AppError,
    AssetTransferError,
    InsufficientBalanceError,
    InsufficientPaymentError,
    InvalidPriceError,
    NotOrderSellerError,
    PaymentTransferError,
    ReentrancyRejectedError,
    TransferFailedError,
    UnknownOrderError,
)
from src.nm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestMarketplaceErrors:
    def test_invalid_price(self) -> None:
        err = InvalidPriceError(price=10, commission=25_000)
        assert err.code == 4001
        assert err.http_status == 422
        assert "25000" in err.message

    def test_insufficient_payment(self) -> None:
        err = InsufficientPaymentError(price=100, value=99)
        assert err.code == 4002
        assert "99" in err.message

    def test_not_order_seller(self) -> None:
        err = NotOrderSellerError("abc")
        assert err.code == 4003
        assert err.http_status == 403

    def test_unknown_order_empty_id(self) -> None:
        err = UnknownOrderError("")
        assert err.code == 4004
        assert err.http_status == 404
        assert "<empty>" in err.message

    def test_reentrancy_rejected(self) -> None:
        err = ReentrancyRejectedError("buy")
        assert err.code == 4009
        assert err.http_status == 409

    def test_transfer_failures_share_base(self) -> None:
        asset_err = AssetTransferError("0xabc", 7, "not the owner")
        pay_err = PaymentTransferError("bob", "no funds")
        assert isinstance(asset_err, TransferFailedError)
        assert isinstance(pay_err, TransferFailedError)
        assert asset_err.code == 3003
        assert pay_err.code == 4005
        assert asset_err.http_status == pay_err.http_status == 422

    def test_insufficient_balance_keeps_amounts(self) -> None:
        err = InsufficientBalanceError(required=6500, available=3000)
        assert err.code == 2001
        assert (err.required, err.available) == (6500, 3000)


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"key": "value"})
        assert isinstance(resp, ApiResponse)
        assert resp.code == 0
        assert resp.data == {"key": "value"}
        assert resp.request_id.startswith("req_")

    def test_error_response(self) -> None:
        resp = error_response(4004, "Unknown order")
        assert resp.code == 4004
        assert resp.data is None
