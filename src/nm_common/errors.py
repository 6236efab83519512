"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account
  3xxx: Asset custody
  4xxx: Marketplace order
  9xxx: System

Every AppError raised inside a mutating marketplace call aborts the whole
database transaction; the HTTP layer maps it to the ApiResponse envelope.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )
        self.required = required
        self.available = available


class AccountNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Account not found for user {user_id}", 404)


# --- 3xxx / TransferFailure family ---

class TransferFailedError(AppError):
    """An asset or fund movement was rejected by its collaborator."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


class AssetNotFoundError(AppError):
    def __init__(self, asset_address: str, asset_id: int) -> None:
        super().__init__(3001, f"Asset not found: {asset_address}#{asset_id}", 404)


class AssetAlreadyRegisteredError(AppError):
    def __init__(self, asset_address: str, asset_id: int) -> None:
        super().__init__(3002, f"Asset already registered: {asset_address}#{asset_id}", 409)


class AssetTransferError(TransferFailedError):
    def __init__(self, asset_address: str, asset_id: int, reason: str) -> None:
        super().__init__(3003, f"Asset transfer rejected for {asset_address}#{asset_id}: {reason}")


# --- 4xxx: Marketplace order ---

class InvalidPriceError(AppError):
    def __init__(self, price: int, commission: int) -> None:
        super().__init__(
            4001,
            f"Invalid price {price}: must be positive and at least the commission {commission}",
            422,
        )


class InsufficientPaymentError(AppError):
    def __init__(self, price: int, value: int) -> None:
        super().__init__(4002, f"Insufficient payment: price {price}, attached {value}", 422)


class NotOrderSellerError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4003, f"Only the seller may cancel order {order_id}", 403)


class UnknownOrderError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Unknown or closed order: {order_id or '<empty>'}", 404)


class PaymentTransferError(TransferFailedError):
    def __init__(self, user_id: str, detail: str) -> None:
        super().__init__(4005, f"Payment transfer rejected for {user_id}: {detail}")


class ReentrancyRejectedError(AppError):
    def __init__(self, operation: str) -> None:
        super().__init__(
            4009, f"Re-entrant call to {operation} rejected while a mutation is in flight", 409
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
