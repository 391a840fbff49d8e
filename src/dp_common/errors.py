"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Wallet/Session
  2xxx: Encryption/Input
  3xxx: Ledger
  4xxx: Decryption
  9xxx: System
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


# --- 1xxx: Wallet/Session ---

class WalletNotConnectedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Connect wallet first", 401)


# --- 2xxx: Encryption/Input ---

class EncryptionError(AppError):
    def __init__(self, detail: str = "Encryption failed") -> None:
        super().__init__(2001, detail, 503)


class OrderValidationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Invalid order input: {detail}", 422)


# --- 3xxx: Ledger ---

class LedgerError(AppError):
    def __init__(self, detail: str = "Ledger call failed", code: int = 3001) -> None:
        super().__init__(code, detail, 502)


class ContractNotFoundError(LedgerError):
    def __init__(self) -> None:
        super().__init__("Contract not available on the connected network", code=3002)


class UserRejectedError(LedgerError):
    def __init__(self) -> None:
        super().__init__("Transaction rejected by signer", code=3003)


class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(3004, f"Order not found: {order_id}", 404)


# --- 4xxx: Decryption ---

class DecryptionError(AppError):
    def __init__(self, detail: str = "Decryption failed") -> None:
        super().__init__(4001, detail, 502)


class AlreadyVerifiedError(AppError):
    """Reveal lost a race: another actor verified the record first."""

    def __init__(self, order_id: str = "") -> None:
        super().__init__(4002, f"Data already verified: {order_id}", 409)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
