"""Global enums — ledger codes must match the deployed contract exactly."""

from enum import Enum


class OrderType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @property
    def ledger_code(self) -> int:
        """uint8 stored in the contract's publicValue2 slot."""
        return 0 if self is OrderType.BUY else 1

    @classmethod
    def from_ledger_code(cls, code: int) -> "OrderType":
        # Contract accepts any uint8; everything non-zero renders as Sell.
        return cls.BUY if code == 0 else cls.SELL


class TransactionPhase(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
