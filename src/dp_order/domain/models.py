"""Order domain model — pure dataclass, no ledger dependency."""
from dataclasses import dataclass

from src.dp_common.enums import OrderType


@dataclass
class Order:
    id: str
    name: str
    token_id: int  # public, plaintext
    order_type: OrderType
    description: str
    creator: str
    created_at: int  # unix seconds, set by the ledger
    is_verified: bool = False
    # Only meaningful once verified; the price is an encrypted handle before that
    decrypted_value: int = 0

    def __post_init__(self) -> None:
        if not self.is_verified:
            self.decrypted_value = 0

    @property
    def revealed_price(self) -> int | None:
        return self.decrypted_value if self.is_verified else None

    @property
    def short_creator(self) -> str:
        if len(self.creator) <= 10:
            return self.creator
        return f"{self.creator[:6]}...{self.creator[-4:]}"


@dataclass(frozen=True)
class MarketStats:
    total_orders: int = 0
    verified_orders: int = 0
    avg_price: float = 0.0
    recent_activity: int = 0
