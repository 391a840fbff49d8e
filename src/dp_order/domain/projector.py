"""Derived views over the order set — pure, synchronous, no I/O."""
from collections.abc import Sequence

from config.settings import settings
from src.dp_common.datetime_utils import unix_now
from src.dp_common.enums import OrderType
from src.dp_order.domain.models import MarketStats, Order


def compute_stats(
    orders: Sequence[Order],
    now: int | None = None,
    window_seconds: int | None = None,
) -> MarketStats:
    """Aggregate stats.

    avg_price divides the sum of *verified* prices by the count of *all*
    orders: an unverified order contributes 0 to the numerator but still
    counts in the denominator. Empty input yields all zeros.
    """
    if not orders:
        return MarketStats()
    now = unix_now() if now is None else now
    window = settings.RECENT_ACTIVITY_WINDOW_SECONDS if window_seconds is None else window_seconds

    total = len(orders)
    verified = sum(1 for o in orders if o.is_verified)
    price_sum = sum(o.decrypted_value for o in orders if o.is_verified)
    recent = sum(1 for o in orders if now - o.created_at < window)
    return MarketStats(
        total_orders=total,
        verified_orders=verified,
        avg_price=price_sum / total,
        recent_activity=recent,
    )


def filter_by_creator(
    orders: Sequence[Order], address: str | None, previous: list[Order]
) -> list[Order]:
    """Orders created by `address` (case-insensitive exact match).

    With no address the previous view is returned untouched.
    """
    if not address:
        return previous
    needle = address.lower()
    return [o for o in orders if o.creator.lower() == needle]


def order_type_label(order_type: OrderType) -> str:
    return "Buy" if order_type is OrderType.BUY else "Sell"
