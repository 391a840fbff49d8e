"""Unit tests for the pure view projections (stats, per-creator history)."""
from typing import Any

from src.dp_common.enums import OrderType
from src.dp_order.domain.models import MarketStats, Order
from src.dp_order.domain.projector import compute_stats, filter_by_creator, order_type_label

NOW = 1_700_100_000
DAY = 86_400
ALICE = "0xAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAa"
BOB = "0xbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbB"


def _make_order(**kwargs: Any) -> Order:
    defaults: dict[str, Any] = {
        "id": "order-1",
        "name": "Azuki #9",
        "token_id": 9,
        "order_type": OrderType.SELL,
        "description": "",
        "creator": ALICE,
        "created_at": NOW - 60,
    }
    defaults.update(kwargs)
    return Order(**defaults)


class TestComputeStats:
    def test_empty_is_all_zero(self) -> None:
        assert compute_stats([], now=NOW) == MarketStats(0, 0, 0.0, 0)

    def test_counts(self) -> None:
        orders = [
            _make_order(id="a", is_verified=True, decrypted_value=10),
            _make_order(id="b"),
            _make_order(id="c", is_verified=True, decrypted_value=20),
        ]
        stats = compute_stats(orders, now=NOW)
        assert stats.total_orders == 3
        assert stats.verified_orders == 2

    def test_avg_divides_by_all_orders(self) -> None:
        # (10 + 20 + 0) / 3, not (10 + 20) / 2
        orders = [
            _make_order(id="a", is_verified=True, decrypted_value=10),
            _make_order(id="b"),
            _make_order(id="c", is_verified=True, decrypted_value=20),
        ]
        assert compute_stats(orders, now=NOW).avg_price == 10.0

    def test_unverified_values_never_counted(self) -> None:
        order = _make_order(is_verified=False)
        order.decrypted_value = 999  # stale value leaking from a snapshot
        assert compute_stats([order], now=NOW).avg_price == 0.0

    def test_recent_activity_window(self) -> None:
        orders = [
            _make_order(id="fresh", created_at=NOW - 10),
            _make_order(id="edge", created_at=NOW - DAY),
            _make_order(id="old", created_at=NOW - 2 * DAY),
        ]
        assert compute_stats(orders, now=NOW).recent_activity == 1

    def test_custom_window(self) -> None:
        orders = [_make_order(created_at=NOW - 120)]
        assert compute_stats(orders, now=NOW, window_seconds=60).recent_activity == 0


class TestFilterByCreator:
    def test_case_insensitive_exact_match(self) -> None:
        mine = _make_order(id="mine", creator=ALICE)
        theirs = _make_order(id="theirs", creator=BOB)
        result = filter_by_creator([mine, theirs], ALICE.lower(), previous=[])
        assert [o.id for o in result] == ["mine"]

    def test_prefix_is_not_a_match(self) -> None:
        order = _make_order(creator=ALICE)
        assert filter_by_creator([order], ALICE[:20], previous=[]) == []

    def test_empty_address_keeps_previous_view(self) -> None:
        previous = [_make_order(id="kept")]
        assert filter_by_creator([_make_order(id="new")], "", previous) is previous
        assert filter_by_creator([_make_order(id="new")], None, previous) is previous


class TestOrderTypeLabel:
    def test_labels(self) -> None:
        assert order_type_label(OrderType.BUY) == "Buy"
        assert order_type_label(OrderType.SELL) == "Sell"
