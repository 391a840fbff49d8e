"""Tests for dp_common.id_generator and dp_common.datetime_utils."""

from datetime import UTC, datetime
from unittest.mock import patch

from src.dp_common.datetime_utils import from_unix, unix_now, utc_now
from src.dp_common.id_generator import OrderIdGenerator, generate_order_id


class TestOrderIdGenerator:
    def test_prefix_and_millis(self) -> None:
        gen = OrderIdGenerator(prefix="order-")
        result = gen.next_id()
        assert result.startswith("order-")
        assert result.removeprefix("order-").isdigit()

    def test_unique_ids(self) -> None:
        gen = OrderIdGenerator()
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_same_millisecond_bumps_forward(self) -> None:
        gen = OrderIdGenerator(prefix="o-")
        with patch.object(gen, "_current_ms", return_value=1_700_000_000_000):
            first = gen.next_id()
            second = gen.next_id()
        assert first == "o-1700000000000"
        assert second == "o-1700000000001"

    def test_clock_going_backwards_stays_monotonic(self) -> None:
        gen = OrderIdGenerator(prefix="")
        with patch.object(gen, "_current_ms", side_effect=[2000, 1000]):
            assert int(gen.next_id()) == 2000
            assert int(gen.next_id()) == 2001

    def test_module_default(self) -> None:
        assert generate_order_id() != generate_order_id()


class TestDatetimeUtils:
    def test_utc_now_is_aware(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo == UTC

    def test_unix_round_trip(self) -> None:
        ts = unix_now()
        assert int(from_unix(ts).timestamp()) == ts
