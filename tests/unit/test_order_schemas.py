"""Unit tests for dp_order Pydantic schemas."""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.dp_common.enums import OrderType, TransactionPhase
from src.dp_order.application.schemas import (
    CreateOrderRequest,
    MarketStatsResponse,
    OrderResponse,
    TransactionStatusResponse,
)
from src.dp_order.domain.models import MarketStats, Order
from src.dp_order.domain.status import HIDDEN, TransactionStatus

CREATOR = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


class TestCreateOrderRequest:
    def test_valid_request(self) -> None:
        req = CreateOrderRequest(name="A", price=5, token_id=1)
        assert req.order_type is OrderType.BUY
        assert req.description == ""

    def test_sell_from_string(self) -> None:
        req = CreateOrderRequest(name="A", price=5, token_id=1, order_type="SELL")  # type: ignore[arg-type]
        assert req.order_type is OrderType.SELL

    def test_blank_name_raises(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(name="   ", price=5, token_id=1)

    def test_negative_price_raises(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(name="A", price=-1, token_id=1)

    def test_negative_token_id_raises(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(name="A", price=5, token_id=-1)

    def test_price_above_value_width_is_not_a_schema_error(self) -> None:
        # Width is enforced at encryption time
        req = CreateOrderRequest(name="A", price=2**40, token_id=1)
        assert req.price == 2**40

    def test_unknown_order_type_raises(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(name="A", price=5, token_id=1, order_type="HOLD")  # type: ignore[arg-type]


class TestOrderResponse:
    def _order(self, **kwargs: object) -> Order:
        defaults: dict[str, object] = {
            "id": "order-1",
            "name": "Punk #1",
            "token_id": 1,
            "order_type": OrderType.SELL,
            "description": "floor",
            "creator": CREATOR,
            "created_at": 1_700_000_000,
        }
        defaults.update(kwargs)
        return Order(**defaults)  # type: ignore[arg-type]

    def test_unverified_hides_price(self) -> None:
        resp = OrderResponse.from_domain(self._order(decrypted_value=9))
        assert resp.revealed_price is None
        assert resp.is_verified is False

    def test_verified_shows_price(self) -> None:
        resp = OrderResponse.from_domain(self._order(is_verified=True, decrypted_value=9))
        assert resp.revealed_price == 9

    def test_display_fields(self) -> None:
        resp = OrderResponse.from_domain(self._order())
        assert resp.order_type_label == "Sell"
        assert resp.creator_short == "0x7099...79C8"
        assert resp.created_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


class TestMarketStatsResponse:
    def test_avg_rounded(self) -> None:
        resp = MarketStatsResponse.from_domain(MarketStats(3, 1, 10 / 3, 3))
        assert resp.avg_price == 3.33
        assert resp.total_orders == 3


class TestTransactionStatusResponse:
    def test_hidden(self) -> None:
        resp = TransactionStatusResponse.from_domain(HIDDEN)
        assert resp.visible is False

    def test_error(self) -> None:
        status = TransactionStatus(TransactionPhase.ERROR, "Invalid price", True)
        resp = TransactionStatusResponse.from_domain(status)
        assert resp.model_dump(mode="json") == {
            "phase": "error",
            "message": "Invalid price",
            "visible": True,
        }
