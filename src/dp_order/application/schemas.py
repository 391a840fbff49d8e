# src/dp_order/application/schemas.py
"""Pydantic schemas for dp_order requests and views.

Only `price` is encrypted; name, token id, order type and description are
public ledger fields. The upper bound on `price` depends on the FHE value
width and is enforced by the encryption session, not here.
"""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.dp_common.datetime_utils import from_unix
from src.dp_common.enums import OrderType, TransactionPhase
from src.dp_order.domain.models import MarketStats, Order
from src.dp_order.domain.projector import order_type_label
from src.dp_order.domain.status import TransactionStatus


class CreateOrderRequest(BaseModel):
    name: str
    price: int = Field(ge=0)
    token_id: int = Field(ge=0)
    order_type: OrderType = OrderType.BUY
    description: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class OrderResponse(BaseModel):
    id: str
    name: str
    token_id: int
    order_type: OrderType
    order_type_label: str
    description: str
    creator: str
    creator_short: str
    created_at: datetime
    is_verified: bool
    # None until the price is revealed and attested on-chain
    revealed_price: int | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            name=order.name,
            token_id=order.token_id,
            order_type=order.order_type,
            order_type_label=order_type_label(order.order_type),
            description=order.description,
            creator=order.creator,
            creator_short=order.short_creator,
            created_at=from_unix(order.created_at),
            is_verified=order.is_verified,
            revealed_price=order.revealed_price,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int


class MarketStatsResponse(BaseModel):
    total_orders: int
    verified_orders: int
    avg_price: float
    recent_activity: int

    @classmethod
    def from_domain(cls, stats: MarketStats) -> "MarketStatsResponse":
        return cls(
            total_orders=stats.total_orders,
            verified_orders=stats.verified_orders,
            avg_price=round(stats.avg_price, 2),
            recent_activity=stats.recent_activity,
        )


class TransactionStatusResponse(BaseModel):
    phase: TransactionPhase
    message: str
    visible: bool

    @classmethod
    def from_domain(cls, status: TransactionStatus) -> "TransactionStatusResponse":
        return cls(phase=status.phase, message=status.message, visible=status.visible)


class CreateOrderResponse(BaseModel):
    created: bool
    status: TransactionStatusResponse


class RevealResponse(BaseModel):
    order_id: str
    # None when the price was verified concurrently or the reveal failed
    price: int | None
    status: TransactionStatusResponse


class WorkflowStateResponse(BaseModel):
    connected: bool
    address: str | None
    fhe_initialized: bool
    fhe_initializing: bool
    loading: bool
    is_refreshing: bool
    creating_order: bool
    is_decrypting: bool
    show_create_form: bool
    contract_address: str | None
    status: TransactionStatusResponse
