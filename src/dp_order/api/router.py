# src/dp_order/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from src.dp_common.errors import WalletNotConnectedError
from src.dp_common.response import ApiResponse, success_response
from src.dp_order.application.schemas import (
    CreateOrderRequest,
    CreateOrderResponse,
    MarketStatsResponse,
    OrderListResponse,
    OrderResponse,
    RevealResponse,
    TransactionStatusResponse,
    WorkflowStateResponse,
)
from src.dp_order.application.service import get_workflow
from src.dp_order.application.workflow import OrderWorkflow

router = APIRouter(prefix="/orders", tags=["orders"])

WorkflowDep = Annotated[OrderWorkflow, Depends(get_workflow)]


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


def _respond(request: Request, data: object, message: str = "success") -> ApiResponse:
    resp = success_response(data, message)
    resp.request_id = _get_request_id(request)
    return resp


def _status_out(workflow: OrderWorkflow) -> TransactionStatusResponse:
    return TransactionStatusResponse.from_domain(workflow.status.current)


def _status_message(workflow: OrderWorkflow) -> str:
    return workflow.status.current.message or "success"


def build_state(workflow: OrderWorkflow) -> WorkflowStateResponse:
    return WorkflowStateResponse(
        connected=workflow.is_connected,
        address=workflow.address,
        fhe_initialized=workflow.fhe_initialized,
        fhe_initializing=workflow.fhe_initializing,
        loading=workflow.loading,
        is_refreshing=workflow.is_refreshing,
        creating_order=workflow.creating_order,
        is_decrypting=workflow.is_decrypting,
        show_create_form=workflow.show_create_form,
        contract_address=workflow.contract_address,
        status=_status_out(workflow),
    )


@router.get("", response_model=ApiResponse, summary="Active orders")
async def list_orders(request: Request, workflow: WorkflowDep) -> ApiResponse:
    items = [OrderResponse.from_domain(o) for o in workflow.orders]
    data = OrderListResponse(items=items, total=len(items))
    return _respond(request, data.model_dump(mode="json"))


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Create an order with an FHE-encrypted price",
)
async def create_order(
    request: Request, body: CreateOrderRequest, workflow: WorkflowDep
) -> ApiResponse:
    created = await workflow.create_order(body)
    data = CreateOrderResponse(created=created, status=_status_out(workflow))
    return _respond(request, data.model_dump(mode="json"), _status_message(workflow))


@router.post("/refresh", response_model=ApiResponse, summary="Reload orders from the ledger")
async def refresh(request: Request, workflow: WorkflowDep) -> ApiResponse:
    await workflow.refresh()
    return _respond(request, build_state(workflow).model_dump(mode="json"))


@router.post("/check-contract", response_model=ApiResponse, summary="Contract liveness")
async def check_contract(request: Request, workflow: WorkflowDep) -> ApiResponse:
    available = await workflow.check_availability()
    return _respond(
        request,
        {"available": available, "status": _status_out(workflow).model_dump(mode="json")},
    )


@router.get("/stats", response_model=ApiResponse, summary="Market statistics")
async def market_stats(request: Request, workflow: WorkflowDep) -> ApiResponse:
    data = MarketStatsResponse.from_domain(workflow.market_stats)
    return _respond(request, data.model_dump())


@router.get("/history", response_model=ApiResponse, summary="Connected user's orders")
async def user_history(request: Request, workflow: WorkflowDep) -> ApiResponse:
    items = [OrderResponse.from_domain(o) for o in workflow.user_history]
    data = OrderListResponse(items=items, total=len(items))
    return _respond(request, data.model_dump(mode="json"))


@router.get("/status", response_model=ApiResponse, summary="Workflow state and status")
async def workflow_state(request: Request, workflow: WorkflowDep) -> ApiResponse:
    return _respond(request, build_state(workflow).model_dump(mode="json"))


@router.post("/form/open", response_model=ApiResponse, summary="Open the create form")
async def open_form(request: Request, workflow: WorkflowDep) -> ApiResponse:
    workflow.open_create_form()
    return _respond(request, build_state(workflow).model_dump(mode="json"))


@router.post("/form/close", response_model=ApiResponse, summary="Close the create form")
async def close_form(request: Request, workflow: WorkflowDep) -> ApiResponse:
    workflow.close_create_form()
    return _respond(request, build_state(workflow).model_dump(mode="json"))


@router.get("/{order_id}", response_model=ApiResponse, summary="Order detail")
async def get_order(order_id: str, request: Request, workflow: WorkflowDep) -> ApiResponse:
    data = OrderResponse.from_domain(workflow.get_order(order_id))
    return _respond(request, data.model_dump(mode="json"))


@router.post("/{order_id}/reveal", response_model=ApiResponse, summary="Reveal order price")
async def reveal_price(order_id: str, request: Request, workflow: WorkflowDep) -> ApiResponse:
    if not workflow.is_connected:
        raise WalletNotConnectedError()
    price = await workflow.reveal_price(order_id)
    data = RevealResponse(order_id=order_id, price=price, status=_status_out(workflow))
    return _respond(request, data.model_dump(mode="json"), _status_message(workflow))
