"""Wallet session API: connect, disconnect, inspect.

Connecting runs the FHE handshake and the first order load before the
response returns; disconnecting hard-stops every protocol.
"""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel, field_validator

from src.dp_common.response import ApiResponse, success_response
from src.dp_order.api.router import build_state
from src.dp_order.application.service import get_workflow

router = APIRouter(prefix="/session", tags=["session"])


class ConnectRequest(BaseModel):
    address: str

    @field_validator("address")
    @classmethod
    def looks_like_address(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("0x") or len(v) != 42:
            raise ValueError("address must be a 0x-prefixed 20-byte hex string")
        int(v[2:], 16)  # ValueError -> 422
        return v


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "/connect",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Connect wallet",
)
async def connect(request: Request, body: ConnectRequest) -> ApiResponse:
    workflow = get_workflow()
    await workflow.wallet.connect(body.address)
    resp = success_response(build_state(workflow).model_dump(mode="json"))
    resp.request_id = _get_request_id(request)
    resp.message = "Wallet connected"
    return resp


@router.post("/disconnect", response_model=ApiResponse, summary="Disconnect wallet")
async def disconnect(request: Request) -> ApiResponse:
    workflow = get_workflow()
    await workflow.wallet.disconnect()
    resp = success_response(build_state(workflow).model_dump(mode="json"))
    resp.request_id = _get_request_id(request)
    resp.message = "Wallet disconnected"
    return resp


@router.get("", response_model=ApiResponse, summary="Current session")
async def current_session(request: Request) -> ApiResponse:
    resp = success_response(build_state(get_workflow()).model_dump(mode="json"))
    resp.request_id = _get_request_id(request)
    return resp
