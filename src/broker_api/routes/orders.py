"""Order endpoints.

Provides REST endpoints for:
- Creating a payment order on the gateway
- Listing and fetching orders from the in-memory ledger
- Clearing the ledger (testing and debugging)
"""

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from broker.services.order_service import OrderService
from broker.services.razorpay_service import RazorpayService
from broker_api.dependencies import get_gateway, get_order_service
from broker_api.models.orders import (
    ClearOrdersResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderDescriptor,
    OrderDetailResponse,
    OrderListResponse,
)

router = APIRouter(tags=["orders"])


@router.post(
    "/create-order",
    summary="Create payment order",
    description="""
Create an order on the payment gateway and record it in the ledger.

**Notes:**
- Amount is in the smallest currency unit (paise for INR), minimum 100
- Currency defaults to INR
- Receipts longer than 40 characters are replaced with a generated one
""",
    response_model=CreateOrderResponse,
    responses={
        400: {"description": "Invalid or out-of-range amount"},
        502: {"description": "Gateway rejected or failed the request"},
        503: {"description": "Gateway credentials not configured"},
    },
)
async def create_order(
    body: CreateOrderRequest,
    order_service: OrderService = Depends(get_order_service),
    gateway: RazorpayService = Depends(get_gateway),
) -> CreateOrderResponse:
    """Create an order and return its gateway descriptor."""
    # Gateway call blocks on network I/O
    result = await run_in_threadpool(
        order_service.create_order,
        body.amount,
        body.currency,
        body.receipt,
    )
    order = result.order
    gateway_order = result.gateway_order

    return CreateOrderResponse(
        order=OrderDescriptor(
            id=order.id,
            entity=gateway_order.get("entity", "order"),
            amount=order.amount,
            currency=order.currency,
            receipt=order.receipt,
            status=gateway_order.get("status", order.status.value),
            created_at=gateway_order.get("created_at"),
        ),
        key_id=gateway.key_id,
    )


@router.get(
    "/orders",
    summary="List orders",
    description="List every order in the ledger with count and summed amount.",
    response_model=OrderListResponse,
)
async def list_orders(
    order_service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    """List all orders."""
    summary = order_service.list_orders()
    return OrderListResponse(
        count=summary.count,
        total_amount=summary.total_amount,
        orders=summary.orders,
    )


@router.get(
    "/orders/{order_id}",
    summary="Get order",
    response_model=OrderDetailResponse,
    responses={404: {"description": "Order not found"}},
)
async def get_order(
    order_id: str,
    order_service: OrderService = Depends(get_order_service),
) -> OrderDetailResponse:
    """Get one order from the ledger."""
    return OrderDetailResponse(order=order_service.get_order(order_id))


@router.delete(
    "/orders",
    summary="Clear orders",
    description="Remove every order from the ledger. Intended for testing and debugging.",
    response_model=ClearOrdersResponse,
)
async def clear_orders(
    order_service: OrderService = Depends(get_order_service),
) -> ClearOrdersResponse:
    """Empty the ledger."""
    return ClearOrdersResponse(cleared=order_service.clear_orders())
