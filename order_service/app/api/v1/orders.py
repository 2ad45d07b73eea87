from typing import List, Optional

from fastapi import APIRouter, Request, status

from ...schemas.order import (
    CreateOrderRequest,
    OrderResponse,
    UpdateOrderStatusRequest,
)
from ...services.order_service import OrderService
from ...utils.logging import setup_order_logging as setup_logging
from ..deps import CorrelationIdDep, OrderServiceDep

logger = setup_logging("order_service.api.orders")

router = APIRouter(prefix="/orders")


@router.get("", status_code=status.HTTP_200_OK, response_model=List[OrderResponse])
async def list_orders(
    order_service: OrderService = OrderServiceDep,
) -> List[OrderResponse]:
    """List every order"""
    orders = await order_service.list_orders()
    return [OrderResponse.model_validate(order) for order in orders]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=OrderResponse)
async def create_order(
    request: Request,
    order_data: CreateOrderRequest,
    correlation_id: Optional[str] = CorrelationIdDep,
    order_service: OrderService = OrderServiceDep,
) -> OrderResponse:
    """Create an order and publish an order.created event for notification.

    Notifier unavailability never fails this request.
    """
    result = await order_service.create_order(order_data)

    logger.info(
        "Create order request completed",
        extra={
            "order_id": str(result.order.id),
            "event_published": result.publish.published if result.publish else False,
            "correlation_id": correlation_id,
        },
    )
    return OrderResponse.model_validate(result.order)


@router.get("/{order_id}", status_code=status.HTTP_200_OK, response_model=OrderResponse)
async def get_order(
    order_id: int,
    order_service: OrderService = OrderServiceDep,
) -> OrderResponse:
    """Get order details by ID"""
    order = await order_service.get_order(order_id)
    return OrderResponse.model_validate(order)


@router.patch(
    "/{order_id}/status", status_code=status.HTTP_200_OK, response_model=OrderResponse
)
async def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    order_service: OrderService = OrderServiceDep,
) -> OrderResponse:
    """Update order status; used by the notification consumer to mark NOTIFIED"""
    order = await order_service.update_order_status(order_id, body.status)
    return OrderResponse.model_validate(order)
