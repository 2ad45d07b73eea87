"""
Order service: the order write path and its best-effort event publishing.
"""

from typing import List, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import OrderNotFoundError, OrderValidationError
from ..events.producers import OrderEventPublisher, PublishResult
from ..models.order import STATUS_MAX_LENGTH, Order, Status
from ..repository.order_repository import OrderRepository
from ..schemas.order import CreateOrderRequest
from ..utils.logging import setup_order_logging as setup_logging

logger = setup_logging("order_service", log_level="INFO")


class OrderCreationResult(NamedTuple):
    """The write and the publish are independent steps with separate outcomes"""

    order: Order
    publish: Optional[PublishResult]


class OrderService:
    def __init__(
        self,
        session: AsyncSession,
        event_publisher: Optional[OrderEventPublisher],
    ):
        self.session = session
        self.event_publisher = event_publisher
        self.order_repository = OrderRepository(session)

    async def create_order(self, order_input: CreateOrderRequest) -> OrderCreationResult:
        """
        Persist a new order, then publish an order.created event.

        The publish outcome is reported next to the order and never changes
        it: a committed order stays committed when the queue is unavailable.
        """
        status = (order_input.status or "").strip() or Status.CREATED.value

        order = await self.order_repository.create_order(
            customer_name=order_input.customer_name,
            total=order_input.total,
            status=status,
        )

        logger.info(
            "Order created successfully.",
            extra={
                "order_id": str(order.id),
                "customer_name": order.customer_name,
                "status": order.status,
                "total": str(order.total),
            },
        )

        publish_result: Optional[PublishResult] = None
        if self.event_publisher:
            publish_result = await self.event_publisher.publish_order_created(order)
            if not publish_result.published:
                logger.warning(
                    "Order event not published; order creation unaffected",
                    extra={
                        "order_id": str(order.id),
                        "error": publish_result.error,
                        "error_type": publish_result.error_type,
                    },
                )
        else:
            logger.warning(
                "Event publisher not configured; skipping order.created event",
                extra={"order_id": str(order.id)},
            )

        return OrderCreationResult(order=order, publish=publish_result)

    async def update_order_status(self, order_id: int, new_status: Optional[str]) -> Order:
        """Overwrite the status of an existing order"""
        if new_status is None or not new_status.strip():
            raise OrderValidationError("Status must not be empty", order_id=order_id)

        new_status = new_status.strip()
        if len(new_status) > STATUS_MAX_LENGTH:
            raise OrderValidationError(
                f"Status must be at most {STATUS_MAX_LENGTH} characters",
                order_id=order_id,
            )
        current = await self.order_repository.get_order_by_id(order_id)
        if not current:
            raise OrderNotFoundError(order_id)

        old_status = current.status
        order = await self.order_repository.update_order_status(current, new_status)

        logger.info(
            "Order status updated successfully.",
            extra={
                "order_id": str(order_id),
                "old_status": old_status,
                "new_status": new_status,
            },
        )
        return order

    async def get_order(self, order_id: int) -> Order:
        """Get a single order"""
        order = await self.order_repository.get_order_by_id(order_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    async def list_orders(self) -> List[Order]:
        """List every order"""
        orders = await self.order_repository.list_orders()
        logger.info("Orders listed successfully.", extra={"count": len(orders)})
        return orders
