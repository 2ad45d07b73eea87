"""
Per-message processing for queued order.created events.
"""

from typing import Union

from ..clients.order_status_client import OrderStatusClient
from ..providers.notification_provider import SimulatedNotificationProvider
from ..utils.logging import setup_notification_logging as setup_logging
from .schemas import parse_order_id

logger = setup_logging("notification_service.events.processor")

NOTIFIED = "NOTIFIED"


class OrderNotificationProcessor:
    """Parse one message, notify, then mark the order as notified.

    Raises on the first failing step: MessageParseError for a bad body,
    TransportError or RemoteRejection for a failed callback. The dispatch
    step never raises and is not undone when the callback fails.
    """

    def __init__(
        self,
        status_client: OrderStatusClient,
        provider: SimulatedNotificationProvider,
        notified_status: str = NOTIFIED,
    ):
        self.status_client = status_client
        self.provider = provider
        self.notified_status = notified_status

    async def process(self, body: Union[str, bytes]) -> int:
        """Process a raw message body and return the order id it referred to"""
        order_id = parse_order_id(body)
        logger.info("Order id extracted", extra={"order_id": order_id})

        dispatch = await self.provider.dispatch(order_id)
        if not dispatch.success:
            logger.warning(
                "Continuing to status update after failed dispatch",
                extra={"order_id": order_id, "error": dispatch.error},
            )

        await self.status_client.update_status(order_id, self.notified_status)
        logger.info(
            "Order marked as notified",
            extra={"order_id": order_id, "status": self.notified_status},
        )
        return order_id
