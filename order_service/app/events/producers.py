import asyncio
import time
from typing import Any, Dict, Optional

from pydantic import BaseModel

from ..utils.logging import setup_order_logging as setup_logging
from .base import EventPublisher
from .schemas import ORDER_CREATED, OrderCreatedEvent

logger = setup_logging("order-producer-events", log_level="INFO")


class PublishResult(BaseModel):
    """Outcome of a best-effort publish; a failed publish is never raised"""

    published: bool
    event_type: str
    topic: str
    order_id: Optional[int] = None
    payload: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    duration_ms: int = 0


class BaseEventPublisher:
    """Base class for event publishers with common functionality"""

    def __init__(
        self,
        channel: EventPublisher,
        topic: str,
        publish_timeout: float = 5.0,
        source_service: str = "order-service",
    ):
        self.channel = channel
        self.topic = topic
        self.publish_timeout = publish_timeout
        self.source_service = source_service

    async def _publish_event(
        self,
        build_payload: Any,
        event_type: str,
        order_id: Optional[int],
        log_data: Dict[str, Any],
    ) -> PublishResult:
        """Serialize and send one event, converting every failure into a result"""
        start = time.monotonic()
        payload: Optional[str] = None
        try:
            payload = build_payload()
            await asyncio.wait_for(
                self.channel.send(
                    self.topic,
                    payload,
                    key=str(order_id) if order_id is not None else None,
                ),
                timeout=self.publish_timeout,
            )
        except Exception as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            error = str(e) or type(e).__name__
            logger.error(
                f"Failed to publish {event_type} event: {error}",
                extra={
                    **log_data,
                    "topic": self.topic,
                    "error_type": type(e).__name__,
                    "duration_ms": duration_ms,
                    "operation": "publish_failed",
                },
            )
            return PublishResult(
                published=False,
                event_type=event_type,
                topic=self.topic,
                order_id=order_id,
                payload=payload,
                error=error,
                error_type=type(e).__name__,
                duration_ms=duration_ms,
            )

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            f"Published {event_type} event.",
            extra={**log_data, "topic": self.topic, "duration_ms": duration_ms},
        )
        return PublishResult(
            published=True,
            event_type=event_type,
            topic=self.topic,
            order_id=order_id,
            payload=payload,
            duration_ms=duration_ms,
        )


class OrderEventPublisher(BaseEventPublisher):
    """Publishes order lifecycle events to the notification queue"""

    async def publish_order_created(self, order: Any) -> PublishResult:
        """Publish an OrderCreated snapshot of ``order``; never raises"""
        order_id = getattr(order, "id", None)

        def build_payload() -> str:
            return OrderCreatedEvent.from_order(order).to_json()

        return await self._publish_event(
            build_payload=build_payload,
            event_type=ORDER_CREATED,
            order_id=order_id,
            log_data={
                "order_id": str(order_id),
                "customer_name": getattr(order, "customer_name", None),
                "status": getattr(order, "status", None),
            },
        )
