"""
Serverless entry point for queue-triggered invocations.

The host runtime delivers an SQS-style event::

    {"Records": [{"messageId": "...", "body": "{\"orderId\": 1, ...}"}, ...]}

and receives the human readable summary, e.g. ``"2 succeeded, 1 failed"``.
"""

import asyncio
from typing import Any, Dict, List, Optional

from ..clients.order_status_client import OrderStatusClient
from ..core.events import build_batch_consumer
from ..core.settings import NotificationServiceSettings, get_settings
from ..events.consumers import BatchSummary
from ..utils.logging import setup_notification_logging as setup_logging

logger = setup_logging("notification_service.handlers.queue")


def extract_bodies(event: Dict[str, Any]) -> List[str]:
    """Pull the raw bodies out of the records, preserving delivery order"""
    records = event.get("Records") or []
    # A record without a body still counts as a message so it is reported failed
    return [str(record.get("body") or "") for record in records]


async def handle_queue_event(
    event: Dict[str, Any],
    settings: Optional[NotificationServiceSettings] = None,
    status_client: Optional[OrderStatusClient] = None,
) -> BatchSummary:
    """Run one queue event through the batch consumer"""
    settings = settings or get_settings()
    owns_client = status_client is None
    client = status_client or OrderStatusClient(
        settings.ORDER_SERVICE_URL, timeout=settings.ORDER_SERVICE_TIMEOUT
    )
    try:
        consumer = build_batch_consumer(settings, client)
        return await consumer.handle(extract_bodies(event))
    finally:
        if owns_client:
            await client.close()


def lambda_handler(event: Dict[str, Any], context: Any = None) -> str:
    """Synchronous handler signature expected by serverless runtimes"""
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Queue invocation received",
        extra={
            "request_id": request_id,
            "record_count": len(event.get("Records") or []),
        },
    )
    summary = asyncio.run(handle_queue_event(event))
    return str(summary)
