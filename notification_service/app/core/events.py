"""
Notification Service Event Management
Builds the batch consumer pipeline from settings and owns its lifecycle.
"""

import logging
from typing import Optional

from ..clients.order_status_client import OrderStatusClient
from ..events.consumers import BatchNotificationConsumer
from ..events.processor import OrderNotificationProcessor
from ..providers.notification_provider import SimulatedNotificationProvider
from .settings import NotificationServiceSettings, get_settings

logger = logging.getLogger(__name__)

# Global instances
_status_client: Optional[OrderStatusClient] = None
_batch_consumer: Optional[BatchNotificationConsumer] = None


def build_batch_consumer(
    settings: NotificationServiceSettings,
    status_client: OrderStatusClient,
) -> BatchNotificationConsumer:
    """Wire processor and consumer around an existing status client"""
    processor = OrderNotificationProcessor(
        status_client=status_client,
        provider=SimulatedNotificationProvider(
            delay=settings.NOTIFICATION_SIMULATED_DELAY
        ),
        notified_status=settings.NOTIFIED_STATUS,
    )
    return BatchNotificationConsumer(
        processor, concurrency=settings.NOTIFICATION_BATCH_CONCURRENCY
    )


def init_events(
    settings: Optional[NotificationServiceSettings] = None,
) -> BatchNotificationConsumer:
    """Initialize the notification pipeline"""
    global _status_client, _batch_consumer

    settings = settings or get_settings()
    _status_client = OrderStatusClient(
        settings.ORDER_SERVICE_URL, timeout=settings.ORDER_SERVICE_TIMEOUT
    )
    _batch_consumer = build_batch_consumer(settings, _status_client)

    logger.info(
        "✅ Notification pipeline initialized",
        extra={
            "order_service_url": settings.ORDER_SERVICE_URL,
            "queue": settings.ORDER_EVENTS_QUEUE,
        },
    )
    return _batch_consumer


async def close_events() -> None:
    """Close the notification pipeline"""
    global _status_client, _batch_consumer

    try:
        if _status_client:
            await _status_client.close()
            logger.info("Notification pipeline closed")
    except Exception as e:
        logger.error(f"Error closing notification pipeline: {e}")
    finally:
        _status_client = None
        _batch_consumer = None


def get_batch_consumer() -> Optional[BatchNotificationConsumer]:
    """Get the batch consumer instance"""
    return _batch_consumer
