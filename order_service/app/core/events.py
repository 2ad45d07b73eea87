"""
Order Service Event Management
Initializes and manages Kafka event publishing for the order service.
"""

import logging
from typing import Optional

from ..events.base.kafka_client import KafkaEventPublisher
from ..events.producers import OrderEventPublisher
from .setting import OrderSettings, get_settings

logger = logging.getLogger(__name__)

# Global instances
_kafka_publisher: Optional[KafkaEventPublisher] = None
_order_event_publisher: Optional[OrderEventPublisher] = None


async def init_events(settings: Optional[OrderSettings] = None) -> None:
    """Initialize event publishing infrastructure"""
    global _kafka_publisher, _order_event_publisher

    settings = settings or get_settings()

    _kafka_publisher = KafkaEventPublisher(
        bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
        client_id=f"{settings.SERVICE_NAME}-producer",
        max_retries=settings.KAFKA_CONNECT_MAX_RETRIES,
        retry_delay=settings.KAFKA_CONNECT_RETRY_DELAY,
        enable_graceful_degradation=True,
    )

    try:
        await _kafka_publisher.start(timeout=settings.KAFKA_CONNECT_TIMEOUT)
    except Exception as e:
        logger.warning(f"⚠️ Kafka publisher start failed: {e}")
        logger.info("Service will continue without event publishing (degraded mode)")

    # The publisher is created even when Kafka is down so every create
    # reports a failed PublishResult instead of silently skipping the event
    _order_event_publisher = OrderEventPublisher(
        _kafka_publisher,
        topic=settings.ORDER_EVENTS_QUEUE,
        publish_timeout=settings.EVENT_PUBLISH_TIMEOUT,
        source_service=settings.SERVICE_NAME,
    )
    logger.info("✅ Event publishing infrastructure initialized")


async def close_events() -> None:
    """Close event publishing infrastructure"""
    global _kafka_publisher, _order_event_publisher

    try:
        if _kafka_publisher:
            await _kafka_publisher.stop()
            logger.info("Event publishing infrastructure closed")
    except Exception as e:
        logger.error(f"Error closing event infrastructure: {e}")
    finally:
        _kafka_publisher = None
        _order_event_publisher = None


def get_event_publisher() -> Optional[OrderEventPublisher]:
    """Get the order event publisher instance"""
    return _order_event_publisher


async def health_check_events() -> bool:
    """Check if event publishing is healthy"""
    if _kafka_publisher:
        return await _kafka_publisher.health_check()
    return False
