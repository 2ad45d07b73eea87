"""
Notification Service worker
===========================

Consumes order.created events from Kafka in batches, simulates the customer
notification and calls the order service back to mark each order NOTIFIED.

Run with ``python -m notification_service.app.main``.
"""

import asyncio
import signal
import time
from typing import Optional

from .core.events import close_events, init_events
from .core.settings import NotificationServiceSettings, get_settings
from .events.base.kafka_client import KafkaBatchSubscriber
from .utils.logging import setup_notification_logging

settings = get_settings()
enable_file_logging = settings.ENVIRONMENT.lower() in ["production", "staging"]

logger = setup_notification_logging(
    "notification_service",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=enable_file_logging,
)


async def run_worker(
    settings: NotificationServiceSettings,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Consume the order events queue until ``stop_event`` is set"""
    startup_start = time.time()
    consumer = init_events(settings)
    subscriber = KafkaBatchSubscriber(
        bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
        topic=settings.ORDER_EVENTS_QUEUE,
        group_id=settings.KAFKA_GROUP_ID,
        client_id=f"{settings.SERVICE_NAME}-consumer",
        max_batch_size=settings.NOTIFICATION_BATCH_SIZE,
        poll_timeout_ms=settings.NOTIFICATION_POLL_TIMEOUT_MS,
    )

    try:
        await subscriber.start()
        logger.info(
            "Notification worker started",
            extra={
                "queue": settings.ORDER_EVENTS_QUEUE,
                "order_service_url": settings.ORDER_SERVICE_URL,
                "batch_size": settings.NOTIFICATION_BATCH_SIZE,
                "startup_duration_ms": int((time.time() - startup_start) * 1000),
            },
        )
        await subscriber.run(consumer.handle, stop_event=stop_event)
    finally:
        logger.info("Starting notification worker shutdown")
        await subscriber.stop()
        await close_events()
        logger.info("Notification worker shutdown completed")


async def _main() -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops
            pass
    await run_worker(settings, stop_event=stop_event)


def main() -> None:
    asyncio.run(_main())


if __name__ == "__main__":
    main()
