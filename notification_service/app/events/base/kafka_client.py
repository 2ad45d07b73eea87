import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from aiokafka import AIOKafkaConsumer  # type: ignore
from aiokafka.errors import KafkaConnectionError  # type: ignore

from ...utils.logging import setup_notification_logging as setup_logging

logger = setup_logging("notification_service.events.kafka")

BatchCallback = Callable[[Sequence[bytes]], Awaitable[object]]


class KafkaBatchSubscriber:
    """
    Notification Service Kafka subscriber that hands the queue to a
    callback one batch at a time.

    Offsets are committed once per batch, after the callback returned,
    regardless of how many messages inside the batch failed.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        topic: str,
        group_id: str,
        client_id: str,
        max_batch_size: int = 10,
        poll_timeout_ms: int = 1000,
        max_retries: int = 5,
        retry_delay: float = 2.0,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.topic = topic
        self.group_id = group_id
        self.client_id = client_id
        self.max_batch_size = max_batch_size
        self.poll_timeout_ms = poll_timeout_ms
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.consumer: Optional[AIOKafkaConsumer] = None
        self.running = False

    async def start(self, timeout: float = 30.0) -> None:
        """Start the consumer with retry logic"""
        for attempt in range(self.max_retries):
            consumer = AIOKafkaConsumer(
                self.topic,
                bootstrap_servers=self.bootstrap_servers,
                group_id=self.group_id,
                client_id=self.client_id,
                enable_auto_commit=False,
                auto_offset_reset="earliest",
            )
            try:
                logger.info(
                    "Attempting Kafka subscriber connection",
                    extra={
                        "attempt": attempt + 1,
                        "max_retries": self.max_retries,
                        "topic": self.topic,
                        "operation": "subscriber_connect",
                    },
                )
                await asyncio.wait_for(consumer.start(), timeout=timeout)  # type: ignore
                self.consumer = consumer
                self.running = True
                logger.info(
                    "Kafka subscriber connected successfully",
                    extra={"topic": self.topic, "group_id": self.group_id},
                )
                return

            except (KafkaConnectionError, asyncio.TimeoutError) as e:
                await consumer.stop()  # type: ignore
                delay = self.retry_delay * (2**attempt)
                logger.warning(
                    f"Kafka subscriber connection attempt {attempt + 1} failed: {e}. "
                    f"Retrying in {delay} seconds..."
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(delay)

        raise KafkaConnectionError(
            f"Could not connect to Kafka at {self.bootstrap_servers}"
        )

    async def stop(self) -> None:
        """Stop the consumer"""
        self.running = False
        if self.consumer:
            try:
                await self.consumer.stop()  # type: ignore
                logger.info("Kafka consumer stopped", extra={"topic": self.topic})
            except Exception as e:
                logger.warning(
                    "Error stopping Kafka consumer",
                    extra={"topic": self.topic, "error": str(e)},
                )
            finally:
                self.consumer = None

    async def poll_batch(self) -> List[bytes]:
        """Fetch up to ``max_batch_size`` message bodies"""
        if not self.consumer:
            raise KafkaConnectionError("Kafka consumer not started")

        records = await self.consumer.getmany(  # type: ignore
            timeout_ms=self.poll_timeout_ms, max_records=self.max_batch_size
        )
        bodies: List[bytes] = []
        for partition_records in records.values():
            for record in partition_records:
                bodies.append(record.value if record.value is not None else b"")
        return bodies

    async def run(
        self, on_batch: BatchCallback, stop_event: Optional[asyncio.Event] = None
    ) -> None:
        """Poll batches until stopped, committing after each handled batch"""
        while self.running and not (stop_event and stop_event.is_set()):
            bodies = await self.poll_batch()
            if not bodies:
                continue

            await on_batch(bodies)
            if not self.consumer:
                break
            await self.consumer.commit()  # type: ignore
            logger.info(
                "Committed batch offsets",
                extra={"topic": self.topic, "batch_size": len(bodies)},
            )
