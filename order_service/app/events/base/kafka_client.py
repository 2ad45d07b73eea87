import asyncio
from typing import Optional, Set

from aiokafka import AIOKafkaProducer  # type: ignore
from aiokafka.admin import AIOKafkaAdminClient, NewTopic  # type: ignore
from aiokafka.errors import KafkaConnectionError  # type: ignore

from ...utils.logging import setup_order_logging as setup_logging
from . import EventPublisher

logger = setup_logging("order_service.events.kafka")


class KafkaEventPublisher(EventPublisher):
    """
    Order Service Kafka publisher with connection retry logic.

    ``send`` raises on any failure; deciding whether a failed send matters
    is left to the caller.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        client_id: str,
        max_retries: int = 10,
        retry_delay: float = 2.0,
        enable_graceful_degradation: bool = True,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.enable_graceful_degradation = enable_graceful_degradation
        self.producer: Optional[AIOKafkaProducer] = None
        self.is_connected = False
        self._known_topics: Set[str] = set()
        self._connection_lock = asyncio.Lock()

    async def ensure_topic_exists(self, topic_name: str) -> None:
        """Ensure a Kafka topic exists, creating it if necessary."""
        if topic_name in self._known_topics:
            return

        admin_client = AIOKafkaAdminClient(bootstrap_servers=self.bootstrap_servers)
        await admin_client.start()  # type: ignore
        try:
            topics = await admin_client.list_topics()
            if topic_name not in topics:
                await admin_client.create_topics(
                    [NewTopic(name=topic_name, num_partitions=1, replication_factor=1)]
                )
                logger.info(
                    "Created Kafka topic",
                    extra={"topic_name": topic_name, "operation": "create_topic"},
                )
            self._known_topics.add(topic_name)
        except Exception as e:
            logger.warning(
                "Error ensuring Kafka topic exists",
                extra={
                    "topic_name": topic_name,
                    "error": str(e),
                    "operation": "ensure_topic_exists",
                },
            )
        finally:
            await admin_client.close()  # type: ignore

    async def start(self, timeout: float = 30.0) -> None:
        """Start Kafka producer with retry logic"""
        async with self._connection_lock:
            if self.producer and self.is_connected:
                return

            self.producer = AIOKafkaProducer(
                bootstrap_servers=self.bootstrap_servers,
                client_id=self.client_id,
                value_serializer=lambda x: x.encode("utf-8"),  # type: ignore
                key_serializer=lambda x: x.encode("utf-8") if x else None,  # type: ignore
                retry_backoff_ms=1000,
                request_timeout_ms=30000,
                connections_max_idle_ms=540000,
            )

            # Retry connection with exponential backoff
            for attempt in range(self.max_retries):
                try:
                    logger.info(
                        "Attempting Kafka connection",
                        extra={
                            "attempt": attempt + 1,
                            "max_retries": self.max_retries,
                            "operation": "kafka_connect",
                        },
                    )

                    await asyncio.wait_for(self.producer.start(), timeout=timeout)  # type: ignore

                    self.is_connected = True
                    logger.info("Successfully connected to Kafka")
                    return

                except (KafkaConnectionError, asyncio.TimeoutError) as e:
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"Kafka connection attempt {attempt + 1} failed: {e}. "
                        f"Retrying in {delay} seconds..."
                    )

                    if attempt < self.max_retries - 1:
                        await asyncio.sleep(delay)

            self.is_connected = False
            if not self.enable_graceful_degradation:
                raise KafkaConnectionError(
                    f"Could not connect to Kafka at {self.bootstrap_servers}"
                )
            logger.error(
                f"Failed to connect to Kafka after {self.max_retries} attempts. "
                f"Running in degraded mode (order events will not be published)"
            )

    async def stop(self) -> None:
        """Stop Kafka producer"""
        async with self._connection_lock:
            if self.producer:
                try:
                    await self.producer.stop()  # type: ignore
                    logger.info("Kafka producer stopped")
                except Exception as e:
                    logger.warning(
                        "Error stopping Kafka producer",
                        extra={"error": str(e), "operation": "stop_producer"},
                    )
                finally:
                    self.producer = None
                    self.is_connected = False

    async def send(self, topic: str, payload: str, key: Optional[str] = None) -> None:
        """Send one serialized event and wait for the broker acknowledgement"""
        if not self.is_connected or not self.producer:
            raise KafkaConnectionError("Kafka producer not connected")

        await self.ensure_topic_exists(topic)
        metadata = await self.producer.send_and_wait(  # type: ignore
            topic=topic, value=payload, key=key
        )
        logger.info(
            "Sent message to Kafka topic",
            extra={
                "topic": topic,
                "partition": getattr(metadata, "partition", None),
                "offset": getattr(metadata, "offset", None),
                "operation": "send_message",
            },
        )

    async def health_check(self) -> bool:
        """Check if Kafka connection is healthy"""
        try:
            if not self.producer or not self.is_connected:
                return False

            # Try to get cluster metadata as health check
            metadata = await self.producer.client.fetch_all_metadata()  # type: ignore
            return len(metadata.brokers()) > 0  # type: ignore

        except Exception as e:
            logger.warning(
                "Kafka health check failed",
                extra={"error": str(e), "operation": "health_check"},
            )
            return False
