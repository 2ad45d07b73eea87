"""
Batch consumption of queued order.created messages.

A batch is folded into one MessageOutcome per message. Processing errors
are captured inside the fold, so a bad message can only ever turn its own
outcome into a failure.
"""

import asyncio
import time
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel

from ..utils.logging import setup_notification_logging as setup_logging
from .processor import OrderNotificationProcessor

logger = setup_logging("notification_service.events.consumer")

MessageBody = Union[str, bytes]


class MessageOutcome(BaseModel):
    """Result of processing a single message of a batch"""

    index: int
    succeeded: bool
    order_id: Optional[int] = None
    error_type: Optional[str] = None
    error: Optional[str] = None
    raw_body: Optional[str] = None

    @classmethod
    def success(cls, index: int, order_id: int) -> "MessageOutcome":
        return cls(index=index, succeeded=True, order_id=order_id)

    @classmethod
    def failure(cls, index: int, body: MessageBody, exc: Exception) -> "MessageOutcome":
        return cls(
            index=index,
            succeeded=False,
            error_type=type(exc).__name__,
            error=str(exc),
            raw_body=_decode(body),
        )


class BatchSummary(BaseModel):
    """Aggregate of a handled batch, derived from its outcomes"""

    outcomes: List[MessageOutcome]
    duration_ms: int = 0

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def failures(self) -> List[MessageOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    def __str__(self) -> str:
        return f"{self.succeeded} succeeded, {self.failed} failed"


def _decode(body: MessageBody) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return str(body)


class BatchNotificationConsumer:
    """Entry point for a batch of queued messages.

    ``handle`` never raises. Every message is attempted exactly once and the
    batch counts as handled afterwards, whatever the individual outcomes;
    failed messages are not re-queued or dead-lettered.
    """

    def __init__(self, processor: OrderNotificationProcessor, concurrency: int = 1):
        self.processor = processor
        self.concurrency = max(1, concurrency)

    async def _process_one(self, index: int, body: MessageBody) -> MessageOutcome:
        try:
            order_id = await self.processor.process(body)
        except Exception as e:
            logger.error(
                f"Error processing message: {e}",
                extra={
                    "message_index": index,
                    "error_type": type(e).__name__,
                    "raw_body": _decode(body),
                    "operation": "process_message_error",
                },
            )
            return MessageOutcome.failure(index, body, e)
        return MessageOutcome.success(index, order_id)

    async def handle(self, bodies: Sequence[MessageBody]) -> BatchSummary:
        """Process every message of the batch and summarize the outcomes"""
        start = time.monotonic()
        logger.info(
            f"Received {len(bodies)} messages",
            extra={"batch_size": len(bodies), "concurrency": self.concurrency},
        )

        if self.concurrency == 1:
            outcomes = [
                await self._process_one(index, body) for index, body in enumerate(bodies)
            ]
        else:
            semaphore = asyncio.Semaphore(self.concurrency)

            async def bounded(index: int, body: MessageBody) -> MessageOutcome:
                async with semaphore:
                    return await self._process_one(index, body)

            outcomes = list(
                await asyncio.gather(
                    *(bounded(index, body) for index, body in enumerate(bodies))
                )
            )

        summary = BatchSummary(
            outcomes=outcomes, duration_ms=int((time.monotonic() - start) * 1000)
        )
        logger.info(
            f"Processed: {summary}",
            extra={
                "batch_size": summary.total,
                "succeeded": summary.succeeded,
                "failed": summary.failed,
                "duration_ms": summary.duration_ms,
            },
        )
        return summary
