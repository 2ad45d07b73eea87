"""
Unit tests for batch consumption.

The order service is replaced by an httpx.MockTransport stub, so the full
parse, dispatch and callback path runs for every message.
"""

import asyncio
import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from notification_service.app.events.consumers import (
    BatchNotificationConsumer,
    BatchSummary,
    MessageOutcome,
)


def message(order_id) -> str:
    return json.dumps({"orderId": order_id, "customerName": "Ana", "status": "CREATED"})


class TestBatchNotificationConsumer:
    """Test cases for BatchNotificationConsumer."""

    @pytest.mark.asyncio
    async def test_single_message_success(self, consumer, order_service):
        """Test one message with a 200 callback."""
        # Execute
        summary = await consumer.handle([message(42)])

        # Assert
        assert str(summary) == "1 succeeded, 0 failed"
        assert order_service.patched_order_ids == [42]
        assert summary.outcomes[0].order_id == 42

    @pytest.mark.asyncio
    async def test_single_message_rejected(self, consumer, order_service):
        """Test one message with a 500 callback."""
        # Setup
        order_service.status_code = 500

        # Execute
        summary = await consumer.handle([message(42)])

        # Assert
        assert str(summary) == "0 succeeded, 1 failed"
        failure = summary.failures[0]
        assert failure.error_type == "RemoteRejection"
        assert "Status: 500" in failure.error

    @pytest.mark.asyncio
    async def test_bad_message_does_not_affect_neighbours(self, consumer, order_service):
        """Test a malformed middle message fails alone."""
        # Setup
        bodies = [message(1), '{"orderId": "abc"}', message(3)]

        # Execute
        summary = await consumer.handle(bodies)

        # Assert
        assert str(summary) == "2 succeeded, 1 failed"
        assert order_service.patched_order_ids == [1, 3]
        assert [outcome.succeeded for outcome in summary.outcomes] == [True, False, True]
        assert summary.outcomes[1].error_type == "MessageParseError"
        assert summary.outcomes[1].raw_body == '{"orderId": "abc"}'

    @pytest.mark.asyncio
    async def test_remote_failures_are_counted_per_message(self, consumer, order_service):
        """Test mixed callback outcomes inside one batch."""
        # Setup
        order_service.responses[2] = 404
        order_service.responses[3] = httpx.ConnectError("connection refused")

        # Execute
        summary = await consumer.handle([message(1), message(2), message(3), message(4)])

        # Assert
        assert summary.succeeded == 2
        assert summary.failed == 2
        assert [f.error_type for f in summary.failures] == [
            "RemoteRejection",
            "TransportError",
        ]

    @pytest.mark.asyncio
    async def test_empty_batch(self, consumer):
        summary = await consumer.handle([])

        assert str(summary) == "0 succeeded, 0 failed"
        assert summary.total == 0

    @pytest.mark.asyncio
    async def test_handle_never_raises(self):
        """Test unexpected processor errors become failed outcomes."""
        # Setup
        processor = Mock()
        processor.process = AsyncMock(side_effect=[RuntimeError("unexpected"), 2])
        consumer = BatchNotificationConsumer(processor)

        # Execute
        summary = await consumer.handle([b"first", b"second"])

        # Assert
        assert summary.total == 2
        assert str(summary) == "1 succeeded, 1 failed"
        assert summary.outcomes[0].raw_body == "first"
        assert summary.outcomes[0].error_type == "RuntimeError"

    @pytest.mark.asyncio
    async def test_every_message_attempted_exactly_once(self):
        """Test succeeded + failed always equals the batch size."""
        # Setup
        processor = Mock()
        processor.process = AsyncMock(
            side_effect=lambda body: int(body) if body.isdigit() else int("x")
        )
        consumer = BatchNotificationConsumer(processor)
        bodies = ["1", "x", "3", "y", "5"]

        # Execute
        summary = await consumer.handle(bodies)

        # Assert
        assert processor.process.await_count == len(bodies)
        assert summary.succeeded + summary.failed == len(bodies)
        assert str(summary) == "3 succeeded, 2 failed"

    @pytest.mark.asyncio
    async def test_concurrent_processing_keeps_batch_order(self):
        """Test bounded concurrency reports outcomes in delivery order."""
        # Setup
        async def process(body):
            order_id = int(body)
            # later messages finish first
            await asyncio.sleep(0.01 * (5 - order_id))
            return order_id

        processor = Mock()
        processor.process = AsyncMock(side_effect=process)
        consumer = BatchNotificationConsumer(processor, concurrency=3)

        # Execute
        summary = await consumer.handle(["1", "2", "3", "4"])

        # Assert
        assert [outcome.order_id for outcome in summary.outcomes] == [1, 2, 3, 4]
        assert [outcome.index for outcome in summary.outcomes] == [0, 1, 2, 3]

    def test_invalid_concurrency_falls_back_to_sequential(self):
        consumer = BatchNotificationConsumer(Mock(), concurrency=0)

        assert consumer.concurrency == 1


class TestBatchSummary:
    def test_counts_are_derived_from_outcomes(self):
        summary = BatchSummary(
            outcomes=[
                MessageOutcome.success(0, 1),
                MessageOutcome.failure(1, b"bad", ValueError("nope")),
            ]
        )

        assert summary.succeeded == 1
        assert summary.failed == 1
        assert summary.total == 2
        assert summary.failures[0].raw_body == "bad"
        assert str(summary) == "1 succeeded, 1 failed"
