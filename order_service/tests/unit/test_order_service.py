"""
Unit tests for the order write path.
"""

from datetime import datetime
from unittest.mock import AsyncMock, Mock

import pytest

from order_service.app.core.exceptions import OrderNotFoundError, OrderValidationError
from order_service.app.events.producers import PublishResult
from order_service.app.models.order import STATUS_MAX_LENGTH, Order, Status
from order_service.app.schemas.order import CreateOrderRequest
from order_service.app.services.order_service import OrderService


def make_order(order_id=1, status="CREATED"):
    order = Order(customer_name="Ana", total=150.5, status=status)
    order.id = order_id
    order.created_at = datetime(2024, 5, 1, 12, 0, 0)
    return order


class TestOrderService:
    """Test cases for OrderService with a mocked repository and publisher."""

    @pytest.fixture
    def event_publisher(self):
        publisher = Mock()
        publisher.publish_order_created = AsyncMock(
            return_value=PublishResult(
                published=True, event_type="order.created", topic="order-events"
            )
        )
        return publisher

    @pytest.fixture
    def order_service(self, event_publisher):
        service = OrderService(AsyncMock(), event_publisher)
        service.order_repository = AsyncMock()
        return service

    @pytest.mark.asyncio
    async def test_create_order_defaults_status_to_created(self, order_service):
        """Test a create without status stores CREATED."""
        # Setup
        order_service.order_repository.create_order.return_value = make_order()
        request = CreateOrderRequest(customerName="Ana", total=150.5)

        # Execute
        result = await order_service.create_order(request)

        # Assert
        order_service.order_repository.create_order.assert_awaited_once_with(
            customer_name="Ana", total=150.5, status=Status.CREATED.value
        )
        assert result.order.status == "CREATED"
        assert result.publish.published is True

    @pytest.mark.asyncio
    async def test_create_order_blank_status_falls_back_to_created(self, order_service):
        """Test a blank status is treated as absent."""
        # Setup
        order_service.order_repository.create_order.return_value = make_order()
        request = CreateOrderRequest(customerName="Ana", total=10, status="   ")

        # Execute
        await order_service.create_order(request)

        # Assert
        kwargs = order_service.order_repository.create_order.await_args.kwargs
        assert kwargs["status"] == "CREATED"

    @pytest.mark.asyncio
    async def test_create_order_keeps_explicit_status(self, order_service):
        """Test a caller-supplied status is stored as given."""
        # Setup
        order_service.order_repository.create_order.return_value = make_order(
            status="PROCESSING"
        )
        request = CreateOrderRequest(customerName="Ana", total=10, status="PROCESSING")

        # Execute
        await order_service.create_order(request)

        # Assert
        kwargs = order_service.order_repository.create_order.await_args.kwargs
        assert kwargs["status"] == "PROCESSING"

    @pytest.mark.asyncio
    async def test_create_order_publishes_persisted_order(
        self, order_service, event_publisher
    ):
        """Test the event is built from the stored order, after the write."""
        # Setup
        stored = make_order(order_id=42)
        order_service.order_repository.create_order.return_value = stored

        # Execute
        await order_service.create_order(CreateOrderRequest(customerName="Ana", total=1))

        # Assert
        event_publisher.publish_order_created.assert_awaited_once_with(stored)

    @pytest.mark.asyncio
    async def test_publish_failure_does_not_affect_created_order(
        self, order_service, event_publisher
    ):
        """Test the order is returned unchanged when the queue is down."""
        # Setup
        stored = make_order(order_id=42)
        order_service.order_repository.create_order.return_value = stored
        event_publisher.publish_order_created.return_value = PublishResult(
            published=False,
            event_type="order.created",
            topic="order-events",
            order_id=42,
            error="Kafka producer not connected",
            error_type="KafkaConnectionError",
        )

        # Execute
        result = await order_service.create_order(
            CreateOrderRequest(customerName="Ana", total=150.5)
        )

        # Assert
        assert result.order is stored
        assert result.order.status == "CREATED"
        assert result.publish.published is False

    @pytest.mark.asyncio
    async def test_create_order_without_publisher(self):
        """Test the write path works with no publisher configured."""
        # Setup
        service = OrderService(AsyncMock(), None)
        service.order_repository = AsyncMock()
        service.order_repository.create_order.return_value = make_order()

        # Execute
        result = await service.create_order(CreateOrderRequest(customerName="Ana", total=1))

        # Assert
        assert result.publish is None
        assert result.order.id == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [None, "", "   "])
    async def test_update_status_rejects_blank(self, order_service, status):
        """Test blank status fails before any lookup or write."""
        # Execute & Assert
        with pytest.raises(OrderValidationError):
            await order_service.update_order_status(1, status)

        order_service.order_repository.get_order_by_id.assert_not_awaited()
        order_service.order_repository.update_order_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_status_rejects_value_longer_than_column(self, order_service):
        """Test a status that cannot fit the column fails before any write."""
        # Execute & Assert
        with pytest.raises(OrderValidationError) as exc_info:
            await order_service.update_order_status(1, "X" * (STATUS_MAX_LENGTH + 1))

        assert "at most 50 characters" in exc_info.value.message
        order_service.order_repository.get_order_by_id.assert_not_awaited()
        order_service.order_repository.update_order_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_status_unknown_order(self, order_service):
        """Test updating a missing order raises not found."""
        # Setup
        order_service.order_repository.get_order_by_id.return_value = None

        # Execute & Assert
        with pytest.raises(OrderNotFoundError) as exc_info:
            await order_service.update_order_status(999, "NOTIFIED")

        assert exc_info.value.order_id == 999
        order_service.order_repository.update_order_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_status_writes_trimmed_value(self, order_service):
        """Test the stored status is the trimmed value."""
        # Setup
        current = make_order()
        order_service.order_repository.get_order_by_id.return_value = current
        order_service.order_repository.update_order_status.return_value = current

        # Execute
        await order_service.update_order_status(1, " NOTIFIED ")

        # Assert
        order_service.order_repository.update_order_status.assert_awaited_once_with(
            current, "NOTIFIED"
        )

    @pytest.mark.asyncio
    async def test_get_order_not_found(self, order_service):
        """Test reading a missing order raises not found."""
        # Setup
        order_service.order_repository.get_order_by_id.return_value = None

        # Execute & Assert
        with pytest.raises(OrderNotFoundError):
            await order_service.get_order(5)


class TestOrderRepository:
    """Test cases for OrderRepository against SQLite."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_created_at(self, db_session):
        from order_service.app.repository.order_repository import OrderRepository

        repository = OrderRepository(db_session)

        order = await repository.create_order(customer_name="Ana", total=150.5)

        assert order.id is not None
        assert order.created_at is not None
        assert order.status == "CREATED"
        assert order.total == 150.5

    @pytest.mark.asyncio
    async def test_update_status_keeps_created_at(self, db_session):
        from order_service.app.repository.order_repository import OrderRepository

        repository = OrderRepository(db_session)
        order = await repository.create_order(customer_name="Ana", total=10)
        created_at = order.created_at

        updated = await repository.update_order_status(order, "NOTIFIED")
        again = await repository.update_order_status(updated, "NOTIFIED")

        assert again.status == "NOTIFIED"
        assert again.created_at == created_at
        assert (await repository.get_order_by_id(order.id)).status == "NOTIFIED"

    @pytest.mark.asyncio
    async def test_list_orders_oldest_first(self, db_session):
        from order_service.app.repository.order_repository import OrderRepository

        repository = OrderRepository(db_session)
        first = await repository.create_order(customer_name="Ana", total=1)
        second = await repository.create_order(customer_name="Luis", total=2)

        orders = await repository.list_orders()

        assert [order.id for order in orders] == [first.id, second.id]
