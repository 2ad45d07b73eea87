"""
Pytest configuration and fixtures for Order Service tests.
"""

import os
from typing import Any, AsyncGenerator
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

# Set up test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["KAFKA_CONNECT_MAX_RETRIES"] = "1"

# Import order service components
from order_service.app.api.deps import get_async_session, get_order_event_publisher
from order_service.app.core.database import OrderServiceDatabaseManager
from order_service.app.events.base import EventPublisher
from order_service.app.events.producers import OrderEventPublisher
from order_service.app.main import app


@pytest.fixture
async def database_manager(tmp_path) -> AsyncGenerator[OrderServiceDatabaseManager, None]:
    """Order store backed by a throwaway SQLite file."""
    manager = OrderServiceDatabaseManager(
        f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}"
    )
    await manager.create_tables()

    yield manager

    await manager.close()


@pytest.fixture
async def db_session(database_manager) -> AsyncGenerator[Any, None]:
    """Create a test database session."""
    async with database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def channel():
    """Message channel double; every send succeeds unless told otherwise."""
    return AsyncMock(spec=EventPublisher)


@pytest.fixture
def event_publisher(channel) -> OrderEventPublisher:
    """Order event publisher writing to the channel double."""
    return OrderEventPublisher(channel, topic="order-events-test", publish_timeout=1.0)


@pytest.fixture
def test_app(database_manager, event_publisher) -> FastAPI:
    """FastAPI application wired to the test store and channel."""

    async def override_session() -> AsyncGenerator[Any, None]:
        async with database_manager.async_session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_order_event_publisher] = lambda: event_publisher

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app) -> TestClient:
    """FastAPI test client fixture (lifespan is not run, so Kafka is never touched)."""
    return TestClient(test_app)


@pytest.fixture
def mock_request():
    """Mock FastAPI Request object."""
    mock_req = Mock(spec=Request)
    mock_req.state = Mock()
    mock_req.state.correlation_id = "test-correlation-id"
    mock_req.headers = {}
    mock_req.url = Mock()
    mock_req.url.path = "/orders"
    mock_req.method = "POST"
    return mock_req


@pytest.fixture
def order_payload():
    """Create order request body."""
    return {"customerName": "Ana", "total": 150.50}
