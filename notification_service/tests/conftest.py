"""
Pytest configuration and fixtures for Notification Service tests.
"""

import json
import os
from typing import Callable, List

import httpx
import pytest

# Set up test environment
os.environ["ENVIRONMENT"] = "test"

from notification_service.app.clients.order_status_client import OrderStatusClient
from notification_service.app.core.settings import NotificationServiceSettings
from notification_service.app.events.consumers import BatchNotificationConsumer
from notification_service.app.events.processor import OrderNotificationProcessor
from notification_service.app.providers.notification_provider import (
    SimulatedNotificationProvider,
)

ORDER_SERVICE_URL = "http://order-service.test"


class OrderServiceStub:
    """In-memory stand-in for the order service status endpoint.

    Records every request and answers with ``status_code`` unless a
    per-order override is registered in ``responses``.
    """

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.responses: dict = {}
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        order_id = int(request.url.path.split("/")[2])
        response = self.responses.get(order_id, self.status_code)
        if isinstance(response, Exception):
            raise response
        if response >= 300:
            text = "Order not found" if response == 404 else "boom"
            return httpx.Response(response, text=text)
        body = json.loads(request.content)
        return httpx.Response(response, json={"id": order_id, "status": body["status"]})

    @property
    def patched_order_ids(self) -> List[int]:
        return [int(request.url.path.split("/")[2]) for request in self.requests]


@pytest.fixture
def settings() -> NotificationServiceSettings:
    """Settings pointing at the stub with no simulated delay."""
    return NotificationServiceSettings(
        ORDER_SERVICE_URL=ORDER_SERVICE_URL,
        ORDER_SERVICE_TIMEOUT=10.0,
        NOTIFICATION_SIMULATED_DELAY=0,
    )


@pytest.fixture
def order_service() -> OrderServiceStub:
    return OrderServiceStub()


@pytest.fixture
def make_status_client(order_service) -> Callable[..., OrderStatusClient]:
    """Factory for status clients whose requests are served by the stub."""

    def factory(*args, **kwargs) -> OrderStatusClient:
        kwargs.setdefault("timeout", 10.0)
        return OrderStatusClient(
            ORDER_SERVICE_URL,
            timeout=kwargs["timeout"],
            transport=httpx.MockTransport(order_service),
        )

    return factory


@pytest.fixture
async def status_client(make_status_client):
    client = make_status_client()
    yield client
    await client.close()


@pytest.fixture
def processor(status_client) -> OrderNotificationProcessor:
    return OrderNotificationProcessor(
        status_client=status_client, provider=SimulatedNotificationProvider(delay=0)
    )


@pytest.fixture
def consumer(processor) -> BatchNotificationConsumer:
    return BatchNotificationConsumer(processor)
