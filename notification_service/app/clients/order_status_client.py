"""
HTTP client for the order service status callback.
"""

import asyncio
from typing import Optional

import httpx

from ..core.exceptions import RemoteRejection, TransportError
from ..utils.logging import setup_notification_logging as setup_logging

logger = setup_logging("notification_service.clients.order_status")


class OrderStatusClient:
    """Client for updating order status via the Order Service API.

    One instance holds a single ``httpx.AsyncClient`` and is safe to share
    across every message of every batch.
    """

    def __init__(
        self,
        order_service_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = order_service_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def update_status(self, order_id: int, status: str) -> httpx.Response:
        """
        PATCH /orders/{order_id}/status with ``{"status": status}``.

        Raises:
            TransportError: network failure or the timeout elapsed
            RemoteRejection: the order service answered outside 2xx
        """
        url = f"{self.base_url}/orders/{order_id}/status"
        logger.info(
            "Calling order service",
            extra={"order_id": order_id, "url": url, "target_status": status},
        )

        try:
            # httpx applies the timeout per phase; wait_for bounds the whole call
            response = await asyncio.wait_for(
                self.client.patch(url, json={"status": status}), timeout=self.timeout
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise TransportError(
                f"Timed out after {self.timeout}s calling {url}", order_id=order_id
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Error calling {url}: {e}", order_id=order_id
            ) from e

        if not 200 <= response.status_code < 300:
            raise RemoteRejection(response.status_code, response.text, order_id=order_id)

        logger.info(
            "Order status updated",
            extra={
                "order_id": order_id,
                "target_status": status,
                "status_code": response.status_code,
            },
        )
        return response

    async def close(self) -> None:
        """Close the HTTP client"""
        await self.client.aclose()

    async def __aenter__(self) -> "OrderStatusClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
