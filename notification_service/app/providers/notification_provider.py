import asyncio
import time
from typing import Optional

from pydantic import BaseModel

from ..utils.logging import setup_notification_logging as setup_logging

logger = setup_logging("notification_service.providers.simulated")


class DispatchResult(BaseModel):
    """Outcome of a notification dispatch; failures are reported, not raised"""

    success: bool
    order_id: int
    provider: str
    channel: str
    duration_ms: int = 0
    error: Optional[str] = None


class SimulatedNotificationProvider:
    """
    Stand-in for an email/SMS/push provider.

    Dispatch is a bounded ``asyncio.sleep``. Errors are captured in the
    returned DispatchResult so the caller always proceeds to the status
    callback.
    """

    name = "simulated"

    def __init__(self, delay: float = 0.1, channel: str = "email"):
        self.delay = delay
        self.channel = channel

    async def dispatch(self, order_id: int) -> DispatchResult:
        start = time.monotonic()
        logger.info(
            "Simulating notification dispatch",
            extra={"order_id": order_id, "channel": self.channel, "delay_s": self.delay},
        )
        try:
            await asyncio.sleep(self.delay)
        except Exception as e:
            # TODO: surface provider failures as retryable once a real provider replaces the simulation
            logger.error(
                "Notification dispatch failed",
                extra={
                    "order_id": order_id,
                    "provider": self.name,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return DispatchResult(
                success=False,
                order_id=order_id,
                provider=self.name,
                channel=self.channel,
                duration_ms=int((time.monotonic() - start) * 1000),
                error=str(e),
            )

        return DispatchResult(
            success=True,
            order_id=order_id,
            provider=self.name,
            channel=self.channel,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
