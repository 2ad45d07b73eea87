"""
Order service event schemas.

The serialized form is the wire contract with the notification consumer:
a flat JSON object with camelCase keys and ISO-8601 timestamps.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..models.base import as_utc

# Event type constants
ORDER_CREATED = "order.created"


class OrderCreatedEvent(BaseModel):
    """Snapshot of an order taken right after it was persisted"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    order_id: int = Field(alias="orderId")
    customer_name: str = Field(alias="customerName")
    total: float
    status: str
    created_at: datetime = Field(alias="createdAt")
    event_timestamp: datetime = Field(alias="eventTimestamp")

    @classmethod
    def from_order(cls, order: Any) -> "OrderCreatedEvent":
        """Build an event from the order's current field values.

        ``event_timestamp`` is always "now", so a re-publish of the same
        order produces a distinguishable event.
        """
        return cls(
            order_id=order.id,
            customer_name=order.customer_name,
            total=float(order.total),
            status=order.status,
            created_at=as_utc(order.created_at),
            event_timestamp=datetime.now(timezone.utc),
        )

    def to_json(self) -> str:
        """Serialize to the wire format"""
        return self.model_dump_json(by_alias=True)
