"""
Queued order event schema as seen by the notification consumer.

Only ``orderId`` is read; every other field the producer writes
(customerName, total, status, createdAt, eventTimestamp) is ignored so a
change in those fields never makes a message unprocessable.
"""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.exceptions import MessageParseError


class OrderCreatedMessage(BaseModel):
    """Body of an order.created message"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    order_id: int = Field(alias="orderId")

    @field_validator("order_id", mode="before")
    @classmethod
    def reject_booleans(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("orderId must be an integer")
        return value


def parse_message(body: Union[str, bytes]) -> OrderCreatedMessage:
    """Parse a raw message body, raising MessageParseError on any defect"""
    try:
        return OrderCreatedMessage.model_validate_json(body)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise MessageParseError(f"Unprocessable message body: {errors}") from e


def parse_order_id(body: Union[str, bytes]) -> int:
    """Extract the order identifier from a raw message body"""
    return parse_message(body).order_id
