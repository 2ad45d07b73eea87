from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.base import as_utc
from ..models.order import STATUS_MAX_LENGTH


class OrderBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., alias="customerName", max_length=255)
    total: float = Field(..., ge=0)


class CreateOrderRequest(OrderBase):
    """Create order request model"""

    status: Optional[str] = Field(None, max_length=STATUS_MAX_LENGTH)

    @field_validator("customer_name")
    @classmethod
    def customer_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("customerName must not be blank")
        return value.strip()


class UpdateOrderStatusRequest(BaseModel):
    """Status update body; blank values are rejected by the service layer"""

    status: Optional[str] = Field(None, max_length=STATUS_MAX_LENGTH)


class OrderResponse(OrderBase):
    """Order representation returned by every endpoint"""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    status: str
    created_at: datetime = Field(..., alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def created_at_in_utc(cls, value: datetime) -> datetime:
        # Same offset-qualified form as the order.created event
        return as_utc(value)
